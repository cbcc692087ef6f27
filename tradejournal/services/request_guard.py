"""Latest-request-wins bookkeeping for advisory calls.

Each call is issued a token from a monotonically increasing counter. When the
call resolves, its result is applied only if no newer request was issued on
the same channel in the meantime; older results are discarded.
"""

import itertools
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class LatestRequestGuard:
    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, channel: str) -> int:
        token = next(self._counter)
        self._latest[channel] = token
        return token

    def latest(self, channel: str) -> int | None:
        return self._latest.get(channel)

    def is_current(self, channel: str, token: int) -> bool:
        return self._latest.get(channel) == token

    async def run(self, channel: str, call: Awaitable[Any]) -> tuple[int, bool, Any]:
        """Await ``call`` under a fresh token.

        Returns (token, applied, result). ``applied`` is False when a newer
        request on the channel was issued before this one resolved.
        """
        token = self.issue(channel)
        result = await call
        applied = self.is_current(channel, token)
        if not applied:
            logger.info(f"Discarding stale response on {channel} (token {token})")
        return token, applied, result


@dataclass
class AppliedResult:
    token: int
    subject_id: str | None
    content: Any


class AnalysisBoard:
    """Holds the most recently applied advisory result per channel."""

    def __init__(self, guard: LatestRequestGuard | None = None):
        self.guard = guard or LatestRequestGuard()
        self._applied: dict[str, AppliedResult] = {}
        # subject of the latest in-flight request per channel
        self._pending: dict[str, str | None] = {}

    async def submit(
        self,
        channel: str,
        call: Awaitable[Any],
        subject_id: str | None = None,
    ) -> tuple[int, bool, Any]:
        self._pending[channel] = subject_id
        token, applied, result = await self.guard.run(channel, call)
        if applied:
            self._pending.pop(channel, None)
            self._applied[channel] = AppliedResult(token=token, subject_id=subject_id, content=result)
        return token, applied, result

    def get(self, channel: str) -> AppliedResult | None:
        return self._applied.get(channel)

    def discard_subject(self, subject_id: str):
        """Drop any result about ``subject_id`` (e.g. a deleted trade).

        Requests still in flight for it are made stale so they are never applied.
        """
        for channel in [c for c, s in self._pending.items() if s == subject_id]:
            self.guard.issue(channel)
            del self._pending[channel]
        for channel in [c for c, r in self._applied.items() if r.subject_id == subject_id]:
            del self._applied[channel]
