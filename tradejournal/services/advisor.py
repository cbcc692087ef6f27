"""Gemini client wrapper for trade critique, behavioural patterns and market search.

Wraps the google-genai async API. Every call is a single request: no retries,
no rate limiting. Failures are logged and turned into placeholder text or an
empty result so callers never see an exception from the model service.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from tradejournal.config import settings
from tradejournal.models.enums import TradeResult

logger = logging.getLogger(__name__)

CRITIQUE_FALLBACK = "The AI mentor is refining its edge. Please try again in a moment."
CRITIQUE_EMPTY = "Analysis failed. Ensure trade notes and images provide enough context."
SEARCH_FALLBACK = "Unable to reach the global trading network. Please check your connection."
SEARCH_EMPTY = "No insights found for this query."
DEFAULT_SOURCE_TITLE = "Market Source"
MIN_NOTE_LENGTH = 5

MENTOR_INSTRUCTION = (
    "You are the 'Pseudo-Whale Mentor'. You are a cold, hyper-logical institutional veteran. "
    "You have zero tolerance for sloppy execution, emotional bias, or lack of discipline. "
    "Your language is sharp, technical (using SMC/ICT and institutional orderflow terminology), "
    "and focuses on professionalizing the trader's approach."
)

PSYCHOLOGIST_INSTRUCTION = (
    "You are a specialized High-Performance Trading Psychologist. Your objective is to extract "
    "'Behavioral Alpha' by identifying patterns that distinguish the user's winning mindset from "
    "their losing mindset. Look beyond simple words like 'greedy' and find structural leaks in "
    "their decision-making process (e.g., 'Scaling into losers', 'Tightening stops prematurely "
    "due to recent loss history')."
)

ANALYST_INSTRUCTION = (
    "You are a senior market analyst at a top-tier hedge fund. Your goal is to synthesize the "
    "latest high-signal intelligence from professional traders, institutional news, and retail "
    "sentiment. Provide a concise, action-oriented summary. Prioritize 'Smart Money' movements "
    "and macroeconomic catalysts."
)

CRITIQUE_TEMPLATE = """\
Analyze this trade as a Lead Risk Manager at a Quantitative Proprietary Trading Firm.

### TRADE PARAMETERS ###
- Asset: {symbol} ({side})
- Result: {result} | PnL: ${pnl}
- Strategy: {entry_type} | TF: {timeframe}
- Execution: Entry @ {entry}, SL @ {stop_loss}, TP @ {take_profit}
- Risk Metrics: RR {rr} | Lot Size {lot_size}
- Narrative/Notes: "{notes}"

### EVALUATION REQUIREMENTS ###
1. CRITIQUE THE SETUP: Based on the {entry_type} model, was this a high-probability A+ setup or a low-conviction 'gambler' entry? If images are provided, verify the technical confluence (Liquidity, FVG, Order Blocks, etc.).
2. EXIT EFFICIENCY: Evaluate the Take Profit and Stop Loss placement. Did the trader leave money on the table, or was the exit perfectly timed with structural exhaustion?
3. BEHAVIORAL DIAGNOSTIC: Analyze the notes for sub-surface emotional triggers. Look for 'Early Exit Anxiety', 'FOMO Entry', or 'Oversizing'.
4. VERDICT & DRILLS: Provide a final 'Grading' (A-F) and 3 specific technical or psychological drills to improve performance in the next 10 trades.
"""

PATTERN_ENTRY_TEMPLATE = """\
[ID: {id}]
OUTCOME: {result} ({sign}${pnl})
SYMBOL/SIDE: {symbol} {side}
ENTRY TYPE: {entry_type}
JOURNAL NOTE: {notes}
"""

PATTERN_PROMPT = (
    "Perform a deep-dive behavioral audit on the following trade journal log. Search for "
    "recurring cognitive biases, emotional triggers, and execution 'leaks' hidden in the text.\n\n"
    "### DATA LOG ###\n{log}"
)


class PsychologicalTheme(BaseModel):
    theme: str = Field(description="Professional name for the behavior, e.g. 'Revenge Escalation'")
    description: str = Field(description="Observation of the pattern citing examples from the notes without naming IDs")
    win_count: int = Field(alias="winCount", description="Wins associated with this mindset")
    loss_count: int = Field(alias="lossCount", description="Losses associated with this mindset")
    total_pnl: float = Field(alias="totalPnL", description="Cumulative PnL impact")
    recommendation: str = Field(description="Protocol to mitigate or exploit this theme")

    model_config = {"populate_by_name": True}


_themes_adapter = TypeAdapter(list[PsychologicalTheme])


@dataclass
class Source:
    title: str
    uri: str


@dataclass
class SearchResult:
    text: str
    sources: list[Source] = field(default_factory=list)


def _label(value) -> str:
    return getattr(value, "value", value)


def parse_data_url(data_url: str | None) -> tuple[bytes, str] | None:
    """Split a ``data:<mime>;base64,<payload>`` string into (bytes, mime type)."""
    if not data_url or "," not in data_url:
        return None
    header, payload = data_url.split(",", 1)
    try:
        mime_type = header.split(":", 1)[1].split(";", 1)[0]
        data = base64.b64decode(payload, validate=True)
    except (IndexError, binascii.Error, ValueError) as e:
        logger.warning(f"Ignoring malformed image payload: {e}")
        return None
    if not mime_type:
        return None
    return data, mime_type


def build_critique_prompt(trade) -> str:
    return CRITIQUE_TEMPLATE.format(
        symbol=trade.symbol,
        side=_label(trade.side),
        result=_label(trade.result),
        pnl=trade.pnl,
        entry_type=trade.entry_type,
        timeframe=trade.timeframe,
        entry=trade.entry,
        stop_loss=trade.stop_loss,
        take_profit=trade.take_profit,
        rr=trade.rr,
        lot_size=trade.lot_size,
        notes=trade.notes or "No psychological context provided.",
    )


def select_pattern_trades(trades) -> list:
    """Closed trades whose journal note has enough text to analyse."""
    return [
        t for t in trades
        if t.notes and len(t.notes.strip()) > MIN_NOTE_LENGTH and t.result != TradeResult.PENDING
    ]


def build_pattern_prompt(trades) -> str:
    entries = [
        PATTERN_ENTRY_TEMPLATE.format(
            id=t.id,
            result=_label(t.result),
            sign="+" if t.pnl >= 0 else "",
            pnl=t.pnl,
            symbol=t.symbol,
            side=_label(t.side),
            entry_type=t.entry_type,
            notes=t.notes,
        )
        for t in trades
    ]
    return PATTERN_PROMPT.format(log="\n---\n".join(entries))


class TradeAdvisor:
    """Thin async wrapper around the Gemini API."""

    def __init__(
        self,
        api_key: str | None = None,
        critique_model: str | None = None,
        fast_model: str | None = None,
        thinking_budget: int | None = None,
    ):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.critique_model = critique_model or settings.critique_model
        self.fast_model = fast_model or settings.fast_model
        self.thinking_budget = (
            settings.critique_thinking_budget if thinking_budget is None else thinking_budget
        )
        self._client = None

    def _ensure_client(self):
        """Lazily create the google-genai client."""
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("Gemini API key is not configured (set TJ_GEMINI_API_KEY)")
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini client initialized")
        return self._client

    async def analyze_trade(self, trade) -> str:
        """Single-trade critique, with chart screenshots attached when present."""
        from google.genai import types

        parts = [types.Part.from_text(text=build_critique_prompt(trade))]
        for label, image in (("ENTRY", trade.entry_image), ("EXIT", trade.exit_image)):
            decoded = parse_data_url(image)
            if decoded:
                data, mime_type = decoded
                parts.append(types.Part.from_text(text=f"### MULTIMODAL INPUT: {label} CHART SNAPSHOT ###"))
                parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))

        try:
            client = self._ensure_client()
            response = await client.aio.models.generate_content(
                model=self.critique_model,
                contents=parts,
                config=types.GenerateContentConfig(
                    system_instruction=MENTOR_INSTRUCTION,
                    thinking_config=types.ThinkingConfig(thinking_budget=self.thinking_budget),
                ),
            )
            return response.text or CRITIQUE_EMPTY
        except Exception as e:
            logger.error(f"Trade analysis failed for {trade.id}: {e}")
            return CRITIQUE_FALLBACK

    async def analyze_patterns(self, trades) -> list[PsychologicalTheme]:
        """Recurring behavioural themes across annotated, closed trades."""
        from google.genai import types

        annotated = select_pattern_trades(trades)
        if not annotated:
            return []

        try:
            client = self._ensure_client()
            response = await client.aio.models.generate_content(
                model=self.fast_model,
                contents=build_pattern_prompt(annotated),
                config=types.GenerateContentConfig(
                    system_instruction=PSYCHOLOGIST_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=list[PsychologicalTheme],
                ),
            )
            return _themes_adapter.validate_json(response.text or "[]")
        except ValidationError as e:
            logger.error(f"Pattern analysis returned malformed JSON: {e}")
            return []
        except Exception as e:
            logger.error(f"Pattern analysis failed: {e}")
            return []

    async def search_market_intelligence(self, query: str) -> SearchResult:
        """Grounded market search; sources come from the search grounding metadata."""
        from google.genai import types

        try:
            client = self._ensure_client()
            response = await client.aio.models.generate_content(
                model=self.fast_model,
                contents=query,
                config=types.GenerateContentConfig(
                    system_instruction=ANALYST_INSTRUCTION,
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                ),
            )
        except Exception as e:
            logger.error(f"Market intelligence search failed: {e}")
            return SearchResult(text=SEARCH_FALLBACK)

        return SearchResult(text=response.text or SEARCH_EMPTY, sources=_grounding_sources(response))


def _grounding_sources(response) -> list[Source]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None or not getattr(web, "uri", None):
            continue
        sources.append(Source(title=web.title or DEFAULT_SOURCE_TITLE, uri=web.uri))
    return sources
