"""System API — health check and onboarding flag."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tradejournal.api.deps import get_repository
from tradejournal.services.repository import JournalRepository
from tradejournal.utils.constants import ENTRY_TYPES, SUGGESTED_SYMBOLS, TIME_FRAMES

router = APIRouter(prefix="/api/system", tags=["system"])


class OnboardingState(BaseModel):
    onboarded: bool


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.get("/onboarding", response_model=OnboardingState)
def get_onboarding(repository: JournalRepository = Depends(get_repository)):
    return OnboardingState(onboarded=repository.is_onboarded())


@router.put("/onboarding", response_model=OnboardingState)
def set_onboarding(body: OnboardingState, repository: JournalRepository = Depends(get_repository)):
    repository.set_onboarded(body.onboarded)
    return body


@router.get("/suggestions")
def form_suggestions():
    """Suggested values for the free-text trade fields."""
    return {
        "timeframes": TIME_FRAMES,
        "entry_types": ENTRY_TYPES,
        "symbols": SUGGESTED_SYMBOLS,
    }
