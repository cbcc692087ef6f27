"""Pydantic schemas for Portfolio API."""

from pydantic import BaseModel, Field, field_validator


class PortfolioCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    currency: str = Field(default="USD", min_length=1, max_length=8)
    initial_balance: float = 0.0

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()


class PortfolioUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    currency: str | None = Field(default=None, min_length=1, max_length=8)
    initial_balance: float | None = None

    @field_validator("currency")
    @classmethod
    def _upper_optional_currency(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().upper()


class PortfolioRead(BaseModel):
    id: str
    name: str
    currency: str
    initial_balance: float

    model_config = {"from_attributes": True}
