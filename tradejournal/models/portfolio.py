"""Portfolio model — an account that trades are recorded against."""

from sqlmodel import SQLModel, Field

from tradejournal.models.trade import new_id


class Portfolio(SQLModel, table=True):
    __tablename__ = "portfolio"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    currency: str = "USD"
    initial_balance: float = 0.0  # equity curve origin
