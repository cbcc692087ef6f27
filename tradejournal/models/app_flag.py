"""AppFlag model — persisted boolean switches such as the onboarding flag."""

from sqlmodel import SQLModel, Field


class AppFlag(SQLModel, table=True):
    __tablename__ = "app_flag"

    key: str = Field(primary_key=True)
    value: bool = False
