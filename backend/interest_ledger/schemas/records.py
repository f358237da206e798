from pydantic import BaseModel, ConfigDict
from datetime import date
from decimal import Decimal

class InputRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    date: date
    amount: Decimal

class RateEntry(BaseModel):
    """Annual rate as a fraction (0.05 == 5%) effective from ``date``."""

    model_config = ConfigDict(frozen=True)

    date: date
    amount: Decimal

class OutputRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    date: str
    amount: Decimal
