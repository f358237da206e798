from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal

from interest_ledger.schemas.records import InputRecord, RateEntry

class RateEntryIn(BaseModel):
    date: date
    annual_rate_percent: Decimal

    def to_entry(self) -> RateEntry:
        return RateEntry(date=self.date, amount=self.annual_rate_percent / Decimal("100"))

class AccrualRequest(BaseModel):
    annual_interest_rate: Decimal
    entries: list[InputRecord]
    rates: list[RateEntryIn] | None = None
    now: datetime | None = None
