from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Iterable, Sequence

from dateutil.relativedelta import relativedelta

from interest_ledger.schemas.records import InputRecord, OutputRecord, RateEntry
from interest_ledger.services.rates import rate_on_date

Q2 = Decimal("0.01")
ONE_MONTH = relativedelta(months=1)


def d2(x: Decimal) -> Decimal:
    return x.quantize(Q2, rounding=ROUND_HALF_EVEN)


def add_month(d: date) -> date:
    # relativedelta clamps to the last day of a shorter month (Jan 31 -> Feb 28/29).
    return d + ONE_MONTH


def _step_end(d: date) -> date | None:
    try:
        return add_month(d)
    except (ValueError, OverflowError):
        # past date.max there is no further month to complete
        return None


def _as_datetime(now: datetime | date) -> datetime:
    if isinstance(now, datetime):
        # calendar dates only; an offset on the clock reading is ignored
        return now.replace(tzinfo=None)
    return datetime.combine(now, time.min)


def accrue(
    entry: InputRecord,
    fallback_annual_rate: Decimal,
    schedule: Sequence[RateEntry] | None = None,
    *,
    now: datetime | date,
) -> list[OutputRecord]:
    """Compound ``entry.amount`` monthly from ``entry.date`` up to ``now``.

    One record is emitted per completed month. A step is only taken while its
    end date is strictly before ``now``, so the month that would reach or
    straddle ``now`` is never emitted. The rate is looked up at the start of
    each step and applied as simple interest over the step's day count; the
    unrounded balance carries into the next step and only the emitted amount
    is rounded to cents.
    """
    limit = _as_datetime(now)

    amount = Decimal(entry.amount)
    current = entry.date
    out: list[OutputRecord] = []

    nxt = _step_end(current)
    while nxt is not None and datetime.combine(nxt, time.min) < limit:
        number_of_days = (nxt - current).days

        daily_rate = rate_on_date(schedule, current, fallback_annual_rate)
        accrued_interest = amount * daily_rate * number_of_days
        amount = amount + accrued_interest

        out.append(
            OutputRecord(
                description=entry.description,
                date=nxt.isoformat(),
                amount=d2(amount),
            )
        )
        current = nxt
        nxt = _step_end(current)

    return out


def compute_interest(
    entries: Iterable[InputRecord],
    fallback_annual_rate: Decimal,
    schedule: Sequence[RateEntry] | None = None,
    *,
    now: datetime | date,
) -> list[OutputRecord]:
    results: list[OutputRecord] = []
    for entry in entries:
        results.extend(accrue(entry, fallback_annual_rate, schedule, now=now))
    return results
