from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from interest_ledger.schemas.records import RateEntry

DAYS_IN_YEAR = Decimal("365")


def sort_schedule(entries: Iterable[RateEntry]) -> list[RateEntry]:
    # sorted() is stable: equal dates keep file order, so the later row wins in lookups.
    return sorted(entries, key=lambda r: r.date)


def annual_rate_on_date(
    schedule: Sequence[RateEntry] | None,
    target: date,
    fallback_annual_rate: Decimal = Decimal("0"),
) -> Decimal:
    if schedule is None:
        return fallback_annual_rate

    latest: RateEntry | None = None
    for r in schedule:
        if r.date <= target:
            latest = r
        else:
            break
    if latest is None:
        return fallback_annual_rate
    return latest.amount


def rate_on_date(
    schedule: Sequence[RateEntry] | None,
    target: date,
    fallback_annual_rate: Decimal = Decimal("0"),
) -> Decimal:
    """Daily rate in effect on ``target``.

    ``schedule`` must be sorted ascending by date. The last entry dated on or
    before ``target`` applies; when there is no schedule, or every entry is
    dated after ``target``, ``fallback_annual_rate`` is used instead.
    """
    return annual_rate_on_date(schedule, target, fallback_annual_rate) / DAYS_IN_YEAR
