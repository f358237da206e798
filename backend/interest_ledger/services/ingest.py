from __future__ import annotations

import csv
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterator

from dateutil import parser as date_parser
from openpyxl import load_workbook

from interest_ledger.core.errors import ParseFailure, UnsupportedFormat
from interest_ledger.schemas.records import InputRecord, RateEntry
from interest_ledger.services.rates import sort_schedule

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"
CSV_SUFFIXES = (".csv",)
XLSX_SUFFIXES = (".xlsx",)

_WS = re.compile(r"\s+")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_YEAR_FIRST = re.compile(r"^\d{4}\D")
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 2))


def _suffix(path: Path) -> str:
    return path.suffix.lower()


def _iter_csv_rows(path: Path) -> Iterator[tuple[int, list[Any]]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f, delimiter=CSV_DELIMITER)
        next(reader, None)  # header
        for row_no, values in enumerate(reader, start=2):
            if not any((v or "").strip() for v in values):
                continue
            yield row_no, values


def _iter_xlsx_rows(path: Path) -> Iterator[tuple[int, list[Any]]]:
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        for row_no, values in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if not values or values[0] is None:
                break
            yield row_no, list(values)
    finally:
        wb.close()


def _iter_rows(path: Path) -> Iterator[tuple[int, list[Any]]]:
    ext = _suffix(path)
    if ext in CSV_SUFFIXES:
        return _iter_csv_rows(path)
    if ext in XLSX_SUFFIXES:
        return _iter_xlsx_rows(path)
    raise UnsupportedFormat(str(path))


def _cell(values: list[Any], idx: int) -> Any:
    return values[idx] if idx < len(values) else None


def parse_date(v: Any, *, path: str = "", row: int = 0) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v).strip() if v is not None else ""
    if not s:
        raise ParseFailure(path, row, v, "date")
    if _ISO_DATE.match(s):
        try:
            return date_parser.isoparse(s).date()
        except ValueError:
            pass
    # 2023/01/05 is read year-first, 31.01.2023 day-first
    yearfirst = bool(_YEAR_FIRST.match(s))
    try:
        parsed = {
            date_parser.parse(s, dayfirst=not yearfirst, yearfirst=yearfirst, default=d).date()
            for d in _FILL_DEFAULTS
        }
    except (ValueError, OverflowError) as e:
        raise ParseFailure(path, row, v, "date") from e
    # a field taken from the default differs between the two fills
    if len(parsed) != 1:
        raise ParseFailure(path, row, v, "date")
    return parsed.pop()


def parse_decimal(v: Any, *, path: str = "", row: int = 0) -> Decimal:
    if isinstance(v, bool):
        raise ParseFailure(path, row, v, "number")
    if isinstance(v, (int, float, Decimal)):
        return Decimal(str(v))
    s = _WS.sub("", str(v)) if v is not None else ""
    s = s.replace(",", ".")
    try:
        out = Decimal(s)
    except InvalidOperation as e:
        raise ParseFailure(path, row, v, "number") from e
    if not out.is_finite():
        raise ParseFailure(path, row, v, "number")
    return out


def _text(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def read_entries(path: str | Path) -> list[InputRecord]:
    """Rows after the header: description, date, amount."""
    p = Path(path)
    out: list[InputRecord] = []
    for row_no, values in _iter_rows(p):
        out.append(
            InputRecord(
                description=_text(_cell(values, 0)),
                date=parse_date(_cell(values, 1), path=str(p), row=row_no),
                amount=parse_decimal(_cell(values, 2), path=str(p), row=row_no),
            )
        )
    logger.info("read %d entries from %s", len(out), p)
    return out


def read_rate_schedule(path: str | Path) -> list[RateEntry] | None:
    """Rows after the header: effective date, annual rate in percent.

    Returns ``None`` when the file does not exist so the configured flat rate
    is used instead.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("%s does not exist; using the annual interest rate from the configuration", p)
        return None

    rates: list[RateEntry] = []
    for row_no, values in _iter_rows(p):
        rates.append(
            RateEntry(
                date=parse_date(_cell(values, 0), path=str(p), row=row_no),
                amount=parse_decimal(_cell(values, 1), path=str(p), row=row_no) / Decimal("100"),
            )
        )
    logger.info("read %d interest rates from %s", len(rates), p)
    return sort_schedule(rates)
