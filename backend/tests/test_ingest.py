import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import Workbook

from interest_ledger.core.errors import ParseFailure, UnsupportedFormat
from interest_ledger.services.ingest import parse_date, parse_decimal, read_entries, read_rate_schedule


def _write_csv(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _write_xlsx(path: Path, rows: list[list]) -> Path:
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    wb.save(path)
    return path


def test_read_entries_from_csv_skips_header_and_blank_lines(tmp_path):
    p = _write_csv(
        tmp_path / "input.csv",
        [
            "Opis;Data;Kwota",
            "Faktura 1;2023-01-01;1000",
            "",
            "Faktura 2;15.02.2023;1 234,56",
            ";2023-03-31;10.5",
        ],
    )

    entries = read_entries(p)

    assert [(e.description, e.date, e.amount) for e in entries] == [
        ("Faktura 1", date(2023, 1, 1), Decimal("1000")),
        ("Faktura 2", date(2023, 2, 15), Decimal("1234.56")),
        (None, date(2023, 3, 31), Decimal("10.5")),
    ]


def test_read_entries_from_xlsx_stops_at_first_empty_row(tmp_path):
    p = _write_xlsx(
        tmp_path / "input.xlsx",
        [
            ["Opis", "Data", "Kwota"],
            ["A", datetime(2023, 1, 1), 1000],
            ["B", "2023-02-10", "250,25"],
            [None, None, None],
            ["ignored", datetime(2023, 5, 1), 1],
        ],
    )

    entries = read_entries(p)

    assert [(e.description, e.date, e.amount) for e in entries] == [
        ("A", date(2023, 1, 1), Decimal("1000")),
        ("B", date(2023, 2, 10), Decimal("250.25")),
    ]


def test_extension_is_case_insensitive(tmp_path):
    p = _write_csv(tmp_path / "INPUT.CSV", ["h;h;h", "x;2023-01-01;1"])
    assert len(read_entries(p)) == 1


@pytest.mark.parametrize("name", ["input.txt", "input.xls", "input"])
def test_unsupported_extension_fails(tmp_path, name):
    p = tmp_path / name
    p.write_text("Opis;Data;Kwota\n", encoding="utf-8")

    with pytest.raises(UnsupportedFormat) as exc:
        read_entries(p)
    assert exc.value.code == "unsupported_file_type"


def test_malformed_row_reports_file_and_row(tmp_path):
    p = _write_csv(tmp_path / "input.csv", ["Opis;Data;Kwota", "ok;2023-01-01;1", "bad;not a date;1"])

    with pytest.raises(ParseFailure) as exc:
        read_entries(p)
    assert exc.value.row == 3
    assert exc.value.what == "date"

    p = _write_csv(tmp_path / "input2.csv", ["Opis;Data;Kwota", "bad;2023-01-01;abc"])
    with pytest.raises(ParseFailure) as exc:
        read_entries(p)
    assert exc.value.row == 2
    assert exc.value.what == "number"


def test_read_rate_schedule_converts_percent_and_sorts(tmp_path):
    p = _write_csv(
        tmp_path / "rates.csv",
        [
            "Data;Stopa",
            "2023-06-01;7,5",
            "2023-01-01;5",
            "2023-06-01;8",
        ],
    )

    schedule = read_rate_schedule(p)

    assert [(r.date, r.amount) for r in schedule] == [
        (date(2023, 1, 1), Decimal("0.05")),
        (date(2023, 6, 1), Decimal("0.075")),
        (date(2023, 6, 1), Decimal("0.08")),
    ]


def test_read_rate_schedule_from_xlsx(tmp_path):
    p = _write_xlsx(
        tmp_path / "rates.xlsx",
        [["Data", "Stopa"], [datetime(2024, 3, 1), 6], [datetime(2024, 1, 1), 5.25]],
    )

    schedule = read_rate_schedule(p)

    assert [(r.date, r.amount) for r in schedule] == [
        (date(2024, 1, 1), Decimal("0.0525")),
        (date(2024, 3, 1), Decimal("0.06")),
    ]


def test_missing_rate_schedule_is_not_an_error(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert read_rate_schedule(tmp_path / "missing.csv") is None
    assert "missing.csv" in caplog.text


def test_parse_helpers():
    assert parse_date("31.01.2023") == date(2023, 1, 31)
    assert parse_date("2023-01-05") == date(2023, 1, 5)
    assert parse_date(datetime(2023, 1, 5, 13, 45)) == date(2023, 1, 5)
    assert parse_decimal(" 12,50 ") == Decimal("12.50")
    assert parse_decimal(0.1) == Decimal("0.1")

    with pytest.raises(ParseFailure):
        parse_date("")
    with pytest.raises(ParseFailure):
        parse_decimal("NaN")
    with pytest.raises(ParseFailure):
        parse_decimal(None)


def test_year_first_slash_dates_keep_month_before_day():
    assert parse_date("2023/01/05") == date(2023, 1, 5)
    assert parse_date("2023.12.31") == date(2023, 12, 31)
    assert parse_date("05/01/2023") == date(2023, 1, 5)


@pytest.mark.parametrize("text", ["10:30", "7", "2023", "2023-01", "March 2023", "31.01", "2023-02-30"])
def test_incomplete_or_impossible_date_text_is_rejected(text):
    with pytest.raises(ParseFailure) as exc:
        parse_date(text, path="input.csv", row=4)
    assert exc.value.row == 4
    assert exc.value.what == "date"


def test_time_only_cell_fails_the_whole_file(tmp_path):
    p = _write_csv(tmp_path / "input.csv", ["Opis;Data;Kwota", "ok;2023-01-01;1", "bad;10:30;1"])

    with pytest.raises(ParseFailure) as exc:
        read_entries(p)
    assert exc.value.row == 3
