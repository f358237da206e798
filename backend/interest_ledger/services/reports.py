from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence

import xlsxwriter

from interest_ledger.core.errors import UnsupportedFormat
from interest_ledger.schemas.records import OutputRecord

logger = logging.getLogger(__name__)

HEADER = ("Opis", "Data", "Kwota")
SHEET_NAME = "Result"
RENAME_STAMP = "%Y-%m-%d %H-%M-%S"


def resolve_output_path(path: str | Path, overwrite: bool, now: datetime) -> Path:
    p = Path(path)
    if overwrite or not p.exists():
        return p
    stem = f"{p.stem}{now.strftime(RENAME_STAMP)}"
    renamed = p.with_name(f"{stem}{p.suffix}")
    n = 1
    while renamed.exists():
        renamed = p.with_name(f"{stem} ({n}){p.suffix}")
        n += 1
    logger.info("%s exists; writing to %s instead", p, renamed)
    return renamed


def _write_csv(path: Path, records: Sequence[OutputRecord]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, lineterminator="\n")
        w.writerow(HEADER)
        for r in records:
            w.writerow([r.description or "", r.date, f"{r.amount:.2f}"])


def build_results_workbook(records: Sequence[OutputRecord], out_file) -> None:
    """Write the ``Result`` sheet to a path or a binary buffer."""
    in_memory = not isinstance(out_file, (str, Path))
    wb = xlsxwriter.Workbook(out_file if in_memory else str(out_file), {"in_memory": in_memory})
    base_font = "Calibri"

    header = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F1F5F9",
            "border": 1,
            "align": "center",
            "valign": "vcenter",
        }
    )
    text_cell = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "left"})
    date_cell = wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "center"})
    money2 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "#,##0.00", "border": 1, "align": "right"}
    )

    ws = wb.add_worksheet(SHEET_NAME)
    ws.set_column(0, 0, 32)  # Opis
    ws.set_column(1, 1, 12)  # Data
    ws.set_column(2, 2, 16)  # Kwota

    for col, title in enumerate(HEADER):
        ws.write(0, col, title, header)
    ws.freeze_panes(1, 0)

    row = 1
    for r in records:
        ws.write_string(row, 0, r.description or "", text_cell)
        ws.write_string(row, 1, r.date, date_cell)
        ws.write_number(row, 2, float(r.amount), money2)
        row += 1

    wb.close()


def save_results(
    path: str | Path,
    records: Sequence[OutputRecord],
    *,
    overwrite: bool,
    now: datetime,
) -> Path:
    target = Path(path)
    ext = target.suffix.lower()
    if ext not in (".csv", ".xlsx"):
        raise UnsupportedFormat(str(target))

    target = resolve_output_path(target, overwrite, now)
    if ext == ".csv":
        _write_csv(target, records)
    else:
        build_results_workbook(records, target)

    logger.info("wrote %d records to %s", len(records), target)
    return target
