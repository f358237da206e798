from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from interest_ledger.core.config import RunConfig
from interest_ledger.services.accrual import compute_interest
from interest_ledger.services.ingest import read_entries, read_rate_schedule
from interest_ledger.services.reports import save_results

logger = logging.getLogger(__name__)


def run(config: RunConfig, *, now: datetime) -> Path | None:
    """Read the input file, accrue every entry and save the ledger.

    ``config`` must already have its file names resolved. Returns the path
    that was written, or ``None`` when there is nothing to read or write.
    """
    if not config.input_file:
        logger.warning("no input file configured; nothing to do")
        return None

    entries = read_entries(config.input_file)

    schedule = None
    if config.interest_rates_file:
        schedule = read_rate_schedule(config.interest_rates_file)

    results = compute_interest(entries, config.annual_rate_fraction, schedule, now=now)

    if not config.output_file:
        logger.warning("no output file configured; %d records not saved", len(results))
        return None

    return save_results(
        config.output_file,
        results,
        overwrite=config.overwrite_existing_file,
        now=now,
    )
