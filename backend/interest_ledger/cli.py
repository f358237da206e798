import logging

from interest_ledger.core.config import load_run_config, resolve_missing_fields, settings
from interest_ledger.core.logging_setup import configure_logging
from interest_ledger.services.pipeline import run
from interest_ledger.utils.clock import now_local


def main():
    configure_logging(settings.log_level)

    try:
        config = load_run_config(settings.config_path)
        config = resolve_missing_fields(config, input)

        for line in config.describe():
            print(line)
        print()

        written = run(config, now=now_local())
    except Exception as e:
        logging.exception("interest calculation failed", exc_info=e)
        raise

    if written is not None:
        print(f"Results saved in file: {written}")

if __name__ == "__main__":
    main()
