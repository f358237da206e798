from __future__ import annotations


class LedgerError(Exception):
    code = "ledger_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class UnsupportedFormat(LedgerError):
    code = "unsupported_file_type"

    def __init__(self, path: str):
        super().__init__(f"Unsupported file type: {path}. Please use a .csv or .xlsx file.")
        self.path = path


class ParseFailure(LedgerError):
    code = "parse_failed"

    def __init__(self, path: str, row: int, value: object, what: str):
        super().__init__(f"{path}: row {row}: cannot parse {what} from {value!r}")
        self.path = path
        self.row = row
        self.value = value
        self.what = what


class ConfigError(LedgerError):
    code = "config_invalid"
