from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from interest_ledger.core.errors import ConfigError


class Settings(BaseSettings):
    config_path: str = "config.json"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173"

    model_config = SettingsConfigDict(env_prefix="INTEREST_LEDGER_", case_sensitive=False, env_file=".env")

settings = Settings()


class RunConfig(BaseModel):
    """Contents of ``config.json``; keys are camelCase on disk."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    annual_interest_rate: Decimal
    input_file: str | None = None
    output_file: str | None = None
    interest_rates_file: str | None = None
    overwrite_existing_file: bool = False

    @property
    def annual_rate_fraction(self) -> Decimal:
        return self.annual_interest_rate / Decimal("100")

    def describe(self) -> list[str]:
        return [
            "configuration:",
            f"- inputFile: {self.input_file or ''}",
            f"- outputFile: {self.output_file or ''}",
            f"- overwriteExistingFile: {self.overwrite_existing_file}",
            f"- interestRatesFile: {self.interest_rates_file or ''}",
        ]


def load_run_config(path: str | Path) -> RunConfig:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {p}") from e

    try:
        return RunConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {p}: {e.error_count()} error(s)") from e


def resolve_missing_fields(config: RunConfig, ask: Callable[[str], str]) -> RunConfig:
    updates: dict[str, str] = {}
    if not (config.input_file or "").strip():
        updates["input_file"] = ask("Input file name: ").strip()
    if not (config.output_file or "").strip():
        updates["output_file"] = ask("Output file name: ").strip()
    if not updates:
        return config
    return config.model_copy(update=updates)
