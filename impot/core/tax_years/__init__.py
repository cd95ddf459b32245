from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from importlib import import_module
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from impot.config import Settings, get_settings
from impot.core.brackets import BracketTable
from impot.core.errors import ConfigurationError

_YEAR_PATTERN = re.compile(r"^y(\d{4})\.py$")

logger = logging.getLogger("impot").getChild("tax_years")


def _package_path() -> Path:
    return Path(__file__).resolve().parent


def _load_builtin_tables() -> Mapping[int, BracketTable]:
    tables: dict[int, BracketTable] = {}
    for module_path in sorted(_package_path().glob("y20??.py")):
        match = _YEAR_PATTERN.match(module_path.name)
        if not match:
            continue
        year = int(match.group(1))
        module = import_module(f"{__name__}.{module_path.stem}")
        rows = getattr(module, f"BRACKETS_{year}", None)
        if rows is None:
            continue
        tables[year] = BracketTable.from_rows(
            year, ({"min": lo, "max": hi, "rate": rate} for lo, hi, rate in rows)
        )
    return tables


@lru_cache(maxsize=1)
def _builtin_map() -> Mapping[int, BracketTable]:
    return _load_builtin_tables()


def builtin_tables() -> dict[int, BracketTable]:
    return dict(_builtin_map())


SUPPORTED_YEARS: tuple[int, ...] = tuple(sorted(_builtin_map().keys()))


class TrancheEntry(BaseModel):
    min: int
    max: int | None = None
    rate: str | int | float

    model_config = ConfigDict(extra="forbid")


class TaxYearEntry(BaseModel):
    year: int
    tranches: list[TrancheEntry]


class TaxFile(BaseModel):
    """JSON tax file: project metadata plus one entry per fiscal year."""

    name: str = "impot"
    version: str = "1.0.0"
    tax: list[TaxYearEntry] = Field(default_factory=list)

    def tables(self) -> dict[int, BracketTable]:
        tables: dict[int, BracketTable] = {}
        for entry in self.tax:
            if entry.year in tables:
                raise ConfigurationError(f"Tax year {entry.year} is defined more than once")
            tables[entry.year] = BracketTable.from_rows(
                entry.year, (tranche.model_dump() for tranche in entry.tranches)
            )
        return tables


def load_tax_file(path: str | Path) -> TaxFile:
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read tax file {file_path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Tax file {file_path} is not valid JSON: {exc}") from exc
    try:
        tax_file = TaxFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Tax file {file_path} is malformed: {exc}") from exc
    # Build once so a bad table is reported when the file is loaded.
    tax_file.tables()
    logger.info("Loaded tax file %s: years=%s", file_path, [entry.year for entry in tax_file.tax])
    return tax_file


def available_tables(settings: Settings | None = None) -> dict[int, BracketTable]:
    if settings is None:
        settings = get_settings()
    tables = builtin_tables()
    if settings.tax_file:
        tables.update(load_tax_file(settings.tax_file).tables())
    return tables


def select_bracket_table(
    tables: Mapping[int, BracketTable],
    year: int,
    default_year: int,
) -> BracketTable:
    table = tables.get(year)
    if table is not None:
        return table
    fallback = tables.get(default_year)
    if fallback is None:
        raise ConfigurationError(
            f"No tax table for {year} and no default table for {default_year}"
        )
    logger.info("No tax table for %s; falling back to %s", year, default_year)
    return fallback


def get_bracket_table(year: int | None = None, settings: Settings | None = None) -> BracketTable:
    if settings is None:
        settings = get_settings()
    target = settings.tax_year if year is None else year
    return select_bracket_table(available_tables(settings), target, settings.default_tax_year)


__all__ = [
    "SUPPORTED_YEARS",
    "TaxFile",
    "available_tables",
    "builtin_tables",
    "get_bracket_table",
    "load_tax_file",
    "select_bracket_table",
]
