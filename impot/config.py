from __future__ import annotations

import logging
import os
from datetime import date
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator, model_validator

DEFAULT_TAX_YEAR = 2022
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value


def _env_optional_int(name: str) -> int | None:
    value = _env_optional(name)
    return None if value is None else int(value)


class Settings(BaseModel):
    tax_file: str | None = Field(default_factory=lambda: _env_optional("IMPOT_TAX_FILE"))
    tax_year: int = Field(default_factory=lambda: _env_int("IMPOT_TAX_YEAR", date.today().year))
    default_tax_year: int = Field(
        default_factory=lambda: _env_int("IMPOT_DEFAULT_TAX_YEAR", DEFAULT_TAX_YEAR)
    )
    reverse_tolerance: int = Field(default_factory=lambda: _env_int("IMPOT_REVERSE_TOLERANCE", 1))
    # None sizes the reverse search budget to its income range.
    reverse_max_iterations: int | None = Field(
        default_factory=lambda: _env_optional_int("IMPOT_REVERSE_MAX_ITERATIONS")
    )
    log_level: str = Field(default_factory=lambda: os.getenv("IMPOT_LOG_LEVEL", "WARNING"))
    currency: str = Field(default_factory=lambda: os.getenv("IMPOT_CURRENCY", "€"))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        upper = (value or "WARNING").upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"IMPOT_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {upper}")
        return upper

    @field_validator("reverse_tolerance")
    @classmethod
    def _validate_tolerance(cls, value: int) -> int:
        if value < 0:
            raise ValueError("IMPOT_REVERSE_TOLERANCE must not be negative")
        return value

    @field_validator("reverse_max_iterations")
    @classmethod
    def _validate_iterations(cls, value: int | None) -> int | None:
        return None if value is None else max(1, value)

    @model_validator(mode="after")
    def _check_years(self) -> "Settings":
        if self.default_tax_year <= 0 or self.tax_year <= 0:
            raise ValueError("Tax years must be positive")
        return self

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
