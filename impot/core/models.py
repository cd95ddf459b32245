from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Household(BaseModel):
    income: int | None = None
    target_remainder: int | None = Field(default=None, alias="remainder")
    is_in_couple: bool = False
    children: int = 0

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class TaxTranche(BaseModel):
    min: int
    max: int | None
    rate: Decimal
    tax: int

    model_config = ConfigDict(frozen=True)


class Result(BaseModel):
    income: int
    tax: int
    remainder: int
    shares: float
    tax_tranches: list[TaxTranche] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
