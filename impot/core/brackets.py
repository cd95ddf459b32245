from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from impot.core.errors import ConfigurationError

D = Decimal

# Largest value the tax files use to mean "no upper limit".
UNBOUNDED_SENTINEL = 2**63 - 1

_HUNDRED = D("100")


def parse_rate(value: str | int | float | Decimal) -> D:
    """Turn a percentage such as ``"11%"`` or ``11`` into the fraction ``0.11``."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid tax rate {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            text = text[:-1].strip()
        try:
            percent = D(text)
        except InvalidOperation as exc:
            raise ConfigurationError(f"Invalid tax rate {value!r}") from exc
    elif isinstance(value, (int, float, Decimal)):
        percent = D(str(value))
    else:
        raise ConfigurationError(f"Invalid tax rate {value!r}")
    if not percent.is_finite() or percent < 0 or percent > _HUNDRED:
        raise ConfigurationError(f"Tax rate {value!r} must be between 0% and 100%")
    return percent / _HUNDRED


def _as_bound(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"Tranche {name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class Tranche:
    min: int
    max: int | None
    rate: D

    @property
    def unbounded(self) -> bool:
        return self.max is None

    @property
    def percent(self) -> str:
        return f"{(self.rate * _HUNDRED).normalize():f}%"

    def taxable_span(self, income: D) -> D:
        """Part of ``income`` that falls inside this tranche."""
        if self.max is not None and income > self.max:
            return D(self.max - self.min)
        if income > self.min:
            return income - self.min
        return D("0")

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "Tranche":
        if "min" not in row or "rate" not in row:
            raise ConfigurationError(f"Tranche {dict(row)!r} needs at least 'min' and 'rate'")
        lower = _as_bound(row["min"], "min")
        raw_max = row.get("max")
        upper = None if raw_max is None else _as_bound(raw_max, "max")
        if upper is not None and upper >= UNBOUNDED_SENTINEL:
            upper = None
        return cls(min=lower, max=upper, rate=parse_rate(row["rate"]))


@dataclass(frozen=True)
class BracketTable:
    """Ordered tranches of one fiscal year.

    Tables are validated on construction: non-empty, starting at 0, each
    tranche starting where the previous one stops (or one unit after), and
    only the last tranche unbounded.
    """

    year: int
    tranches: tuple[Tranche, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tranches", tuple(self.tranches))
        _validate(self.year, self.tranches)

    def __iter__(self):
        return iter(self.tranches)

    def __len__(self) -> int:
        return len(self.tranches)

    @property
    def top(self) -> Tranche:
        return self.tranches[-1]

    @property
    def top_rate(self) -> D:
        return max(t.rate for t in self.tranches)

    @classmethod
    def from_rows(cls, year: int, rows: Iterable[Mapping[str, Any] | Tranche]) -> "BracketTable":
        tranches = [row if isinstance(row, Tranche) else Tranche.from_mapping(row) for row in rows]
        return cls(year=year, tranches=tuple(tranches))


def _validate(year: int, tranches: tuple[Tranche, ...]) -> None:
    if not tranches:
        raise ConfigurationError(f"Tax table {year} has no tranches")
    if tranches[0].min != 0:
        raise ConfigurationError(f"Tax table {year} must start at 0, starts at {tranches[0].min}")
    for index, tranche in enumerate(tranches):
        rate = tranche.rate
        if not isinstance(rate, Decimal) or not rate.is_finite() or rate < 0 or rate > 1:
            raise ConfigurationError(
                f"Tax table {year}: tranche starting at {tranche.min} has invalid rate {rate!r}"
            )
        if tranche.min < 0:
            raise ConfigurationError(f"Tax table {year}: negative lower bound {tranche.min}")
        if tranche.max is not None and tranche.max < tranche.min:
            raise ConfigurationError(
                f"Tax table {year}: tranche {tranche.min}-{tranche.max} ends before it starts"
            )
        if index == 0:
            continue
        previous = tranches[index - 1]
        if previous.max is None:
            raise ConfigurationError(f"Tax table {year}: only the last tranche may be unbounded")
        if tranche.min not in (previous.max, previous.max + 1):
            raise ConfigurationError(
                f"Tax table {year}: tranche starting at {tranche.min} does not follow {previous.max}"
            )
    if tranches[-1].max is not None:
        raise ConfigurationError(
            f"Tax table {year}: the last tranche must be unbounded "
            f"(max omitted, null or at least {UNBOUNDED_SENTINEL}), got max={tranches[-1].max}"
        )


__all__ = ["BracketTable", "Tranche", "UNBOUNDED_SENTINEL", "parse_rate"]
