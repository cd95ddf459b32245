from __future__ import annotations

import logging
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from impot.config import get_settings
from impot.core.brackets import BracketTable
from impot.core.errors import ConvergenceError, InputError
from impot.core.models import Household, Result, TaxTranche
from impot.core.shares import get_shares

D = Decimal

logger = logging.getLogger("impot").getChild("engine")


def _round_unit(value: D) -> int:
    return int(value.quantize(D("1"), rounding=ROUND_HALF_UP))


def _check_children(household: Household) -> None:
    if household.children < 0:
        raise InputError(f"Number of children cannot be negative, got {household.children}")


def _compute(income: int, is_in_couple: bool, children: int, table: BracketTable) -> Result:
    shares = get_shares(is_in_couple, children)
    share_count = D(str(shares))
    per_share_income = D(income) / share_count

    per_share_tax = D("0")
    rows: list[TaxTranche] = []
    for tranche in table:
        tranche_tax = tranche.taxable_span(per_share_income) * tranche.rate
        per_share_tax += tranche_tax
        rows.append(
            TaxTranche(
                min=tranche.min,
                max=tranche.max,
                rate=tranche.rate,
                tax=_round_unit(tranche_tax * share_count),
            )
        )

    tax = _round_unit(per_share_tax * share_count)
    return Result(
        income=income,
        tax=tax,
        remainder=income - tax,
        shares=shares,
        tax_tranches=rows,
    )


def calculate_tax(household: Household, table: BracketTable) -> Result:
    """Tax owed by ``household`` on its income under ``table``.

    The income is split across the household shares, each share is taxed
    tranche by tranche, and the per-share tax is scaled back to the household
    and rounded half-up to the unit.
    """
    if household.income is None:
        raise InputError("An income is required to calculate the tax")
    if household.income < 0:
        raise InputError(f"Income cannot be negative, got {household.income}")
    _check_children(household)
    result = _compute(household.income, household.is_in_couple, household.children, table)
    logger.debug(
        "Tax %s: income=%s shares=%s tax=%s remainder=%s",
        table.year,
        result.income,
        result.shares,
        result.tax,
        result.remainder,
    )
    return result


def _default_upper_bound(table: BracketTable, shares: float, target: int) -> int:
    top_start = D(table.top.min) * D(str(shares))
    top_rate = table.top_rate
    if top_rate >= 1:
        return int(top_start) + target + 1
    needed = (D(target) / (1 - top_rate)).to_integral_value(rounding=ROUND_CEILING)
    return int(max(top_start, needed)) + 1


def calculate_reverse_tax(
    household: Household,
    table: BracketTable,
    *,
    tolerance: int | None = None,
    max_iterations: int | None = None,
    upper_bound: int | None = None,
) -> Result:
    """Find the income that leaves ``household.target_remainder`` after tax.

    Binary search over ``[0, upper_bound]`` for the smallest income whose
    remainder reaches the target. Without an explicit or configured
    ``max_iterations`` the budget is sized to the range. Raises
    :class:`ConvergenceError` when the iteration budget runs out or no income
    in range comes within ``tolerance``.
    """
    target = household.target_remainder
    if target is None:
        raise InputError("A target remainder is required for the reverse calculation")
    if target < 0:
        raise InputError(f"Target remainder cannot be negative, got {target}")
    _check_children(household)

    if tolerance is None or max_iterations is None:
        settings = get_settings()
        if tolerance is None:
            tolerance = settings.reverse_tolerance
        if max_iterations is None:
            max_iterations = settings.reverse_max_iterations
    shares = get_shares(household.is_in_couple, household.children)
    if upper_bound is None:
        upper_bound = _default_upper_bound(table, shares, target)
    if max_iterations is None:
        # One halving per bit of the range always collapses it.
        max_iterations = upper_bound.bit_length() + 1

    def probe(income: int) -> Result:
        return _compute(income, household.is_in_couple, household.children, table)

    ceiling = probe(upper_bound)
    if ceiling.remainder < target - tolerance:
        raise ConvergenceError(
            f"Remainder {target} is out of reach below income {upper_bound} "
            f"(best remainder {ceiling.remainder})"
        )

    low, high = 0, upper_bound
    iterations = 0
    while low < high:
        if iterations >= max_iterations:
            raise ConvergenceError(
                f"No income found for remainder {target} after {iterations} iterations "
                f"(range {low}-{high})"
            )
        iterations += 1
        middle = (low + high) // 2
        if probe(middle).remainder < target:
            low = middle + 1
        else:
            high = middle

    result = probe(low)
    if abs(result.remainder - target) > tolerance:
        raise ConvergenceError(
            f"Closest income {low} leaves {result.remainder}, not within {tolerance} of {target}"
        )
    logger.debug(
        "Reverse tax %s: target=%s income=%s iterations=%s",
        table.year,
        target,
        result.income,
        iterations,
    )
    return result


__all__ = ["calculate_tax", "calculate_reverse_tax"]
