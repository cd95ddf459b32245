from __future__ import annotations

from impot.core.brackets import BracketTable, Tranche, parse_rate
from impot.core.engine import calculate_reverse_tax, calculate_tax
from impot.core.errors import ConfigurationError, ConvergenceError, ImpotError, InputError
from impot.core.models import Household, Result, TaxTranche
from impot.core.shares import get_shares

__all__ = [
    "BracketTable",
    "ConfigurationError",
    "ConvergenceError",
    "Household",
    "ImpotError",
    "InputError",
    "Result",
    "TaxTranche",
    "Tranche",
    "calculate_reverse_tax",
    "calculate_tax",
    "get_shares",
    "parse_rate",
]
