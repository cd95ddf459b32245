"""
Household income tax calculator.

Computes French-style progressive income tax by tranches, with the household
split into shares (quotient familial), and solves the reverse problem of
finding the income that leaves a given remainder after tax.
"""
from __future__ import annotations

__version__ = "1.0.0"
