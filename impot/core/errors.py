from __future__ import annotations


class ImpotError(Exception):
    """Base class for every error raised by the tax engine."""


class ConfigurationError(ImpotError, ValueError):
    """A bracket table, rate or tax file cannot be used for a calculation."""


class InputError(ImpotError, ValueError):
    """A household value is out of range or missing."""


class ConvergenceError(ImpotError, ArithmeticError):
    """The reverse search found no income leaving the requested remainder."""


__all__ = ["ImpotError", "ConfigurationError", "InputError", "ConvergenceError"]
