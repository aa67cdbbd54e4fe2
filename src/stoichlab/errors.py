"""Exceptions raised by stoichlab."""

from __future__ import annotations


class StoichLabError(ValueError):
    """Base class for all stoichlab errors."""


class UnknownMolarMassError(StoichLabError):
    def __init__(self, formula: str) -> None:
        super().__init__(f"Unknown molar mass for '{formula}'")
        self.formula = formula


class UnbalancedReactionError(StoichLabError):
    """Raised when a stoichiometry calculation is attempted on an unbalanced reaction."""


class NoReactantDataError(StoichLabError):
    """Raised when no usable (compound, mass) entries remain after filtering."""


class UnknownSpeciesError(StoichLabError):
    def __init__(self, formula: str, role: str = "product") -> None:
        super().__init__(f"'{formula}' is not a {role} of the reaction")
        self.formula = formula
        self.role = role
