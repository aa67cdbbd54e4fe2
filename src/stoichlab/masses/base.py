"""Base interface for molar mass sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MolarMassSource(ABC):
    """Abstract base class for molar mass lookups."""

    name: str = "source"

    @abstractmethod
    def lookup(self, formula: str) -> float | None:
        """Return the molar mass (g/mol) of a canonical formula, or None if unknown."""
        pass
