"""Table-backed molar mass sources."""

from __future__ import annotations

from typing import Mapping

from stoichlab.formula import normalize_formula, parse_formula_counts, split_phase
from stoichlab.masses.base import MolarMassSource


def canonical_formula(formula: str) -> str:
    """ASCII digits, no whitespace, phase tag removed."""
    return split_phase(normalize_formula(formula))[0]


class CompoundTable(MolarMassSource):
    """Authoritative molar masses for whole compounds.

    Keys are canonicalized on construction, so ``"H₂O"``, ``"H2O"`` and
    ``"H2O(l)"`` all address the same entry.
    """

    name = "table"

    def __init__(self, masses: Mapping[str, float]):
        self.masses = {canonical_formula(key): float(value) for key, value in masses.items()}

    def lookup(self, formula: str) -> float | None:
        return self.masses.get(canonical_formula(formula))


class ElementSum(MolarMassSource):
    """Molar mass as the sum of atomic masses over the parsed composition."""

    name = "elements"

    def __init__(self, atomic_masses: Mapping[str, float]):
        self.atomic_masses = atomic_masses

    def lookup(self, formula: str) -> float | None:
        total = 0.0
        for element, count in parse_formula_counts(formula).items():
            # Unknown symbols contribute nothing.
            total += count * self.atomic_masses.get(element, 0.0)
        return total if total > 0 else None

    def unknown_elements(self, formula: str) -> list[str]:
        return [el for el in parse_formula_counts(formula) if el not in self.atomic_masses]
