"""Data structures for species, reactions and stoichiometry results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Species:
    formula: str
    molar_mass: float
    coefficient: int = 1
    phase: str | None = None


@dataclass(frozen=True)
class Reaction:
    reactants: Tuple[Species, ...]
    products: Tuple[Species, ...]
    balanced: bool = False

    @property
    def species(self) -> Tuple[Species, ...]:
        return self.reactants + self.products

    def coefficients(self) -> List[int]:
        return [s.coefficient for s in self.species]

    def find_reactant(self, formula: str) -> Species | None:
        return next((s for s in self.reactants if s.formula == formula), None)

    def find_product(self, formula: str) -> Species | None:
        return next((s for s in self.products if s.formula == formula), None)


@dataclass(frozen=True)
class ReactantEntry:
    compound: str
    mass_g: float


@dataclass(frozen=True)
class StoichiometryResult:
    """Outcome of a single stoichiometry calculation.

    Attributes:
        target: Product the yield refers to.
        theoretical_yield: Theoretical yield of ``target`` (g).
        theoretical_yield_moles: Theoretical yield of ``target`` (mol).
        reaction_extent: Moles of reaction events supported by the inputs.
        limiting_reagent: Limiting reactant, None when only one reactant was given.
        excess_reagents: Remaining moles of every non-limiting reactant.
        excess_masses: The same remainders in grams.
        mole_ratios: Balanced coefficient of every species.
        balanced_equation: Display form of the balanced reaction.
        steps: Human-readable calculation trail.
        warnings: Approximations made along the way (fallback molar masses, ignored entries).
    """

    target: str
    theoretical_yield: float
    theoretical_yield_moles: float
    reaction_extent: float
    limiting_reagent: str | None
    excess_reagents: Dict[str, float] = field(default_factory=dict)
    excess_masses: Dict[str, float] = field(default_factory=dict)
    mole_ratios: Dict[str, int] = field(default_factory=dict)
    balanced_equation: str = ""
    steps: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
