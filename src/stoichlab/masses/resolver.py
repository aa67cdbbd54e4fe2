"""Molar mass resolution with explicit provenance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stoichlab.constants import ATOMIC_MASSES, COMPOUND_MASSES, FALLBACK_MOLAR_MASS
from stoichlab.errors import UnknownMolarMassError
from stoichlab.masses.tables import CompoundTable, ElementSum, canonical_formula

logger = logging.getLogger(__name__)

DEFAULT_COMPOUNDS = CompoundTable(COMPOUND_MASSES)
DEFAULT_ELEMENTS = ElementSum(ATOMIC_MASSES)


@dataclass(frozen=True)
class MolarMass:
    """A resolved molar mass.

    Attributes:
        formula: Canonical formula that was resolved.
        value: Molar mass (g/mol), always positive.
        source: ``"table"``, ``"elements"`` or ``"fallback"``.
        warning: Set when the value is an approximation the caller should surface.
    """

    formula: str
    value: float
    source: str
    warning: str | None = None

    @property
    def ok(self) -> bool:
        return self.warning is None


def resolve_molar_mass(
    formula: str,
    fallback: float = FALLBACK_MOLAR_MASS,
    strict: bool = False,
    compounds: CompoundTable = DEFAULT_COMPOUNDS,
    elements: ElementSum = DEFAULT_ELEMENTS,
) -> MolarMass:
    """Resolve a formula against the compound table, then the atomic masses.

    When neither source knows the formula, ``fallback`` is returned with a
    warning, or :class:`UnknownMolarMassError` is raised if ``strict``.
    """
    canonical = canonical_formula(formula)

    value = compounds.lookup(canonical)
    if value is not None:
        return MolarMass(canonical, value, compounds.name)

    value = elements.lookup(canonical)
    if value is not None:
        unknown = elements.unknown_elements(canonical)
        warning = None
        if unknown:
            warning = f"unknown elements {', '.join(unknown)} in {canonical} counted as 0 g/mol"
            if strict:
                raise UnknownMolarMassError(canonical)
            logger.warning(warning)
        return MolarMass(canonical, value, elements.name, warning)

    if strict:
        raise UnknownMolarMassError(canonical)
    warning = f"molar mass of '{canonical}' is unknown; assuming {fallback:g} g/mol"
    logger.warning(warning)
    return MolarMass(canonical, fallback, "fallback", warning)


def get_molar_mass(formula: str) -> float:
    """Lenient lookup; always returns a positive number."""
    return resolve_molar_mass(formula).value
