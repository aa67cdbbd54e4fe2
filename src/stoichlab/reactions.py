"""Reaction string parsing and display."""

from __future__ import annotations

import logging
import re
from typing import List

from stoichlab.constants import ARROW_TOKENS, DEFAULT_REACTION, FALLBACK_MOLAR_MASS
from stoichlab.formula import normalize_formula, split_phase, to_subscripts
from stoichlab.masses import resolve_molar_mass
from stoichlab.models import Reaction, Species

logger = logging.getLogger(__name__)

ARROW_PATTERN = re.compile("|".join(re.escape(token) for token in ARROW_TOKENS))
_LEADING_COEFFICIENT = re.compile(r"^([0-9]+)\s*(.+)$")


def has_arrow(text: str) -> bool:
    return ARROW_PATTERN.search(text) is not None


def parse_species(token: str, fallback_molar_mass: float = FALLBACK_MOLAR_MASS) -> Species | None:
    """Parse one side token such as ``2 H₂O`` or ``NaCl(aq)``."""
    token = token.strip()
    match = _LEADING_COEFFICIENT.match(token)
    coefficient = int(match.group(1)) if match else 1
    formula, phase = split_phase(normalize_formula(match.group(2) if match else token))
    if not formula:
        return None
    molar_mass = resolve_molar_mass(formula, fallback=fallback_molar_mass)
    return Species(
        formula=formula,
        molar_mass=molar_mass.value,
        coefficient=max(coefficient, 1),
        phase=phase,
    )


def _parse_side(side: str, fallback_molar_mass: float) -> tuple[Species, ...]:
    species: List[Species] = []
    for token in side.split("+"):
        parsed = parse_species(token, fallback_molar_mass)
        if parsed is None:
            logger.debug("Skipping empty token in %r", side)
            continue
        species.append(parsed)
    return tuple(species)


def parse_reaction(text: str, fallback_molar_mass: float = FALLBACK_MOLAR_MASS) -> Reaction:
    """Parse ``"2 Ag + Cl₂ → 2 AgCl"`` into an unbalanced :class:`Reaction`.

    Input without an arrow is replaced by the default reaction. Only the
    first two sides are used when the input contains several arrows.
    """
    if not has_arrow(text):
        logger.warning("No reaction arrow in %r; using default reaction %s", text, DEFAULT_REACTION)
        text = DEFAULT_REACTION
    parts = ARROW_PATTERN.split(text)
    if len(parts) > 2:
        logger.warning("Ignoring everything after the second arrow in %r", text)

    return Reaction(
        reactants=_parse_side(parts[0], fallback_molar_mass),
        products=_parse_side(parts[1], fallback_molar_mass),
        balanced=False,
    )


def _format_term(species: Species, pretty: bool) -> str:
    formula = to_subscripts(species.formula) if pretty else species.formula
    if species.coefficient == 1:
        return formula
    return f"{species.coefficient}{formula}"


def format_equation(reaction: Reaction, pretty: bool = False) -> str:
    """Render ``2H2 + O2 → 2H2O``; ``pretty`` uses subscript digits."""
    lhs = " + ".join(_format_term(s, pretty) for s in reaction.reactants)
    rhs = " + ".join(_format_term(s, pretty) for s in reaction.products)
    return f"{lhs} → {rhs}"
