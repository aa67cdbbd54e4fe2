"""Calculator form handling: raw text fields in, a result or a message out."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from stoichlab.balancer import balance_reaction
from stoichlab.config import Settings, get_settings
from stoichlab.errors import NoReactantDataError
from stoichlab.models import ReactantEntry, Reaction, StoichiometryResult
from stoichlab.reactions import parse_reaction
from stoichlab.stoichiometry import evaluate

UNBALANCED_MESSAGE = "reaction could not be balanced"
NO_DATA_MESSAGE = "no valid reactant data"


@dataclass(frozen=True)
class StoichFormInputs:
    reaction_input: str
    reactants: Sequence[tuple[str, str]] = field(default_factory=tuple)
    target: str = ""


@dataclass(frozen=True)
class StoichFormResult:
    reaction: Reaction
    result: StoichiometryResult | None = None
    message: str | None = None


def parse_mass(text: str) -> float | None:
    """Parse a mass field; None for anything that is not a finite positive number."""
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_reactant_option(option: str) -> tuple[str, str]:
    """Split ``"Ag=10"`` (or ``"Ag:10"``) into compound and mass text."""
    for separator in ("=", ":"):
        if separator in option:
            compound, mass = option.rsplit(separator, 1)
            return compound.strip(), mass.strip()
    raise ValueError(f"Expected COMPOUND=MASS, got {option!r}")


def valid_entries(rows: Sequence[tuple[str, str]]) -> list[ReactantEntry]:
    entries = []
    for compound, mass_text in rows:
        mass = parse_mass(mass_text)
        if compound.strip() and mass is not None:
            entries.append(ReactantEntry(compound=compound.strip(), mass_g=mass))
    return entries


def run_stoich_form(inputs: StoichFormInputs, settings: Settings | None = None) -> StoichFormResult:
    settings = settings or get_settings()
    reaction = balance_reaction(
        parse_reaction(inputs.reaction_input, fallback_molar_mass=settings.fallback_molar_mass),
        epsilon=settings.pivot_epsilon,
        tolerance=settings.fraction_tolerance,
        max_denominator=settings.max_denominator,
    )
    if not reaction.balanced:
        return StoichFormResult(reaction=reaction, message=UNBALANCED_MESSAGE)

    entries = valid_entries(inputs.reactants)
    if not entries:
        return StoichFormResult(reaction=reaction, message=NO_DATA_MESSAGE)

    try:
        result = evaluate(
            reaction,
            entries,
            target=inputs.target.strip() or None,
            strict=settings.strict_molar_mass,
            fallback_molar_mass=settings.fallback_molar_mass,
        )
    except NoReactantDataError:
        return StoichFormResult(reaction=reaction, message=NO_DATA_MESSAGE)
    return StoichFormResult(reaction=reaction, result=result)
