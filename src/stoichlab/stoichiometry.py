"""Limiting reagent and theoretical yield calculations."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List

from stoichlab.constants import FALLBACK_MOLAR_MASS
from stoichlab.errors import (
    NoReactantDataError,
    UnbalancedReactionError,
    UnknownSpeciesError,
)
from stoichlab.formula import normalize_formula, split_phase
from stoichlab.masses import resolve_molar_mass
from stoichlab.models import ReactantEntry, Reaction, Species, StoichiometryResult
from stoichlab.reactions import format_equation

logger = logging.getLogger(__name__)


def _canonical(compound: str) -> str:
    return split_phase(normalize_formula(compound))[0]


def collect_entries(reaction: Reaction, entries: Iterable[ReactantEntry]) -> tuple[Dict[str, float], List[str]]:
    """Map reactant formula -> total mass (g), in first-seen order.

    Entries with a non-finite or non-positive mass are dropped silently;
    entries naming something that is not a reactant are dropped with a warning.
    """
    masses: Dict[str, float] = {}
    warnings: List[str] = []
    for entry in entries:
        compound = _canonical(entry.compound)
        try:
            mass = float(entry.mass_g)
        except (TypeError, ValueError):
            continue
        if not compound or not math.isfinite(mass) or mass <= 0:
            continue
        if reaction.find_reactant(compound) is None:
            message = f"{compound} is not a reactant of {format_equation(reaction)}; ignored"
            logger.warning(message)
            warnings.append(message)
            continue
        masses[compound] = masses.get(compound, 0.0) + mass
    return masses, warnings


def evaluate(
    reaction: Reaction,
    entries: Iterable[ReactantEntry],
    target: str | None = None,
    strict: bool = False,
    fallback_molar_mass: float = FALLBACK_MOLAR_MASS,
) -> StoichiometryResult:
    """Compute limiting reagent, theoretical yield and excess reagents.

    Args:
        reaction: A balanced reaction.
        entries: Reactant masses supplied by the user.
        target: Product to report the yield for; defaults to the first product.
        strict: Raise :class:`UnknownMolarMassError` instead of using the
            fallback molar mass.
        fallback_molar_mass: Molar mass assumed for unknown formulas.

    Raises:
        UnbalancedReactionError: ``reaction`` is not balanced.
        NoReactantDataError: No entry names a reactant with a positive mass.
        UnknownSpeciesError: ``target`` is not a product of the reaction.
    """
    equation = format_equation(reaction)
    if not reaction.balanced:
        raise UnbalancedReactionError(f"{equation} is not balanced")

    masses, warnings = collect_entries(reaction, entries)
    if not masses:
        raise NoReactantDataError("no valid reactant data")

    if target:
        target_formula = _canonical(target)
        target_species = reaction.find_product(target_formula)
        if target_species is None:
            raise UnknownSpeciesError(target_formula)
    elif reaction.products:
        target_species = reaction.products[0]
    else:
        raise UnknownSpeciesError("", role="product")

    def molar_mass(species: Species) -> float:
        # Species.molar_mass drives the numbers; the resolver only enforces
        # strict mode and reports fallback values.
        resolved = resolve_molar_mass(species.formula, fallback=fallback_molar_mass, strict=strict)
        value = species.molar_mass
        if not math.isfinite(value) or value <= 0:
            value = resolved.value
        if resolved.warning and value == resolved.value and resolved.warning not in warnings:
            warnings.append(resolved.warning)
        return value

    steps: List[str] = []
    moles: Dict[str, float] = {}
    coefficients: Dict[str, int] = {}
    molar_masses: Dict[str, float] = {}
    for compound, mass in masses.items():
        species = reaction.find_reactant(compound)
        mm = molar_masses[compound] = molar_mass(species)
        moles[compound] = mass / mm
        coefficients[compound] = max(species.coefficient, 1)
        steps.append(f"{mass:.1f} g {compound} ÷ {mm:.2f} g/mol = {moles[compound]:.3f} mol {compound}")

    limiting: str | None = None
    excess: Dict[str, float] = {}
    if len(moles) >= 2:
        extent = math.inf
        for compound, amount in moles.items():
            nu = coefficients[compound]
            value = amount / nu
            steps.append(f"{compound}: {amount:.3f} mol ÷ {nu} (coeff) = {value:.3f}")
            if value < extent:
                extent = value
                limiting = compound
        steps.append(f"({extent:.3f} is smallest, so {limiting} is limiting)")
        for compound, amount in moles.items():
            if compound != limiting:
                excess[compound] = max(0.0, amount - extent * coefficients[compound])
    else:
        compound, amount = next(iter(moles.items()))
        extent = amount / coefficients[compound]

    target_coefficient = max(target_species.coefficient, 1)
    target_mm = molar_mass(target_species)
    yield_moles = extent * target_coefficient
    yield_grams = yield_moles * target_mm
    steps.append(
        f"{extent:.3f} × {target_coefficient} = {yield_moles:.3f} mol {target_species.formula}"
        f" × {target_mm:.2f} g/mol = {yield_grams:.2f} g {target_species.formula}"
    )

    excess_masses = {compound: amount * molar_masses[compound] for compound, amount in excess.items()}
    mole_ratios = {s.formula: s.coefficient for s in reaction.species}

    return StoichiometryResult(
        target=target_species.formula,
        theoretical_yield=yield_grams,
        theoretical_yield_moles=yield_moles,
        reaction_extent=extent,
        limiting_reagent=limiting,
        excess_reagents=excess,
        excess_masses=excess_masses,
        mole_ratios=mole_ratios,
        balanced_equation=equation,
        steps=steps,
        warnings=warnings,
    )
