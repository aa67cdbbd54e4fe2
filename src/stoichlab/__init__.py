"""stoichlab core package."""

__version__ = "0.1.0"

from stoichlab.balancer import balance_reaction, rational_approximation
from stoichlab.formula import normalize_formula, parse_formula_counts
from stoichlab.masses import get_molar_mass, resolve_molar_mass
from stoichlab.models import ReactantEntry, Reaction, Species, StoichiometryResult
from stoichlab.reactions import format_equation, parse_reaction
from stoichlab.stoichiometry import evaluate

__all__ = [
    "balance_reaction",
    "evaluate",
    "format_equation",
    "get_molar_mass",
    "normalize_formula",
    "parse_formula_counts",
    "parse_reaction",
    "rational_approximation",
    "resolve_molar_mass",
    "ReactantEntry",
    "Reaction",
    "Species",
    "StoichiometryResult",
]
