from .base import MolarMassSource
from .resolver import MolarMass, get_molar_mass, resolve_molar_mass
from .tables import CompoundTable, ElementSum, canonical_formula

__all__ = [
    "MolarMassSource",
    "CompoundTable",
    "ElementSum",
    "MolarMass",
    "canonical_formula",
    "get_molar_mass",
    "resolve_molar_mass",
]
