"""Static chemistry data and numeric defaults."""

from __future__ import annotations

# Standard atomic weights (g/mol), abridged.
ATOMIC_MASSES: dict[str, float] = {
    "H": 1.008, "He": 4.003, "Li": 6.941, "Be": 9.012, "B": 10.81, "C": 12.01,
    "N": 14.01, "O": 16.00, "F": 19.00, "Ne": 20.18, "Na": 22.99, "Mg": 24.31,
    "Al": 26.98, "Si": 28.09, "P": 30.97, "S": 32.07, "Cl": 35.45, "Ar": 39.95,
    "K": 39.10, "Ca": 40.08, "Sc": 44.96, "Ti": 47.87, "V": 50.94, "Cr": 52.00,
    "Mn": 54.94, "Fe": 55.85, "Co": 58.93, "Ni": 58.69, "Cu": 63.55, "Zn": 65.38,
    "Ga": 69.72, "Ge": 72.63, "As": 74.92, "Se": 78.97, "Br": 79.90, "Kr": 83.80,
    "Rb": 85.47, "Sr": 87.62, "Y": 88.91, "Zr": 91.22, "Nb": 92.91, "Mo": 95.95,
    "Ru": 101.07, "Rh": 102.91, "Pd": 106.42, "Ag": 107.87, "Cd": 112.41,
    "In": 114.82, "Sn": 118.71, "Sb": 121.76, "Te": 127.60, "I": 126.90,
    "Xe": 131.29, "Cs": 132.91, "Ba": 137.33, "La": 138.91, "Ce": 140.12,
    "W": 183.84, "Pt": 195.08, "Au": 196.97, "Hg": 200.59, "Tl": 204.38,
    "Pb": 207.2, "Bi": 208.98, "U": 238.03,
}

# Tabulated molar masses (g/mol) keyed by canonical formula.
COMPOUND_MASSES: dict[str, float] = {
    "H2O": 18.02, "CO2": 44.01, "NaCl": 58.44, "HCl": 36.46, "NaOH": 40.00,
    "H2SO4": 98.08, "CaCO3": 100.09, "NH3": 17.03, "CH4": 16.04, "O2": 32.00,
    "N2": 28.02, "H2": 2.02, "CaO": 56.08, "Fe2O3": 159.69, "Al2O3": 101.96,
    "Cu": 63.55, "Ag": 107.87, "Au": 196.97, "Fe": 55.85, "Al": 26.98,
}

FALLBACK_MOLAR_MASS = 100.0  # g/mol

ARROW_TOKENS = ("→", "->", "⟶", "=>")
DEFAULT_REACTION = "H₂ + O₂ → H₂O"
PHASE_TAGS = ("s", "l", "g", "aq")

PIVOT_EPSILON = 1e-12
FRACTION_TOLERANCE = 1e-6
MAX_DENOMINATOR = 1000
# Residual allowed on A·x = 0 before a candidate solution is rejected.
RESIDUAL_TOLERANCE = 1e-6
