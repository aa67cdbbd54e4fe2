"""Chemical equation balancing.

Balancing is posed as the homogeneous system ``A x = 0`` where ``A`` is the
element conservation matrix (reactant columns positive, product columns
negative). The null space is determined only up to scale, so one
coefficient at a time is fixed to 1 and the remaining inhomogeneous system
is solved by Gauss-Jordan elimination:

    A[:, free] · x_free = -A[:, fixed]

The floating-point solution is turned into the smallest whole-number
vector with continued-fraction rational approximation followed by LCM
scaling and GCD reduction. A result is only marked ``balanced`` once every
element is conserved exactly in integer arithmetic.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Sequence

import numpy as np
from scipy.linalg import null_space

from stoichlab.constants import (
    FRACTION_TOLERANCE,
    MAX_DENOMINATOR,
    PIVOT_EPSILON,
    RESIDUAL_TOLERANCE,
)
from stoichlab.formula import parse_formula_counts
from stoichlab.models import Reaction
from stoichlab.reactions import format_equation

logger = logging.getLogger(__name__)


def build_conservation_matrix(reaction: Reaction) -> tuple[List[str], np.ndarray]:
    """Return the element order and the ``elements x species`` integer matrix."""
    compositions = [parse_formula_counts(s.formula) for s in reaction.species]
    elements: List[str] = []
    for composition in compositions:
        for element in composition:
            if element not in elements:
                elements.append(element)

    matrix = np.zeros((len(elements), len(compositions)), dtype=np.int64)
    n_reactants = len(reaction.reactants)
    for column, composition in enumerate(compositions):
        sign = 1 if column < n_reactants else -1
        for element, count in composition.items():
            matrix[elements.index(element), column] = sign * count
    return elements, matrix


def gaussian_solve(
    matrix: np.ndarray,
    rhs: np.ndarray,
    epsilon: float = PIVOT_EPSILON,
) -> np.ndarray | None:
    """Solve ``matrix · x = rhs`` by Gauss-Jordan elimination with partial pivoting.

    Columns whose best pivot is below ``epsilon`` are treated as free and set
    to 0. Inconsistent rows are not reported here; callers check the
    residual. Returns None when the solution is not finite.
    """
    matrix = np.asarray(matrix, dtype=float)
    rows, cols = matrix.shape
    augmented = np.zeros((rows, cols + 1))
    augmented[:, :cols] = matrix
    augmented[:, cols] = np.asarray(rhs, dtype=float)

    pivot_columns: List[int] = []
    pivot_row = 0
    for col in range(cols):
        if pivot_row >= rows:
            break
        pivot = pivot_row + int(np.argmax(np.abs(augmented[pivot_row:, col])))
        if abs(augmented[pivot, col]) < epsilon:
            continue
        augmented[[pivot_row, pivot]] = augmented[[pivot, pivot_row]]
        augmented[pivot_row] /= augmented[pivot_row, col]
        for row in range(rows):
            if row != pivot_row:
                augmented[row] -= augmented[row, col] * augmented[pivot_row]
        pivot_columns.append(col)
        pivot_row += 1

    solution = np.zeros(cols)
    for row, col in enumerate(pivot_columns):
        solution[col] = augmented[row, cols]
    if not np.all(np.isfinite(solution)):
        return None
    return solution


def rational_approximation(
    value: float,
    max_denominator: int = MAX_DENOMINATOR,
    tolerance: float = FRACTION_TOLERANCE,
) -> tuple[int, int]:
    """Approximate ``value`` by ``numerator / denominator`` using continued fractions.

    Convergents are generated until one lies within ``tolerance`` of the
    value or the next denominator would exceed ``max_denominator``.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot approximate non-finite value {value!r}")
    if max_denominator < 1:
        raise ValueError("max_denominator must be at least 1")

    sign = -1 if value < 0 else 1
    x = abs(value)
    h_prev, h = 0, 1
    k_prev, k = 1, 0
    remainder = x
    while True:
        a = math.floor(remainder)
        h_next = a * h + h_prev
        k_next = a * k + k_prev
        if k_next > max_denominator:
            break
        h_prev, h = h, h_next
        k_prev, k = k, k_next
        fraction = remainder - a
        if abs(h / k - x) < tolerance or fraction < 1e-15:
            break
        remainder = 1.0 / fraction
    return sign * h, k


def integer_coefficients(
    values: Sequence[float],
    max_denominator: int = MAX_DENOMINATOR,
    tolerance: float = FRACTION_TOLERANCE,
) -> List[int] | None:
    """Smallest integer vector proportional to ``values``.

    Returns None when a component rounds to zero.
    """
    fractions = [rational_approximation(float(v), max_denominator, tolerance) for v in values]
    if any(numerator == 0 for numerator, _ in fractions):
        return None

    common = math.lcm(*(denominator for _, denominator in fractions))
    integers = [numerator * (common // denominator) for numerator, denominator in fractions]
    if min(integers) < 0:
        integers = [-v for v in integers]
    divisor = math.gcd(*integers)
    return [v // divisor for v in integers]


def null_space_dimension(matrix: np.ndarray) -> int:
    """Number of independent balancings of the conservation matrix."""
    matrix = np.asarray(matrix, dtype=float)
    if matrix.shape[0] == 0:
        return matrix.shape[1]
    return int(null_space(matrix).shape[1])


def conserves_mass(matrix: np.ndarray, coefficients: Sequence[int]) -> bool:
    """Exact integer check that every element balances."""
    return all(
        sum(int(a) * int(c) for a, c in zip(row, coefficients)) == 0
        for row in matrix
    )


def _solve_with_fixed(matrix: np.ndarray, fixed: int, epsilon: float) -> np.ndarray | None:
    free = [j for j in range(matrix.shape[1]) if j != fixed]
    solution = gaussian_solve(matrix[:, free], -matrix[:, fixed], epsilon)
    if solution is None:
        return None
    candidate = np.empty(matrix.shape[1])
    candidate[fixed] = 1.0
    candidate[free] = solution
    return candidate


def _is_admissible(matrix: np.ndarray, candidate: np.ndarray, epsilon: float) -> bool:
    scale = max(1.0, float(np.max(np.abs(candidate))))
    residual = np.abs(matrix.astype(float) @ candidate)
    if residual.size and float(np.max(residual)) > RESIDUAL_TOLERANCE * scale:
        return False
    # Every species takes part, all on the side it was written on.
    return bool(np.all(candidate > epsilon) or np.all(candidate < -epsilon))


def balance_reaction(
    reaction: Reaction,
    epsilon: float = PIVOT_EPSILON,
    tolerance: float = FRACTION_TOLERANCE,
    max_denominator: int = MAX_DENOMINATOR,
) -> Reaction:
    """Return ``reaction`` with balanced coefficients.

    On failure the input is returned with ``balanced=False`` and its
    coefficients untouched; such a reaction is not a valid basis for yield
    calculations.
    """
    equation = format_equation(reaction)
    failed = replace(reaction, balanced=False)
    if not reaction.reactants or not reaction.products:
        logger.warning("Cannot balance %s: both sides need at least one species", equation)
        return failed

    elements, matrix = build_conservation_matrix(reaction)
    if not elements:
        logger.warning("Cannot balance %s: no elements recognised", equation)
        return failed

    nullity = null_space_dimension(matrix)
    if nullity > 1:
        logger.warning(
            "%s has %d independent balancings; the result is not unique", equation, nullity
        )

    n_species = matrix.shape[1]
    for fixed in range(n_species - 1, -1, -1):
        candidate = _solve_with_fixed(matrix, fixed, epsilon)
        if candidate is None or not _is_admissible(matrix, candidate, epsilon):
            logger.debug("Fixing species %d of %s gave no admissible solution", fixed, equation)
            continue

        coefficients = integer_coefficients(candidate, max_denominator, tolerance)
        if coefficients is None or not conserves_mass(matrix, coefficients):
            logger.debug("Fixing species %d of %s gave no integer solution", fixed, equation)
            continue

        n_reactants = len(reaction.reactants)
        balanced = Reaction(
            reactants=tuple(
                replace(s, coefficient=c)
                for s, c in zip(reaction.reactants, coefficients[:n_reactants])
            ),
            products=tuple(
                replace(s, coefficient=c)
                for s, c in zip(reaction.products, coefficients[n_reactants:])
            ),
            balanced=True,
        )
        logger.debug("Balanced %s as %s", equation, format_equation(balanced))
        return balanced

    logger.warning("Could not balance %s", equation)
    return failed
