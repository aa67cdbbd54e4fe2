import math
import unittest
from functools import reduce

import numpy as np

from stoichlab.balancer import (
    balance_reaction,
    build_conservation_matrix,
    gaussian_solve,
    integer_coefficients,
    null_space_dimension,
    rational_approximation,
)
from stoichlab.formula import parse_formula_counts
from stoichlab.reactions import parse_reaction

FIXTURES = {
    "H2 + O2 -> H2O": [2, 1, 2],
    "N2 + H2 -> NH3": [1, 3, 2],
    "C + O2 -> CO2": [1, 1, 1],
    "2 Ag + Cl2 -> 2 AgCl": [2, 1, 2],
    "Al + O2 -> Al2O3": [4, 3, 2],
    "C3H8 + O2 -> CO2 + H2O": [1, 5, 3, 4],
    "Fe2O3 + CO -> Fe + CO2": [1, 3, 2, 3],
    "Ca(OH)2 + H3PO4 -> Ca3(PO4)2 + H2O": [3, 2, 1, 6],
    "KMnO4 + HCl -> KCl + MnCl2 + H2O + Cl2": [2, 16, 2, 2, 8, 5],
    "C₆H₁₂O₆ + O₂ → CO₂ + H₂O": [1, 6, 6, 6],
}


class TestRationalApproximation(unittest.TestCase):
    def test_simple_fractions(self):
        for numerator, denominator in [(1, 2), (1, 3), (2, 3), (3, 4), (5, 7), (16, 5), (7, 1)]:
            with self.subTest(fraction=(numerator, denominator)):
                self.assertEqual(
                    rational_approximation(numerator / denominator),
                    (numerator, denominator),
                )

    def test_negative(self):
        self.assertEqual(rational_approximation(-1.5), (-3, 2))

    def test_solver_noise(self):
        self.assertEqual(rational_approximation(0.33333333331), (1, 3))
        self.assertEqual(rational_approximation(1.2500000004), (5, 4))

    def test_zero(self):
        self.assertEqual(rational_approximation(0.0), (0, 1))

    def test_denominator_cap(self):
        numerator, denominator = rational_approximation(math.pi, max_denominator=100)
        self.assertEqual((numerator, denominator), (22, 7))
        self.assertLessEqual(rational_approximation(math.pi)[1], 1000)

    def test_reconstruction_accuracy(self):
        for denominator in range(1, 13):
            for numerator in range(1, 3 * denominator):
                value = numerator / denominator
                n, d = rational_approximation(value)
                self.assertAlmostEqual(n / d, value, places=6)

    def test_non_finite(self):
        with self.assertRaises(ValueError):
            rational_approximation(float("nan"))
        with self.assertRaises(ValueError):
            rational_approximation(1.0, max_denominator=0)


class TestLinearAlgebra(unittest.TestCase):
    def test_gaussian_solve(self):
        x = gaussian_solve(np.array([[2.0, 1.0], [1.0, 3.0]]), np.array([3.0, 5.0]))
        np.testing.assert_allclose(x, [0.8, 1.4])

    def test_gaussian_solve_free_variable(self):
        x = gaussian_solve(np.array([[1.0, 1.0]]), np.array([2.0]))
        np.testing.assert_allclose(x, [2.0, 0.0])

    def test_gaussian_solve_pivots(self):
        x = gaussian_solve(np.array([[0.0, 1.0], [1.0, 0.0]]), np.array([4.0, 5.0]))
        np.testing.assert_allclose(x, [5.0, 4.0])

    def test_integer_coefficients(self):
        self.assertEqual(integer_coefficients([1.0, 0.5, 1.0]), [2, 1, 2])
        self.assertEqual(integer_coefficients([-1.0, -0.5, -1.0]), [2, 1, 2])
        self.assertEqual(integer_coefficients([2.0, 4.0, 6.0]), [1, 2, 3])
        self.assertIsNone(integer_coefficients([1.0, 0.0]))

    def test_conservation_matrix(self):
        elements, matrix = build_conservation_matrix(parse_reaction("H2 + O2 -> H2O"))
        self.assertEqual(elements, ["H", "O"])
        np.testing.assert_array_equal(matrix, [[2, 0, -2], [0, 2, -1]])

    def test_null_space_dimension(self):
        _, matrix = build_conservation_matrix(parse_reaction("H2 + O2 -> H2O"))
        self.assertEqual(null_space_dimension(matrix), 1)
        _, matrix = build_conservation_matrix(parse_reaction("H2 + O2 -> H2O + H2O2"))
        self.assertEqual(null_space_dimension(matrix), 2)


class TestBalanceReaction(unittest.TestCase):
    def assertConserved(self, reaction):
        totals = {}
        for species in reaction.reactants:
            for element, count in parse_formula_counts(species.formula).items():
                totals[element] = totals.get(element, 0) + species.coefficient * count
        for species in reaction.products:
            for element, count in parse_formula_counts(species.formula).items():
                totals[element] = totals.get(element, 0) - species.coefficient * count
        self.assertTrue(all(v == 0 for v in totals.values()), totals)

    def test_fixtures(self):
        for text, expected in FIXTURES.items():
            with self.subTest(reaction=text):
                balanced = balance_reaction(parse_reaction(text))
                self.assertTrue(balanced.balanced)
                self.assertEqual(balanced.coefficients(), expected)

    def test_conservation_and_minimal_integers(self):
        for text in FIXTURES:
            with self.subTest(reaction=text):
                balanced = balance_reaction(parse_reaction(text))
                self.assertConserved(balanced)
                coefficients = balanced.coefficients()
                self.assertTrue(all(isinstance(c, int) and c > 0 for c in coefficients))
                self.assertEqual(reduce(math.gcd, coefficients), 1)

    def test_user_coefficients_are_replaced(self):
        balanced = balance_reaction(parse_reaction("4 H2 + 3 O2 -> H2O"))
        self.assertEqual(balanced.coefficients(), [2, 1, 2])

    def test_molar_masses_and_order_kept(self):
        original = parse_reaction("2 Ag + Cl2 -> 2 AgCl")
        balanced = balance_reaction(original)
        self.assertEqual(
            [(s.formula, s.molar_mass) for s in balanced.species],
            [(s.formula, s.molar_mass) for s in original.species],
        )

    def test_input_not_mutated(self):
        original = parse_reaction("4 H2 + 3 O2 -> H2O")
        balance_reaction(original)
        self.assertEqual(original.coefficients(), [4, 3, 1])
        self.assertFalse(original.balanced)

    def test_impossible_reaction(self):
        original = parse_reaction("H2 -> O2")
        result = balance_reaction(original)
        self.assertFalse(result.balanced)
        self.assertEqual(result.coefficients(), [1, 1])

    def test_element_on_one_side_only(self):
        result = balance_reaction(parse_reaction("Na + Cl2 -> NaCl + H2O"))
        self.assertFalse(result.balanced)

    def test_missing_side(self):
        self.assertFalse(balance_reaction(parse_reaction("-> H2O")).balanced)
        self.assertFalse(balance_reaction(parse_reaction("H2O ->")).balanced)

    def test_non_unique_reaction_is_rejected(self):
        result = balance_reaction(parse_reaction("H2 + O2 -> H2O + H2O2"))
        self.assertFalse(result.balanced)


if __name__ == '__main__':
    unittest.main()
