# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for allocation handling and deterministic portfolio projections.
"""

import unittest

from ..errors import InvalidArgumentError
from ..lumpsum import calculate_lumpsum_fv
from ..portfolio import (
    Allocation,
    ProjectionParams,
    validate_allocations,
    normalize_allocations,
    calculate_allocated_amounts,
    project_portfolio,
)


def _stocks_bonds():
    return [Allocation('Stocks', 60, 0.12), Allocation('Bonds', 40, 0.07)]


def _stocks_bonds_gold():
    return _stocks_bonds() + [Allocation('Gold', 30, 0.06)]


class TestValidateAllocations(unittest.TestCase):
    """Tests for validate_allocations."""

    def test_valid(self):
        """Test a valid allocation."""
        result = validate_allocations(_stocks_bonds())
        self.assertTrue(result.valid)
        self.assertEqual(result.errors, [])

    def test_empty(self):
        """Test an empty allocation."""
        result = validate_allocations([])
        self.assertFalse(result.valid)
        self.assertIn('At least one allocation is required', result.errors)

    def test_negative_percent(self):
        """Test a negative percentage."""
        result = validate_allocations([Allocation('Stocks', -10, 0.12)])
        self.assertFalse(result.valid)
        self.assertIn('Allocation 1: Percentage cannot be negative', result.errors)

    def test_single_allocation_over_100(self):
        """Test a single allocation above 100%."""
        result = validate_allocations([Allocation('Stocks', 150, 0.12)])
        self.assertFalse(result.valid)
        self.assertIn('Allocation 1: Single allocation cannot exceed 100%', result.errors)

    def test_missing_category(self):
        """Test a missing category."""
        result = validate_allocations([Allocation('Stocks', 50, 0.1), Allocation('  ', 50, 0.12)])
        self.assertEqual(result.errors, ['Allocation 2: Category name is required'])


class TestNormalizeAllocations(unittest.TestCase):
    """Tests for normalize_allocations."""

    def test_rescales_proportionally(self):
        """Test proportional rescaling."""
        result = normalize_allocations(_stocks_bonds_gold())

        self.assertTrue(result.success)
        self.assertEqual(result.total_percent, 100)
        self.assertEqual([a.percent_normalized for a in result.allocations], [46.15, 30.77, 23.08])
        self.assertAlmostEqual(sum(a.percent_normalized for a in result.allocations), 100, places=1)

    def test_input_is_not_modified(self):
        """Test that normalization does not modify its input."""
        allocations = _stocks_bonds_gold()
        normalize_allocations(allocations)
        self.assertIsNone(allocations[0].percent_normalized)

    def test_strict_requires_100(self):
        """Test that strict mode requires 100%."""
        result = normalize_allocations([Allocation('Stocks', 60, 0.12), Allocation('Bonds', 30, 0.07)],
                                       strict=True)
        self.assertFalse(result.success)
        self.assertIn('must sum to 100%', result.error)
        self.assertIn('90.00%', result.error)

    def test_strict_passes_at_100(self):
        """Test that strict mode accepts 100%."""
        result = normalize_allocations(_stocks_bonds(), strict=True)
        self.assertTrue(result.success)
        self.assertEqual([a.percent_normalized for a in result.allocations], [60, 40])

    def test_empty_and_zero_total(self):
        """Test empty and zero total allocations."""
        self.assertFalse(normalize_allocations([]).success)
        result = normalize_allocations([Allocation('Stocks', 0, 0.12)])
        self.assertFalse(result.success)
        self.assertEqual(result.error, 'Total allocation percentage is 0%')


class TestAllocatedAmounts(unittest.TestCase):

    def test_splits_amount(self):
        """Test splitting an amount across allocations."""
        allocations = [Allocation('Stocks', 60, 0.12, percent_normalized=60),
                       Allocation('Bonds', 40, 0.07, percent_normalized=40)]
        result = calculate_allocated_amounts(100000, allocations)
        self.assertEqual([a.amount for a in result], [60000, 40000])

    def test_prefers_normalized_percent(self):
        """Test that the normalized percent is used."""
        result = calculate_allocated_amounts(100000, [Allocation('Stocks', 70, 0.12, percent_normalized=50)])
        self.assertEqual(result[0].amount, 50000)

    def test_falls_back_to_entered_percent(self):
        """Test fallback to the entered percent."""
        result = calculate_allocated_amounts(1000, [Allocation('Stocks', 25, 0.12)])
        self.assertEqual(result[0].amount, 250)


class TestProjectPortfolio(unittest.TestCase):
    """Tests for project_portfolio."""

    def test_lumpsum(self):
        """Test a lump sum projection."""
        result = project_portfolio(ProjectionParams('lumpsum', 100000, 10, _stocks_bonds(), normalize=False))

        self.assertEqual(len(result.normalized_allocations), 2)
        self.assertEqual(result.aggregate.total_contributions, 100000)
        self.assertGreater(result.aggregate.future_value, 100000)
        self.assertEqual(len(result.yearly_breakdown), 10)

        stocks = result.normalized_allocations[0]
        self.assertEqual(stocks.amount, 60000)
        self.assertEqual(stocks.projected_fv, calculate_lumpsum_fv(60000, 0.12, 10))
        self.assertAlmostEqual(stocks.cagr, 0.1268, places=4)

    def test_normalize(self):
        """Test a projection with normalization."""
        result = project_portfolio(ProjectionParams('lumpsum', 100000, 5, _stocks_bonds_gold()))

        self.assertAlmostEqual(sum(c.percent_normalized for c in result.normalized_allocations), 100, places=1)
        self.assertAlmostEqual(sum(c.amount for c in result.normalized_allocations), 100000, places=0)

    def test_sip(self):
        """Test a SIP projection."""
        params = ProjectionParams('sip', 10000, 10, [Allocation('Mutual Funds', 100, 0.10)], normalize=False)
        result = project_portfolio(params)

        self.assertEqual(result.aggregate.total_contributions, 1200000)
        self.assertGreater(result.aggregate.future_value, 1200000)
        self.assertGreater(result.aggregate.total_returns, 0)
        self.assertEqual(result.yearly_breakdown[0].start_balance, 0)
        self.assertEqual(result.yearly_breakdown[0].contributions, 120000)

    def test_goal_and_withdrawal_project_as_lumpsum(self):
        """Test that goal and withdrawal project as lump sums."""
        allocations = [Allocation('Stocks', 100, 0.12)]
        lumpsum = project_portfolio(ProjectionParams('lumpsum', 50000, 5, allocations))
        for mode in ('goal', 'withdrawal'):
            with self.subTest(mode=mode):
                result = project_portfolio(ProjectionParams(mode, 50000, 5, allocations))
                self.assertEqual(result.aggregate, lumpsum.aggregate)

    def test_inflation(self):
        """Test inflation-adjusted projection."""
        params = ProjectionParams('lumpsum', 100000, 10, [Allocation('Stocks', 100, 0.12)],
                                  normalize=False, inflation_rate=0.05)
        result = project_portfolio(params)

        self.assertIsNotNone(result.aggregate.real_future_value)
        self.assertLess(result.aggregate.real_future_value, result.aggregate.future_value)
        self.assertIsNotNone(result.yearly_breakdown[0].inflation_adjusted)

    def test_no_inflation_leaves_real_values_empty(self):
        """Test that real values stay empty without inflation."""
        result = project_portfolio(ProjectionParams('lumpsum', 1000, 2, [Allocation('Stocks', 100, 0.12)]))
        self.assertIsNone(result.aggregate.real_future_value)
        self.assertIsNone(result.yearly_breakdown[0].inflation_adjusted)

    def test_tax_on_gains(self):
        """Test tax deducted from gains."""
        allocations = [Allocation('Stocks', 100, 0.12)]
        untaxed = project_portfolio(ProjectionParams('lumpsum', 100000, 10, allocations))
        taxed = project_portfolio(ProjectionParams('lumpsum', 100000, 10, allocations, tax_percent=0.1))

        self.assertAlmostEqual(taxed.aggregate.total_returns, untaxed.aggregate.total_returns * 0.9, delta=0.02)

    def test_strict_mode_rejects_partial_allocation(self):
        """Test that strict mode rejects a partial allocation."""
        params = ProjectionParams('lumpsum', 100000, 10, [Allocation('Stocks', 60, 0.12)], normalize=False)
        with self.assertRaises(InvalidArgumentError):
            project_portfolio(params)

    def test_yearly_breakdown_is_continuous(self):
        """Test that yearly breakdown values carry over."""
        result = project_portfolio(ProjectionParams('lumpsum', 100000, 5, [Allocation('Stocks', 100, 0.10)],
                                                    normalize=False))
        breakdown = result.yearly_breakdown

        self.assertEqual(len(breakdown), 5)
        self.assertEqual(breakdown[0].year, 1)
        self.assertEqual(breakdown[0].start_balance, 100000)
        self.assertAlmostEqual(breakdown[-1].end_balance, result.aggregate.future_value, delta=0.02)
        for previous, current in zip(breakdown, breakdown[1:]):
            self.assertAlmostEqual(current.start_balance, previous.end_balance, delta=0.02)

    def test_invalid_params(self):
        """Test invalid projection parameters."""
        with self.assertRaises(InvalidArgumentError):
            ProjectionParams('swp', 1000, 5, [Allocation('Stocks', 100, 0.1)])
        with self.assertRaises(InvalidArgumentError):
            ProjectionParams('lumpsum', 1000, -1, [Allocation('Stocks', 100, 0.1)])


if __name__ == '__main__':
    unittest.main()
