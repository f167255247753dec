# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio parameters calculator for deriving simulation inputs.

This module calculates the expected return and volatility of a portfolio
from its category allocations and the market assumptions, so a simulation
can be run straight from an allocation list.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..errors import InvalidArgumentError
from .market_assumptions import MarketAssumptions


@dataclass
class PortfolioStochasticParams:
    """Derived stochastic parameters for a portfolio.

    Attributes:
        expected_return: Expected annual return derived from the allocation
        volatility: Annual volatility derived from the allocation
    """
    expected_return: float
    volatility: float


class PortfolioParametersCalculator:
    """Derives portfolio-level return and volatility from category allocations.

    Example:
        >>> calc = PortfolioParametersCalculator()
        >>> params = calc.calculate([("stocks", 60), ("bonds", 40)])
        >>> print(f"Expected return: {params.expected_return:.2%}")
        Expected return: 10.00%
    """

    def __init__(self, market_assumptions: Optional[MarketAssumptions] = None):
        """Initialize with market assumptions.

        Args:
            market_assumptions: Category assumptions. If None, uses defaults.
        """
        self.market = market_assumptions or MarketAssumptions.create_default()

    def calculate(self, allocations: Iterable) -> PortfolioStochasticParams:
        """Calculate expected return and volatility for an allocation.

        Args:
            allocations: (category, percent) or (category, percent,
                expected_return) tuples, or objects/dicts with ``category``,
                ``percent`` and optionally ``expected_annual_return``.
                Without an explicit return the category default is used.

        Returns:
            PortfolioStochasticParams; the return is the percent-weighted
            average rounded to 4 places, the volatility the blended
            volatility.

        Raises:
            InvalidArgumentError: If the percentages total 0 or any is negative
        """
        rows = [self._unpack(a) for a in allocations]
        total_percent = sum(percent for _, percent, _ in rows)

        if any(percent < 0 for _, percent, _ in rows):
            raise InvalidArgumentError("Allocation percentages cannot be negative")
        if total_percent == 0:
            raise InvalidArgumentError("Total allocation percentage is 0%")

        expected_return = 0.0
        for category, percent, explicit_return in rows:
            asset_return = explicit_return
            if asset_return is None:
                asset_return = self.market.get_expected_return(category)
            expected_return += percent / total_percent * asset_return

        volatility = self.market.blended_volatility([(c, p) for c, p, _ in rows])
        return PortfolioStochasticParams(round(expected_return, 4), volatility)

    @staticmethod
    def _unpack(allocation) -> Tuple[str, float, Optional[float]]:
        if isinstance(allocation, tuple):
            if len(allocation) == 3:
                category, percent, expected_return = allocation
            else:
                (category, percent), expected_return = allocation, None
        elif isinstance(allocation, dict):
            category = allocation['category']
            percent = allocation['percent']
            expected_return = allocation.get('expected_annual_return')
        else:
            category = allocation.category
            percent = allocation.percent
            expected_return = getattr(allocation, 'expected_annual_return', None)
        if expected_return is not None:
            expected_return = float(expected_return)
        return str(category), float(percent), expected_return
