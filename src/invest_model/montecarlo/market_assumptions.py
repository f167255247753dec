# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Market assumptions for asset categories.

This module contains the MarketAssumptions class which holds the default
expected return, historical volatility and risk level for each asset category
a user can allocate to. It also provides the volatility estimator used to
turn a multi-category allocation into a single blended volatility for the
Monte Carlo simulator.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

DEFAULT_VOLATILITY_FALLBACK = 0.15
DEFAULT_RETURN_FALLBACK = 0.08

RISK_LEVELS = ('low', 'medium', 'high')


@dataclass
class AssetCategoryAssumptions:
    """Return and volatility assumptions for a single asset category.

    Attributes:
        id: Category identifier (e.g., "mutual_funds")
        name: Display name (e.g., "Mutual Funds")
        expected_return: Annual expected return as decimal (e.g., 0.10 for 10%)
        volatility: Annual standard deviation as decimal (e.g., 0.15 for 15%)
        risk_level: 'low', 'medium' or 'high'
    """
    id: str
    name: str
    expected_return: float
    volatility: float
    risk_level: str

    def __post_init__(self):
        if self.volatility < 0:
            raise ValueError(f"Volatility cannot be negative: {self.volatility}")
        if self.risk_level not in RISK_LEVELS:
            raise ValueError(f"Unknown risk level: {self.risk_level}")


AllocationLike = Union[Tuple[str, float], Dict[str, float], object]


def normalize_category_label(label: str) -> str:
    """Lowercase a category label and turn whitespace runs into underscores."""
    return re.sub(r'\s+', '_', label.lower())


def _category_and_percent(allocation: AllocationLike) -> Tuple[str, float]:
    if isinstance(allocation, tuple):
        category, percent = allocation
    elif isinstance(allocation, dict):
        category, percent = allocation['category'], allocation['percent']
    else:
        category, percent = allocation.category, allocation.percent
    return str(category), float(percent)


class MarketAssumptions:
    """Default assumptions for the asset categories users can allocate to.

    Volatilities are historical standard deviations; inter-category
    correlation is not modelled, so blended volatility is a plain weighted
    average and overstates the risk of diversified portfolios.

    Example:
        >>> market = MarketAssumptions.create_default()
        >>> market.get_volatility("Fixed Deposits")
        0.01
        >>> market.blended_volatility([("stocks", 60), ("bonds", 40)])
        0.144
    """

    def __init__(self,
                 categories: List[AssetCategoryAssumptions],
                 default_volatility: float = DEFAULT_VOLATILITY_FALLBACK,
                 default_return: float = DEFAULT_RETURN_FALLBACK):
        """Initialize market assumptions.

        Args:
            categories: Assumptions for each known asset category
            default_volatility: Volatility used for unknown categories
            default_return: Expected return used for unknown categories

        Raises:
            ValueError: If category ids are duplicated
        """
        ids = [c.id for c in categories]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate asset categories: {duplicates}")

        self.categories = list(categories)
        self.default_volatility = default_volatility
        self.default_return = default_return
        self._by_id = {c.id: c for c in self.categories}

    @property
    def volatility_table(self) -> Dict[str, float]:
        """Category id to volatility."""
        return {c.id: c.volatility for c in self.categories}

    def find(self, label: str) -> Optional[AssetCategoryAssumptions]:
        """Find a category by id or display name, ignoring case."""
        lowered = label.lower()
        for category in self.categories:
            if category.id == lowered or category.name.lower() == lowered:
                return category
        return None

    def get_volatility(self, label: str) -> float:
        """Estimate the annual volatility for a category label.

        The label is normalized (lowercase, whitespace to underscores) and
        looked up by id; unknown labels get the default volatility.
        """
        category = self._by_id.get(normalize_category_label(label))
        return category.volatility if category else self.default_volatility

    def get_expected_return(self, label: str) -> float:
        """Default expected annual return for a category id or display name."""
        category = self.find(label)
        return category.expected_return if category else self.default_return

    def blended_volatility(self, allocations: Iterable[AllocationLike]) -> float:
        """Percent-weighted volatility of a multi-category allocation.

        Args:
            allocations: (category, percent) tuples, dicts with ``category``
                and ``percent`` keys, or objects with those attributes.
                Percentages need not sum to 100.

        Returns:
            Weighted volatility rounded to 3 decimal places, or the default
            volatility when the percentages total 0.
        """
        pairs = [_category_and_percent(a) for a in allocations]
        total_percent = sum(percent for _, percent in pairs)
        if total_percent == 0:
            return self.default_volatility

        weighted = sum(percent / total_percent * self.get_volatility(category)
                       for category, percent in pairs)
        return round(weighted, 3)

    @classmethod
    def create_default(cls) -> 'MarketAssumptions':
        """Create the default category assumptions.

        Returns are long-run averages for the Indian market; volatilities are
        historical standard deviations.
        """
        return cls([
            AssetCategoryAssumptions('stocks', 'Stocks', 0.12, 0.20, 'high'),
            AssetCategoryAssumptions('mutual_funds', 'Mutual Funds', 0.10, 0.15, 'medium'),
            AssetCategoryAssumptions('etfs', 'ETFs', 0.09, 0.16, 'medium'),
            AssetCategoryAssumptions('index_funds', 'Index Funds', 0.10, 0.15, 'medium'),
            AssetCategoryAssumptions('reits', 'REITs', 0.08, 0.18, 'medium'),
            AssetCategoryAssumptions('gold', 'Gold', 0.07, 0.12, 'low'),
            AssetCategoryAssumptions('silver', 'Silver', 0.06, 0.22, 'medium'),
            AssetCategoryAssumptions('bonds', 'Bonds', 0.07, 0.06, 'low'),
            AssetCategoryAssumptions('fixed_deposits', 'Fixed Deposits', 0.065, 0.01, 'low'),
            AssetCategoryAssumptions('cash', 'Cash / Savings', 0.04, 0.02, 'low'),
            AssetCategoryAssumptions('crypto', 'Crypto', 0.15, 0.60, 'high'),
            AssetCategoryAssumptions('real_estate', 'Real Estate', 0.09, 0.10, 'medium'),
            AssetCategoryAssumptions('p2p', 'P2P Lending', 0.11, 0.15, 'high'),
            AssetCategoryAssumptions('ppf', 'PPF', 0.071, 0.01, 'low'),
            AssetCategoryAssumptions('nps', 'NPS', 0.09, 0.12, 'medium'),
        ])


DEFAULT_MARKET = MarketAssumptions.create_default()

DEFAULT_VOLATILITY = DEFAULT_MARKET.volatility_table


def estimate_volatility(category_label: str) -> float:
    """Volatility estimate for a category label using the default assumptions."""
    return DEFAULT_MARKET.get_volatility(category_label)


def blended_volatility(allocations: Iterable[AllocationLike]) -> float:
    """Blended volatility of an allocation using the default assumptions."""
    return DEFAULT_MARKET.blended_volatility(allocations)
