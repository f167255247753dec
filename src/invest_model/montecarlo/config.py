# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration and inputs for Monte Carlo simulations."""

import math
from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidArgumentError
from ..lumpsum import COMPOUNDING_PERIODS, DEFAULT_COMPOUNDING

ONE_TIME = 'one-time'
RECURRING = 'recurring'

# lumpsum/sip are the names the planner UI uses for the same two modes
MODE_ALIASES = {
    ONE_TIME: ONE_TIME,
    'lumpsum': ONE_TIME,
    RECURRING: RECURRING,
    'sip': RECURRING,
}

DEFAULT_PATH_COUNT = 1000


@dataclass
class MonteCarloConfig:
    """Configuration for how a Monte Carlo simulation is executed.

    Attributes:
        random_seed: Optional seed for reproducible results. Default None.
        max_workers: Number of worker processes used to simulate paths.
            1 (the default) runs every path in the calling process.
    """
    random_seed: Optional[int] = None
    max_workers: int = 1

    def __post_init__(self):
        if self.max_workers < 1:
            raise InvalidArgumentError("max_workers must be at least 1")


@dataclass
class SimulationRequest:
    """What to simulate.

    Attributes:
        mode: 'one-time' (lump sum invested up front) or 'recurring'
            (``amount`` contributed at the start of every period).
            'lumpsum' and 'sip' are accepted as aliases.
        amount: One-time principal or per-period contribution
        horizon_years: Investment horizon in whole years
        expected_annual_return: Expected annual return as decimal
        volatility: Annualized standard deviation of returns as decimal
        path_count: Number of simulated paths. Default 1000.
        compounding: 'daily', 'monthly', 'quarterly' or 'annually'
        inflation_rate: Optional annual inflation; when given, yearly
            snapshots and final values are reported in real terms

    Raises:
        InvalidArgumentError: If any field is out of range
    """
    mode: str
    amount: float
    horizon_years: int
    expected_annual_return: float
    volatility: float
    path_count: int = DEFAULT_PATH_COUNT
    compounding: str = DEFAULT_COMPOUNDING
    inflation_rate: Optional[float] = None

    def __post_init__(self):
        if self.mode not in MODE_ALIASES:
            raise InvalidArgumentError(
                f"Unknown simulation mode '{self.mode}'. Expected one of {list(MODE_ALIASES)}"
            )
        self.mode = MODE_ALIASES[self.mode]

        if self.compounding not in COMPOUNDING_PERIODS:
            raise InvalidArgumentError(
                f"Unknown compounding frequency '{self.compounding}'. "
                f"Expected one of {list(COMPOUNDING_PERIODS)}"
            )
        for name in ('amount', 'expected_annual_return', 'volatility'):
            if not math.isfinite(getattr(self, name)):
                raise InvalidArgumentError(f"{name} must be a finite number, got {getattr(self, name)}")
        if self.inflation_rate is not None:
            if not math.isfinite(self.inflation_rate):
                raise InvalidArgumentError(f"inflation_rate must be a finite number, got {self.inflation_rate}")
            if not self.inflation_rate > -1:
                raise InvalidArgumentError(f"inflation_rate must be greater than -1, got {self.inflation_rate}")
        if not self.amount > 0:
            raise InvalidArgumentError(f"amount must be positive, got {self.amount}")
        if isinstance(self.horizon_years, bool) or int(self.horizon_years) != self.horizon_years:
            raise InvalidArgumentError(f"horizon_years must be a whole number, got {self.horizon_years}")
        self.horizon_years = int(self.horizon_years)
        if self.horizon_years <= 0:
            raise InvalidArgumentError(f"horizon_years must be positive, got {self.horizon_years}")
        if not self.volatility >= 0:
            raise InvalidArgumentError(f"volatility cannot be negative, got {self.volatility}")
        if isinstance(self.path_count, bool) or int(self.path_count) != self.path_count:
            raise InvalidArgumentError(f"path_count must be a whole number, got {self.path_count}")
        self.path_count = int(self.path_count)
        if self.path_count < 1:
            raise InvalidArgumentError("path_count must be at least 1")

    @property
    def is_recurring(self) -> bool:
        return self.mode == RECURRING

    @property
    def periods_per_year(self) -> int:
        return COMPOUNDING_PERIODS[self.compounding]

    @property
    def total_periods(self) -> int:
        return self.horizon_years * self.periods_per_year

    @property
    def total_contributions(self) -> float:
        """Money paid in over the horizon, the baseline for gain/loss metrics."""
        if self.is_recurring:
            return self.amount * self.periods_per_year * self.horizon_years
        return self.amount
