# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation module for probabilistic investment projections.

This module simulates thousands of stochastic return paths for a lump-sum or
recurring investment and summarizes them as percentile bands and
probability-of-outcome metrics. Volatility can be estimated from a portfolio's
category allocation using internal market assumptions.
"""

from .config import MonteCarloConfig, SimulationRequest, ONE_TIME, RECURRING
from .market_assumptions import (
    MarketAssumptions,
    AssetCategoryAssumptions,
    DEFAULT_VOLATILITY,
    estimate_volatility,
    blended_volatility,
)
from .portfolio_parameters import PortfolioParametersCalculator, PortfolioStochasticParams
from .return_sampler import ReturnSampler
from .results import SimulationResult, PathOutcome, aggregate, percentile
from .simulator import MonteCarloSimulator, simulate_path, run_simulation

__all__ = [
    'MonteCarloConfig',
    'SimulationRequest',
    'ONE_TIME',
    'RECURRING',
    'MarketAssumptions',
    'AssetCategoryAssumptions',
    'DEFAULT_VOLATILITY',
    'estimate_volatility',
    'blended_volatility',
    'PortfolioParametersCalculator',
    'PortfolioStochasticParams',
    'ReturnSampler',
    'SimulationResult',
    'PathOutcome',
    'aggregate',
    'percentile',
    'MonteCarloSimulator',
    'simulate_path',
    'run_simulation',
]
