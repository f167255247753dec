# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation orchestrator.

This module provides the MonteCarloSimulator class which simulates many
independent balance paths for a SimulationRequest and aggregates them into
a SimulationResult.
"""

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List, Optional

import numpy as np

from .config import MonteCarloConfig, SimulationRequest
from .results import PathOutcome, SimulationResult, aggregate
from .return_sampler import ReturnSampler

logger = logging.getLogger(__name__)


def _real_value(balance: float, inflation_rate: Optional[float], years: int) -> float:
    if inflation_rate is None:
        return balance
    return balance / (1 + inflation_rate) ** years


def simulate_path(request: SimulationRequest, rng: np.random.Generator) -> PathOutcome:
    """Simulate one balance path over the full horizon.

    Recurring contributions are added at the start of each period, before
    that period's sampled return is applied. Year-end balances and the final
    balance are discounted by cumulative inflation when an inflation rate is
    set; the discount is applied to the nominal balance at that point and
    does not feed back into later growth.

    Args:
        request: What to simulate
        rng: Uniform random source for this path

    Returns:
        PathOutcome with the final value and the year-end values
    """
    periods_per_year = request.periods_per_year
    period_return = request.expected_annual_return / periods_per_year
    period_volatility = request.volatility / math.sqrt(periods_per_year)

    sampler = ReturnSampler(rng)
    returns = sampler.sample_many(period_return, period_volatility, request.total_periods).tolist()

    contribution = request.amount if request.is_recurring else 0.0
    balance = 0.0 if request.is_recurring else request.amount
    yearly_values: List[float] = []

    for period, sampled_return in enumerate(returns, start=1):
        balance += contribution
        balance *= 1.0 + sampled_return

        if period % periods_per_year == 0:
            year = period // periods_per_year
            yearly_values.append(_real_value(balance, request.inflation_rate, year))

    final_value = _real_value(balance, request.inflation_rate, request.horizon_years)
    return PathOutcome(final_value=final_value, yearly_values=yearly_values)


def _simulate_seeded_path(request: SimulationRequest, seed: np.random.SeedSequence) -> PathOutcome:
    return simulate_path(request, np.random.default_rng(seed))


class MonteCarloSimulator:
    """Orchestrates Monte Carlo simulations of an investment.

    Every path gets its own random generator, spawned from a single
    SeedSequence, so paths are independent and a seeded run produces the
    same result whether the paths run in this process or across worker
    processes.

    The workflow:
    1. Spawn one child seed per path from the configured seed
    2. Simulate each path (serially or on a process pool)
    3. Aggregate the path outcomes into a SimulationResult

    Example:
        >>> simulator = MonteCarloSimulator(MonteCarloConfig(random_seed=42))
        >>> request = SimulationRequest('recurring', 10000, 5, 0.10, 0.15)
        >>> result = simulator.run(request)
        >>> print(f"Chance of loss: {result.probability_metrics.probability_of_loss}%")
    """

    def __init__(self, config: Optional[MonteCarloConfig] = None):
        """Initialize the simulator.

        Args:
            config: Execution configuration. If None, uses defaults.
        """
        self.config = config or MonteCarloConfig()

    def run(self, request: SimulationRequest) -> SimulationResult:
        """Run a Monte Carlo simulation.

        Args:
            request: What to simulate. ``request.path_count`` paths are run.

        Returns:
            SimulationResult aggregated over all paths
        """
        seeds = np.random.SeedSequence(self.config.random_seed).spawn(request.path_count)
        workers = min(self.config.max_workers, request.path_count)

        logger.debug("Simulating %d paths over %d years (%d periods/year) with %d worker(s)",
                     request.path_count, request.horizon_years, request.periods_per_year, workers)

        if workers > 1:
            chunksize = max(1, request.path_count // (workers * 4))
            with ProcessPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(partial(_simulate_seeded_path, request), seeds,
                                             chunksize=chunksize))
        else:
            outcomes = [_simulate_seeded_path(request, seed) for seed in seeds]

        result = aggregate(request, outcomes)
        logger.debug("Simulation finished: median=%.2f p10=%.2f p90=%.2f",
                     result.statistics.median, result.percentiles.p10, result.percentiles.p90)
        return result

    def run_single(self, request: SimulationRequest,
                   rng: Optional[np.random.Generator] = None) -> PathOutcome:
        """Simulate a single path and return it without aggregation.

        Useful for debugging or inspecting one trajectory.

        Args:
            request: What to simulate
            rng: Random source; if None, one is created from the configured seed
        """
        if rng is None:
            rng = np.random.default_rng(self.config.random_seed)
        return simulate_path(request, rng)


def run_simulation(request: SimulationRequest,
                   config: Optional[MonteCarloConfig] = None) -> SimulationResult:
    """Run a Monte Carlo simulation with the given request and configuration."""
    return MonteCarloSimulator(config).run(request)
