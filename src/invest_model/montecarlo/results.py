# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation results aggregation and analysis.

This module reduces the per-path outcomes of a simulation into a
SimulationResult: sorted final values, summary statistics, percentile cuts,
confidence points, probability metrics and per-year percentile bands.
"""

import bisect
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from ..errors import InvalidArgumentError
from .config import SimulationRequest

BAND_PERCENTILES = (10, 25, 50, 75, 90)
CONFIDENCE_PERCENTILES = (5, 10, 25, 50, 75, 90, 95)

MONEY_DECIMALS = 2
PROBABILITY_DECIMALS = 1


@dataclass
class PathOutcome:
    """Outcome of one simulated path.

    Attributes:
        final_value: Balance at the end of the horizon
        yearly_values: End-of-year balance for years 1..horizon
    """
    final_value: float
    yearly_values: List[float]


@dataclass(frozen=True)
class SummaryStatistics:
    mean: float
    median: float
    min: float
    max: float
    standard_deviation: float


@dataclass(frozen=True)
class PercentileSet:
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float

    def as_tuple(self) -> Tuple[float, ...]:
        return (self.p10, self.p25, self.p50, self.p75, self.p90)


@dataclass(frozen=True)
class ConfidenceInterval:
    percentile: int
    value: float


@dataclass(frozen=True)
class ProbabilityMetrics:
    """Probabilities as percentages (0-100) against total contributions."""
    probability_of_doubling: float
    probability_of_loss: float


@dataclass(frozen=True)
class YearlyBand:
    year: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float


@dataclass(frozen=True)
class SimulationResult:
    """Aggregated outcome of a Monte Carlo simulation.

    Example:
        >>> result = run_simulation(request)
        >>> print(f"Median outcome: {result.statistics.median:,.2f}")
        >>> print(f"Chance of loss: {result.probability_metrics.probability_of_loss}%")
    """
    path_count: int
    total_contributions: float
    sorted_final_values: Tuple[float, ...]
    statistics: SummaryStatistics
    percentiles: PercentileSet
    confidence_intervals: Tuple[ConfidenceInterval, ...]
    probability_metrics: ProbabilityMetrics
    yearly_bands: Tuple[YearlyBand, ...]

    def probability_of_reaching(self, target: float) -> float:
        """Percentage of paths whose final value is at least ``target``."""
        reached = len(self.sorted_final_values) - bisect.bisect_left(self.sorted_final_values, target)
        return _as_percentage(reached, self.path_count)

    def yearly_bands_df(self) -> pd.DataFrame:
        """Get yearly percentile bands as a DataFrame with years as index."""
        df = pd.DataFrame([asdict(band) for band in self.yearly_bands],
                          columns=['year', 'p10', 'p25', 'p50', 'p75', 'p90'])
        return df.set_index('year')

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (f"SimulationResult(path_count={self.path_count}, "
                f"median={self.statistics.median}, years={len(self.yearly_bands)})")


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Percentile of an ascending sequence by linear interpolation.

    The rank is ``p / 100 * (n - 1)``; a fractional rank interpolates
    between the two order statistics around it.

    Raises:
        InvalidArgumentError: If the sequence is empty or p is outside 0-100
    """
    if len(sorted_values) == 0:
        raise InvalidArgumentError("Cannot take a percentile of no values")
    if not 0 <= p <= 100:
        raise InvalidArgumentError(f"Percentile must be within 0-100, got {p}")

    index = p / 100 * (len(sorted_values) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])
    low_value = sorted_values[lower]
    return float(low_value + (sorted_values[upper] - low_value) * (index - lower))


def _money(value: float) -> float:
    return round(float(value), MONEY_DECIMALS)


def _as_percentage(count: int, total: int) -> float:
    return round(count / total * 100, PROBABILITY_DECIMALS)


def _percentile_set(sorted_values: Sequence[float]) -> PercentileSet:
    return PercentileSet(*(_money(percentile(sorted_values, p)) for p in BAND_PERCENTILES))


def aggregate(request: SimulationRequest, outcomes: Sequence[PathOutcome]) -> SimulationResult:
    """Reduce per-path outcomes into a SimulationResult.

    Args:
        request: The request the paths were simulated for
        outcomes: One outcome per path, in any order

    Returns:
        SimulationResult with monetary figures rounded to 2 decimals and
        probabilities to 1 decimal

    Raises:
        InvalidArgumentError: If there are no outcomes
    """
    if not outcomes:
        raise InvalidArgumentError("At least one simulated path is required")

    path_count = len(outcomes)
    final_values = np.sort(np.array([o.final_value for o in outcomes], dtype=float))

    statistics = SummaryStatistics(
        mean=_money(np.mean(final_values)),
        median=_money(percentile(final_values, 50)),
        min=_money(final_values[0]),
        max=_money(final_values[-1]),
        standard_deviation=_money(np.std(final_values)),
    )

    confidence_intervals = tuple(
        ConfidenceInterval(p, _money(percentile(final_values, p)))
        for p in CONFIDENCE_PERCENTILES
    )

    total_contributions = request.total_contributions
    doubled = int(np.count_nonzero(final_values >= 2 * total_contributions))
    lost = int(np.count_nonzero(final_values < total_contributions))
    probability_metrics = ProbabilityMetrics(
        probability_of_doubling=_as_percentage(doubled, path_count),
        probability_of_loss=_as_percentage(lost, path_count),
    )

    # rows are paths, columns are years
    yearly = np.array([o.yearly_values for o in outcomes], dtype=float).reshape(path_count, -1)
    yearly_bands = []
    for year_idx in range(yearly.shape[1]):
        cut = _percentile_set(np.sort(yearly[:, year_idx]))
        yearly_bands.append(YearlyBand(year_idx + 1, *cut.as_tuple()))

    return SimulationResult(
        path_count=path_count,
        total_contributions=_money(total_contributions),
        sorted_final_values=tuple(_money(v) for v in final_values),
        statistics=statistics,
        percentiles=_percentile_set(final_values),
        confidence_intervals=confidence_intervals,
        probability_metrics=probability_metrics,
        yearly_bands=tuple(yearly_bands),
    )
