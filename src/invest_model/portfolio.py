# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio allocation handling and deterministic projections.

This module validates and normalizes user-entered allocations (which may not
sum to 100%), splits an investment amount across them, and projects each
category and the portfolio as a whole using the closed-form lump-sum and SIP
formulas.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from .errors import InvalidArgumentError
from .lumpsum import calculate_lumpsum_fv, DEFAULT_COMPOUNDING
from .rates import calculate_cagr
from .sip import calculate_sip_fv, calculate_sip_total_contributions

INVESTMENT_MODES = ('lumpsum', 'sip', 'goal', 'withdrawal')


@dataclass
class Allocation:
    """Share of a portfolio assigned to one asset category.

    Attributes:
        category: Asset category name (e.g., "Stocks")
        percent: User-entered percentage, may not sum to 100 across allocations
        expected_annual_return: Expected annual return as decimal
        percent_normalized: Percentage after normalization to 100
        amount: Currency amount assigned to this category
    """
    category: str
    percent: float
    expected_annual_return: float = 0.0
    percent_normalized: Optional[float] = None
    amount: Optional[float] = None

    @property
    def effective_percent(self) -> float:
        if self.percent_normalized is not None:
            return self.percent_normalized
        return self.percent


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class NormalizationResult:
    success: bool
    allocations: List[Allocation]
    total_percent: float
    error: Optional[str] = None


@dataclass
class ProjectionParams:
    """Inputs for a deterministic portfolio projection.

    Attributes:
        mode: 'lumpsum', 'sip', 'goal' or 'withdrawal'
        amount: Total investment (lump sum) or monthly contribution (SIP)
        duration_years: Investment duration in years
        allocations: Category allocations
        compounding: Compounding frequency for lump-sum projections
        normalize: Rescale allocations to 100% instead of requiring it
        inflation_rate: Optional annual inflation for real values
        tax_percent: Optional tax on gains as decimal (e.g., 0.1 for 10%)
    """
    mode: str
    amount: float
    duration_years: int
    allocations: List[Allocation]
    compounding: str = DEFAULT_COMPOUNDING
    normalize: bool = True
    inflation_rate: Optional[float] = None
    tax_percent: Optional[float] = None

    def __post_init__(self):
        if self.mode not in INVESTMENT_MODES:
            raise InvalidArgumentError(
                f"Unknown investment mode '{self.mode}'. Expected one of {list(INVESTMENT_MODES)}"
            )
        if self.duration_years < 0:
            raise InvalidArgumentError(f"duration_years cannot be negative: {self.duration_years}")


@dataclass
class CategoryProjection:
    category: str
    percent_normalized: float
    amount: float
    projected_fv: float
    total_contributions: float
    total_returns: float
    cagr: float
    real_fv: Optional[float] = None


@dataclass
class YearlyBreakdown:
    year: int
    start_balance: float
    contributions: float
    interest: float
    end_balance: float
    inflation_adjusted: Optional[float] = None


@dataclass
class AggregateProjection:
    future_value: float
    total_contributions: float
    total_returns: float
    cagr: float
    real_future_value: Optional[float] = None


@dataclass
class PortfolioProjection:
    normalized_allocations: List[CategoryProjection]
    aggregate: AggregateProjection
    yearly_breakdown: List[YearlyBreakdown]


def validate_allocations(allocations: List[Allocation]) -> ValidationResult:
    """Check allocations for missing names and out-of-range percentages."""
    errors = []

    if not allocations:
        errors.append('At least one allocation is required')

    for index, alloc in enumerate(allocations or [], start=1):
        if not alloc.category or not alloc.category.strip():
            errors.append(f"Allocation {index}: Category name is required")
        if alloc.percent < 0:
            errors.append(f"Allocation {index}: Percentage cannot be negative")
        if alloc.percent > 100:
            errors.append(f"Allocation {index}: Single allocation cannot exceed 100%")

    return ValidationResult(valid=not errors, errors=errors)


def normalize_allocations(allocations: List[Allocation], strict: bool = False) -> NormalizationResult:
    """Normalize allocations so they sum to 100%.

    Args:
        allocations: Allocations with user-entered percentages
        strict: If True, fail unless the percentages already sum to 100
            (within 0.01); if False, rescale them proportionally

    Returns:
        NormalizationResult with ``percent_normalized`` filled in on copies
        of the input allocations
    """
    if not allocations:
        return NormalizationResult(False, [], 0.0, 'No allocations provided')

    total_percent = sum(a.percent for a in allocations)

    if strict:
        if abs(total_percent - 100) > 0.01:
            return NormalizationResult(
                False, list(allocations), total_percent,
                f"Allocations must sum to 100%. Current total: {total_percent:.2f}%"
            )
        normalized = [replace(a, percent_normalized=a.percent) for a in allocations]
        return NormalizationResult(True, normalized, 100.0)

    if total_percent == 0:
        return NormalizationResult(False, list(allocations), 0.0, 'Total allocation percentage is 0%')

    normalized = [
        replace(a, percent_normalized=round(a.percent / total_percent * 100, 2))
        for a in allocations
    ]
    return NormalizationResult(True, normalized, 100.0)


def calculate_allocated_amounts(total_amount: float, allocations: List[Allocation]) -> List[Allocation]:
    """Split ``total_amount`` across allocations by their (normalized) percentage."""
    return [
        replace(a, amount=round(total_amount * a.effective_percent / 100, 2))
        for a in allocations
    ]


def _generate_yearly_breakdown(principal: float,
                               annual_rate: float,
                               years: int,
                               monthly_contribution: float = 0.0,
                               inflation_rate: Optional[float] = None) -> List[YearlyBreakdown]:
    """Simulate a single blended balance month by month.

    Contributions land at the start of each month before that month's
    interest is credited.
    """
    breakdown = []
    balance = principal
    monthly_rate = annual_rate / 12

    for year in range(1, years + 1):
        start_balance = balance
        contributions = 0.0
        interest = 0.0

        for _ in range(12):
            balance += monthly_contribution
            contributions += monthly_contribution
            month_interest = balance * monthly_rate
            interest += month_interest
            balance += month_interest

        end_balance = round(balance, 2)
        inflation_adjusted = None
        if inflation_rate is not None:
            inflation_adjusted = round(end_balance / (1 + inflation_rate) ** year, 2)

        breakdown.append(YearlyBreakdown(
            year=year,
            start_balance=round(start_balance, 2),
            contributions=round(contributions, 2),
            interest=round(interest, 2),
            end_balance=end_balance,
            inflation_adjusted=inflation_adjusted,
        ))

    return breakdown


def _project_category(alloc: Allocation, params: ProjectionParams) -> CategoryProjection:
    amount = alloc.amount or 0.0
    rate = alloc.expected_annual_return
    years = params.duration_years

    if params.mode == 'sip':
        projected_fv = calculate_sip_fv(amount, rate, years, 'monthly')
        total_contributions = calculate_sip_total_contributions(amount, years, 'monthly')
    else:
        # goal and withdrawal are projected as a lump sum
        projected_fv = calculate_lumpsum_fv(amount, rate, years, params.compounding)
        total_contributions = amount

    returns = projected_fv - total_contributions
    if params.tax_percent and returns > 0:
        projected_fv -= returns * params.tax_percent

    real_fv = None
    if params.inflation_rate is not None:
        real_fv = round(projected_fv / (1 + params.inflation_rate) ** years, 2)

    return CategoryProjection(
        category=alloc.category,
        percent_normalized=alloc.effective_percent,
        amount=amount,
        projected_fv=round(projected_fv, 2),
        total_contributions=round(total_contributions, 2),
        total_returns=round(projected_fv - total_contributions, 2),
        cagr=calculate_cagr(total_contributions, projected_fv, years),
        real_fv=real_fv,
    )


def project_portfolio(params: ProjectionParams) -> PortfolioProjection:
    """Project the future value of a portfolio across all its categories.

    Args:
        params: Projection parameters

    Returns:
        Per-category projections, aggregate totals and a yearly breakdown
        of the blended portfolio

    Raises:
        InvalidArgumentError: If the allocations cannot be normalized
    """
    norm = normalize_allocations(params.allocations, strict=not params.normalize)
    if not norm.success:
        raise InvalidArgumentError(norm.error or 'Failed to normalize allocations')

    allocated = calculate_allocated_amounts(params.amount, norm.allocations)
    categories = [_project_category(alloc, params) for alloc in allocated]

    aggregate_fv = sum(c.projected_fv for c in categories)
    aggregate_contributions = sum(c.total_contributions for c in categories)

    real_aggregate_fv = None
    if params.inflation_rate is not None:
        real_aggregate_fv = round(sum(c.real_fv or 0.0 for c in categories), 2)

    aggregate = AggregateProjection(
        future_value=round(aggregate_fv, 2),
        total_contributions=round(aggregate_contributions, 2),
        total_returns=round(aggregate_fv - aggregate_contributions, 2),
        cagr=calculate_cagr(aggregate_contributions, aggregate_fv, params.duration_years),
        real_future_value=real_aggregate_fv,
    )

    weighted_rate = sum(a.expected_annual_return * a.effective_percent / 100 for a in allocated)
    if params.mode == 'sip':
        breakdown = _generate_yearly_breakdown(0.0, weighted_rate, params.duration_years,
                                               monthly_contribution=params.amount,
                                               inflation_rate=params.inflation_rate)
    else:
        breakdown = _generate_yearly_breakdown(params.amount, weighted_rate, params.duration_years,
                                               inflation_rate=params.inflation_rate)

    return PortfolioProjection(
        normalized_allocations=categories,
        aggregate=aggregate,
        yearly_breakdown=breakdown,
    )
