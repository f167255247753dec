# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Investment Planning Engine

Calculations behind a personal investment planner: lump-sum and SIP
projections, portfolio allocation and projection, risk profiling, FIRE
targets, and Monte Carlo simulation of investment outcomes.

Example usage:
    from invest_model import SimulationRequest, run_simulation, blended_volatility

    volatility = blended_volatility([("stocks", 60), ("bonds", 40)])
    request = SimulationRequest(mode='recurring', amount=10000, horizon_years=10,
                                expected_annual_return=0.10, volatility=volatility)
    result = run_simulation(request)
    print(result.percentiles.p50)
"""

from .errors import InvalidArgumentError

# Closed-form projections
from .lumpsum import get_compounding_periods, calculate_lumpsum_fv, calculate_lumpsum_fv_real
from .sip import (
    get_contributions_per_year,
    calculate_sip_fv,
    calculate_sip_fv_real,
    calculate_sip_total_contributions,
    calculate_sip_for_goal,
)
from .rates import (
    calculate_cagr,
    calculate_real_rate,
    calculate_nominal_rate,
    calculate_effective_annual_rate,
    calculate_years_to_double,
    calculate_years_to_multiplier,
)

# Portfolio
from .portfolio import (
    Allocation,
    ProjectionParams,
    PortfolioProjection,
    validate_allocations,
    normalize_allocations,
    calculate_allocated_amounts,
    project_portfolio,
)

# Risk
from .risk import (
    RISK_QUESTIONS,
    ALLOCATION_PRESETS,
    RiskQuestionnaireAnswer,
    RiskAssessment,
    get_default_expected_return,
    calculate_risk_score,
    get_risk_profile,
    assess_risk,
    calculate_emergency_fund,
    calculate_fire_number,
    estimate_years_to_fire,
)

# Monte Carlo Simulation
from .montecarlo import (
    MonteCarloSimulator,
    MonteCarloConfig,
    SimulationRequest,
    SimulationResult,
    MarketAssumptions,
    AssetCategoryAssumptions,
    PortfolioParametersCalculator,
    PortfolioStochasticParams,
    ReturnSampler,
    DEFAULT_VOLATILITY,
    estimate_volatility,
    blended_volatility,
    run_simulation,
)

# Version
from .__meta__ import __version__

__all__ = [
    'InvalidArgumentError',
    # Lump sum / SIP
    'get_compounding_periods', 'calculate_lumpsum_fv', 'calculate_lumpsum_fv_real',
    'get_contributions_per_year', 'calculate_sip_fv', 'calculate_sip_fv_real',
    'calculate_sip_total_contributions', 'calculate_sip_for_goal',
    # Rates
    'calculate_cagr', 'calculate_real_rate', 'calculate_nominal_rate',
    'calculate_effective_annual_rate', 'calculate_years_to_double',
    'calculate_years_to_multiplier',
    # Portfolio
    'Allocation', 'ProjectionParams', 'PortfolioProjection',
    'validate_allocations', 'normalize_allocations',
    'calculate_allocated_amounts', 'project_portfolio',
    # Risk
    'RISK_QUESTIONS', 'ALLOCATION_PRESETS', 'RiskQuestionnaireAnswer', 'RiskAssessment',
    'get_default_expected_return', 'calculate_risk_score', 'get_risk_profile',
    'assess_risk', 'calculate_emergency_fund', 'calculate_fire_number',
    'estimate_years_to_fire',
    # Monte Carlo
    'MonteCarloSimulator', 'MonteCarloConfig', 'SimulationRequest', 'SimulationResult',
    'MarketAssumptions', 'AssetCategoryAssumptions',
    'PortfolioParametersCalculator', 'PortfolioStochasticParams', 'ReturnSampler',
    'DEFAULT_VOLATILITY', 'estimate_volatility', 'blended_volatility', 'run_simulation',
    # Version
    '__version__',
]
