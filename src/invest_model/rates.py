# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Growth-rate helpers: CAGR, real/nominal conversion, effective annual rate
and time-to-multiple estimates.
"""

import math


def calculate_cagr(present_value: float, future_value: float, years: float) -> float:
    """Calculate the compound annual growth rate.

    CAGR = (FV / PV) ** (1 / t) - 1

    Returns:
        CAGR as decimal rounded to 4 places. 0 when years is 0, infinity
        when growing from nothing, -1 for a complete loss.
    """
    if years == 0:
        return 0.0
    if present_value == 0:
        return math.inf if future_value > 0 else 0.0
    if future_value <= 0:
        return -1.0

    cagr = (future_value / present_value) ** (1 / years) - 1
    return round(cagr, 4)


def calculate_real_rate(nominal_rate: float, inflation_rate: float) -> float:
    """Inflation-adjusted rate: (1 + nominal) / (1 + inflation) - 1."""
    if inflation_rate == -1:
        return math.inf
    return round((1 + nominal_rate) / (1 + inflation_rate) - 1, 4)


def calculate_nominal_rate(real_rate: float, inflation_rate: float) -> float:
    """Nominal rate from a real rate: (1 + real) * (1 + inflation) - 1."""
    return round((1 + real_rate) * (1 + inflation_rate) - 1, 4)


def calculate_effective_annual_rate(nominal_rate: float, compounding_periods: int) -> float:
    """Effective annual rate: (1 + r/n) ** n - 1."""
    if compounding_periods == 0:
        return nominal_rate
    ear = (1 + nominal_rate / compounding_periods) ** compounding_periods - 1
    return round(ear, 4)


def calculate_years_to_double(annual_rate: float) -> float:
    """Years for an investment to double, using ln(2) / ln(1 + r)."""
    if annual_rate <= 0:
        return math.inf
    return round(math.log(2) / math.log(1 + annual_rate), 2)


def calculate_years_to_multiplier(annual_rate: float, multiplier: float) -> float:
    """Years for an investment to grow by ``multiplier``."""
    if multiplier <= 1:
        return 0.0
    if annual_rate <= 0:
        return math.inf
    return round(math.log(multiplier) / math.log(1 + annual_rate), 2)
