# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Lump-sum future value calculations.

    FV = P * (1 + r/n) ** (n * t)

where P is the principal, r the annual rate, n the compounding periods per
year and t the duration in years.
"""

COMPOUNDING_PERIODS = {
    'daily': 365,
    'monthly': 12,
    'quarterly': 4,
    'annually': 1,
}

DEFAULT_COMPOUNDING = 'monthly'


def get_compounding_periods(frequency: str) -> int:
    """Get the number of compounding periods per year.

    Unknown frequencies fall back to monthly compounding.
    """
    return COMPOUNDING_PERIODS.get(frequency, COMPOUNDING_PERIODS[DEFAULT_COMPOUNDING])


def calculate_lumpsum_fv(principal: float,
                         annual_rate: float,
                         years: float,
                         compounding_frequency: str = DEFAULT_COMPOUNDING) -> float:
    """Calculate the future value of a one-time investment.

    Args:
        principal: Initial investment amount
        annual_rate: Annual interest rate as decimal (e.g., 0.12 for 12%)
        years: Investment duration in years
        compounding_frequency: 'daily', 'monthly', 'quarterly' or 'annually'

    Returns:
        Future value rounded to 2 decimal places

    Example:
        >>> calculate_lumpsum_fv(25000, 0.12, 10)
        82509.67
    """
    if years == 0:
        return principal
    if principal <= 0:
        return 0.0
    if annual_rate == 0:
        return principal

    n = get_compounding_periods(compounding_frequency)
    fv = principal * (1 + annual_rate / n) ** (n * years)
    return round(fv, 2)


def calculate_lumpsum_fv_real(principal: float,
                              annual_rate: float,
                              years: float,
                              inflation_rate: float,
                              compounding_frequency: str = DEFAULT_COMPOUNDING) -> float:
    """Calculate the inflation-adjusted future value of a one-time investment.

    The nominal future value is discounted by (1 + inflation) ** years.
    """
    nominal_fv = calculate_lumpsum_fv(principal, annual_rate, years, compounding_frequency)
    real_fv = nominal_fv / (1 + inflation_rate) ** years
    return round(real_fv, 2)
