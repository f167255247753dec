# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
SIP (Systematic Investment Plan) future value calculations.

End-of-period contributions:

    FV = A * ((1 + i) ** N - 1) / i

Start-of-period contributions multiply the above by (1 + i). A is the
contribution per period, i = r / m the periodic rate, N = m * t the number
of contributions.
"""

CONTRIBUTIONS_PER_YEAR = {
    'monthly': 12,
    'quarterly': 4,
    'annually': 1,
}


def get_contributions_per_year(frequency: str) -> int:
    """Get contributions per year for a contribution frequency (default monthly)."""
    return CONTRIBUTIONS_PER_YEAR.get(frequency, 12)


def calculate_sip_fv(contribution: float,
                     annual_rate: float,
                     years: float,
                     contribution_frequency: str = 'monthly',
                     contribution_at_start: bool = False) -> float:
    """Calculate the future value of a recurring investment.

    Args:
        contribution: Amount invested each period
        annual_rate: Annual interest rate as decimal
        years: Investment duration in years
        contribution_frequency: 'monthly', 'quarterly' or 'annually'
        contribution_at_start: Whether contributions land at the start of
            each period (annuity due) instead of the end

    Returns:
        Future value rounded to 2 decimal places
    """
    if years == 0 or contribution <= 0:
        return 0.0

    m = get_contributions_per_year(contribution_frequency)
    n = m * years

    if annual_rate == 0:
        return contribution * n

    i = annual_rate / m
    fv = contribution * ((1 + i) ** n - 1) / i
    if contribution_at_start:
        fv *= 1 + i

    return round(fv, 2)


def calculate_sip_total_contributions(contribution: float,
                                      years: float,
                                      contribution_frequency: str = 'monthly') -> float:
    """Total amount paid in over the life of the plan."""
    return contribution * get_contributions_per_year(contribution_frequency) * years


def calculate_sip_fv_real(contribution: float,
                          annual_rate: float,
                          years: float,
                          inflation_rate: float,
                          contribution_frequency: str = 'monthly',
                          contribution_at_start: bool = False) -> float:
    """Calculate the inflation-adjusted future value of a recurring investment."""
    nominal_fv = calculate_sip_fv(contribution, annual_rate, years,
                                  contribution_frequency, contribution_at_start)
    return round(nominal_fv / (1 + inflation_rate) ** years, 2)


def calculate_sip_for_goal(goal_amount: float,
                           annual_rate: float,
                           years: float,
                           contribution_frequency: str = 'monthly') -> float:
    """Calculate the per-period contribution needed to reach a goal.

    Args:
        goal_amount: Target future value
        annual_rate: Annual interest rate as decimal
        years: Investment duration in years
        contribution_frequency: 'monthly', 'quarterly' or 'annually'

    Returns:
        Required contribution per period, rounded to 2 decimal places
    """
    if years == 0 or goal_amount <= 0:
        return goal_amount

    m = get_contributions_per_year(contribution_frequency)
    n = m * years

    if annual_rate == 0:
        return goal_amount / n

    # A = FV * i / ((1 + i) ** N - 1)
    i = annual_rate / m
    contribution = goal_amount * i / ((1 + i) ** n - 1)
    return round(contribution, 2)
