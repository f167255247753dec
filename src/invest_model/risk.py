# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Risk assessment and default allocations.

Provides questionnaire scoring, risk profile determination, allocation
presets per risk profile, and the emergency-fund and FIRE (financial
independence, retire early) helpers built on top of a risk profile.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, List

from .errors import InvalidArgumentError
from .montecarlo.market_assumptions import DEFAULT_MARKET
from .portfolio import Allocation

RISK_PROFILES = ('conservative', 'balanced', 'aggressive')

NEUTRAL_RISK_SCORE = 50
MAX_ANSWER_SCORE = 5


@dataclass(frozen=True)
class RiskOption:
    value: int
    label: str


@dataclass(frozen=True)
class RiskQuestion:
    id: str
    question: str
    options: tuple
    weight: float


@dataclass
class RiskQuestionnaireAnswer:
    question_id: str
    score: float


@dataclass
class RiskAssessment:
    profile: str
    score: int
    suggested_allocations: List[Allocation]


@dataclass
class EmergencyFund:
    minimum: float
    recommended: float
    ideal: float


def _options(*labels: str) -> tuple:
    # labels are listed from the most to the least risk-tolerant answer
    return tuple(RiskOption(MAX_ANSWER_SCORE - i, label) for i, label in enumerate(labels))


RISK_QUESTIONS = (
    RiskQuestion('age_group', 'What is your age group?',
                 _options('18-30', '31-40', '41-50', '51-60', '60+'), 1.5),
    RiskQuestion('investment_horizon', 'What is your investment time horizon?',
                 _options('10+ years', '5-10 years', '3-5 years', '1-3 years', 'Less than 1 year'), 2),
    RiskQuestion('loss_reaction', 'If your investments dropped 20% in value, you would:',
                 _options('Buy more at lower prices',
                          'Hold and wait for recovery',
                          'Wait and see, might sell if it drops more',
                          'Sell some to limit losses',
                          'Sell everything immediately'), 2),
    RiskQuestion('income_stability', 'How stable is your income?',
                 _options('Very stable (government job, established business)',
                          'Stable (salaried with good job security)',
                          'Moderately stable (private sector)',
                          'Variable (freelance, commissions)',
                          'Unstable or currently unemployed'), 1.5),
    RiskQuestion('emergency_fund', 'Do you have an emergency fund covering 6+ months of expenses?',
                 _options('Yes, more than 12 months',
                          'Yes, 6-12 months',
                          'Yes, 3-6 months',
                          'Less than 3 months',
                          'No emergency fund'), 1.5),
    RiskQuestion('investment_knowledge', 'How would you rate your investment knowledge?',
                 _options('Expert - I actively manage investments',
                          'Advanced - I understand most concepts',
                          'Intermediate - I know basics',
                          'Basic - Just starting to learn',
                          'Beginner - No experience'), 1),
    RiskQuestion('risk_return_preference', 'Which statement best describes your preference?',
                 _options('Maximum growth, I can handle high volatility',
                          'High growth with some volatility tolerance',
                          'Balanced growth with moderate risk',
                          'Steady growth with low risk',
                          'Capital preservation is most important'), 2),
    RiskQuestion('financial_goals', 'What is your primary financial goal?',
                 _options('Wealth accumulation / FIRE',
                          'Retirement planning (10+ years away)',
                          'Major purchase (home, education)',
                          'Short-term savings goal',
                          'Emergency fund building'), 1.5),
)

_QUESTIONS_BY_ID = {q.id: q for q in RISK_QUESTIONS}

ALLOCATION_PRESETS: Dict[str, List[Allocation]] = {
    'conservative': [
        Allocation('Fixed Deposits', 30, 0.065),
        Allocation('Bonds', 25, 0.07),
        Allocation('Gold', 15, 0.07),
        Allocation('Mutual Funds', 15, 0.09),
        Allocation('PPF', 10, 0.071),
        Allocation('Cash / Savings', 5, 0.04),
    ],
    'balanced': [
        Allocation('Mutual Funds', 30, 0.10),
        Allocation('Stocks', 25, 0.12),
        Allocation('Index Funds', 15, 0.10),
        Allocation('Bonds', 10, 0.07),
        Allocation('Gold', 10, 0.07),
        Allocation('REITs', 10, 0.08),
    ],
    'aggressive': [
        Allocation('Stocks', 40, 0.12),
        Allocation('Mutual Funds', 25, 0.11),
        Allocation('ETFs', 15, 0.10),
        Allocation('Crypto', 10, 0.15),
        Allocation('P2P Lending', 5, 0.11),
        Allocation('REITs', 5, 0.08),
    ],
}

EMERGENCY_FUND_MONTHS = {
    'conservative': (6, 9, 12),
    'balanced': (6, 8, 10),
    'aggressive': (3, 6, 8),
}


def get_default_expected_return(category: str) -> float:
    """Default expected return for a category id or display name (8% if unknown)."""
    return DEFAULT_MARKET.get_expected_return(category)


def calculate_risk_score(answers: List[RiskQuestionnaireAnswer]) -> int:
    """Calculate a 0-100 risk score from questionnaire answers.

    Each answer (1-5) is weighted by its question; the total is expressed
    as a share of the highest weighted score the answered questions allow.
    Answers to unknown questions are ignored. With no usable answers the
    neutral score of 50 is returned.
    """
    total_weighted_score = 0.0
    total_weight = 0.0

    for answer in answers or []:
        question = _QUESTIONS_BY_ID.get(answer.question_id)
        if question is None:
            continue
        total_weighted_score += answer.score * question.weight
        total_weight += question.weight * MAX_ANSWER_SCORE

    if total_weight == 0:
        return NEUTRAL_RISK_SCORE

    # round half up, matching how scores are shown to users
    return int(math.floor(total_weighted_score / total_weight * 100 + 0.5))


def get_risk_profile(score: float) -> str:
    """Map a 0-100 risk score to a risk profile."""
    if score >= 70:
        return 'aggressive'
    if score >= 40:
        return 'balanced'
    return 'conservative'


def assess_risk(answers: List[RiskQuestionnaireAnswer]) -> RiskAssessment:
    """Score questionnaire answers and suggest the matching preset allocation."""
    score = calculate_risk_score(answers)
    profile = get_risk_profile(score)
    suggested = [replace(a, percent_normalized=a.percent) for a in ALLOCATION_PRESETS[profile]]
    return RiskAssessment(profile=profile, score=score, suggested_allocations=suggested)


def calculate_emergency_fund(monthly_expenses: float, risk_profile: str) -> EmergencyFund:
    """Recommend an emergency fund size in months of expenses.

    Raises:
        InvalidArgumentError: If the risk profile is unknown
    """
    if risk_profile not in EMERGENCY_FUND_MONTHS:
        raise InvalidArgumentError(
            f"Unknown risk profile '{risk_profile}'. Expected one of {list(RISK_PROFILES)}"
        )
    minimum, recommended, ideal = EMERGENCY_FUND_MONTHS[risk_profile]
    return EmergencyFund(
        minimum=monthly_expenses * minimum,
        recommended=monthly_expenses * recommended,
        ideal=monthly_expenses * ideal,
    )


def calculate_fire_number(annual_expenses: float, withdrawal_rate: float = 0.04) -> float:
    """Portfolio size that sustains ``annual_expenses`` at a safe withdrawal rate."""
    if withdrawal_rate <= 0:
        return math.inf
    return float(round(annual_expenses / withdrawal_rate))


def estimate_years_to_fire(current_savings: float,
                           monthly_contribution: float,
                           expected_return: float,
                           fire_number: float,
                           max_years: float = 100.0,
                           precision: float = 0.1) -> float:
    """Estimate the years until savings reach the FIRE number.

    Bisects over 0..max_years on the combined future value of the current
    savings (compounded annually) and the monthly contributions (compounded
    monthly).

    Returns:
        Years rounded to one decimal place, 0 when already reached, or
        infinity when the target cannot be reached without contributions
        or growth
    """
    if current_savings >= fire_number:
        return 0.0
    if monthly_contribution <= 0 and expected_return <= 0:
        return math.inf

    def future_value(years: float) -> float:
        lumpsum_fv = current_savings * (1 + expected_return) ** years
        if monthly_contribution <= 0:
            return lumpsum_fv
        if expected_return == 0:
            return lumpsum_fv + monthly_contribution * years * 12
        monthly_rate = expected_return / 12
        sip_fv = monthly_contribution * ((1 + monthly_rate) ** (years * 12) - 1) / monthly_rate
        return lumpsum_fv + sip_fv

    low, high = 0.0, max_years
    while high - low > precision:
        mid = (low + high) / 2
        if future_value(mid) >= fire_number:
            high = mid
        else:
            low = mid

    return round(high, 1)
