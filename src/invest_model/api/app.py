from __future__ import annotations

import logging
import math
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, Flask, current_app, jsonify, request

from ..errors import InvalidArgumentError
from ..montecarlo import (
    MonteCarloConfig,
    PortfolioParametersCalculator,
    SimulationRequest,
    blended_volatility,
    run_simulation,
)
from ..portfolio import Allocation, ProjectionParams, project_portfolio
from ..risk import (
    RISK_PROFILES,
    RISK_QUESTIONS,
    RiskQuestionnaireAnswer,
    assess_risk,
    calculate_emergency_fund,
    calculate_fire_number,
    estimate_years_to_fire,
)
from .settings import Settings

logger = logging.getLogger(__name__)

API_PREFIX = "/calc/api/v1"
ASSUMED_FIRE_RETURN = 0.10
_MISSING = object()

calc_api = Blueprint("calc_api", __name__, url_prefix=API_PREFIX)


def _to_float(value: Any, field: str, default: Any = _MISSING) -> float:
    if value is None:
        if default is _MISSING:
            raise InvalidArgumentError(f"'{field}' is required")
        return default
    if isinstance(value, bool):
        raise InvalidArgumentError(f"'{field}' must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            raise InvalidArgumentError(f"'{field}' must be a number, got {value!r}") from None
    else:
        raise InvalidArgumentError(f"'{field}' must be a number, got {value!r}")
    if not math.isfinite(result):
        raise InvalidArgumentError(f"'{field}' must be finite, got {value!r}")
    return result


def _to_int(value: Any, field: str, default: Any = _MISSING) -> int:
    result = _to_float(value, field, default)
    if result is None:
        return result
    if result != int(result):
        raise InvalidArgumentError(f"'{field}' must be a whole number, got {value!r}")
    return int(result)


def _to_bool(value: Any, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidArgumentError(f"'{field}' must be true or false, got {value!r}")


def _pick_first(payload: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return default


def _json_number(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _require_object(payload: Any) -> Dict[str, Any]:
    if payload is None:
        raise InvalidArgumentError("Request JSON body is required")
    if not isinstance(payload, dict):
        raise InvalidArgumentError("Request JSON body must be an object")
    return payload


def _parse_allocations(raw: Any, require_returns: bool = False) -> List[Allocation]:
    if not isinstance(raw, list):
        raise InvalidArgumentError("'allocations' must be a list")

    allocations = []
    for index, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            raise InvalidArgumentError(f"Allocation {index} must be an object")
        expected_return = _pick_first(item, ["expected_annual_return", "expectedAnnualReturn"])
        if expected_return is None and require_returns:
            raise InvalidArgumentError(f"Allocation {index}: 'expected_annual_return' is required")
        # None leaves the category default to the market assumptions
        allocations.append(Allocation(
            category=str(item.get("category") or ""),
            percent=_to_float(item.get("percent"), f"allocations[{index}].percent"),
            expected_annual_return=_to_float(expected_return, f"allocations[{index}].expected_annual_return", None),
        ))
    return allocations


def _simulation_request(payload: Dict[str, Any], settings: Settings) -> Tuple[SimulationRequest, Dict[str, float]]:
    allocations = None
    if payload.get("allocations") is not None:
        allocations = _parse_allocations(payload["allocations"])

    expected_return = _pick_first(payload, ["expected_annual_return", "expectedReturn"])
    volatility = payload.get("volatility")
    if allocations is not None and (expected_return is None or volatility is None):
        derived = PortfolioParametersCalculator().calculate(allocations)
        if expected_return is None:
            expected_return = derived.expected_return
        if volatility is None:
            volatility = derived.volatility

    path_count = _to_int(_pick_first(payload, ["path_count", "simulations"]), "path_count",
                         settings.default_simulations)
    if path_count > settings.max_simulations:
        raise InvalidArgumentError(
            f"'path_count' cannot exceed {settings.max_simulations}, got {path_count}"
        )

    inflation_rate = _pick_first(payload, ["inflation_rate", "inflationRate"])
    sim_request = SimulationRequest(
        mode=str(payload.get("mode") or "one-time"),
        amount=_to_float(payload.get("amount"), "amount"),
        horizon_years=_to_int(_pick_first(payload, ["horizon_years", "horizonYears", "durationYears"]),
                              "horizon_years"),
        expected_annual_return=_to_float(expected_return, "expected_annual_return"),
        volatility=_to_float(volatility, "volatility"),
        path_count=path_count,
        compounding=str(payload.get("compounding") or "monthly"),
        inflation_rate=_to_float(inflation_rate, "inflation_rate", None),
    )
    return sim_request, {
        "expected_annual_return": sim_request.expected_annual_return,
        "volatility": sim_request.volatility,
    }


@calc_api.post("/monte-carlo")
def monte_carlo() -> Tuple[Any, int]:
    payload = _require_object(request.get_json(silent=True))
    settings: Settings = current_app.config["SETTINGS"]

    sim_request, assumptions = _simulation_request(payload, settings)
    config = MonteCarloConfig(
        random_seed=_to_int(payload.get("seed"), "seed", None),
        max_workers=settings.simulation_workers,
    )
    result = run_simulation(sim_request, config)

    response = {
        "success": True,
        "assumptions": assumptions,
        "result": result.to_dict(),
    }
    target = _to_float(payload.get("target"), "target", None)
    if target is not None:
        response["probability_of_reaching_target"] = result.probability_of_reaching(target)
    return jsonify(response), 200


@calc_api.post("/volatility")
def volatility() -> Tuple[Any, int]:
    payload = _require_object(request.get_json(silent=True))
    allocations = _parse_allocations(payload.get("allocations"))
    return jsonify({"success": True, "volatility": blended_volatility(allocations)}), 200


@calc_api.post("/project")
def project() -> Tuple[Any, int]:
    payload = _require_object(request.get_json(silent=True))
    allocations = _parse_allocations(payload.get("allocations"), require_returns=True)

    params = ProjectionParams(
        mode=str(payload.get("mode") or "lumpsum"),
        amount=_to_float(payload.get("amount"), "amount"),
        duration_years=_to_int(_pick_first(payload, ["duration_years", "durationYears"]), "duration_years"),
        allocations=allocations,
        compounding=str(payload.get("compounding") or "monthly"),
        normalize=_to_bool(payload.get("normalize"), "normalize", True),
        inflation_rate=_to_float(_pick_first(payload, ["inflation_rate", "inflationRate"]),
                                 "inflation_rate", None),
        tax_percent=_to_float(_pick_first(payload, ["tax_percent", "taxPercent"]), "tax_percent", None),
    )
    projection = project_portfolio(params)
    return jsonify({"success": True, "projection": asdict(projection)}), 200


@calc_api.get("/risk/questions")
def risk_questions() -> Tuple[Any, int]:
    return jsonify({"success": True, "questions": [asdict(q) for q in RISK_QUESTIONS]}), 200


@calc_api.post("/risk/assessment")
def risk_assessment() -> Tuple[Any, int]:
    payload = _require_object(request.get_json(silent=True))
    raw_answers = payload.get("answers")
    if not isinstance(raw_answers, list):
        raise InvalidArgumentError("'answers' must be a list")

    answers = []
    for index, item in enumerate(raw_answers, start=1):
        if not isinstance(item, dict):
            raise InvalidArgumentError(f"Answer {index} must be an object")
        score = _to_float(item.get("score"), f"answers[{index}].score")
        if not 1 <= score <= 5:
            raise InvalidArgumentError(f"answers[{index}].score must be between 1 and 5, got {score}")
        question_id = _pick_first(item, ["question_id", "questionId"])
        if not question_id:
            raise InvalidArgumentError(f"answers[{index}].question_id is required")
        answers.append(RiskQuestionnaireAnswer(str(question_id), score))

    assessment = assess_risk(answers)
    return jsonify({"success": True, "assessment": asdict(assessment)}), 200


@calc_api.post("/financial-health")
def financial_health() -> Tuple[Any, int]:
    payload = _require_object(request.get_json(silent=True))
    monthly_income = _to_float(_pick_first(payload, ["monthly_income", "income_monthly"]), "monthly_income", 0.0)
    monthly_expenses = _to_float(_pick_first(payload, ["monthly_expenses", "expenses_monthly"]),
                                 "monthly_expenses", 0.0)
    existing_investments = _to_float(payload.get("existing_investments"), "existing_investments", 0.0)
    expected_return = _to_float(payload.get("expected_return"), "expected_return", ASSUMED_FIRE_RETURN)
    risk_profile = str(payload.get("risk_profile") or "balanced")
    if risk_profile not in RISK_PROFILES:
        raise InvalidArgumentError(f"Unknown risk profile '{risk_profile}'")

    monthly_savings = monthly_income - monthly_expenses
    savings_rate = monthly_savings / monthly_income * 100 if monthly_income > 0 else 0.0
    emergency_fund = calculate_emergency_fund(monthly_expenses, risk_profile)
    fire_number = calculate_fire_number(monthly_expenses * 12)
    years_to_fire = estimate_years_to_fire(existing_investments, monthly_savings, expected_return, fire_number)
    progress = existing_investments / fire_number * 100 if fire_number > 0 else 100.0

    return jsonify({
        "success": True,
        "summary": {
            "monthly_income": monthly_income,
            "monthly_expenses": monthly_expenses,
            "monthly_savings": monthly_savings,
            "savings_rate": round(savings_rate, 2),
        },
        "emergency_fund": asdict(emergency_fund),
        "fire": {
            "target_number": _json_number(fire_number),
            "current_progress": existing_investments,
            "progress_percent": round(progress, 2),
            "estimated_years": _json_number(years_to_fire),
        },
        "risk_profile": risk_profile,
    }), 200


def health() -> Tuple[Any, int]:
    return jsonify({"ok": True, "service": "invest-model-api"}), 200


def _invalid_argument(error: ValueError) -> Tuple[Any, int]:
    logger.warning("Rejected %s %s: %s", request.method, request.path, error)
    return jsonify({"success": False, "error": str(error)}), 400


def create_app(settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    app.config["SETTINGS"] = settings or Settings.from_env()

    app.add_url_rule("/health", view_func=health, methods=["GET"])
    app.register_blueprint(calc_api)

    app.register_error_handler(ValueError, _invalid_argument)
    return app


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
