# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for the Flask calculation API.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ..api.app import API_PREFIX, create_app
from ..api.settings import Settings
from ..risk import RISK_QUESTIONS


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.settings = Settings(max_simulations=500, default_simulations=50)
        self.client = create_app(self.settings).test_client()

    def post(self, path, payload):
        return self.client.post(f"{API_PREFIX}{path}", json=payload)


class TestHealth(ApiTestCase):

    def test_health(self):
        """Test the health check endpoint."""
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()["ok"])


class TestMonteCarloEndpoint(ApiTestCase):
    """Tests for POST /monte-carlo."""

    def test_runs_simulation(self):
        """Test a recurring simulation through the API."""
        response = self.post("/monte-carlo", {
            "mode": "recurring",
            "amount": 10000,
            "horizon_years": 5,
            "expected_annual_return": 0.1,
            "volatility": 0.15,
            "path_count": 100,
            "seed": 42,
        })
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        result = body["result"]
        self.assertEqual(result["path_count"], 100)
        self.assertEqual(len(result["sorted_final_values"]), 100)
        self.assertEqual(len(result["yearly_bands"]), 5)
        self.assertEqual(result["total_contributions"], 600000)

    def test_seeded_requests_are_reproducible(self):
        """Test that the same seed returns the same result."""
        payload = {"mode": "lumpsum", "amount": 5000, "horizon_years": 3,
                   "expected_annual_return": 0.08, "volatility": 0.2, "path_count": 50, "seed": 9}
        first = self.post("/monte-carlo", payload).get_json()
        second = self.post("/monte-carlo", payload).get_json()
        self.assertEqual(first["result"], second["result"])

    def test_defaults_path_count_from_settings(self):
        """Test that path_count falls back to the configured default."""
        response = self.post("/monte-carlo", {"amount": 1000, "horizon_years": 1,
                                              "expected_annual_return": 0.1, "volatility": 0.1})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["result"]["path_count"], 50)

    def test_derives_parameters_from_allocations(self):
        """Test return and volatility derived from allocations."""
        response = self.post("/monte-carlo", {
            "mode": "one-time",
            "amount": 100000,
            "horizon_years": 2,
            "allocations": [{"category": "Stocks", "percent": 60}, {"category": "Bonds", "percent": 40}],
            "path_count": 20,
        })
        self.assertEqual(response.status_code, 200)
        assumptions = response.get_json()["assumptions"]
        self.assertEqual(assumptions["volatility"], 0.144)
        self.assertAlmostEqual(assumptions["expected_annual_return"], 0.1)

    def test_target_probability(self):
        """Test the probability of reaching a target value."""
        response = self.post("/monte-carlo", {
            "amount": 1000, "horizon_years": 1, "expected_annual_return": 0.12,
            "volatility": 0, "path_count": 10, "target": 1100,
        })
        self.assertEqual(response.get_json()["probability_of_reaching_target"], 100.0)

    def test_rejects_too_many_paths(self):
        """Test that path_count above the configured maximum is rejected."""
        response = self.post("/monte-carlo", {"amount": 1000, "horizon_years": 1,
                                              "expected_annual_return": 0.1, "volatility": 0.1,
                                              "path_count": 501})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()["success"])
        self.assertIn("500", response.get_json()["error"])

    def test_rejects_invalid_input(self):
        """Test that invalid simulation inputs return 400."""
        invalid = [
            {"amount": -5, "horizon_years": 1, "expected_annual_return": 0.1, "volatility": 0.1},
            {"amount": 100, "horizon_years": 0, "expected_annual_return": 0.1, "volatility": 0.1},
            {"amount": 100, "horizon_years": 1.5, "expected_annual_return": 0.1, "volatility": 0.1},
            {"amount": "lots", "horizon_years": 1, "expected_annual_return": 0.1, "volatility": 0.1},
            {"amount": 100, "horizon_years": 1, "expected_annual_return": 0.1},
            {"amount": 100, "horizon_years": 1, "expected_annual_return": 0.1, "volatility": 0.1,
             "mode": "weekly"},
        ]
        for payload in invalid:
            with self.subTest(payload=payload):
                response = self.post("/monte-carlo", payload)
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.get_json()["success"])

    def test_rejects_inflation_at_or_below_minus_one(self):
        """Test that an inflation rate of -1 or less returns a JSON 400."""
        for inflation_rate in (-1, -2.5):
            with self.subTest(inflation_rate=inflation_rate):
                response = self.post("/monte-carlo", {
                    "amount": 1000, "horizon_years": 2, "expected_annual_return": 0.1,
                    "volatility": 0.1, "path_count": 5, "inflation_rate": inflation_rate,
                })
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.get_json()["success"])
                self.assertIn("inflation_rate", response.get_json()["error"])

    def test_rejects_missing_body(self):
        """Test that a non-JSON body returns 400."""
        response = self.client.post(f"{API_PREFIX}/monte-carlo", data="not json",
                                    content_type="text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Request JSON body is required")


class TestVolatilityEndpoint(ApiTestCase):

    def test_blended_volatility(self):
        """Test blended volatility for a stock/bond mix."""
        response = self.post("/volatility", {"allocations": [
            {"category": "Stocks", "percent": 60}, {"category": "Bonds", "percent": 40}]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["volatility"], 0.144)

    def test_empty_allocation_uses_default(self):
        """Test that an empty allocation uses the default volatility."""
        response = self.post("/volatility", {"allocations": []})
        self.assertEqual(response.get_json()["volatility"], 0.15)

    def test_requires_list(self):
        """Test that allocations must be a list."""
        response = self.post("/volatility", {"allocations": "stocks"})
        self.assertEqual(response.status_code, 400)


class TestProjectEndpoint(ApiTestCase):

    def test_projection(self):
        """Test a lump sum portfolio projection."""
        response = self.post("/project", {
            "mode": "lumpsum",
            "amount": 100000,
            "duration_years": 5,
            "allocations": [
                {"category": "Stocks", "percent": 60, "expected_annual_return": 0.12},
                {"category": "Bonds", "percent": 40, "expected_annual_return": 0.07},
            ],
        })
        self.assertEqual(response.status_code, 200)
        projection = response.get_json()["projection"]
        self.assertEqual(len(projection["normalized_allocations"]), 2)
        self.assertEqual(len(projection["yearly_breakdown"]), 5)
        self.assertEqual(projection["aggregate"]["total_contributions"], 100000)

    def test_strict_mode_error(self):
        """Test that strict mode reports allocations not summing to 100%."""
        response = self.post("/project", {
            "amount": 1000, "duration_years": 5, "normalize": False,
            "allocations": [{"category": "Stocks", "percent": 60, "expected_annual_return": 0.12}],
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("must sum to 100%", response.get_json()["error"])

    def test_normalize_accepts_boolean_strings(self):
        """Test that "false" and "true" strings select strict and auto mode."""
        allocations = [{"category": "Stocks", "percent": 60, "expected_annual_return": 0.12}]
        strict = self.post("/project", {"amount": 1000, "duration_years": 5, "normalize": "false",
                                        "allocations": allocations})
        self.assertEqual(strict.status_code, 400)
        self.assertIn("must sum to 100%", strict.get_json()["error"])

        auto = self.post("/project", {"amount": 1000, "duration_years": 5, "normalize": "True",
                                      "allocations": allocations})
        self.assertEqual(auto.status_code, 200)

    def test_normalize_rejects_non_boolean(self):
        """Test that a normalize value other than true or false is rejected."""
        for value in ("no", 0, [True]):
            with self.subTest(normalize=value):
                response = self.post("/project", {
                    "amount": 1000, "duration_years": 5, "normalize": value,
                    "allocations": [{"category": "Stocks", "percent": 100, "expected_annual_return": 0.12}],
                })
                self.assertEqual(response.status_code, 400)
                self.assertIn("normalize", response.get_json()["error"])

    def test_requires_expected_returns(self):
        """Test that projections need an expected return per allocation."""
        response = self.post("/project", {"amount": 1000, "duration_years": 5,
                                          "allocations": [{"category": "Stocks", "percent": 100}]})
        self.assertEqual(response.status_code, 400)


class TestRiskEndpoints(ApiTestCase):

    def test_questions(self):
        """Test listing the risk questionnaire."""
        response = self.client.get(f"{API_PREFIX}/risk/questions")
        questions = response.get_json()["questions"]
        self.assertEqual(len(questions), len(RISK_QUESTIONS))
        self.assertEqual(questions[0]["id"], "age_group")
        self.assertEqual(questions[0]["options"][0]["value"], 5)

    def test_assessment(self):
        """Test scoring a full set of answers."""
        answers = [{"question_id": q.id, "score": 1} for q in RISK_QUESTIONS]
        response = self.post("/risk/assessment", {"answers": answers})
        self.assertEqual(response.status_code, 200)
        assessment = response.get_json()["assessment"]
        self.assertEqual(assessment["score"], 20)
        self.assertEqual(assessment["profile"], "conservative")

    def test_assessment_rejects_out_of_range_score(self):
        """Test that scores outside 1-5 are rejected."""
        response = self.post("/risk/assessment", {"answers": [{"question_id": "age_group", "score": 9}]})
        self.assertEqual(response.status_code, 400)


class TestFinancialHealthEndpoint(ApiTestCase):

    def test_summary(self):
        """Test the financial health summary."""
        response = self.post("/financial-health", {
            "monthly_income": 100000,
            "monthly_expenses": 50000,
            "existing_investments": 1000000,
            "risk_profile": "balanced",
        })
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["summary"]["savings_rate"], 50.0)
        self.assertEqual(body["emergency_fund"]["recommended"], 400000)
        self.assertEqual(body["fire"]["target_number"], 15000000)
        self.assertGreater(body["fire"]["estimated_years"], 5)

    def test_unreachable_fire_is_null(self):
        """Test that an unreachable FIRE estimate is returned as null."""
        response = self.post("/financial-health", {"monthly_income": 0, "monthly_expenses": 1000,
                                                   "expected_return": 0})
        self.assertIsNone(response.get_json()["fire"]["estimated_years"])

    def test_unknown_profile(self):
        """Test that an unknown risk profile is rejected."""
        response = self.post("/financial-health", {"monthly_expenses": 1000, "risk_profile": "yolo"})
        self.assertEqual(response.status_code, 400)


class TestSettings(unittest.TestCase):
    """Tests for environment-driven settings."""

    def test_reads_environment(self):
        """Test reading settings from environment variables."""
        env = {"PORT": "9000", "MAX_SIMULATIONS": "5000", "FLASK_DEBUG": "true", "LOG_LEVEL": "debug"}
        with patch.dict(os.environ, env):
            settings = Settings.from_env(env_file="/nonexistent/.env")
        self.assertEqual(settings.port, 9000)
        self.assertEqual(settings.max_simulations, 5000)
        self.assertTrue(settings.debug)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_env_file_does_not_override_environment(self):
        """Test that the .env file never overrides the environment."""
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text("PORT=7000\nDEFAULT_SIMULATIONS=250\n")
            with patch.dict(os.environ, {"PORT": "9100"}):
                os.environ.pop("DEFAULT_SIMULATIONS", None)
                settings = Settings.from_env(env_file=env_file)
        self.assertEqual(settings.port, 9100)
        self.assertEqual(settings.default_simulations, 250)

    def test_rejects_bad_values(self):
        """Test that malformed settings raise ValueError."""
        with patch.dict(os.environ, {"PORT": "eighty"}):
            with self.assertRaises(ValueError):
                Settings.from_env(env_file="/nonexistent/.env")
        with self.assertRaises(ValueError):
            Settings(default_simulations=100, max_simulations=10)


if __name__ == '__main__':
    unittest.main()
