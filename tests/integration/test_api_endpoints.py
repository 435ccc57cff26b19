"""API endpoint integration tests.

Tests the FastAPI endpoints for planner calculations.
"""

import json

import pytest
from httpx import AsyncClient

from rrsp_planner.api.app import create_app, lifespan
from rrsp_planner.api.dependencies import get_engine
from rrsp_planner.calculators.errors import InvalidConfigurationError
from rrsp_planner.config import Settings


pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["bracket_count"] == 5
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        """Readiness endpoint should return 200."""
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        """Liveness endpoint should return 200."""
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestReference:
    """Test reference data endpoint."""

    async def test_reference_lists_choices(self, client: AsyncClient):
        response = await client.get("/api/v1/reference")
        assert response.status_code == 200

        data = response.json()
        assert len(data["provinces"]) == 13
        assert data["provinces"][0] == "Alberta"
        assert data["pay_intervals"] == [
            {"label": "Weekly", "periods_per_year": 52},
            {"label": "Biweekly", "periods_per_year": 26},
            {"label": "Monthly", "periods_per_year": 12},
        ]
        assert data["brackets"][0] == {"threshold": 50197, "rate": 0.15}
        assert data["brackets"][-1] == {"threshold": None, "rate": 0.33}


class TestPlans:
    """Test full plan calculation."""

    async def test_calculate_plan(self, client: AsyncClient):
        """POST /api/v1/plans should return limit, reduction and rows."""
        response = await client.post(
            "/api/v1/plans",
            json={
                "province": "Ontario",
                "annual_income": 80000,
                "rrsp_room": 20000,
                "planned_contribution": 12000,
                "rate_of_return_percent": 7,
                "pay_interval": 12,
                "years_to_work": 2,
            },
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["contribution_limit"] == pytest.approx(14400)
        assert data["tax_reduction"] > 0
        assert [row["year"] for row in data["rows"]] == [1, 2]
        assert data["rows"][0]["contributed_this_year"] == pytest.approx(12000)
        assert data["final_balance"] == data["rows"][-1]["ending_balance"]
        assert data["inputs"]["province"] == "Ontario"

    async def test_plan_defaults(self, client: AsyncClient):
        """An empty body uses the default inputs."""
        response = await client.post("/api/v1/plans", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["rows"] == []
        assert data["inputs"]["pay_interval"] == 52

    async def test_invalid_pay_interval(self, client: AsyncClient):
        """Zero periods per year is a configuration error."""
        response = await client.post(
            "/api/v1/plans", json={"pay_interval": 0, "years_to_work": 1}
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_CONFIGURATION"

    async def test_negative_years(self, client: AsyncClient):
        response = await client.post("/api/v1/plans", json={"years_to_work": -1})

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_unknown_province_rejected_by_schema(self, client: AsyncClient):
        response = await client.post("/api/v1/plans", json={"province": "Atlantis"})

        assert response.status_code == 422


class TestTax:
    """Test tax endpoints."""

    async def test_tax_liability(self, client: AsyncClient):
        response = await client.post("/api/v1/tax/liability", json={"income": 100000})

        assert response.status_code == 200
        assert response.json()["tax"] == pytest.approx(17739.165)

    async def test_tax_reduction(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/reduction",
            json={"gross_income": 30000, "deduction": 50000},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["taxable_income"] == 0
        assert data["tax_after"] == 0
        assert data["reduction"] == pytest.approx(4500)


class TestProjections:
    """Test standalone projection endpoint."""

    async def test_projection(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projections",
            json={
                "annual_return_rate_percent": 0,
                "periods_per_year": 26,
                "contribution_per_year": 2600,
                "number_of_years": 3,
            },
        )

        assert response.status_code == 200
        rows = response.json()["rows"]
        assert [row["ending_balance"] for row in rows] == pytest.approx([2600, 5200, 7800])

    async def test_projection_zero_years(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projections", json={"number_of_years": 0}
        )

        assert response.status_code == 200
        assert response.json()["rows"] == []


class TestConfiguredBrackets:
    """Test a bracket table supplied through the environment."""

    async def test_brackets_file_used(self, client: AsyncClient, monkeypatch, tmp_path):
        path = tmp_path / "brackets.json"
        path.write_text(
            json.dumps({"brackets": [{"threshold": None, "rate": 0.1}]})
        )
        monkeypatch.setenv("TAX_BRACKETS_FILE", str(path))
        get_engine.cache_clear()
        monkeypatch.setattr("rrsp_planner.api.dependencies.get_settings", Settings.from_env)

        response = await client.post("/api/v1/tax/liability", json={"income": 1000})

        assert response.status_code == 200
        assert response.json()["tax"] == pytest.approx(100)

    async def test_bad_brackets_file_reported(self, client: AsyncClient, monkeypatch, tmp_path):
        path = tmp_path / "brackets.json"
        path.write_text(json.dumps({"brackets": [{"threshold": 100, "rate": 0.1}]}))
        monkeypatch.setenv("TAX_BRACKETS_FILE", str(path))
        get_engine.cache_clear()
        monkeypatch.setattr("rrsp_planner.api.dependencies.get_settings", Settings.from_env)

        response = await client.post("/api/v1/tax/liability", json={"income": 1000})
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_CONFIGURATION"

    async def test_bad_brackets_file_stops_startup(self, monkeypatch, tmp_path):
        """The app refuses to start rather than serve without brackets."""
        path = tmp_path / "brackets.json"
        path.write_text(json.dumps({"brackets": []}))
        monkeypatch.setenv("TAX_BRACKETS_FILE", str(path))
        get_engine.cache_clear()
        monkeypatch.setattr("rrsp_planner.api.dependencies.get_settings", Settings.from_env)

        with pytest.raises(InvalidConfigurationError):
            async with lifespan(create_app()):
                pass

        get_engine.cache_clear()


class TestRequestLimits:
    """Oversized or overflowing calculations are refused."""

    async def test_too_many_periods_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projections",
            json={"periods_per_year": 20_000_000, "number_of_years": 1},
        )

        assert response.status_code == 422

    async def test_too_many_years_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/plans", json={"years_to_work": 1000})

        assert response.status_code == 422

    async def test_largest_allowed_request(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projections",
            json={"periods_per_year": 365, "number_of_years": 100, "contribution_per_year": 365},
        )

        assert response.status_code == 200
        assert len(response.json()["rows"]) == 100

    async def test_overflowing_balance_rejected(self, client: AsyncClient):
        """A balance that overflows is an error, not a null in the response."""
        response = await client.post(
            "/api/v1/projections",
            json={
                "annual_return_rate_percent": 7,
                "periods_per_year": 12,
                "contribution_per_year": 1e308,
                "number_of_years": 3,
            },
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"

    async def test_error_body_lists_only_populated_fields(self, client: AsyncClient):
        response = await client.post("/api/v1/projections", json={"periods_per_year": 0})
        schema = (await client.get("/openapi.json")).json()

        assert response.status_code == 422
        assert set(response.json()) == {"detail", "code"}
        assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {
            "detail",
            "code",
        }
