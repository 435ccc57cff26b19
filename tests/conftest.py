"""Pytest fixtures for planner tests."""

from __future__ import annotations

import math

import pytest

from rrsp_planner.calculators.brackets import FEDERAL_TAX_BRACKETS
from rrsp_planner.calculators.engine import PlannerEngine
from rrsp_planner.calculators.types import BracketTable, TaxBracket
from rrsp_planner.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the process environment."""
    return Settings(
        engine_version="1.0.0",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        contribution_limit_rate=0.18,
        tax_brackets_file=None,
    )


@pytest.fixture
def federal_brackets() -> BracketTable:
    """The built-in five-tier federal bracket table."""
    return FEDERAL_TAX_BRACKETS


@pytest.fixture
def simple_brackets() -> BracketTable:
    """Round-number brackets for hand-checkable arithmetic."""
    return (
        TaxBracket(threshold=10000, rate=0.10),
        TaxBracket(threshold=40000, rate=0.12),
        TaxBracket(threshold=math.inf, rate=0.22),
    )


@pytest.fixture
def engine(federal_brackets: BracketTable, test_settings: Settings) -> PlannerEngine:
    """Planner engine on the federal table."""
    return PlannerEngine(federal_brackets, test_settings)
