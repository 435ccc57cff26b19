"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from rrsp_planner.calculators.brackets import resolve_bracket_table
from rrsp_planner.calculators.engine import PlannerEngine
from rrsp_planner.config import Settings, get_settings


def get_app_settings() -> Settings:
    """Get settings dependency."""
    return get_settings()


@lru_cache(maxsize=1)
def get_engine() -> PlannerEngine:
    """Get the planner engine built from the configured bracket table."""
    settings = get_settings()
    brackets = resolve_bracket_table(settings.tax_brackets_file)
    return PlannerEngine(brackets, settings)


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Engine = Annotated[PlannerEngine, Depends(get_engine)]
