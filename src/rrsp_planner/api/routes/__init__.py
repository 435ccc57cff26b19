"""API routes."""

from rrsp_planner.api.routes.planner import router as planner_router
from rrsp_planner.api.routes.health import router as health_router

__all__ = ["planner_router", "health_router"]
