"""HTTP API for the planner engine."""
