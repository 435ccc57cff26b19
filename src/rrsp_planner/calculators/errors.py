"""Exceptions raised by the planner calculators."""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for calculation failures reported to callers."""

    code = "PLANNER_ERROR"


class InvalidConfigurationError(PlannerError):
    """Raised when static configuration cannot be used for calculation.

    Covers malformed bracket tables and non-positive period counts.
    """

    code = "INVALID_CONFIGURATION"


class InvalidInputError(PlannerError):
    """Raised when a caller-supplied value cannot be calculated on."""

    code = "INVALID_INPUT"

    def __init__(self, field_name: str, value: object, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field_name}={value!r}: {reason}")
