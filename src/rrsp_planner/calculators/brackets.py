"""Bracket table configuration: defaults, validation and loading.

Bracket files are JSON documents with structure:
{
    "brackets": [
        {"threshold": 50197, "rate": 0.15},
        {"threshold": 100392, "rate": 0.205},
        ...
        {"threshold": null, "rate": 0.33}  // null = no upper limit
    ]
}
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rrsp_planner.calculators.errors import InvalidConfigurationError
from rrsp_planner.calculators.types import BracketTable, TaxBracket

logger = logging.getLogger(__name__)


FEDERAL_TAX_BRACKETS: BracketTable = (
    TaxBracket(threshold=50197, rate=0.15),
    TaxBracket(threshold=100392, rate=0.205),
    TaxBracket(threshold=155625, rate=0.26),
    TaxBracket(threshold=221708, rate=0.29),
    TaxBracket(threshold=math.inf, rate=0.33),
)


def validate_bracket_table(brackets: Iterable[TaxBracket]) -> BracketTable:
    """Check a bracket table and return it as an immutable tuple.

    Raises:
        InvalidConfigurationError: If the table is empty, unsorted, has a
            rate outside 0-1, or its last bracket is bounded.
    """
    table = tuple(brackets)
    if not table:
        raise InvalidConfigurationError("Bracket table is empty")

    previous = -math.inf
    for index, bracket in enumerate(table):
        if not isinstance(bracket, TaxBracket):
            raise InvalidConfigurationError(
                f"Bracket {index} is not a TaxBracket: {bracket!r}"
            )
        if math.isnan(bracket.threshold) or bracket.threshold < 0:
            raise InvalidConfigurationError(
                f"Bracket {index} has invalid threshold {bracket.threshold!r}"
            )
        if not 0 <= bracket.rate <= 1:
            raise InvalidConfigurationError(
                f"Bracket {index} has rate {bracket.rate!r} outside 0-1"
            )
        if bracket.threshold <= previous:
            raise InvalidConfigurationError(
                f"Bracket thresholds must be strictly ascending "
                f"({bracket.threshold!r} follows {previous!r})"
            )
        if bracket.is_unbounded and index != len(table) - 1:
            raise InvalidConfigurationError(
                f"Only the last bracket may be unbounded (found at {index})"
            )
        previous = bracket.threshold

    if not table[-1].is_unbounded:
        raise InvalidConfigurationError(
            "Last bracket must be unbounded so that all income is covered"
        )

    return table


def parse_bracket_table(payload: dict[str, Any]) -> BracketTable:
    """Build a validated bracket table from a JSON payload."""
    raw_brackets = payload.get("brackets")
    if not isinstance(raw_brackets, list):
        raise InvalidConfigurationError("Bracket payload must contain a 'brackets' list")

    brackets = []
    for index, b in enumerate(raw_brackets):
        try:
            threshold = b.get("threshold")
            brackets.append(
                TaxBracket(
                    threshold=math.inf if threshold is None else float(threshold),
                    rate=float(b["rate"]),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise InvalidConfigurationError(
                f"Bracket {index} is malformed: {b!r}"
            ) from e

    return validate_bracket_table(brackets)


def load_bracket_table(path: str | Path) -> BracketTable:
    """Load a bracket table from a JSON file."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidConfigurationError(f"Cannot read bracket file {path}: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidConfigurationError(f"Bracket file {path} must hold a JSON object")

    table = parse_bracket_table(payload)
    logger.info("Loaded %d tax brackets from %s", len(table), path)
    return table


def bracket_table_to_payload(brackets: BracketTable) -> dict[str, Any]:
    """Render a bracket table in the JSON file format."""
    return {
        "brackets": [
            {
                "threshold": None if b.is_unbounded else b.threshold,
                "rate": b.rate,
            }
            for b in brackets
        ]
    }


def resolve_bracket_table(tax_brackets_file: str | None = None) -> BracketTable:
    """Return the configured bracket table, defaulting to the federal one."""
    if tax_brackets_file:
        return load_bracket_table(tax_brackets_file)
    return FEDERAL_TAX_BRACKETS
