# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Envelope and rounding helpers shared by the match analysis reports.

A report returns a JSON string shaped either as

    {"status": "ok", "tool": name, "data": {...}}

or, when its inputs fail validation,

    {"status": "error", "tool": name, "error_code": code, "message": text}

Win probabilities are reported to three decimals, run values and leverage
to two.
"""

import json
from typing import Any

INVALID_PARAMETER = "INVALID_PARAMETER"

PROBABILITY_DIGITS = 3
RUNS_DIGITS = 2


def probability(value: float) -> float:
    return round(value, PROBABILITY_DIGITS)


def runs(value: float) -> float:
    return round(value, RUNS_DIGITS)


def leverage_value(value: float) -> float:
    return round(value, RUNS_DIGITS)


def success_response(tool: str, data: dict[str, Any]) -> str:
    """Wrap a report payload in the ok envelope."""
    return json.dumps({"status": "ok", "tool": tool, "data": data})


def error_response(tool: str, error_code: str, message: str) -> str:
    """Wrap a failure in the error envelope.

    Args:
        tool: Report name.
        error_code: Machine-readable code, e.g. INVALID_PARAMETER.
        message: What went wrong, naming the offending parameter.
    """
    return json.dumps({
        "status": "error",
        "tool": tool,
        "error_code": error_code,
        "message": message,
    })


def invalid_parameter(tool: str, message: str) -> str:
    return error_response(tool, INVALID_PARAMETER, message)
