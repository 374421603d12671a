# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Returns expected runs for a given base-out state.

Backed by the engine's 24-state run expectancy matrix, plus the expected
runs (runs scored on the play + RE24 of the resulting state) after each of
the representative plate-appearance outcomes.
"""

from __future__ import annotations

from base_state import apply_outcome, bases_to_mask
from tools.response import invalid_parameter, runs, success_response
from tools.validation import validate_tool_input
from win_expectancy import PA_OUTCOME_WEIGHTS, run_expectancy

TOOL_NAME = "get_run_expectancy"


def _outcome_values(bases: tuple[bool, bool, bool], outs: int) -> dict:
    values = {}
    for outcome, weight in PA_OUTCOME_WEIGHTS:
        result = apply_outcome(outcome, bases, outs)
        values[outcome.value] = {
            "league_weight": weight,
            "runs_scored": result.runs_scored,
            "outs_after": result.outs,
            "expected_runs_after": runs(result.runs_scored + run_expectancy(result.outs, result.bases)),
        }
    return values


def get_run_expectancy(
    runner_on_first: bool,
    runner_on_second: bool,
    runner_on_third: bool,
    outs: int,
) -> str:
    """Returns expected runs for a given base-out state and after each
    representative outcome of the next plate appearance.

    Args:
        runner_on_first: Whether there is a runner on first base.
        runner_on_second: Whether there is a runner on second base.
        runner_on_third: Whether there is a runner on third base.
        outs: Number of outs (0, 1, or 2).
    Returns:
        JSON string with run expectancy data.
    """
    ok, message = validate_tool_input(
        TOOL_NAME,
        runner_on_first=runner_on_first,
        runner_on_second=runner_on_second,
        runner_on_third=runner_on_third,
        outs=outs,
    )
    if not ok:
        return invalid_parameter(TOOL_NAME, message)

    bases = (runner_on_first, runner_on_second, runner_on_third)
    return success_response(TOOL_NAME, {
        "base_out_state": {
            "first": runner_on_first,
            "second": runner_on_second,
            "third": runner_on_third,
            "outs": outs,
            "mask": bases_to_mask(bases),
        },
        "expected_runs": run_expectancy(outs, bases),
        "after_outcome": _outcome_values(bases, outs),
    })
