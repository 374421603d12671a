# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Returns win expectancy, leverage index, and conditional win expectancies.

All probabilities are from the batting team's perspective, computed with
the Poisson model in win_expectancy. The leverage threshold is the one the
engine uses to decide whether to pause for a human decision.
"""

from __future__ import annotations

from base_state import EMPTY_BASES
from config import DEFAULT_CONFIG
from leverage import leverage_threshold
from tools.response import invalid_parameter, leverage_value, probability, success_response
from tools.validation import validate_tool_input
from win_expectancy import leverage_index, we_after_inning_end, win_expectancy

TOOL_NAME = "get_win_probability"

# Extreme differentials add nothing but compute time
MAX_DIFFERENTIAL = 15


def get_win_probability(
    inning: int,
    half: str,
    outs: int,
    runner_on_first: bool,
    runner_on_second: bool,
    runner_on_third: bool,
    score_differential: int,
) -> str:
    """Returns win expectancy, leverage index, and conditional win expectancies
    for the batting team given the full game state.

    Args:
        inning: Current inning (1+).
        half: Half of the inning ('TOP' or 'BOTTOM').
        outs: Number of outs (0, 1, or 2).
        runner_on_first: Whether there is a runner on first base.
        runner_on_second: Whether there is a runner on second base.
        runner_on_third: Whether there is a runner on third base.
        score_differential: Batting team runs minus fielding team runs.
    Returns:
        JSON string with win expectancy data.
    """
    ok, message = validate_tool_input(
        TOOL_NAME,
        inning=inning, half=half, outs=outs,
        runner_on_first=runner_on_first,
        runner_on_second=runner_on_second,
        runner_on_third=runner_on_third,
        score_differential=score_differential,
    )
    if not ok:
        return invalid_parameter(TOOL_NAME, message)

    half_upper = half.upper()
    is_top = half_upper == "TOP"
    bases = (runner_on_first, runner_on_second, runner_on_third)
    diff = max(-MAX_DIFFERENTIAL, min(MAX_DIFFERENTIAL, score_differential))

    we = win_expectancy(inning, is_top, outs, bases, diff)
    li = leverage_index(inning, is_top, outs, bases, diff)
    threshold = leverage_threshold(inning, DEFAULT_CONFIG)
    we_if_run = win_expectancy(inning, is_top, outs, EMPTY_BASES, diff + 1)
    we_if_end = we_after_inning_end(inning, is_top, diff)

    return success_response(TOOL_NAME, {
        "game_state": {
            "inning": inning,
            "half": half_upper,
            "outs": outs,
            "runners": {
                "first": runner_on_first,
                "second": runner_on_second,
                "third": runner_on_third,
            },
            "score_differential": score_differential,
        },
        "win_expectancy": probability(we),
        "leverage_index": leverage_value(li),
        "leverage_threshold": threshold,
        "is_high_leverage": li >= threshold,
        "we_if_run_scores": probability(we_if_run),
        "we_if_inning_ends": probability(we_if_end),
    })
