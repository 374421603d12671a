# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Leverage gating for human-in-the-loop pauses.

The threshold tightens as the game goes on, so late close games surface
more decisions to the human while early routine play auto-advances.
"""

from __future__ import annotations

from config import DEFAULT_CONFIG, EngineConfig
from match_state import MatchState
from win_expectancy import leverage_index, win_expectancy


def leverage_threshold(inning: int, config: EngineConfig = DEFAULT_CONFIG) -> float:
    if inning >= 8:
        return config.late_leverage_threshold
    if inning >= 6:
        return config.middle_leverage_threshold
    return config.early_leverage_threshold


def compute_leverage_index(state: MatchState) -> float:
    """LI of the next plate appearance. Zero once the game is over."""
    if state.is_complete or state.outs >= 3:
        return 0.0
    return leverage_index(state.inning, state.is_top, state.outs, state.bases, state.run_differential)


def is_high_leverage(state: MatchState) -> bool:
    if state.is_complete:
        return False
    return compute_leverage_index(state) >= leverage_threshold(state.inning, state.config)


def current_win_expectancy(state: MatchState) -> float:
    """P(my team wins) from the current state."""
    if state.is_complete:
        if state.my.runs > state.opponent.runs:
            return 1.0
        if state.my.runs < state.opponent.runs:
            return 0.0
        return 0.5
    we = win_expectancy(state.inning, state.is_top, state.outs, state.bases, state.run_differential)
    return 1.0 - we if state.is_top else we
