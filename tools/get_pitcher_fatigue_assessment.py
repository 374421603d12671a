# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Assesses a pitcher's fatigue from innings pitched and extra fatigue.

Reports the tier the engine uses (fresh, tired, gassed), the 0-100 score
the decision rules read, and the multiplier applied to the pitcher's
ratings when resolving plate appearances.
"""

from __future__ import annotations

from fatigue import fatigue_effectiveness, fatigue_level, pitcher_fatigue_score
from tools.response import invalid_parameter, probability, success_response
from tools.validation import validate_tool_input

TOOL_NAME = "get_pitcher_fatigue_assessment"


def get_pitcher_fatigue_assessment(innings_pitched: float, extra_fatigue: float = 0.0) -> str:
    """Assesses pitcher fatigue for the current outing.

    Args:
        innings_pitched: Innings pitched by the current pitcher.
        extra_fatigue: Fatigue accumulated from patient batters and painting.
    Returns:
        JSON string with fatigue assessment.
    """
    ok, message = validate_tool_input(
        TOOL_NAME, innings_pitched=innings_pitched, extra_fatigue=extra_fatigue,
    )
    if not ok:
        return invalid_parameter(TOOL_NAME, message)

    tier = fatigue_level(innings_pitched, extra_fatigue)
    return success_response(TOOL_NAME, {
        "innings_pitched": innings_pitched,
        "extra_fatigue": extra_fatigue,
        "fatigue_level": tier.value,
        "fatigue_score": round(pitcher_fatigue_score(innings_pitched, extra_fatigue), 1),
        "effectiveness": probability(fatigue_effectiveness(innings_pitched + extra_fatigue)),
    })
