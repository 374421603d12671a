# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Match analysis reports -- structured JSON views of engine state."""

from tools.get_run_expectancy import get_run_expectancy
from tools.get_win_probability import get_win_probability
from tools.get_pitcher_fatigue_assessment import get_pitcher_fatigue_assessment

ALL_TOOLS = [
    get_run_expectancy,
    get_win_probability,
    get_pitcher_fatigue_assessment,
]
