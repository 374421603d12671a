# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Input validation layer for the analysis reports.

Provides a Pydantic input model per report and validate_tool_input, which
checks parameters before a report runs. Validation errors name the
parameter that failed and what was expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


@dataclass(frozen=True)
class ValidationErrorDetail:
    """One rejected report parameter."""
    parameter: str
    expected: str
    got: Any

    @classmethod
    def from_pydantic(cls, error: dict) -> ValidationErrorDetail:
        loc = ".".join(str(x) for x in error["loc"])
        got = error["input"] if error["type"] != "missing" else None
        return cls(loc, error["msg"], got)

    def to_dict(self) -> dict:
        return {
            "parameter": self.parameter,
            "expected": self.expected,
            "got": repr(self.got),
        }

    def __str__(self) -> str:
        return f"Parameter '{self.parameter}': {self.expected} (got {self.got!r})"


# ---------------------------------------------------------------------------
# Pydantic input models for each report
# ---------------------------------------------------------------------------


class GetWinProbabilityInput(BaseModel):
    """Input schema for get_win_probability."""
    inning: int = Field(ge=1, description="Current inning (1+).")
    half: str = Field(description="Half of the inning ('TOP' or 'BOTTOM').")
    outs: int = Field(ge=0, le=2, description="Number of outs (0, 1, or 2).")
    runner_on_first: bool = Field(description="Whether there is a runner on first base.")
    runner_on_second: bool = Field(description="Whether there is a runner on second base.")
    runner_on_third: bool = Field(description="Whether there is a runner on third base.")
    score_differential: int = Field(description="Batting team runs minus fielding team runs.")

    @field_validator("half")
    @classmethod
    def validate_half(cls, v: str) -> str:
        upper = v.upper() if isinstance(v, str) else ""
        if upper not in ("TOP", "BOTTOM"):
            raise ValueError("Must be 'TOP' or 'BOTTOM'")
        return upper


class GetRunExpectancyInput(BaseModel):
    """Input schema for get_run_expectancy."""
    runner_on_first: bool = Field(description="Whether there is a runner on first base.")
    runner_on_second: bool = Field(description="Whether there is a runner on second base.")
    runner_on_third: bool = Field(description="Whether there is a runner on third base.")
    outs: int = Field(ge=0, le=2, description="Number of outs (0, 1, or 2).")


class GetPitcherFatigueAssessmentInput(BaseModel):
    """Input schema for get_pitcher_fatigue_assessment."""
    innings_pitched: float = Field(ge=0, description="Innings pitched by the current pitcher.")
    extra_fatigue: float = Field(default=0.0, ge=0, description="Fatigue accumulated from patient batters and painting.")


TOOL_INPUT_MODELS: dict[str, type[BaseModel]] = {
    "get_win_probability": GetWinProbabilityInput,
    "get_run_expectancy": GetRunExpectancyInput,
    "get_pitcher_fatigue_assessment": GetPitcherFatigueAssessmentInput,
}


def validate_tool_input(tool_name: str, **kwargs: Any) -> tuple[bool, Optional[str]]:
    """Check report parameters before the report touches the engine.

    Returns (True, None) when valid, else (False, message) where the message
    names every rejected parameter.
    """
    model_cls = TOOL_INPUT_MODELS.get(tool_name)
    if model_cls is None:
        return False, f"Unknown tool: {tool_name}"

    try:
        model_cls(**kwargs)
        return True, None
    except ValidationError as e:
        return False, _format_validation_error(e)


def _format_validation_error(exc: ValidationError) -> str:
    """One clause per rejected parameter, joined with semicolons."""
    return "; ".join(str(ValidationErrorDetail.from_pydantic(e)) for e in exc.errors())
