# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Centralized engine configuration and environment overrides."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

LOG_LEVEL_ENV = "MATCH_ENGINE_LOG_LEVEL"
MAX_INNINGS_ENV = "MATCH_ENGINE_MAX_INNINGS"
AT_BAT_CAP_ENV = "MATCH_ENGINE_AT_BAT_CAP_MULTIPLIER"


class EngineConfig(BaseModel):
    """Tunable constants for the match state machine."""
    model_config = ConfigDict(frozen=True)

    regulation_innings: int = Field(default=9, ge=1)
    max_innings: int = Field(default=18, ge=1, description="Hard stop for extra innings")
    at_bat_cap_multiplier: int = Field(
        default=3, ge=1, description="Max at-bats per half-inning = lineup size x this",
    )
    first_reliever_inning: int = Field(default=5, ge=1)
    second_reliever_inning: int = Field(default=7, ge=1)
    patient_fatigue_effect: float = Field(default=0.15, ge=0.0)
    paint_fatigue_cost: float = Field(default=0.2, ge=0.0)
    early_leverage_threshold: float = Field(default=2.0, gt=0.0, description="Innings 1-5")
    middle_leverage_threshold: float = Field(default=1.5, gt=0.0, description="Innings 6-7")
    late_leverage_threshold: float = Field(default=1.2, gt=0.0, description="Innings 8+")


DEFAULT_CONFIG = EngineConfig()


def load_config() -> EngineConfig:
    """Build the engine config from defaults plus environment overrides."""
    overrides = {}
    max_innings = os.environ.get(MAX_INNINGS_ENV, "")
    if max_innings:
        overrides["max_innings"] = int(max_innings)
    cap = os.environ.get(AT_BAT_CAP_ENV, "")
    if cap:
        overrides["at_bat_cap_multiplier"] = int(cap)
    return EngineConfig(**overrides)


def get_log_level() -> str:
    """Return the configured log level name, or WARNING if not set."""
    return os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=getattr(logging, level or get_log_level(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
