# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Stat and outcome modifiers for batter approaches and pitch strategies.

Positive outcome modifiers favor the named outcome (percentage points on
the strikeout / walk checks, roll points on hit quality and home runs).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models import BatterApproach, PitchStrategy


class OutcomeModifiers(BaseModel):
    model_config = ConfigDict(frozen=True)

    strikeout_bonus: float = 0.0
    walk_bonus: float = 0.0
    hit_bonus: float = 0.0
    homerun_bonus: float = 0.0

    def scaled(self, multiplier: float) -> OutcomeModifiers:
        return OutcomeModifiers(
            strikeout_bonus=self.strikeout_bonus * multiplier,
            walk_bonus=self.walk_bonus * multiplier,
            hit_bonus=self.hit_bonus * multiplier,
            homerun_bonus=self.homerun_bonus * multiplier,
        )


class ApproachConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    stat_modifiers: dict[str, float] = Field(default_factory=dict)
    outcome_modifiers: OutcomeModifiers = OutcomeModifiers()


BATTER_APPROACHES: dict[BatterApproach, ApproachConfig] = {
    BatterApproach.POWER: ApproachConfig(
        label="Power Swing",
        description="Sell out for extra bases. More homers, more strikeouts.",
        stat_modifiers={"power": 10, "contact": -8},
        outcome_modifiers=OutcomeModifiers(homerun_bonus=8, strikeout_bonus=5, hit_bonus=-3),
    ),
    BatterApproach.CONTACT: ApproachConfig(
        label="Contact",
        description="Shorten up and put it in play.",
        stat_modifiers={"contact": 8, "power": -6},
        outcome_modifiers=OutcomeModifiers(strikeout_bonus=-5, homerun_bonus=-4, hit_bonus=3),
    ),
    BatterApproach.PATIENT: ApproachConfig(
        label="Patient",
        description="Work the count. Draws walks and tires the pitcher.",
        stat_modifiers={"contact": 3, "power": -6},
        outcome_modifiers=OutcomeModifiers(walk_bonus=5, strikeout_bonus=-3, homerun_bonus=-6),
    ),
}

PITCH_STRATEGIES: dict[PitchStrategy, ApproachConfig] = {
    PitchStrategy.CHALLENGE: ApproachConfig(
        label="Challenge",
        description="Attack the zone with velocity.",
        stat_modifiers={"velocity": 8, "control": -6},
        outcome_modifiers=OutcomeModifiers(strikeout_bonus=4, homerun_bonus=4),
    ),
    PitchStrategy.FINESSE: ApproachConfig(
        label="Finesse",
        description="Spin and movement over velocity.",
        stat_modifiers={"breaking": 8, "velocity": -6},
        outcome_modifiers=OutcomeModifiers(hit_bonus=-5, strikeout_bonus=-3, homerun_bonus=-5),
    ),
    PitchStrategy.PAINT: ApproachConfig(
        label="Paint the Corners",
        description="Nibble at the edges. Costs the pitcher extra fatigue.",
        stat_modifiers={"control": 8, "velocity": -4},
        outcome_modifiers=OutcomeModifiers(walk_bonus=-3, homerun_bonus=-4, strikeout_bonus=-1),
    ),
}

# Effectiveness of a repeated choice, indexed by consecutive uses - 1
ADAPTATION_PENALTY_SCALE: tuple[float, ...] = (1.0, 1.0, 0.85, 0.70, 0.55)


def adaptation_multiplier(consecutive_count: int) -> float:
    idx = min(max(consecutive_count - 1, 0), len(ADAPTATION_PENALTY_SCALE) - 1)
    return ADAPTATION_PENALTY_SCALE[idx]
