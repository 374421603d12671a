# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitcher workload: fatigue tiers, strategy fatigue costs and bullpen rotation."""

from __future__ import annotations

from typing import Optional

from config import DEFAULT_CONFIG, EngineConfig
from models import BatterApproach, FatigueTier, PitchStrategy, Player, Roster

# Stat effectiveness lost per (effective) inning pitched, and its floor
EFFECTIVENESS_LOSS_PER_INNING = 0.08
MINIMUM_EFFECTIVENESS = 0.55


def fatigue_level(innings: float, extra_fatigue: float) -> FatigueTier:
    """Coarse fatigue tier from innings pitched plus accumulated extra fatigue."""
    if innings >= 6 or extra_fatigue >= 1.5:
        return FatigueTier.GASSED
    if innings < 4 and extra_fatigue < 0.5:
        return FatigueTier.FRESH
    return FatigueTier.TIRED


def fatigue_effectiveness(effective_innings: float) -> float:
    """Multiplier applied to pitcher ratings after effective_innings of work."""
    return max(MINIMUM_EFFECTIVENESS, 1.0 - effective_innings * EFFECTIVENESS_LOSS_PER_INNING)


def pitcher_fatigue_score(innings: float, extra_fatigue: float) -> float:
    """0-100 fatigue score used by the decision rules."""
    return min(100.0, innings * 10 + extra_fatigue * 20)


def fatigue_deltas(
    approach: Optional[BatterApproach],
    strategy: Optional[PitchStrategy],
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[float, float]:
    """Extra fatigue from one at-bat's choices.

    Returns (added to the pitcher facing a patient batter, added to a pitcher
    who chose to paint). Both land on the fielding side's pitcher.
    """
    patient = config.patient_fatigue_effect if approach == BatterApproach.PATIENT else 0.0
    paint = config.paint_fatigue_cost if strategy == PitchStrategy.PAINT else 0.0
    return patient, paint


def resolve_next_pitcher(
    roster: Roster,
    current: Optional[Player],
    innings_completed: int,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[Player]:
    """Starter -> first reliever -> second reliever by innings fielded.

    A reliever only enters when the roster has that many pitchers.
    """
    pitchers = roster.pitchers()
    if len(pitchers) <= 1:
        return current
    if innings_completed >= config.second_reliever_inning and len(pitchers) >= 3:
        return pitchers[2]
    if innings_completed >= config.first_reliever_inning:
        return pitchers[1]
    return current
