# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Outcome resolution for a single at-bat.

The state machine only depends on the OutcomeResolver protocol. The
stat-driven resolver below is the default: strikeout check, walk check,
then a hit-quality roll shifted by the batter/pitcher/defense matchup.
Every random draw comes from the injected RandomProvider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from approach_config import BATTER_APPROACHES, OutcomeModifiers, PITCH_STRATEGIES
from base_state import DEFAULT_DEFENSE_GLOVE
from fatigue import fatigue_effectiveness
from models import BatterApproach, Outcome, PitchStrategy, Player
from random_provider import RandomProvider

# ---------------------------------------------------------------------------
# Tuning constants
# ---------------------------------------------------------------------------

STRIKEOUT_DIVISOR = 1.8
STRIKEOUT_CONTROL_WEIGHT = 0.4
WALK_WILDNESS_DIVISOR = 12.0
WALK_DISCIPLINE_DIVISOR = 20.0
WALK_DISCIPLINE_THRESHOLD = 40.0

BATTER_SCORE_MULTIPLIER = 1.2
PITCHER_SCORE_MULTIPLIER = 0.9
DEFENSE_SCORE_MULTIPLIER = 0.8
POWER_HIT_BONUS_WEIGHT = 0.15
MAX_NET_SCORE = 15.0
MIN_NET_SCORE = -15.0

HOMERUN_THRESHOLD = 98.0
TRIPLE_THRESHOLD = 95.0
DOUBLE_THRESHOLD = 85.0
SINGLE_THRESHOLD = 55.0

OUT_TYPE_WEIGHTS: tuple[tuple[Outcome, float], ...] = (
    (Outcome.GROUNDOUT, 0.45),
    (Outcome.FLYOUT, 0.35),
    (Outcome.LINEOUT, 0.12),
    (Outcome.POPOUT, 0.08),
)

_DEFAULT_BATTING = {"power": 30.0, "contact": 30.0}
_DEFAULT_PITCHING = {"velocity": 30.0, "control": 30.0, "breaking": 30.0}


@dataclass(frozen=True)
class AtBatModifiers:
    """Per-at-bat inputs beyond the two players and the defense."""
    approach: Optional[BatterApproach] = None
    strategy: Optional[PitchStrategy] = None
    approach_adaptation: float = 1.0
    strategy_adaptation: float = 1.0
    extra_fatigue: float = 0.0
    ability_ids: tuple[str, ...] = ()
    aim_cell: Optional[int] = None


class OutcomeResolver(Protocol):
    def resolve(
        self,
        batter: Player,
        pitcher: Player,
        defense: Sequence[Player],
        fatigue_innings: float,
        rng: RandomProvider,
        modifiers: AtBatModifiers,
        trace=None,
    ) -> Outcome: ...


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def defense_glove(defense: Sequence[Player]) -> float:
    """Mean glove rating of the fielders, 50 when there are none."""
    gloves = [p.batting.glove for p in defense if p.is_batter and p.batting is not None]
    if not gloves:
        return DEFAULT_DEFENSE_GLOVE
    return sum(gloves) / len(gloves)


def effective_batter_stats(batter: Player, modifiers: AtBatModifiers) -> dict[str, float]:
    stats = (
        {"power": batter.batting.power, "contact": batter.batting.contact}
        if batter.batting is not None else dict(_DEFAULT_BATTING)
    )
    if modifiers.approach is not None:
        config = BATTER_APPROACHES[modifiers.approach]
        for stat in stats:
            delta = config.stat_modifiers.get(stat, 0.0)
            stats[stat] = max(1.0, stats[stat] + round(delta * modifiers.approach_adaptation))
    return {k: _clamp(v) for k, v in stats.items()}


def effective_pitcher_stats(
    pitcher: Player, fatigue_innings: float, modifiers: AtBatModifiers,
) -> dict[str, float]:
    if pitcher.pitching is not None:
        base = {
            "velocity": pitcher.pitching.velocity,
            "control": pitcher.pitching.control,
            "breaking": pitcher.pitching.breaking,
        }
    else:
        base = dict(_DEFAULT_PITCHING)
    effectiveness = fatigue_effectiveness(fatigue_innings + modifiers.extra_fatigue)
    stats = {k: v * effectiveness for k, v in base.items()}
    if modifiers.strategy is not None:
        config = PITCH_STRATEGIES[modifiers.strategy]
        for stat in stats:
            delta = config.stat_modifiers.get(stat, 0.0)
            stats[stat] = max(1.0, stats[stat] + round(delta * modifiers.strategy_adaptation))
    return {k: _clamp(v) for k, v in stats.items()}


def combined_outcome_modifiers(modifiers: AtBatModifiers) -> OutcomeModifiers:
    """Approach + strategy outcome modifiers, each scaled by its adaptation multiplier."""
    parts = []
    if modifiers.approach is not None:
        parts.append(BATTER_APPROACHES[modifiers.approach].outcome_modifiers.scaled(modifiers.approach_adaptation))
    if modifiers.strategy is not None:
        parts.append(PITCH_STRATEGIES[modifiers.strategy].outcome_modifiers.scaled(modifiers.strategy_adaptation))
    return OutcomeModifiers(
        strikeout_bonus=sum(p.strikeout_bonus for p in parts),
        walk_bonus=sum(p.walk_bonus for p in parts),
        hit_bonus=sum(p.hit_bonus for p in parts),
        homerun_bonus=sum(p.homerun_bonus for p in parts),
    )


def strikeout_chance(velocity: float, breaking: float, control: float, contact: float) -> float:
    return max(0.0, (velocity + breaking + control * STRIKEOUT_CONTROL_WEIGHT - contact) / STRIKEOUT_DIVISOR)


def walk_chance(contact: float, control: float) -> float:
    """Pitcher wildness plus batter discipline."""
    wildness = (100 - control) / WALK_WILDNESS_DIVISOR
    discipline = max(0.0, contact - WALK_DISCIPLINE_THRESHOLD) / WALK_DISCIPLINE_DIVISOR
    return wildness + discipline


def net_score(power: float, contact: float, velocity: float, breaking: float, control: float, glove: float) -> float:
    batter_score = (power + contact) * BATTER_SCORE_MULTIPLIER
    pitcher_score = (velocity + breaking + control) * PITCHER_SCORE_MULTIPLIER
    defense_score = glove * DEFENSE_SCORE_MULTIPLIER
    return _clamp(batter_score - pitcher_score - defense_score, MIN_NET_SCORE, MAX_NET_SCORE)


def out_type(rng: RandomProvider, trace=None) -> Outcome:
    roll = rng.random()
    if trace is not None:
        trace.log_roll("out_type", roll)
    cumulative = 0.0
    for outcome, weight in OUT_TYPE_WEIGHTS:
        cumulative += weight
        if roll < cumulative:
            return outcome
    return OUT_TYPE_WEIGHTS[-1][0]


def hit_outcome(hit_roll: float, rng: RandomProvider, trace=None) -> Outcome:
    if hit_roll > HOMERUN_THRESHOLD:
        return Outcome.HOMERUN
    if hit_roll > TRIPLE_THRESHOLD:
        return Outcome.TRIPLE
    if hit_roll > DOUBLE_THRESHOLD:
        return Outcome.DOUBLE
    if hit_roll > SINGLE_THRESHOLD:
        return Outcome.SINGLE
    return out_type(rng, trace)


class StatOutcomeResolver:
    """Default resolver driven by player ratings.

    Ability activations and the aim cell are accepted but not modeled here;
    resolvers that implement abilities read them from the modifiers.
    """

    def resolve(
        self,
        batter: Player,
        pitcher: Player,
        defense: Sequence[Player],
        fatigue_innings: float,
        rng: RandomProvider,
        modifiers: AtBatModifiers,
        trace=None,
    ) -> Outcome:
        b = effective_batter_stats(batter, modifiers)
        p = effective_pitcher_stats(pitcher, fatigue_innings, modifiers)
        glove = defense_glove(defense)
        bonus = combined_outcome_modifiers(modifiers)

        k_chance = max(0.0, strikeout_chance(p["velocity"], p["breaking"], p["control"], b["contact"])
                       + bonus.strikeout_bonus)
        k_raw = rng.random()
        if trace is not None:
            trace.log_roll("strikeout_check", k_raw, k_raw * 100, k_chance, k_raw * 100 < k_chance)
        if k_raw * 100 < k_chance:
            return Outcome.STRIKEOUT

        bb_chance = max(0.0, walk_chance(b["contact"], p["control"]) + bonus.walk_bonus)
        bb_raw = rng.random()
        if trace is not None:
            trace.log_roll("walk_check", bb_raw, bb_raw * 100, bb_chance, bb_raw * 100 < bb_chance)
        if bb_raw * 100 < bb_chance:
            return Outcome.WALK

        score = net_score(b["power"], b["contact"], p["velocity"], p["breaking"], p["control"], glove)
        hit_raw = rng.random()
        hit_roll = (
            hit_raw * 100 + score + bonus.hit_bonus
            + (b["power"] - 50) * POWER_HIT_BONUS_WEIGHT
            + bonus.homerun_bonus
        )
        if trace is not None:
            trace.log_roll("hit_quality", hit_raw, hit_roll, SINGLE_THRESHOLD, hit_roll > SINGLE_THRESHOLD)
        return hit_outcome(hit_roll, rng, trace)
