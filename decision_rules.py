# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Adaptive decision engine for batter approaches and pitch strategies.

Each axis is a list of rules ordered by confidence. The first rule whose
predicate matches supplies a weighted set of choices; when nothing matches
a fixed default distribution is sampled instead. An adaptation override
then pushes the AI off a choice it has already repeated twice or more.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence

from models import BatterApproach, PitchStrategy
from random_provider import RandomProvider

Weights = tuple[tuple[str, float], ...]

SWITCH_PROBABILITY_REPEAT_2 = 0.80
SWITCH_PROBABILITY_REPEAT_3 = 0.95

BATTER_DEFAULT_WEIGHTS: Weights = (
    (BatterApproach.CONTACT.value, 0.45),
    (BatterApproach.POWER.value, 0.30),
    (BatterApproach.PATIENT.value, 0.25),
)
PITCHER_DEFAULT_WEIGHTS: Weights = (
    (PitchStrategy.CHALLENGE.value, 0.40),
    (PitchStrategy.FINESSE.value, 0.35),
    (PitchStrategy.PAINT.value, 0.25),
)


# ---------------------------------------------------------------------------
# Context and adaptation counters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecisionContext:
    """Game situation from the deciding side's point of view."""
    outs: int = 0
    bases: tuple[bool, bool, bool] = (False, False, False)
    my_score: int = 0
    opponent_score: int = 0
    inning: int = 1
    batter_power: float = 50.0
    batter_contact: float = 50.0
    pitcher_fatigue: float = 0.0  # 0-100
    last_decision: Optional[str] = None
    consecutive_count: int = 0

    @property
    def score_diff(self) -> int:
        return self.my_score - self.opponent_score


@dataclass(frozen=True)
class Adaptation:
    """Consecutive-repeat tracking for one decision axis."""
    last: Optional[str] = None
    count: int = 0


def update_adaptation(
    adaptation: Adaptation, decision: Optional[BatterApproach | PitchStrategy | str],
) -> Adaptation:
    """Count consecutive uses of the same decision. No decision leaves it unchanged."""
    if decision is None:
        return adaptation
    value = getattr(decision, "value", decision)
    if value == adaptation.last:
        return replace(adaptation, count=adaptation.count + 1)
    return Adaptation(last=value, count=1)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecisionRule:
    name: str
    confidence: float
    predicate: Callable[[DecisionContext], bool] = field(compare=False)
    weights: Weights

    def evaluate(self, ctx: DecisionContext) -> Optional[Weights]:
        return self.weights if self.predicate(ctx) else None


def sample_weights(weights: Weights, rng: RandomProvider) -> str:
    """Pick one choice. A single-choice set consumes no random draw."""
    if len(weights) == 1:
        return weights[0][0]
    roll = rng.random()
    cumulative = 0.0
    for choice, weight in weights:
        cumulative += weight
        if roll < cumulative:
            return choice
    return weights[-1][0]


def _sorted(rules: Sequence[DecisionRule]) -> tuple[DecisionRule, ...]:
    # sorted() is stable, so equal confidence keeps list order
    return tuple(sorted(rules, key=lambda r: -r.confidence))


BATTER_RULES: tuple[DecisionRule, ...] = _sorted([
    DecisionRule(
        "runner_on_third", 0.95,
        lambda c: c.bases[2] and c.outs < 2,
        (("contact", 0.8), ("power", 0.2)),
    ),
    DecisionRule(
        "down_4_plus_anytime", 0.90,
        lambda c: c.score_diff <= -4,
        (("power", 0.6), ("contact", 0.4)),
    ),
    DecisionRule(
        "down_3_plus_late", 0.85,
        lambda c: c.inning >= 7 and c.score_diff <= -3,
        (("power", 0.7), ("contact", 0.3)),
    ),
    DecisionRule(
        "tired_pitcher", 0.80,
        lambda c: c.pitcher_fatigue >= 60,
        (("patient", 0.5), ("contact", 0.5)),
    ),
    DecisionRule(
        "bases_loaded", 0.80,
        lambda c: all(c.bases),
        (("power", 0.6), ("contact", 0.4)),
    ),
    DecisionRule(
        "two_outs_empty", 0.75,
        lambda c: c.outs == 2 and not any(c.bases),
        (("patient", 0.4), ("contact", 0.35), ("power", 0.25)),
    ),
    DecisionRule(
        "up_comfortably", 0.75,
        lambda c: c.score_diff >= 3,
        (("contact", 0.6), ("patient", 0.4)),
    ),
    DecisionRule(
        "high_power_batter", 0.70,
        lambda c: c.batter_power >= 75,
        (("contact", 1.0),),
    ),
])

PITCHER_RULES: tuple[DecisionRule, ...] = _sorted([
    DecisionRule(
        "bases_loaded", 0.95,
        lambda c: all(c.bases),
        (("paint", 0.6), ("finesse", 0.4)),
    ),
    DecisionRule(
        "high_power_batter", 0.90,
        lambda c: c.batter_power >= 70,
        (("finesse", 0.5), ("paint", 0.3), ("challenge", 0.2)),
    ),
    DecisionRule(
        "high_contact_batter", 0.85,
        lambda c: c.batter_contact >= 70,
        (("challenge", 0.5), ("finesse", 0.5)),
    ),
    DecisionRule(
        "runners_in_scoring_position", 0.80,
        lambda c: c.bases[1] or c.bases[2],
        (("paint", 0.4), ("finesse", 0.35), ("challenge", 0.25)),
    ),
    DecisionRule(
        "ahead_comfortably", 0.75,
        lambda c: c.score_diff >= 3,
        (("challenge", 0.6), ("finesse", 0.4)),
    ),
    DecisionRule(
        "behind_significantly", 0.70,
        lambda c: c.score_diff <= -3,
        (("finesse", 1.0),),
    ),
    DecisionRule(
        "pitcher_tired", 0.70,
        lambda c: c.pitcher_fatigue >= 70,
        (("finesse", 1.0),),
    ),
])


def first_matching_rule(
    rules: Sequence[DecisionRule], ctx: DecisionContext,
) -> Optional[DecisionRule]:
    for rule in rules:
        if rule.evaluate(ctx) is not None:
            return rule
    return None


# ---------------------------------------------------------------------------
# Adaptation override
# ---------------------------------------------------------------------------

def apply_adaptation_override(
    choice: str,
    ctx: DecisionContext,
    options: Sequence[str],
    rng: RandomProvider,
) -> str:
    """Re-roll away from a choice already repeated twice or more.

    Switches with probability 0.80 at a repeat count of 2 and 0.95 at 3+,
    picking uniformly among the remaining options.
    """
    if ctx.last_decision is None or choice != ctx.last_decision or ctx.consecutive_count < 2:
        return choice
    switch = SWITCH_PROBABILITY_REPEAT_3 if ctx.consecutive_count >= 3 else SWITCH_PROBABILITY_REPEAT_2
    if rng.random() < switch:
        alternatives = [o for o in options if o != choice]
        return alternatives[int(rng.random() * len(alternatives))]
    return choice


def _decide(
    rules: Sequence[DecisionRule],
    defaults: Weights,
    options: Sequence[str],
    ctx: DecisionContext,
    rng: RandomProvider,
) -> str:
    rule = first_matching_rule(rules, ctx)
    weights = rule.weights if rule is not None else defaults
    choice = sample_weights(weights, rng)
    return apply_adaptation_override(choice, ctx, options, rng)


def decide_batter_approach(ctx: DecisionContext, rng: RandomProvider) -> BatterApproach:
    options = [a.value for a in BatterApproach]
    return BatterApproach(_decide(BATTER_RULES, BATTER_DEFAULT_WEIGHTS, options, ctx, rng))


def decide_pitch_strategy(ctx: DecisionContext, rng: RandomProvider) -> PitchStrategy:
    options = [s.value for s in PitchStrategy]
    return PitchStrategy(_decide(PITCHER_RULES, PITCHER_DEFAULT_WEIGHTS, options, ctx, rng))
