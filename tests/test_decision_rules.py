# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for the adaptive decision engine.

Verifies:
1. Rules are ordered by confidence and the first match wins
2. Situational tendencies (runner on 3rd, big deficits, bases loaded)
3. Single-choice rules consume no random draws
4. Adaptation override steers away from repeated choices
5. Repeat counters and effectiveness penalties
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from approach_config import adaptation_multiplier
from decision_rules import (
    BATTER_RULES,
    PITCHER_RULES,
    Adaptation,
    DecisionContext,
    apply_adaptation_override,
    decide_batter_approach,
    decide_pitch_strategy,
    first_matching_rule,
    sample_weights,
    update_adaptation,
)
from models import BatterApproach, PitchStrategy
from random_provider import MockRandomProvider, SeededRandomProvider


def count_batter_choices(ctx, trials, seed=2024):
    rng = SeededRandomProvider(seed)
    counts = {a: 0 for a in BatterApproach}
    for _ in range(trials):
        counts[decide_batter_approach(ctx, rng)] += 1
    return counts


# -----------------------------------------------------------------------
# Step 1: Rule ordering
# -----------------------------------------------------------------------

@pytest.mark.parametrize("rules", [BATTER_RULES, PITCHER_RULES])
def test_step1_rules_sorted_by_confidence(rules):
    confidences = [r.confidence for r in rules]
    assert confidences == sorted(confidences, reverse=True)


def test_step1_highest_confidence_match_wins():
    ctx = DecisionContext(bases=(False, False, True), outs=0, my_score=0, opponent_score=6)
    assert first_matching_rule(BATTER_RULES, ctx).name == "runner_on_third"


def test_step1_no_match_returns_none():
    assert first_matching_rule(BATTER_RULES, DecisionContext()) is None


def test_step1_sample_weights_cumulative():
    weights = (("a", 0.5), ("b", 0.5))
    assert sample_weights(weights, MockRandomProvider([0.2])) == "a"
    assert sample_weights(weights, MockRandomProvider([0.6])) == "b"


# -----------------------------------------------------------------------
# Step 2: Situational tendencies
# -----------------------------------------------------------------------

def test_step2_runner_on_third_favors_contact():
    ctx = DecisionContext(bases=(False, False, True), outs=1)
    counts = count_batter_choices(ctx, 100)
    assert 65 <= counts[BatterApproach.CONTACT] <= 95
    assert counts[BatterApproach.PATIENT] == 0


def test_step2_big_deficit_favors_power():
    ctx = DecisionContext(inning=3, my_score=1, opponent_score=6)
    counts = count_batter_choices(ctx, 1000)
    assert counts[BatterApproach.POWER] >= 550
    assert counts[BatterApproach.PATIENT] == 0


EXPECTED_BATTER_WEIGHTS = {
    "runner_on_third": {"contact": 0.8, "power": 0.2},
    "down_4_plus_anytime": {"power": 0.6, "contact": 0.4},
    "down_3_plus_late": {"power": 0.7, "contact": 0.3},
    "tired_pitcher": {"patient": 0.5, "contact": 0.5},
    "bases_loaded": {"power": 0.6, "contact": 0.4},
    "two_outs_empty": {"patient": 0.4, "contact": 0.35, "power": 0.25},
    "up_comfortably": {"contact": 0.6, "patient": 0.4},
    "high_power_batter": {"contact": 1.0},
}

EXPECTED_PITCHER_WEIGHTS = {
    "bases_loaded": {"paint": 0.6, "finesse": 0.4},
    "high_power_batter": {"finesse": 0.5, "paint": 0.3, "challenge": 0.2},
    "high_contact_batter": {"challenge": 0.5, "finesse": 0.5},
    "runners_in_scoring_position": {"paint": 0.4, "finesse": 0.35, "challenge": 0.25},
    "ahead_comfortably": {"challenge": 0.6, "finesse": 0.4},
    "behind_significantly": {"finesse": 1.0},
    "pitcher_tired": {"finesse": 1.0},
}


@pytest.mark.parametrize("rules,expected", [
    (BATTER_RULES, EXPECTED_BATTER_WEIGHTS),
    (PITCHER_RULES, EXPECTED_PITCHER_WEIGHTS),
])
def test_step2_rule_weight_tables(rules, expected):
    assert {r.name: dict(r.weights) for r in rules} == expected


def test_step2_rule_weights_sum_to_one():
    for rule in BATTER_RULES + PITCHER_RULES:
        assert sum(w for _, w in rule.weights) == pytest.approx(1.0), rule.name


def test_step2_deficit_of_five_power_share():
    ctx = DecisionContext(inning=3, my_score=0, opponent_score=5)
    counts = count_batter_choices(ctx, 1000)
    assert 540 <= counts[BatterApproach.POWER] <= 660
    assert counts[BatterApproach.POWER] + counts[BatterApproach.CONTACT] == 1000


def test_step2_pitcher_bases_loaded_avoids_challenge():
    ctx = DecisionContext(bases=(True, True, True))
    rng = SeededRandomProvider(8)
    choices = {decide_pitch_strategy(ctx, rng) for _ in range(100)}
    assert PitchStrategy.CHALLENGE not in choices
    assert choices <= {PitchStrategy.PAINT, PitchStrategy.FINESSE}


def test_step2_neutral_context_uses_all_options():
    counts = count_batter_choices(DecisionContext(), 300)
    assert all(c > 0 for c in counts.values())


# -----------------------------------------------------------------------
# Step 3: Deterministic rules
# -----------------------------------------------------------------------

def test_step3_power_hitter_gets_contact_without_draw():
    rng = MockRandomProvider([0.99])
    ctx = DecisionContext(batter_power=80)
    assert decide_batter_approach(ctx, rng) == BatterApproach.CONTACT
    assert rng.call_count == 0


def test_step3_trailing_pitcher_goes_finesse():
    rng = MockRandomProvider([0.0])
    ctx = DecisionContext(my_score=0, opponent_score=4)
    assert decide_pitch_strategy(ctx, rng) == PitchStrategy.FINESSE
    assert rng.call_count == 0


# -----------------------------------------------------------------------
# Step 4: Adaptation override
# -----------------------------------------------------------------------

def test_step4_third_repeat_rarely_kept():
    ctx = DecisionContext(last_decision="contact", consecutive_count=3)
    counts = count_batter_choices(ctx, 1000)
    assert counts[BatterApproach.CONTACT] < 50


def test_step4_second_repeat_mostly_switched():
    ctx = DecisionContext(last_decision="power", consecutive_count=2)
    counts = count_batter_choices(ctx, 100)
    assert counts[BatterApproach.POWER] < 20


def test_step4_first_use_not_overridden():
    ctx = DecisionContext(last_decision="power", consecutive_count=1)
    counts = count_batter_choices(ctx, 100)
    assert counts[BatterApproach.POWER] > 15


def test_step4_override_picks_remaining_option():
    ctx = DecisionContext(last_decision="contact", consecutive_count=3)
    # switch roll 0.1 < 0.95, then index roll 0.9 -> second alternative
    choice = apply_adaptation_override("contact", ctx, ["power", "contact", "patient"], MockRandomProvider([0.1, 0.9]))
    assert choice == "patient"


def test_step4_override_can_keep_choice():
    ctx = DecisionContext(last_decision="contact", consecutive_count=2)
    choice = apply_adaptation_override("contact", ctx, ["power", "contact", "patient"], MockRandomProvider([0.85]))
    assert choice == "contact"


# -----------------------------------------------------------------------
# Step 5: Repeat counters
# -----------------------------------------------------------------------

def test_step5_update_adaptation_counts_repeats():
    a = update_adaptation(Adaptation(), BatterApproach.POWER)
    a = update_adaptation(a, BatterApproach.POWER)
    assert a == Adaptation(last="power", count=2)
    a = update_adaptation(a, BatterApproach.CONTACT)
    assert a == Adaptation(last="contact", count=1)


def test_step5_enum_and_value_count_together():
    a = update_adaptation(Adaptation(), PitchStrategy.PAINT)
    a = update_adaptation(a, "paint")
    assert a == Adaptation(last="paint", count=2)
    assert type(a.last) is str


def test_step5_no_decision_leaves_counter():
    a = Adaptation(last="paint", count=2)
    assert update_adaptation(a, None) == a


def test_step5_adaptation_multiplier_scale():
    assert adaptation_multiplier(1) == 1.0
    assert adaptation_multiplier(2) == 1.0
    assert adaptation_multiplier(3) == pytest.approx(0.85)
    assert adaptation_multiplier(5) == pytest.approx(0.55)
    assert adaptation_multiplier(9) == pytest.approx(0.55)
