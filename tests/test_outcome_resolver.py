# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for stat-driven outcome resolution and play-by-play text.

Verifies:
1. Strikeout check, walk check and hit-quality roll in that order
2. Fatigue lowers pitcher ratings; approaches and strategies shift them
3. Repeated choices weaken their outcome modifiers
4. Defense glove averaging
5. Rolls are recorded when a trace collector is supplied
6. Narrative text for outcomes, runs and extra-base running
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from engine_trace import TraceCollector
from narrative import NarrativeContext, PlainNarrativeGenerator
from models import BatterApproach, BatterStats, Outcome, PitcherStats, PitchStrategy, Player, PlayerRole
from outcome_resolver import (
    AtBatModifiers,
    StatOutcomeResolver,
    combined_outcome_modifiers,
    defense_glove,
    effective_batter_stats,
    effective_pitcher_stats,
)
from random_provider import MockRandomProvider


def make_test_batter(power=55, contact=60, glove=50):
    return Player(player_id="b", name="Test Batter", role=PlayerRole.BATTER,
                  batting=BatterStats(power=power, contact=contact, glove=glove))


def make_test_pitcher(velocity=60, control=60, breaking=60):
    return Player(player_id="p", name="Test Pitcher", role=PlayerRole.STARTER,
                  pitching=PitcherStats(velocity=velocity, control=control, breaking=breaking))


def resolve(values, batter=None, modifiers=None, fatigue=0, trace=None):
    rng = MockRandomProvider(values)
    outcome = StatOutcomeResolver().resolve(
        batter or make_test_batter(), make_test_pitcher(), [make_test_batter()],
        fatigue, rng, modifiers or AtBatModifiers(), trace,
    )
    return outcome, rng.call_count


# -----------------------------------------------------------------------
# Step 1: Resolution order
# -----------------------------------------------------------------------

def test_step1_low_roll_strikes_out():
    assert resolve([0.0]) == (Outcome.STRIKEOUT, 1)


def test_step1_walk_after_missed_strikeout():
    assert resolve([0.99, 0.0]) == (Outcome.WALK, 2)


def test_step1_hit_roll_single():
    # net score clamps to -15, so 99 - 15 + 0.75 lands in single range
    assert resolve([0.99, 0.99, 0.99]) == (Outcome.SINGLE, 3)


def test_step1_weak_contact_out_type():
    assert resolve([0.99, 0.99, 0.1, 0.0]) == (Outcome.GROUNDOUT, 4)
    assert resolve([0.99, 0.99, 0.1, 0.6]) == (Outcome.FLYOUT, 4)


def test_step1_elite_hitter_homers():
    outcome, _ = resolve([0.99, 0.99, 0.99], batter=make_test_batter(power=100, contact=100))
    assert outcome == Outcome.HOMERUN


# -----------------------------------------------------------------------
# Step 2: Effective ratings
# -----------------------------------------------------------------------

def test_step2_fatigue_lowers_pitcher():
    fresh = effective_pitcher_stats(make_test_pitcher(), 0, AtBatModifiers())
    tired = effective_pitcher_stats(make_test_pitcher(), 5, AtBatModifiers())
    assert fresh["velocity"] == pytest.approx(60)
    assert tired["velocity"] == pytest.approx(36)


def test_step2_extra_fatigue_counts_as_innings():
    stats = effective_pitcher_stats(make_test_pitcher(), 2, AtBatModifiers(extra_fatigue=3.0))
    assert stats["control"] == pytest.approx(36)


def test_step2_strategy_modifies_pitcher():
    stats = effective_pitcher_stats(make_test_pitcher(), 0, AtBatModifiers(strategy=PitchStrategy.CHALLENGE))
    assert stats["velocity"] == pytest.approx(68)
    assert stats["control"] == pytest.approx(54)


def test_step2_approach_modifies_batter():
    stats = effective_batter_stats(make_test_batter(), AtBatModifiers(approach=BatterApproach.POWER))
    assert stats == {"power": 65, "contact": 52}


def test_step2_ratings_clamped():
    stats = effective_batter_stats(make_test_batter(power=98), AtBatModifiers(approach=BatterApproach.POWER))
    assert stats["power"] == 100


# -----------------------------------------------------------------------
# Step 3: Adaptation
# -----------------------------------------------------------------------

def test_step3_repeated_approach_weaker():
    full = combined_outcome_modifiers(AtBatModifiers(approach=BatterApproach.POWER))
    worn = combined_outcome_modifiers(AtBatModifiers(approach=BatterApproach.POWER, approach_adaptation=0.85))
    assert full.homerun_bonus == pytest.approx(8)
    assert worn.homerun_bonus == pytest.approx(6.8)


def test_step3_modifiers_combine():
    combined = combined_outcome_modifiers(
        AtBatModifiers(approach=BatterApproach.PATIENT, strategy=PitchStrategy.PAINT),
    )
    assert combined.walk_bonus == pytest.approx(2)
    assert combined.homerun_bonus == pytest.approx(-10)


# -----------------------------------------------------------------------
# Step 4: Defense
# -----------------------------------------------------------------------

def test_step4_defense_glove_average():
    fielders = [make_test_batter(glove=40), make_test_batter(glove=80)]
    assert defense_glove(fielders) == pytest.approx(60)


def test_step4_no_fielders_default():
    assert defense_glove([]) == 50.0


# -----------------------------------------------------------------------
# Step 5: Trace
# -----------------------------------------------------------------------

def test_step5_rolls_traced():
    trace = TraceCollector()
    resolve([0.99, 0.99, 0.1, 0.0], trace=trace)
    assert trace.roll_count == 4
    names = [r.name for r in trace._pending_rolls]
    assert names == ["strikeout_check", "walk_check", "hit_quality", "out_type"]


# -----------------------------------------------------------------------
# Step 6: Narrative
# -----------------------------------------------------------------------

def test_step6_home_run_text():
    text = PlainNarrativeGenerator().describe(Outcome.HOMERUN, NarrativeContext("Ann", "Bo", runs_scored=2))
    assert text == "Ann homers off Bo! 2 runs score."


def test_step6_single_run_and_extra_base():
    text = PlainNarrativeGenerator().describe(
        Outcome.SINGLE, NarrativeContext("Ann", "Bo", runs_scored=1, extra_base="scores from 2nd on the single"),
    )
    assert text == "Ann singles. Runner scores from 2nd on the single. 1 run scores."


def test_step6_every_outcome_described():
    narrator = PlainNarrativeGenerator()
    for outcome in Outcome:
        assert "Ann" in narrator.describe(outcome, NarrativeContext("Ann", "Bo"))
