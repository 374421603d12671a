# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for pitcher fatigue and bullpen rotation.

Verifies:
1. Fatigue tiers from innings pitched and extra fatigue
2. Effectiveness multiplier declines per inning down to its floor
3. Patient batters and painting add extra fatigue
4. Starter -> first reliever -> second reliever by innings fielded
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import EngineConfig
from fatigue import (
    fatigue_deltas,
    fatigue_effectiveness,
    fatigue_level,
    pitcher_fatigue_score,
    resolve_next_pitcher,
)
from models import (
    BatterApproach,
    FatigueTier,
    PitcherStats,
    PitchStrategy,
    Player,
    PlayerRole,
    Roster,
)


def make_test_pitching_staff(count=3):
    players = []
    for i in range(count):
        role = PlayerRole.STARTER if i == 0 else PlayerRole.RELIEVER
        players.append(Player(
            player_id=f"p{i}", name=f"Pitcher {i}", role=role,
            pitching=PitcherStats(velocity=60, control=60, breaking=60),
        ))
    return Roster(name="Staff", players=tuple(players))


# -----------------------------------------------------------------------
# Step 1: Fatigue tiers
# -----------------------------------------------------------------------

@pytest.mark.parametrize("innings,extra,expected", [
    (0, 0.0, FatigueTier.FRESH),
    (3, 0.4, FatigueTier.FRESH),
    (4, 0.0, FatigueTier.TIRED),
    (2, 0.5, FatigueTier.TIRED),
    (5, 1.0, FatigueTier.TIRED),
    (6, 0.0, FatigueTier.GASSED),
    (1, 1.5, FatigueTier.GASSED),
])
def test_step1_fatigue_level(innings, extra, expected):
    assert fatigue_level(innings, extra) == expected


def test_step1_fatigue_score_capped():
    assert pitcher_fatigue_score(3, 0.5) == pytest.approx(40.0)
    assert pitcher_fatigue_score(12, 3.0) == 100.0


# -----------------------------------------------------------------------
# Step 2: Effectiveness
# -----------------------------------------------------------------------

def test_step2_fresh_pitcher_full_effectiveness():
    assert fatigue_effectiveness(0) == 1.0


def test_step2_effectiveness_declines():
    assert fatigue_effectiveness(3) == pytest.approx(0.76)
    assert fatigue_effectiveness(4) < fatigue_effectiveness(3)


def test_step2_effectiveness_floor():
    assert fatigue_effectiveness(20) == pytest.approx(0.55)


# -----------------------------------------------------------------------
# Step 3: Strategy fatigue costs
# -----------------------------------------------------------------------

def test_step3_patient_and_paint_costs():
    assert fatigue_deltas(BatterApproach.PATIENT, PitchStrategy.PAINT) == pytest.approx((0.15, 0.2))


def test_step3_other_choices_cost_nothing():
    assert fatigue_deltas(BatterApproach.POWER, PitchStrategy.CHALLENGE) == (0.0, 0.0)
    assert fatigue_deltas(None, None) == (0.0, 0.0)


def test_step3_costs_follow_config():
    config = EngineConfig(patient_fatigue_effect=0.5, paint_fatigue_cost=0.0)
    assert fatigue_deltas(BatterApproach.PATIENT, PitchStrategy.PAINT, config) == pytest.approx((0.5, 0.0))


# -----------------------------------------------------------------------
# Step 4: Rotation
# -----------------------------------------------------------------------

def test_step4_starter_stays_early():
    staff = make_test_pitching_staff()
    starter = staff.pitchers()[0]
    assert resolve_next_pitcher(staff, starter, 4) == starter


def test_step4_first_reliever_after_five():
    staff = make_test_pitching_staff()
    starter = staff.pitchers()[0]
    assert resolve_next_pitcher(staff, starter, 5).player_id == "p1"


def test_step4_second_reliever_after_seven():
    staff = make_test_pitching_staff()
    assert resolve_next_pitcher(staff, staff.pitchers()[1], 7).player_id == "p2"


def test_step4_two_pitchers_never_reach_third():
    staff = make_test_pitching_staff(2)
    assert resolve_next_pitcher(staff, staff.pitchers()[1], 8).player_id == "p1"


def test_step4_single_pitcher_never_rotates():
    staff = make_test_pitching_staff(1)
    starter = staff.pitchers()[0]
    assert resolve_next_pitcher(staff, starter, 12) == starter
