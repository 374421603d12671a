# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Tests for the get_run_expectancy report.

Verifies:
1. Returns RE24 for all 24 base-out states
2. Returns expected runs after each representative outcome
3. Rejects invalid outs with a structured error
"""

import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tools.get_run_expectancy import get_run_expectancy


def parse(result: str) -> dict:
    d = json.loads(result)
    if d.get("status") == "ok" and "data" in d:
        return {"status": "ok", "tool": d.get("tool"), **d["data"]}
    return d


# -----------------------------------------------------------------------
# Step 1: RE24
# -----------------------------------------------------------------------

def test_step1_bases_empty_no_outs():
    result = parse(get_run_expectancy(False, False, False, 0))
    assert result["status"] == "ok"
    assert result["expected_runs"] == pytest.approx(0.51)
    assert result["base_out_state"]["mask"] == 0


def test_step1_all_24_states():
    for outs in (0, 1, 2):
        for first in (False, True):
            for second in (False, True):
                for third in (False, True):
                    result = parse(get_run_expectancy(first, second, third, outs))
                    assert result["status"] == "ok"
                    assert result["expected_runs"] > 0


def test_step1_loaded_two_outs():
    result = parse(get_run_expectancy(True, True, True, 2))
    assert result["expected_runs"] == pytest.approx(0.79)
    assert result["base_out_state"]["mask"] == 7


# -----------------------------------------------------------------------
# Step 2: After each outcome
# -----------------------------------------------------------------------

def test_step2_outcome_keys():
    result = parse(get_run_expectancy(False, False, False, 0))
    assert set(result["after_outcome"]) == {"groundout", "walk", "single", "homerun"}


def test_step2_home_run_bases_empty():
    after = parse(get_run_expectancy(False, False, False, 0))["after_outcome"]
    assert after["homerun"]["runs_scored"] == 1
    assert after["homerun"]["expected_runs_after"] == pytest.approx(1.51)
    assert after["groundout"]["outs_after"] == 1
    assert after["groundout"]["expected_runs_after"] == pytest.approx(0.27)


def test_step2_third_out_ends_expectation():
    after = parse(get_run_expectancy(True, True, True, 2))["after_outcome"]
    assert after["groundout"]["outs_after"] == 3
    assert after["groundout"]["expected_runs_after"] == 0.0
    assert after["walk"]["expected_runs_after"] == pytest.approx(1.79)


# -----------------------------------------------------------------------
# Step 3: Invalid input
# -----------------------------------------------------------------------

@pytest.mark.parametrize("outs", [-1, 3, 5])
def test_step3_invalid_outs(outs):
    result = json.loads(get_run_expectancy(False, False, False, outs))
    assert result["status"] == "error"
    assert result["error_code"] == "INVALID_PARAMETER"
    assert "outs" in result["message"]
