# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Win expectancy and leverage index from any mid-game state.

Win expectancy is P(batting team wins). Future runs for each side are
modeled as Poisson with

    lambda = RE24(outs, bases) + future half-innings * runs per half-inning

for the batting side (RE24 covers the rest of the current half-inning) and
future half-innings * runs per half-inning for the fielding side. Ties are
split 50/50, which stands in for extra innings.

For small combined lambda the exact discrete convolution of the two Poisson
PMFs is summed; above POISSON_EXACT_THRESHOLD a logistic approximation of
the normal CDF is used.

The leverage index is the expected absolute WE swing of the next plate
appearance over four representative outcomes, normalized so that an
average situation is about 1.0.
"""

from __future__ import annotations

import math

from base_state import Bases, EMPTY_BASES, apply_outcome, bases_to_mask
from models import Outcome

# ---------------------------------------------------------------------------
# Run expectancy (RE24)
# Row = outs, column = occupancy bitmask (1st=1, 2nd=2, 3rd=4)
# ---------------------------------------------------------------------------

RE24: tuple[tuple[float, ...], ...] = (
    (0.51, 0.88, 1.12, 1.37, 1.49, 1.72, 1.96, 2.33),
    (0.27, 0.54, 0.72, 0.97, 0.97, 1.19, 1.41, 1.62),
    (0.10, 0.23, 0.34, 0.43, 0.45, 0.58, 0.64, 0.79),
)

RUNS_PER_HALF_INNING = 0.51
REGULATION_INNINGS = 9

POISSON_EXACT_THRESHOLD = 2.5
MIN_TOTAL_LAMBDA = 0.001
MIN_PMF = 1e-12
LOGISTIC_SCALE = 1.7

# League-average WE swing of one plate appearance (LI denominator).
# Game states average an LI near 1.6 against it, not 1.0.
AVG_PA_WE_SWING = 0.040

# Representative plate-appearance outcomes and their league weights
PA_OUTCOME_WEIGHTS: tuple[tuple[Outcome, float], ...] = (
    (Outcome.GROUNDOUT, 0.713),
    (Outcome.WALK, 0.082),
    (Outcome.SINGLE, 0.165),
    (Outcome.HOMERUN, 0.040),
)


def run_expectancy(outs: int, bases: Bases) -> float:
    """Expected runs for the rest of the half-inning. Zero once it is over."""
    if outs >= 3:
        return 0.0
    return RE24[outs][bases_to_mask(bases)]


# ---------------------------------------------------------------------------
# Poisson model
# ---------------------------------------------------------------------------

def poisson_pmf(k: int, lam: float) -> float:
    """P(X = k) for X ~ Poisson(lam), computed in log space."""
    if lam <= 0:
        return 1.0 if k == 0 else 0.0
    return math.exp(k * math.log(lam) - lam - math.lgamma(k + 1))


def poisson_win_prob(lam_batting: float, lam_fielding: float, run_diff: int) -> float:
    """P(batting future runs + run_diff > fielding future runs) + 0.5 * P(tie)."""
    total = lam_batting + lam_fielding
    if total < MIN_TOTAL_LAMBDA:
        if run_diff > 0:
            return 1.0
        if run_diff < 0:
            return 0.0
        return 0.5

    if total < POISSON_EXACT_THRESHOLD:
        max_k = max(20, math.ceil(total * 5 + 10))
        fielding_pmf = [poisson_pmf(k, lam_fielding) for k in range(max_k + 1)]
        # fielding_cdf_below[t] = P(F < t)
        fielding_cdf_below = [0.0]
        for p in fielding_pmf:
            fielding_cdf_below.append(fielding_cdf_below[-1] + p)

        prob = 0.0
        for b in range(max_k + 1):
            p_b = poisson_pmf(b, lam_batting)
            if p_b < MIN_PMF:
                continue
            threshold = b + run_diff
            if threshold <= 0:
                below = 0.0
            else:
                below = fielding_cdf_below[min(threshold, max_k + 1)]
            tie = fielding_pmf[threshold] if 0 <= threshold <= max_k else 0.0
            prob += p_b * (below + 0.5 * tie)
        return max(0.0, min(1.0, prob))

    z = (run_diff + lam_batting - lam_fielding) / math.sqrt(total)
    return 1.0 / (1.0 + math.exp(-LOGISTIC_SCALE * z))


# ---------------------------------------------------------------------------
# Win expectancy
# ---------------------------------------------------------------------------

def remaining_half_innings(inning: int, is_top: bool) -> tuple[int, int]:
    """Future half-innings (batting side, fielding side) after the current one.

    The home team always has one more opportunity than the away team at the
    same inning number while the away team is batting.
    """
    n = min(inning, REGULATION_INNINGS)
    batting = max(0, REGULATION_INNINGS - n)
    if is_top:
        fielding = max(0, REGULATION_INNINGS + 1 - n)
    else:
        fielding = max(0, REGULATION_INNINGS - n)
    return batting, fielding


def win_expectancy(
    inning: int,
    is_top: bool,
    outs: int,
    bases: Bases,
    run_diff: int,
) -> float:
    """P(batting team wins). run_diff is batting runs minus fielding runs."""
    batting_future, fielding_future = remaining_half_innings(inning, is_top)
    lam_batting = run_expectancy(outs, bases) + batting_future * RUNS_PER_HALF_INNING
    lam_fielding = fielding_future * RUNS_PER_HALF_INNING
    return poisson_win_prob(lam_batting, lam_fielding, run_diff)


def we_after_inning_end(inning: int, is_top: bool, run_diff: int) -> float:
    """WE of the team that just finished batting, once its half-inning ends."""
    if is_top:
        return 1.0 - win_expectancy(inning, False, 0, EMPTY_BASES, -run_diff)
    return 1.0 - win_expectancy(inning + 1, True, 0, EMPTY_BASES, -run_diff)


# ---------------------------------------------------------------------------
# Leverage index
# ---------------------------------------------------------------------------

def _we_after_outcome(
    outcome: Outcome,
    inning: int,
    is_top: bool,
    outs: int,
    bases: Bases,
    run_diff: int,
) -> float:
    result = apply_outcome(outcome, bases, outs)
    new_diff = run_diff + result.runs_scored
    if result.outs >= 3:
        return we_after_inning_end(inning, is_top, new_diff)
    return win_expectancy(inning, is_top, result.outs, result.bases, new_diff)


def leverage_index(
    inning: int,
    is_top: bool,
    outs: int,
    bases: Bases,
    run_diff: int,
) -> float:
    """Expected |delta WE| of the next plate appearance / AVG_PA_WE_SWING."""
    we_now = win_expectancy(inning, is_top, outs, bases, run_diff)
    expected_swing = 0.0
    for outcome, weight in PA_OUTCOME_WEIGHTS:
        we_next = _we_after_outcome(outcome, inning, is_top, outs, bases, run_diff)
        expected_swing += weight * abs(we_next - we_now)
    return expected_swing / AVG_PA_WE_SWING
