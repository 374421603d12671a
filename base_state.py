# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Base occupancy and runner advancement.

Pure functions mapping (outcome, bases, outs) to the new base-out state and
runs scored, plus the speed-vs-defense extra-base pass that can follow a
single or a double.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from models import Outcome, OUT_OUTCOMES
from random_provider import RandomProvider

Bases = tuple[bool, bool, bool]
RunnerIds = tuple[Optional[str], Optional[str], Optional[str]]

EMPTY_BASES: Bases = (False, False, False)
NO_RUNNERS: RunnerIds = (None, None, None)

# Extra-base attempt tuning (percent values)
BASE_ATTEMPT_CHANCE = 15.0
SPEED_ATTEMPT_SCALE = 0.5
TWO_OUT_ATTEMPT_BONUS = 15.0
MIN_ATTEMPT_CHANCE = 5.0
MAX_ATTEMPT_CHANCE = 55.0
BASE_SUCCESS_CHANCE = 55.0
SPEED_SUCCESS_SCALE = 0.6
MIN_SUCCESS_CHANCE = 25.0
MAX_SUCCESS_CHANCE = 90.0

DEFAULT_RUNNER_SPEED = 40.0
DEFAULT_DEFENSE_GLOVE = 50.0


@dataclass(frozen=True)
class BaseResult:
    bases: Bases
    outs: int
    runs_scored: int


@dataclass(frozen=True)
class ExtraBaseResult:
    bases: Bases
    runner_ids: RunnerIds
    extra_runs: int = 0
    thrown_out: bool = False
    scorers: tuple[str, ...] = ()
    narrative: Optional[str] = None


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def bases_to_mask(bases: Bases) -> int:
    """Occupancy bitmask: 1st=1, 2nd=2, 3rd=4."""
    first, second, third = bases
    return (1 if first else 0) | (2 if second else 0) | (4 if third else 0)


def mask_to_bases(mask: int) -> Bases:
    return (bool(mask & 1), bool(mask & 2), bool(mask & 4))


def apply_outcome(outcome: Outcome, bases: Bases, outs: int) -> BaseResult:
    """Advance runners with standard forced-advancement rules."""
    first, second, third = bases
    if outcome in OUT_OUTCOMES:
        return BaseResult(bases=tuple(bases), outs=outs + 1, runs_scored=0)

    if outcome == Outcome.WALK:
        runs = 1 if first and second and third else 0
        new_bases = (True, first or second, (first and second) or third)
    elif outcome == Outcome.SINGLE:
        runs = int(third)
        new_bases = (True, first, second)
    elif outcome == Outcome.DOUBLE:
        runs = int(second) + int(third)
        new_bases = (False, True, first)
    elif outcome == Outcome.TRIPLE:
        runs = int(first) + int(second) + int(third)
        new_bases = (False, False, True)
    else:
        runs = int(first) + int(second) + int(third) + 1
        new_bases = EMPTY_BASES
    return BaseResult(bases=new_bases, outs=outs, runs_scored=runs)


def advance_runner_ids(
    outcome: Outcome,
    bases: Bases,
    runner_ids: RunnerIds,
    batter_id: str,
) -> tuple[RunnerIds, tuple[str, ...]]:
    """Move runner identities the same way apply_outcome moves occupancy.

    Returns the new runner ids and the ids of runners who scored.
    """
    first, second, third = bases
    r1, r2, r3 = runner_ids
    if outcome in OUT_OUTCOMES:
        return tuple(runner_ids), ()

    if outcome == Outcome.WALK:
        new_ids = (batter_id, r1 if first else r2, r2 if first and second else r3)
        scored = [r3] if first and second and third else []
    elif outcome == Outcome.SINGLE:
        new_ids = (batter_id, r1, r2)
        scored = [r3] if third else []
    elif outcome == Outcome.DOUBLE:
        new_ids = (None, batter_id, r1)
        scored = [r for r, on in ((r2, second), (r3, third)) if on]
    elif outcome == Outcome.TRIPLE:
        new_ids = (None, None, batter_id)
        scored = [r for r, on in ((r1, first), (r2, second), (r3, third)) if on]
    else:
        new_ids = NO_RUNNERS
        scored = [r for r, on in ((r1, first), (r2, second), (r3, third)) if on] + [batter_id]
    return new_ids, tuple(r for r in scored if r is not None)


def attempt_chance(speed: float, outs: int) -> float:
    chance = BASE_ATTEMPT_CHANCE + (speed - 50) * SPEED_ATTEMPT_SCALE
    if outs == 2:
        chance += TWO_OUT_ATTEMPT_BONUS
    return _clamp(chance, MIN_ATTEMPT_CHANCE, MAX_ATTEMPT_CHANCE)


def success_chance(speed: float, defense_glove: float) -> float:
    chance = BASE_SUCCESS_CHANCE + (speed - defense_glove) * SPEED_SUCCESS_SCALE
    return _clamp(chance, MIN_SUCCESS_CHANCE, MAX_SUCCESS_CHANCE)


def _attempt(runner_id, speed_lookup, defense_glove, outs, rng, trace, label):
    """Roll attempt then success. Returns None (held), True (safe) or False (out)."""
    speed = speed_lookup(runner_id)
    a_chance = attempt_chance(speed, outs)
    a_raw = rng.random()
    attempted = a_raw * 100 < a_chance
    if trace is not None:
        trace.log_roll(f"{label}_attempt", a_raw, a_raw * 100, a_chance, attempted)
    if not attempted:
        return None
    s_chance = success_chance(speed, defense_glove)
    s_raw = rng.random()
    safe = s_raw * 100 < s_chance
    if trace is not None:
        trace.log_roll(f"{label}_success", s_raw, s_raw * 100, s_chance, safe)
    return safe


def resolve_extra_base_attempts(
    outcome: Outcome,
    bases_before: Bases,
    bases_after: Bases,
    runner_ids: RunnerIds,
    speed_lookup: Callable[[str], float],
    defense_glove: float,
    outs: int,
    rng: RandomProvider,
    trace=None,
) -> ExtraBaseResult:
    """Let runners try for one more base after a single or double.

    Runs only for singles and doubles with fewer than three outs. A runner
    thrown out adds one out; the caller applies it.
    """
    bases = list(bases_after)
    ids = list(runner_ids)
    extra_runs = 0
    thrown_out = False
    scorers: list[str] = []
    notes: list[str] = []

    if outs >= 3 or outcome not in (Outcome.SINGLE, Outcome.DOUBLE):
        return ExtraBaseResult(bases=tuple(bases), runner_ids=tuple(ids))

    if outcome == Outcome.SINGLE:
        # Runner who went 2nd -> 3rd tries to score
        if bases_before[1] and bases[2] and ids[2]:
            runner = ids[2]
            safe = _attempt(runner, speed_lookup, defense_glove, outs, rng, trace, "score_from_second")
            if safe is not None:
                bases[2] = False
                ids[2] = None
                if safe:
                    extra_runs += 1
                    scorers.append(runner)
                    notes.append("scores from 2nd on the single")
                else:
                    thrown_out = True
                    notes.append("thrown out at home trying to score")

        # Runner who went 1st -> 2nd tries for 3rd
        if bases_before[0] and bases[1] and ids[1] and not bases[2] and not thrown_out:
            runner = ids[1]
            safe = _attempt(runner, speed_lookup, defense_glove, outs, rng, trace, "first_to_third")
            if safe is not None:
                bases[1] = False
                ids[1] = None
                if safe:
                    bases[2] = True
                    ids[2] = runner
                    notes.append("advances 1st to 3rd on the single")
                else:
                    thrown_out = True
                    notes.append("thrown out at 3rd trying to advance")

    else:
        # Runner who went 1st -> 3rd on the double tries to score
        if bases_before[0] and bases[2] and ids[2]:
            runner = ids[2]
            safe = _attempt(runner, speed_lookup, defense_glove, outs, rng, trace, "score_from_first")
            if safe is not None:
                bases[2] = False
                ids[2] = None
                if safe:
                    extra_runs += 1
                    scorers.append(runner)
                    notes.append("scores from 1st on the double")
                else:
                    thrown_out = True
                    notes.append("thrown out at home trying to score from 1st")

    return ExtraBaseResult(
        bases=tuple(bases),
        runner_ids=tuple(ids),
        extra_runs=extra_runs,
        thrown_out=thrown_out,
        scorers=tuple(scorers),
        narrative="; ".join(notes) if notes else None,
    )
