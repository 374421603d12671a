# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Match state machine.

Owns every game state transition: one decision in, one resolved plate
appearance, one new MatchState out. States are frozen; apply_decision never
mutates its input, and it advances a private clone of the input's random
stream, so replaying the same (state, decision) pair always yields the same
result.

"My team" is the home team and bats in the bottom half. The opponent is the
away team and bats first.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional

from approach_config import adaptation_multiplier
from base_state import (
    Bases,
    EMPTY_BASES,
    NO_RUNNERS,
    RunnerIds,
    DEFAULT_RUNNER_SPEED,
    advance_runner_ids,
    apply_outcome,
    bases_to_mask,
    resolve_extra_base_attempts,
)
from config import DEFAULT_CONFIG, EngineConfig
from decision_rules import Adaptation, update_adaptation
from engine_trace import AtBatTrace
from fatigue import fatigue_deltas, fatigue_level, resolve_next_pitcher
from models import (
    Decision,
    FatigueTier,
    Half,
    HIT_OUTCOMES,
    MatchPhase,
    MatchResult,
    Outcome,
    PlayByPlayEvent,
    Player,
    RewardConfig,
    Roster,
)
from narrative import NarrativeContext, NarrativeGenerator, PlainNarrativeGenerator
from outcome_resolver import AtBatModifiers, OutcomeResolver, StatOutcomeResolver, defense_glove
from random_provider import RandomProvider, SeededRandomProvider, SystemRandomProvider

logger = logging.getLogger(__name__)

DEFAULT_RESOLVER = StatOutcomeResolver()
DEFAULT_NARRATOR = PlainNarrativeGenerator()


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SideState:
    """Everything one team carries across half-innings."""
    roster: Roster
    lineup: tuple[Player, ...] = ()
    batter_index: int = 0
    pitcher: Optional[Player] = None
    pitcher_innings: int = 0
    pitcher_extra_fatigue: float = 0.0
    innings_fielded: int = 0
    runs: int = 0
    hits: int = 0

    @property
    def current_batter(self) -> Optional[Player]:
        if not self.lineup:
            return None
        return self.lineup[self.batter_index % len(self.lineup)]

    @property
    def pitcher_fatigue(self) -> FatigueTier:
        return fatigue_level(self.pitcher_innings, self.pitcher_extra_fatigue)


@dataclass(frozen=True)
class MatchState:
    my: SideState
    opponent: SideState
    rng: RandomProvider = field(compare=False, repr=False)
    config: EngineConfig = field(default=DEFAULT_CONFIG, compare=False, repr=False)
    inning: int = 1
    half: Half = Half.TOP
    outs: int = 0
    bases: Bases = EMPTY_BASES
    runner_ids: RunnerIds = NO_RUNNERS
    batter_adaptation: Adaptation = Adaptation()
    pitcher_adaptation: Adaptation = Adaptation()
    half_inning_at_bats: int = 0
    play_by_play: tuple[PlayByPlayEvent, ...] = ()
    diagnostics: tuple[str, ...] = ()
    is_complete: bool = False
    inning_complete: bool = False

    @property
    def is_top(self) -> bool:
        return self.half == Half.TOP

    @property
    def batting_side(self) -> SideState:
        return self.opponent if self.is_top else self.my

    @property
    def fielding_side(self) -> SideState:
        return self.my if self.is_top else self.opponent

    @property
    def run_differential(self) -> int:
        """Batting team runs minus fielding team runs."""
        return self.batting_side.runs - self.fielding_side.runs

    @property
    def at_bat_cap(self) -> int:
        return max(1, len(self.batting_side.lineup)) * self.config.at_bat_cap_multiplier

    @property
    def phase(self) -> MatchPhase:
        if self.is_complete:
            return MatchPhase.GAME_COMPLETE
        if not self.play_by_play:
            return MatchPhase.PRE_GAME
        if self.inning_complete:
            return MatchPhase.HALF_COMPLETE
        return MatchPhase.IN_PROGRESS


def _with_sides(state: MatchState, batting: SideState, fielding: SideState) -> dict:
    if state.is_top:
        return {"opponent": batting, "my": fielding}
    return {"my": batting, "opponent": fielding}


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def _roster_problems(roster: Roster, label: str) -> list[str]:
    problems = []
    if not roster.batting_order():
        problems.append(f"{label} ({roster.name}) has an empty lineup")
    if not roster.pitchers():
        problems.append(f"{label} ({roster.name}) has no pitchers")
    return problems


def initialize_match(
    my_roster: Roster,
    opponent_roster: Roster,
    seed: Optional[int] = None,
    rng: Optional[RandomProvider] = None,
    config: Optional[EngineConfig] = None,
) -> MatchState:
    """Create the pre-game state.

    A malformed roster (empty lineup or no pitchers) yields a state that is
    already complete with no runs and no plays.
    """
    if rng is None:
        rng = SeededRandomProvider(seed) if seed is not None else SystemRandomProvider()
    config = config or DEFAULT_CONFIG

    def side(roster: Roster) -> SideState:
        pitchers = roster.pitchers()
        return SideState(
            roster=roster,
            lineup=tuple(roster.batting_order()),
            pitcher=pitchers[0] if pitchers else None,
        )

    state = MatchState(my=side(my_roster), opponent=side(opponent_roster), rng=rng, config=config)

    problems = _roster_problems(my_roster, "my team") + _roster_problems(opponent_roster, "opponent")
    if problems:
        for problem in problems:
            logger.error("Cannot start match: %s", problem)
        return replace(
            state,
            is_complete=True,
            diagnostics=tuple(f"invalid_roster:{p}" for p in problems),
        )
    return state


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def _speed_lookup(roster: Roster):
    def lookup(player_id: str) -> float:
        player = roster.get(player_id)
        if player is None or player.batting is None:
            return DEFAULT_RUNNER_SPEED
        return player.batting.speed
    return lookup


def _record_cap(state: MatchState, kind: str, trace=None) -> MatchState:
    logger.warning(
        "Safety cap '%s' hit in %s of inning %d (score %d-%d); truncating play",
        kind, state.half.value.lower(), state.inning, state.opponent.runs, state.my.runs,
    )
    if trace is not None:
        trace.log_event("safety_cap", cap=kind, inning=state.inning, half=state.half.value)
    return replace(state, diagnostics=state.diagnostics + (f"cap:{kind}",))


def _rotate_pitcher(side: SideState, config: EngineConfig, trace=None) -> SideState:
    """Bring in the next reliever when the side has fielded enough innings."""
    nxt = resolve_next_pitcher(side.roster, side.pitcher, side.innings_fielded, config)
    if nxt is None or side.pitcher is None or nxt.player_id == side.pitcher.player_id:
        return side
    logger.debug(
        "%s: %s replaces %s after %d innings",
        side.roster.name, nxt.name, side.pitcher.name, side.innings_fielded,
    )
    if trace is not None:
        trace.log_event(
            "pitching_change", team=side.roster.name,
            incoming=nxt.player_id, outgoing=side.pitcher.player_id,
            innings_fielded=side.innings_fielded,
        )
    return replace(side, pitcher=nxt, pitcher_innings=0, pitcher_extra_fatigue=0.0)


def _end_half_inning(state: MatchState, trace=None) -> MatchState:
    config = state.config
    fielding = state.fielding_side
    fielding = replace(
        fielding,
        pitcher_innings=fielding.pitcher_innings + 1,
        innings_fielded=fielding.innings_fielded + 1,
    )
    reset = dict(
        bases=EMPTY_BASES,
        runner_ids=NO_RUNNERS,
        batter_adaptation=Adaptation(),
        pitcher_adaptation=Adaptation(),
        half_inning_at_bats=0,
        inning_complete=True,
    )

    if state.is_top:
        state = replace(state, my=fielding)
        # Home team already ahead: the bottom half is not played
        if state.inning >= config.regulation_innings and state.my.runs > state.opponent.runs:
            return replace(state, is_complete=True, **reset)
        logger.debug("End of top %d: %d-%d", state.inning, state.opponent.runs, state.my.runs)
        opponent = _rotate_pitcher(state.opponent, config, trace)
        return replace(state, half=Half.BOTTOM, outs=0, opponent=opponent, **reset)

    state = replace(state, opponent=fielding)
    if state.inning >= config.regulation_innings and state.my.runs != state.opponent.runs:
        return replace(state, is_complete=True, **reset)
    if state.inning >= config.max_innings:
        state = _record_cap(state, "max_innings", trace)
        return replace(state, is_complete=True, **reset)
    logger.debug("End of inning %d: %d-%d", state.inning, state.opponent.runs, state.my.runs)
    my = _rotate_pitcher(state.my, config, trace)
    return replace(state, inning=state.inning + 1, half=Half.TOP, outs=0, my=my, **reset)


def _is_walk_off(state: MatchState) -> bool:
    return (
        not state.is_top
        and state.inning >= state.config.regulation_innings
        and state.my.runs > state.opponent.runs
    )


def apply_decision(
    state: MatchState,
    decision: Optional[Decision] = None,
    resolver: Optional[OutcomeResolver] = None,
    narrator: Optional[NarrativeGenerator] = None,
    trace=None,
) -> MatchState:
    """Resolve one plate appearance and return the next state.

    decision.approach is the batting side's choice and decision.strategy the
    fielding side's. A completed state is returned unchanged.
    """
    if state.is_complete:
        return state
    decision = decision or Decision()
    resolver = resolver or DEFAULT_RESOLVER
    narrator = narrator or DEFAULT_NARRATOR
    config = state.config
    rng = state.rng.clone()

    batting = state.batting_side
    fielding = state.fielding_side
    batter = batting.current_batter
    pitcher = fielding.pitcher

    # Repeat tracking; the multipliers weaken a repeated choice
    batter_adaptation = update_adaptation(state.batter_adaptation, decision.approach)
    pitcher_adaptation = update_adaptation(state.pitcher_adaptation, decision.strategy)
    modifiers = AtBatModifiers(
        approach=decision.approach,
        strategy=decision.strategy,
        approach_adaptation=adaptation_multiplier(batter_adaptation.count) if decision.approach else 1.0,
        strategy_adaptation=adaptation_multiplier(pitcher_adaptation.count) if decision.strategy else 1.0,
        extra_fatigue=fielding.pitcher_extra_fatigue,
        ability_ids=decision.ability_ids,
        aim_cell=decision.aim_cell,
    )
    outcome = resolver.resolve(
        batter, pitcher, fielding.lineup, fielding.pitcher_innings, rng, modifiers, trace,
    )

    result = apply_outcome(outcome, state.bases, state.outs)
    runner_ids, scorers = advance_runner_ids(outcome, state.bases, state.runner_ids, batter.player_id)
    bases, outs, runs = result.bases, result.outs, result.runs_scored
    outs_recorded = outs - state.outs
    extra_base_note = None
    if outcome in (Outcome.SINGLE, Outcome.DOUBLE) and outs < 3:
        extra = resolve_extra_base_attempts(
            outcome, state.bases, bases, runner_ids,
            _speed_lookup(batting.roster), defense_glove(fielding.lineup), outs, rng, trace,
        )
        bases, runner_ids = extra.bases, extra.runner_ids
        runs += extra.extra_runs
        scorers += extra.scorers
        extra_base_note = extra.narrative
        if extra.thrown_out:
            outs += 1
            outs_recorded += 1

    batting = replace(
        batting,
        runs=batting.runs + runs,
        hits=batting.hits + (1 if outcome in HIT_OUTCOMES else 0),
        batter_index=(batting.batter_index + 1) % len(batting.lineup),
    )
    patient_fatigue, paint_fatigue = fatigue_deltas(decision.approach, decision.strategy, config)
    if patient_fatigue or paint_fatigue:
        fielding = replace(
            fielding,
            pitcher_extra_fatigue=fielding.pitcher_extra_fatigue + patient_fatigue + paint_fatigue,
        )

    narrative = narrator.describe(
        outcome, NarrativeContext(batter.name, pitcher.name, runs, extra_base_note),
    )
    event = PlayByPlayEvent(
        inning=state.inning,
        half=state.half,
        batter_id=batter.player_id,
        batter_name=batter.name,
        pitcher_id=pitcher.player_id,
        pitcher_name=pitcher.name,
        outcome=outcome,
        rbi=runs if runs > 0 else None,
        outs_after=outs,
        outs_recorded=outs_recorded,
        scorers=scorers,
        approach_used=decision.approach,
        strategy_used=decision.strategy,
        narrative=narrative,
    )
    if trace is not None:
        trace.log_at_bat(AtBatTrace(
            inning=state.inning,
            half=state.half.value,
            batter_id=batter.player_id,
            pitcher_id=pitcher.player_id,
            outcome=outcome.value,
            runs_scored=runs,
            approach=decision.approach.value if decision.approach else None,
            strategy=decision.strategy.value if decision.strategy else None,
        ))

    next_state = replace(
        state,
        rng=rng,
        outs=outs,
        bases=bases,
        runner_ids=runner_ids,
        batter_adaptation=batter_adaptation,
        pitcher_adaptation=pitcher_adaptation,
        half_inning_at_bats=state.half_inning_at_bats + 1,
        play_by_play=state.play_by_play + (event,),
        inning_complete=False,
        **_with_sides(state, batting, fielding),
    )

    if outs >= 3:
        return _end_half_inning(next_state, trace)
    if _is_walk_off(next_state):
        logger.debug("Walk-off in the bottom of inning %d", next_state.inning)
        return replace(next_state, is_complete=True)
    if next_state.half_inning_at_bats >= next_state.at_bat_cap:
        return _end_half_inning(_record_cap(next_state, "at_bats", trace), trace)
    return next_state


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

def finalize_match(state: MatchState, reward_config: Optional[RewardConfig] = None) -> MatchResult:
    """Score the match and compute the cash reward.

    Wins pay base_win scaled by the fan multiplier; losses pay base_loss.
    """
    reward = reward_config or RewardConfig()
    is_win = state.my.runs > state.opponent.runs
    cash = math.floor(reward.base_win * reward.fans) if is_win else reward.base_loss
    return MatchResult(
        my_runs=state.my.runs,
        opponent_runs=state.opponent.runs,
        is_win=is_win,
        cash_earned=cash,
        total_innings=state.inning if state.play_by_play else 0,
        play_by_play=list(state.play_by_play),
    )


def match_state_to_dict(state: MatchState) -> dict:
    """Serializable snapshot of a match state."""
    def side_dict(side: SideState) -> dict:
        return {
            "team": side.roster.name,
            "runs": side.runs,
            "hits": side.hits,
            "batter_index": side.batter_index,
            "pitcher": side.pitcher.player_id if side.pitcher else None,
            "pitcher_innings": side.pitcher_innings,
            "pitcher_extra_fatigue": round(side.pitcher_extra_fatigue, 4),
            "pitcher_fatigue": side.pitcher_fatigue.value,
            "innings_fielded": side.innings_fielded,
        }

    # only seeded streams have a resumable state
    get_seed = getattr(state.rng, "get_seed", None)
    return {
        "phase": state.phase.value,
        "inning": state.inning,
        "half": state.half.value,
        "outs": state.outs,
        "bases": bases_to_mask(state.bases),
        "runner_ids": list(state.runner_ids),
        "my": side_dict(state.my),
        "opponent": side_dict(state.opponent),
        "batter_adaptation": {"last": state.batter_adaptation.last, "count": state.batter_adaptation.count},
        "pitcher_adaptation": {"last": state.pitcher_adaptation.last, "count": state.pitcher_adaptation.count},
        "half_inning_at_bats": state.half_inning_at_bats,
        "play_by_play": [e.model_dump(mode="json") for e in state.play_by_play],
        "diagnostics": list(state.diagnostics),
        "is_complete": state.is_complete,
        "inning_complete": state.inning_complete,
        "rng_state": get_seed() if get_seed else None,
    }
