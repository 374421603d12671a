# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Automated match simulation on top of the match state machine.

Both teams are managed by the adaptive decision engine. iter_match yields
after every plate appearance so a UI can pace playback; simulate_game runs
to completion and builds the box score.

All randomness is seeded for deterministic replay. The match stream and
the AI decision stream are separate providers so that the AI layer never
disturbs the sequence of draws the state machine sees.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from config import EngineConfig
from decision_rules import DecisionContext, decide_batter_approach, decide_pitch_strategy
from fatigue import pitcher_fatigue_score
from match_state import MatchState, apply_decision, initialize_match
from models import Decision, Half, HIT_OUTCOMES, Outcome, PlayByPlayEvent, Roster
from narrative import NarrativeGenerator
from outcome_resolver import OutcomeResolver
from random_provider import RandomProvider, SeededRandomProvider, SystemRandomProvider

logger = logging.getLogger(__name__)

DecisionSource = Callable[[MatchState], Decision]

# Offset applied to the match seed for the AI decision stream
AI_SEED_OFFSET = 7919


# ---------------------------------------------------------------------------
# Load roster data
# ---------------------------------------------------------------------------

_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_rosters.json"


def load_rosters(path: Path | None = None) -> dict[str, Roster]:
    """Load both team rosters from JSON, keyed 'home' and 'away'."""
    p = path or _ROSTER_PATH
    with open(p) as f:
        raw = json.load(f)
    return {side: Roster.model_validate(raw[side]) for side in ("home", "away")}


# ---------------------------------------------------------------------------
# AI decisions
# ---------------------------------------------------------------------------

def batter_context(state: MatchState) -> DecisionContext:
    batting, fielding = state.batting_side, state.fielding_side
    batter = batting.current_batter
    stats = batter.batting if batter is not None else None
    return DecisionContext(
        outs=state.outs,
        bases=state.bases,
        my_score=batting.runs,
        opponent_score=fielding.runs,
        inning=state.inning,
        batter_power=stats.power if stats else 50.0,
        batter_contact=stats.contact if stats else 50.0,
        pitcher_fatigue=pitcher_fatigue_score(fielding.pitcher_innings, fielding.pitcher_extra_fatigue),
        last_decision=state.batter_adaptation.last,
        consecutive_count=state.batter_adaptation.count,
    )


def pitcher_context(state: MatchState) -> DecisionContext:
    batting, fielding = state.batting_side, state.fielding_side
    batter = batting.current_batter
    stats = batter.batting if batter is not None else None
    return DecisionContext(
        outs=state.outs,
        bases=state.bases,
        my_score=fielding.runs,
        opponent_score=batting.runs,
        inning=state.inning,
        batter_power=stats.power if stats else 50.0,
        batter_contact=stats.contact if stats else 50.0,
        pitcher_fatigue=pitcher_fatigue_score(fielding.pitcher_innings, fielding.pitcher_extra_fatigue),
        last_decision=state.pitcher_adaptation.last,
        consecutive_count=state.pitcher_adaptation.count,
    )


def ai_decision(state: MatchState, rng: RandomProvider) -> Decision:
    """Approach for the batting side, then strategy for the fielding side."""
    approach = decide_batter_approach(batter_context(state), rng)
    strategy = decide_pitch_strategy(pitcher_context(state), rng)
    return Decision(approach=approach, strategy=strategy)


# ---------------------------------------------------------------------------
# Stepped and full simulation
# ---------------------------------------------------------------------------

def iter_match(
    state: MatchState,
    decide: Optional[DecisionSource] = None,
    ai_rng: Optional[RandomProvider] = None,
    resolver: Optional[OutcomeResolver] = None,
    narrator: Optional[NarrativeGenerator] = None,
    trace=None,
) -> Iterator[MatchState]:
    """Yield each successive state until the match is complete.

    decide supplies the decision for every plate appearance; the AI manages
    both sides when it is omitted.
    """
    if decide is None:
        ai_rng = ai_rng or SystemRandomProvider()
        decide = lambda s: ai_decision(s, ai_rng)  # noqa: E731
    while not state.is_complete:
        state = apply_decision(state, decide(state), resolver=resolver, narrator=narrator, trace=trace)
        yield state


def simulate_match(
    my_roster: Roster,
    opponent_roster: Roster,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    resolver: Optional[OutcomeResolver] = None,
    trace=None,
) -> MatchState:
    """Play a full AI-vs-AI match and return the final state."""
    state = initialize_match(my_roster, opponent_roster, seed=seed, config=config)
    ai_rng = SeededRandomProvider(seed + AI_SEED_OFFSET) if seed is not None else SystemRandomProvider()
    for state in iter_match(state, ai_rng=ai_rng, resolver=resolver, trace=trace):
        pass
    return state


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

@dataclass
class BatterGameStats:
    ab: int = 0
    hits: int = 0
    runs: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    doubles: int = 0
    triples: int = 0
    hr: int = 0

    @property
    def pa(self) -> int:
        return self.ab + self.bb

    def to_dict(self) -> dict:
        return {
            "AB": self.ab, "H": self.hits, "R": self.runs,
            "RBI": self.rbi, "BB": self.bb, "K": self.k,
            "2B": self.doubles, "3B": self.triples, "HR": self.hr,
        }


@dataclass
class PitcherGameStats:
    ip_outs: int = 0  # outs recorded (3 = 1.0 IP)
    hits: int = 0
    runs: int = 0
    bb: int = 0
    k: int = 0
    batters_faced: int = 0
    hr_allowed: int = 0

    @property
    def ip(self) -> float:
        full = self.ip_outs // 3
        partial = self.ip_outs % 3
        return full + partial / 10.0

    def to_dict(self) -> dict:
        return {
            "IP": self.ip, "H": self.hits, "R": self.runs,
            "BB": self.bb, "K": self.k, "HR": self.hr_allowed,
            "batters_faced": self.batters_faced,
        }


@dataclass
class GameResult:
    home_name: str = "Home"
    away_name: str = "Away"
    home_runs: int = 0
    away_runs: int = 0
    home_hits: int = 0
    away_hits: int = 0
    innings: int = 0
    seed: Optional[int] = None
    home_inning_runs: list[int] = field(default_factory=list)
    away_inning_runs: list[int] = field(default_factory=list)
    batting: dict[str, BatterGameStats] = field(default_factory=dict)
    pitching: dict[str, PitcherGameStats] = field(default_factory=dict)
    play_by_play: list[PlayByPlayEvent] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    @property
    def winner(self) -> Optional[str]:
        if self.home_runs > self.away_runs:
            return self.home_name
        if self.away_runs > self.home_runs:
            return self.away_name
        return None


def _accumulate(result: GameResult, events: list[PlayByPlayEvent]) -> None:
    for e in events:
        b = result.batting.setdefault(e.batter_id, BatterGameStats())
        p = result.pitching.setdefault(e.pitcher_id, PitcherGameStats())
        runs = e.rbi or 0
        p.batters_faced += 1
        p.ip_outs += e.outs_recorded
        p.runs += runs
        b.rbi += runs
        for scorer in e.scorers:
            result.batting.setdefault(scorer, BatterGameStats()).runs += 1
        if e.outcome == Outcome.WALK:
            b.bb += 1
            p.bb += 1
            continue
        b.ab += 1
        if e.outcome == Outcome.STRIKEOUT:
            b.k += 1
            p.k += 1
        if e.outcome in HIT_OUTCOMES:
            b.hits += 1
            p.hits += 1
        if e.outcome == Outcome.DOUBLE:
            b.doubles += 1
        elif e.outcome == Outcome.TRIPLE:
            b.triples += 1
        elif e.outcome == Outcome.HOMERUN:
            b.hr += 1
            p.hr_allowed += 1


def _inning_runs(events: list[PlayByPlayEvent], half: Half, innings: int) -> list[int]:
    runs = [0] * innings
    for e in events:
        if e.half == half:
            runs[e.inning - 1] += e.rbi or 0
    return runs


def build_game_result(state: MatchState, seed: Optional[int] = None) -> GameResult:
    events = list(state.play_by_play)
    innings = state.inning if events else 0
    result = GameResult(
        home_name=state.my.roster.name,
        away_name=state.opponent.roster.name,
        home_runs=state.my.runs,
        away_runs=state.opponent.runs,
        home_hits=state.my.hits,
        away_hits=state.opponent.hits,
        innings=innings,
        seed=seed,
        home_inning_runs=_inning_runs(events, Half.BOTTOM, innings),
        away_inning_runs=_inning_runs(events, Half.TOP, innings),
        play_by_play=events,
        diagnostics=list(state.diagnostics),
    )
    _accumulate(result, events)
    return result


def simulate_game(
    home: Roster,
    away: Roster,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    resolver: Optional[OutcomeResolver] = None,
    trace=None,
) -> GameResult:
    """Simulate a complete game with both sides managed by the AI.

    Malformed rosters produce an empty result (no runs, no plays, 0 innings).
    """
    state = simulate_match(home, away, seed=seed, config=config, resolver=resolver, trace=trace)
    result = build_game_result(state, seed)
    logger.info(
        "Final: %s %d, %s %d (%d innings, %d plate appearances)",
        result.away_name, result.away_runs, result.home_name, result.home_runs,
        result.innings, len(result.play_by_play),
    )
    return result


def format_box_score(result: GameResult, rosters: Optional[dict[str, Roster]] = None) -> str:
    """Generate a formatted box score string."""
    names: dict[str, str] = {}
    for roster in (rosters or {}).values():
        names.update({p.player_id: p.name for p in roster.players})
    for e in result.play_by_play:
        names.setdefault(e.batter_id, e.batter_name)
        names.setdefault(e.pitcher_id, e.pitcher_name)

    lines = []
    lines.append("=" * 72)
    lines.append("FINAL BOX SCORE")
    lines.append("=" * 72)

    header = f"{'Team':<20}"
    for i in range(1, result.innings + 1):
        header += f" {i:>3}"
    header += "  |   R   H"
    lines.append(header)
    lines.append("-" * len(header))
    for name, inning_runs, runs, hits in (
        (result.away_name, result.away_inning_runs, result.away_runs, result.away_hits),
        (result.home_name, result.home_inning_runs, result.home_runs, result.home_hits),
    ):
        row = f"{name:<20}"
        for r in inning_runs:
            row += f" {r:>3}"
        row += f"  | {runs:>3} {hits:>3}"
        lines.append(row)

    lines.append("")
    lines.append(f"Winner: {result.winner or 'TIE (innings limit)'}")
    lines.append(f"Seed: {result.seed}")
    for diagnostic in result.diagnostics:
        lines.append(f"Diagnostic: {diagnostic}")

    lines.append("\nBatting:")
    lines.append(f"  {'Name':<20} {'AB':>3} {'H':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'K':>3} {'HR':>3}")
    for pid, b in result.batting.items():
        lines.append(
            f"  {names.get(pid, pid):<20} {b.ab:>3} {b.hits:>3} {b.runs:>3} "
            f"{b.rbi:>4} {b.bb:>3} {b.k:>3} {b.hr:>3}"
        )

    lines.append("\nPitching:")
    lines.append(f"  {'Name':<20} {'IP':>5} {'H':>3} {'R':>3} {'BB':>3} {'K':>3} {'BF':>4}")
    for pid, p in result.pitching.items():
        lines.append(
            f"  {names.get(pid, pid):<20} {p.ip:>5.1f} {p.hits:>3} {p.runs:>3} "
            f"{p.bb:>3} {p.k:>3} {p.batters_faced:>4}"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import argparse

    from config import configure_logging, load_config

    parser = argparse.ArgumentParser(description="Simulate one AI-vs-AI match.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for deterministic replay")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print play-by-play")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else None)
    rosters = load_rosters()
    print(f"{rosters['away'].name} at {rosters['home'].name}")
    game = simulate_game(rosters["home"], rosters["away"], seed=args.seed, config=load_config())

    if args.verbose:
        for e in game.play_by_play:
            print(f"  {e.half.value.title()} {e.inning}: {e.narrative}")
    print()
    print(format_box_score(game, rosters))
