# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the turn-based match engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class PlayerRole(str, Enum):
    BATTER = "BATTER"
    STARTER = "STARTER"
    RELIEVER = "RELIEVER"


class Outcome(str, Enum):
    STRIKEOUT = "strikeout"
    WALK = "walk"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOMERUN = "homerun"
    GROUNDOUT = "groundout"
    FLYOUT = "flyout"
    LINEOUT = "lineout"
    POPOUT = "popout"


HIT_OUTCOMES = frozenset({Outcome.SINGLE, Outcome.DOUBLE, Outcome.TRIPLE, Outcome.HOMERUN})
OUT_OUTCOMES = frozenset({
    Outcome.STRIKEOUT, Outcome.GROUNDOUT, Outcome.FLYOUT, Outcome.LINEOUT, Outcome.POPOUT,
})


class BatterApproach(str, Enum):
    POWER = "power"
    CONTACT = "contact"
    PATIENT = "patient"


class PitchStrategy(str, Enum):
    CHALLENGE = "challenge"
    FINESSE = "finesse"
    PAINT = "paint"


class FatigueTier(str, Enum):
    FRESH = "fresh"
    TIRED = "tired"
    GASSED = "gassed"


class MatchPhase(str, Enum):
    PRE_GAME = "pre-game"
    IN_PROGRESS = "in-progress"
    HALF_COMPLETE = "half-complete"
    GAME_COMPLETE = "game-complete"


# ---------------------------------------------------------------------------
# Player data models
# ---------------------------------------------------------------------------

class BatterStats(BaseModel):
    """Batting and fielding ratings that drive at-bat resolution."""
    model_config = ConfigDict(frozen=True)

    power: float = Field(ge=0.0, le=100.0, description="Extra-base and home run power (0-100)")
    contact: float = Field(ge=0.0, le=100.0, description="Ability to put the ball in play (0-100)")
    glove: float = Field(default=50.0, ge=0.0, le=100.0, description="Fielding defense (0-100)")
    speed: float = Field(default=50.0, ge=0.0, le=100.0, description="Baserunning speed (0-100)")


class PitcherStats(BaseModel):
    """Pitching ratings that drive at-bat resolution."""
    model_config = ConfigDict(frozen=True)

    velocity: float = Field(ge=0.0, le=100.0, description="Fastball velocity / strikeout power (0-100)")
    control: float = Field(ge=0.0, le=100.0, description="Strike throwing accuracy (0-100)")
    breaking: float = Field(ge=0.0, le=100.0, description="Breaking ball movement (0-100)")


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str = Field(min_length=1)
    name: str
    role: PlayerRole
    batting: Optional[BatterStats] = None
    pitching: Optional[PitcherStats] = None

    @property
    def is_pitcher(self) -> bool:
        return self.role in (PlayerRole.STARTER, PlayerRole.RELIEVER)

    @property
    def is_batter(self) -> bool:
        return self.role == PlayerRole.BATTER


class Roster(BaseModel):
    """A team: its players plus the batting order (player ids)."""
    model_config = ConfigDict(frozen=True)

    name: str = "Team"
    players: tuple[Player, ...] = ()
    lineup: tuple[str, ...] = ()

    def get(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def filter(self, role: PlayerRole) -> list[Player]:
        return [p for p in self.players if p.role == role]

    def pitchers(self) -> list[Player]:
        """Pitchers in roster order. The first one starts the game."""
        return [p for p in self.players if p.is_pitcher]

    def batting_order(self) -> list[Player]:
        """Batters in lineup order; all batters in roster order when no lineup is set."""
        if not self.lineup:
            return self.filter(PlayerRole.BATTER)
        order = []
        for player_id in self.lineup:
            player = self.get(player_id)
            if player is not None and player.is_batter:
                order.append(player)
        return order


# ---------------------------------------------------------------------------
# Turn input
# ---------------------------------------------------------------------------

class Decision(BaseModel):
    """One turn of input, consumed by exactly one apply_decision call.

    approach is used by the batting side, strategy by the fielding side.
    Ability activations and the aim cell are forwarded to the outcome
    resolver untouched.
    """
    model_config = ConfigDict(frozen=True)

    approach: Optional[BatterApproach] = None
    strategy: Optional[PitchStrategy] = None
    ability_ids: tuple[str, ...] = ()
    aim_cell: Optional[int] = Field(default=None, ge=0, le=8, description="Cell of the 3x3 strike zone grid")


# ---------------------------------------------------------------------------
# Match output
# ---------------------------------------------------------------------------

class PlayByPlayEvent(BaseModel):
    """One resolved plate appearance. Append-only, chronological."""
    model_config = ConfigDict(frozen=True)

    inning: int = Field(ge=1)
    half: Half
    batter_id: str
    batter_name: str
    pitcher_id: str
    pitcher_name: str
    outcome: Outcome
    rbi: Optional[int] = Field(default=None, ge=1)
    outs_after: int = Field(ge=0, le=3)
    outs_recorded: int = Field(default=0, ge=0, le=3)
    scorers: tuple[str, ...] = ()
    approach_used: Optional[BatterApproach] = None
    strategy_used: Optional[PitchStrategy] = None
    narrative: str = ""


class RewardConfig(BaseModel):
    base_win: int = Field(default=500, ge=0)
    base_loss: int = Field(default=250, ge=0)
    fans: float = Field(default=1.0, ge=0.0, description="Fan multiplier applied to cash earned")


class MatchResult(BaseModel):
    my_runs: int
    opponent_runs: int
    is_win: bool
    cash_earned: int
    total_innings: int
    play_by_play: list[PlayByPlayEvent] = Field(default_factory=list)
