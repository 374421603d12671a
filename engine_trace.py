# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Explicit trace collection for engine runs.

A TraceCollector is passed by the caller into each transition that should
be traced. Nothing in the engine keeps a collector of its own, so
independent simulations can run side by side.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class RollRecord:
    name: str
    raw: float
    value: Optional[float] = None
    threshold: Optional[float] = None
    success: Optional[bool] = None


@dataclass
class AtBatTrace:
    inning: int
    half: str
    batter_id: str
    pitcher_id: str
    outcome: str
    runs_scored: int
    approach: Optional[str] = None
    strategy: Optional[str] = None
    rolls: list[RollRecord] = field(default_factory=list)


class TraceCollector:
    """Collects RNG rolls, at-bat summaries and match-level events."""

    def __init__(self) -> None:
        self.at_bats: list[AtBatTrace] = []
        self.events: list[dict[str, Any]] = []
        self._pending_rolls: list[RollRecord] = []

    def log_roll(
        self,
        name: str,
        raw: float,
        value: Optional[float] = None,
        threshold: Optional[float] = None,
        success: Optional[bool] = None,
    ) -> None:
        self._pending_rolls.append(RollRecord(name, raw, value, threshold, success))

    def log_event(self, kind: str, **details: Any) -> None:
        self.events.append({"kind": kind, **details})

    def log_at_bat(self, at_bat: AtBatTrace) -> None:
        """Record an at-bat, attaching every roll logged since the previous one."""
        at_bat.rolls.extend(self._pending_rolls)
        self._pending_rolls = []
        self.at_bats.append(at_bat)

    @property
    def roll_count(self) -> int:
        return sum(len(ab.rolls) for ab in self.at_bats) + len(self._pending_rolls)

    def to_dict(self) -> dict:
        return {
            "at_bats": [asdict(ab) for ab in self.at_bats],
            "events": list(self.events),
        }
