# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Play-by-play text.

Narration is cosmetic: it never reads the RNG and never changes state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from models import Outcome


@dataclass(frozen=True)
class NarrativeContext:
    batter_name: str
    pitcher_name: str
    runs_scored: int = 0
    extra_base: Optional[str] = None


class NarrativeGenerator(Protocol):
    def describe(self, outcome: Outcome, context: NarrativeContext) -> str: ...


_TEMPLATES: dict[Outcome, str] = {
    Outcome.STRIKEOUT: "{batter} strikes out against {pitcher}.",
    Outcome.WALK: "{batter} draws a walk.",
    Outcome.SINGLE: "{batter} singles.",
    Outcome.DOUBLE: "{batter} doubles.",
    Outcome.TRIPLE: "{batter} triples.",
    Outcome.HOMERUN: "{batter} homers off {pitcher}!",
    Outcome.GROUNDOUT: "{batter} grounds out.",
    Outcome.FLYOUT: "{batter} flies out.",
    Outcome.LINEOUT: "{batter} lines out.",
    Outcome.POPOUT: "{batter} pops out.",
}


class PlainNarrativeGenerator:
    def describe(self, outcome: Outcome, context: NarrativeContext) -> str:
        text = _TEMPLATES[outcome].format(batter=context.batter_name, pitcher=context.pitcher_name)
        if context.extra_base:
            text += f" Runner {context.extra_base}."
        if context.runs_scored == 1:
            text += " 1 run scores."
        elif context.runs_scored > 1:
            text += f" {context.runs_scored} runs score."
        return text
