"""
Engine Events

Every change to a session is one of these events. User actions, timer
callbacks and data arrival all go through the same transition function.
"""

from dataclasses import dataclass
from typing import Tuple

from .game import Session, SubmittedBy, TileStatus


class Event:
    """Base class for engine events."""


@dataclass(frozen=True)
class Initialize(Event):
    shuffle: bool = True


@dataclass(frozen=True)
class Restore(Event):
    session: Session


@dataclass(frozen=True)
class SelectWord(Event):
    word: str


@dataclass(frozen=True)
class DeselectWord(Event):
    word: str


@dataclass(frozen=True)
class DeselectAll(Event):
    pass


@dataclass(frozen=True)
class Submit(Event):
    submitted_by: SubmittedBy = SubmittedBy.USER


@dataclass(frozen=True)
class Shuffle(Event):
    pass


# Timer events

@dataclass(frozen=True)
class SetTileStatus(Event):
    word: str
    status: TileStatus


@dataclass(frozen=True)
class ClearSelection(Event):
    pass


@dataclass(frozen=True)
class AutoSolveStep(Event):
    """Reveals remaining[0]; remaining is fixed when the game ends."""
    remaining: Tuple[Tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class AutoSolveFinished(Event):
    pass


@dataclass(frozen=True)
class ScheduledEvent:
    """An event to be applied after a delay."""
    delay_ms: int
    event: Event


TIMER_EVENTS: Tuple[type, ...] = (SetTileStatus, ClearSelection, AutoSolveStep, AutoSolveFinished)
