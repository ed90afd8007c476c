"""
Game Data Models

Contains all game-related data structures and enums, plus the
serialized form of a saved session.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from ..config.game_settings import GRID_SIZE, GROUP_SIZE


class TileStatus(Enum):
    """Transient visual status of a tile."""
    NONE = "none"
    ATTEMPT = "attempt"
    WRONG = "wrong"
    SOLVED = "solved"


class SubmittedBy(Enum):
    """Who submitted an attempt."""
    USER = "user"
    AUTO = "auto"


class SessionFormatError(ValueError):
    """Raised when a saved session does not have the expected shape."""


@dataclass(frozen=True)
class Grouping:
    """One of the four target categories of a puzzle."""
    group: str
    difficulty: int
    words: Tuple[str, ...]


@dataclass(frozen=True)
class Position:
    """Grid cell of a tile."""
    row: int
    col: int


@dataclass(frozen=True)
class Tile:
    """A placed word with its visual status."""
    word: str
    status: TileStatus = TileStatus.NONE


@dataclass(frozen=True)
class Attempt:
    """One submitted guess of four words."""
    words: Tuple[str, ...]
    correct: bool
    submitted_by: SubmittedBy = SubmittedBy.USER


@dataclass(frozen=True)
class Session:
    """
    Persisted, resumable state for a single calendar day's puzzle.

    Derived values (remaining attempts, solved groupings, ...) are never
    stored here; see services.rules.
    """
    date_key: str
    tiles: Tuple[Tile, ...] = ()
    selected_words: Tuple[str, ...] = ()
    attempts: Tuple[Attempt, ...] = ()
    positions: Tuple[Position, ...] = ()
    ended: bool = False
    won: bool = False
    auto_solve_finished: bool = False

    @property
    def words(self) -> List[str]:
        return [tile.word for tile in self.tiles]

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form using the saved-session schema."""
        return {
            "dateKey": self.date_key,
            "tiles": [
                {"word": tile.word,
                 "status": None if tile.status is TileStatus.NONE else tile.status.value}
                for tile in self.tiles
            ],
            "selectedWords": list(self.selected_words),
            "attempts": [
                {"words": list(attempt.words),
                 "correct": attempt.correct,
                 "submittedBy": attempt.submitted_by.value}
                for attempt in self.attempts
            ],
            "positions": [{"row": p.row, "col": p.col} for p in self.positions],
            "ended": self.ended,
            "won": self.won,
            "autoSolveFinished": self.auto_solve_finished,
        }

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """
        Rebuilds a session from its saved form.

        Every required field is validated before anything is built, so a
        malformed record is rejected as a whole rather than partially applied.

        Raises:
            SessionFormatError: If the record has the wrong shape
        """
        if not isinstance(data, dict):
            raise SessionFormatError("Saved session must be an object")

        required = ("dateKey", "tiles", "selectedWords", "attempts",
                    "positions", "ended", "won", "autoSolveFinished")
        missing = [key for key in required if key not in data]
        if missing:
            raise SessionFormatError(f"Saved session is missing fields: {missing}")

        date_key = data["dateKey"]
        if not isinstance(date_key, str) or not date_key:
            raise SessionFormatError("dateKey must be a non-empty string")

        for flag in ("ended", "won", "autoSolveFinished"):
            if not isinstance(data[flag], bool):
                raise SessionFormatError(f"{flag} must be a boolean")

        tiles = _parse_tiles(data["tiles"])
        words = [tile.word for tile in tiles]
        positions = _parse_positions(data["positions"], len(tiles))

        selected = data["selectedWords"]
        if (not isinstance(selected, list) or len(selected) > GROUP_SIZE
                or any(word not in words for word in selected)
                or len(set(selected)) != len(selected)):
            raise SessionFormatError("selectedWords must be up to 4 distinct board words")

        attempts = _parse_attempts(data["attempts"], words)

        return cls(
            date_key=date_key,
            tiles=tuple(tiles),
            selected_words=tuple(selected),
            attempts=tuple(attempts),
            positions=tuple(positions),
            ended=data["ended"],
            won=data["won"],
            auto_solve_finished=data["autoSolveFinished"],
        )

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Session":
        try:
            data = json.loads(blob.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SessionFormatError(f"Saved session is not valid JSON: {e}")
        return cls.from_dict(data)


def _parse_tiles(raw: Any) -> List[Tile]:
    if not isinstance(raw, list) or len(raw) != GRID_SIZE * GRID_SIZE:
        raise SessionFormatError("tiles must be a list of 16 entries")

    tiles = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("word"), str):
            raise SessionFormatError(f"Invalid tile entry: {entry!r}")
        status = entry.get("status")
        try:
            tile_status = TileStatus.NONE if status is None else TileStatus(status)
        except ValueError:
            raise SessionFormatError(f"Unknown tile status: {status!r}")
        tiles.append(Tile(entry["word"], tile_status))

    if len({tile.word for tile in tiles}) != len(tiles):
        raise SessionFormatError("Tile words must be unique")
    return tiles


def _parse_positions(raw: Any, count: int) -> List[Position]:
    if not isinstance(raw, list) or len(raw) != count:
        raise SessionFormatError("positions must parallel the tiles")

    positions = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise SessionFormatError(f"Invalid position entry: {entry!r}")
        row, col = entry.get("row"), entry.get("col")
        if (not isinstance(row, int) or not isinstance(col, int)
                or not 0 <= row < GRID_SIZE or not 0 <= col < GRID_SIZE):
            raise SessionFormatError(f"Position out of range: {entry!r}")
        positions.append(Position(row, col))

    if len(set(positions)) != len(positions):
        raise SessionFormatError("Two tiles share a position")
    return positions


def _parse_attempts(raw: Any, words: List[str]) -> List[Attempt]:
    if not isinstance(raw, list):
        raise SessionFormatError("attempts must be a list")

    attempts = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise SessionFormatError(f"Invalid attempt entry: {entry!r}")
        attempt_words = entry.get("words")
        if (not isinstance(attempt_words, list) or len(attempt_words) != GROUP_SIZE
                or any(word not in words for word in attempt_words)):
            raise SessionFormatError(f"Attempt must hold 4 board words: {entry!r}")
        if not isinstance(entry.get("correct"), bool):
            raise SessionFormatError(f"Attempt correctness must be a boolean: {entry!r}")
        try:
            submitted_by = SubmittedBy(entry.get("submittedBy"))
        except ValueError:
            raise SessionFormatError(f"Unknown submitter: {entry.get('submittedBy')!r}")
        attempts.append(Attempt(tuple(attempt_words), entry["correct"], submitted_by))
    return attempts
