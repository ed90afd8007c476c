"""
Game Configuration Constants Module

This module defines the puzzle rules and the timing contract of the board.
All game parameters are centralized here to enable easy modification.
"""

import datetime
from typing import Dict, Final

# Board shape
GRID_SIZE: Final[int] = 4
"""Rows and columns of the board; also the number of groupings."""

GROUP_SIZE: Final[int] = 4
"""Words per grouping and words per attempt."""

MAX_MISTAKES: Final[int] = 4
"""Incorrect attempts allowed before the game ends."""

# Tile reveal timings (milliseconds from the attempt being appended)
ATTEMPT_STAGGER_MS: Final[int] = 100
REVEAL_DELAY_MS: Final[int] = 1_000
CLEAR_SELECTION_DELAY_MS: Final[int] = 2_000

# Auto-solve pacing (milliseconds)
AUTO_SOLVE_STEP_MS: Final[int] = 2_500
AUTO_SOLVE_TRAILING_MS: Final[int] = 3_000

# Persistence
STORAGE_KEY: Final[str] = "boluxiones-game-state"

# Puzzle fallback selection counts days from this date
FALLBACK_EPOCH: Final[datetime.date] = datetime.date(2022, 2, 14)

DIFFICULTY_EMOJI: Final[Dict[int, str]] = {
    1: "\U0001F7E8",  # yellow square
    2: "\U0001F7E9",  # green square
    3: "\U0001F7E6",  # blue square
    4: "\U0001F7EA",  # purple square
}

SHARE_TITLE: Final[str] = "Boluxiones"


def difficulty_to_emoji(difficulty: int) -> str:
    """Maps a difficulty rank to its share symbol ('' for unknown ranks)."""
    return DIFFICULTY_EMOJI.get(difficulty, "")


def validate_settings() -> bool:
    """
    Validates the consistency of the timing contract.

    Returns:
        bool: True if all checks pass

    Raises:
        ValueError: If a timing would make reveals overlap incorrectly
    """
    last_stagger = ATTEMPT_STAGGER_MS * (GROUP_SIZE - 1)
    if last_stagger >= REVEAL_DELAY_MS:
        raise ValueError("Staggered attempt statuses must finish before the reveal")

    if REVEAL_DELAY_MS >= CLEAR_SELECTION_DELAY_MS:
        raise ValueError("Selection must be cleared after the reveal")

    if CLEAR_SELECTION_DELAY_MS >= AUTO_SOLVE_STEP_MS:
        raise ValueError("Auto-solve steps must not start before the selection is cleared")

    if sorted(DIFFICULTY_EMOJI) != list(range(1, GRID_SIZE + 1)):
        raise ValueError("Every difficulty rank needs a share symbol")

    return True


if __name__ == "__main__":

    try:
        validate_settings()
        print(" Game settings validation passed")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
