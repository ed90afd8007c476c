"""
Position Model

Maps tiles to grid cells. Positions are parallel to the tile sequence:
positions[i] is where tile i is drawn.
"""

import random
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..config.game_settings import GRID_SIZE
from ..models.game import Position

T = TypeVar("T")


def create_ordered_positions(size: int = GRID_SIZE) -> Tuple[Position, ...]:
    """Row-major default placement of a size x size board."""
    return tuple(Position(row, col) for row in range(size) for col in range(size))


ORDERED_POSITIONS: Tuple[Position, ...] = create_ordered_positions()


def restricted_shuffle(sequence: Sequence[T],
                       indices: Iterable[int],
                       rng: Optional[random.Random] = None) -> List[T]:
    """
    Permutes the elements at the given indices among themselves.

    Elements at every other index keep their place. The permutation of the
    selected indices is uniform (Fisher-Yates via random.shuffle) and each call
    draws fresh randomness from rng.

    Args:
        sequence: Full ordered sequence (left untouched)
        indices: Subset of index positions to permute
        rng: Random source, defaults to the module-level generator

    Returns:
        A new list with the selected elements permuted
    """
    rng = rng or random
    slots = sorted(set(indices))
    result = list(sequence)
    values = [result[index] for index in slots]
    rng.shuffle(values)
    for index, value in zip(slots, values):
        result[index] = value
    return result


def move_word_to_position(positions: Sequence[Position],
                          tile_words: Sequence[str],
                          word: str,
                          destination: Position) -> List[Position]:
    """Swaps the word's position with whichever tile currently sits at destination."""
    src_index = list(tile_words).index(word)
    src_position = positions[src_index]

    moved = []
    for index, position in enumerate(positions):
        if position == destination:
            moved.append(src_position)
        elif index == src_index:
            moved.append(destination)
        else:
            moved.append(position)
    return moved


def relocate_words_to_row(positions: Sequence[Position],
                          tile_words: Sequence[str],
                          words: Sequence[str],
                          row: int) -> List[Position]:
    """
    Moves words to a row, in order, starting at column 0.

    Pure: the input positions are not modified.
    """
    current = list(positions)
    for col, word in enumerate(words):
        current = move_word_to_position(current, tile_words, word, Position(row, col))
    return current


def is_bijection(positions: Sequence[Position], size: int = GRID_SIZE) -> bool:
    """True if the positions cover every cell of the board exactly once."""
    return sorted(positions, key=lambda p: (p.row, p.col)) == list(create_ordered_positions(size))
