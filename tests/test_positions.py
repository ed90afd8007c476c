import random

from boluxiones.models.game import Position
from boluxiones.services.positions import (
    ORDERED_POSITIONS, is_bijection, relocate_words_to_row, restricted_shuffle
)

from conftest import WORDS


def test_ordered_positions_are_row_major():
    assert ORDERED_POSITIONS[0] == Position(0, 0)
    assert ORDERED_POSITIONS[5] == Position(1, 1)
    assert ORDERED_POSITIONS[15] == Position(3, 3)
    assert is_bijection(ORDERED_POSITIONS)


def test_restricted_shuffle_keeps_unselected_indices():
    for seed in range(200):
        shuffled = restricted_shuffle(WORDS, [0, 1, 2, 3], random.Random(seed))
        assert shuffled[4:] == WORDS[4:]
        assert sorted(shuffled[:4]) == sorted(WORDS[:4])


def test_restricted_shuffle_does_not_modify_input():
    original = list(WORDS)
    restricted_shuffle(WORDS, range(16), random.Random(1))
    assert WORDS == original


def test_restricted_shuffle_non_contiguous_indices():
    indices = [1, 6, 11, 15]
    for seed in range(50):
        shuffled = restricted_shuffle(WORDS, indices, random.Random(seed))
        for index in range(16):
            if index not in indices:
                assert shuffled[index] == WORDS[index]
        assert sorted(shuffled[i] for i in indices) == sorted(WORDS[i] for i in indices)


def test_restricted_shuffle_reaches_every_permutation():
    rng = random.Random(3)
    seen = {tuple(restricted_shuffle(["a", "b", "c"], [0, 1, 2], rng)) for _ in range(300)}
    assert len(seen) == 6


def test_relocate_swaps_into_target_row():
    moved = relocate_words_to_row(ORDERED_POSITIONS, WORDS, ["w5", "w6", "w7", "w8"], 0)
    assert moved[4:8] == [Position(0, c) for c in range(4)]
    assert moved[0:4] == [Position(1, c) for c in range(4)]
    assert moved[8:] == list(ORDERED_POSITIONS[8:])
    assert is_bijection(moved)


def test_relocate_respects_submitted_order():
    moved = relocate_words_to_row(ORDERED_POSITIONS, WORDS, ["w16", "w1", "w11", "w6"], 2)
    assert moved[15] == Position(2, 0)
    assert moved[0] == Position(2, 1)
    assert moved[10] == Position(2, 2)
    assert moved[5] == Position(2, 3)
    assert is_bijection(moved)


def test_relocate_is_pure():
    positions = list(ORDERED_POSITIONS)
    relocate_words_to_row(positions, WORDS, ["w9", "w10", "w11", "w12"], 0)
    assert positions == list(ORDERED_POSITIONS)


def test_relocate_words_already_in_place():
    moved = relocate_words_to_row(ORDERED_POSITIONS, WORDS, ["w1", "w2", "w3", "w4"], 0)
    assert moved == list(ORDERED_POSITIONS)
