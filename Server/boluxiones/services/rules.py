"""
Puzzle Rules

Grouping matching, the one-away rule, derived session values and the
emoji summary. Everything here is a pure function of a session and a catalog.
"""

from collections import Counter
from typing import List, Optional, Sequence

from ..config.game_settings import GRID_SIZE, MAX_MISTAKES, SHARE_TITLE, difficulty_to_emoji
from ..models.catalog import Catalog
from ..models.game import Attempt, Grouping, Session, SubmittedBy


def are_same_group(words: Sequence[str], catalog: Catalog) -> Optional[str]:
    """
    Returns the shared group label if every word belongs to the same group.

    Unmapped words resolve to the empty label, which never matches.
    """
    if not catalog.groupings:
        return None

    labels = {catalog.find_group(word) for word in words}
    if len(labels) == 1:
        label = labels.pop()
        if label != "":
            return label
    return None


def is_one_away(words: Sequence[str], catalog: Catalog) -> bool:
    """True for a 3-1 split over exactly two group labels."""
    if not catalog.groupings:
        return False

    counts = Counter(catalog.find_group(word) for word in words)
    return len(counts) == 2 and all(count in (1, 3) for count in counts.values())


def correct_attempts(session: Session) -> List[Attempt]:
    return [attempt for attempt in session.attempts if attempt.correct]


def incorrect_attempt_count(session: Session) -> int:
    return len(session.attempts) - len(correct_attempts(session))


def attempts_remaining(session: Session) -> int:
    return max(MAX_MISTAKES - incorrect_attempt_count(session), 0)


def solved_groupings(session: Session, catalog: Catalog) -> List[Grouping]:
    """Groupings matched by correct attempts, in the order they were solved."""
    solved = []
    for attempt in correct_attempts(session):
        label = are_same_group(attempt.words, catalog)
        grouping = catalog.grouping_by_label(label) if label else None
        if grouping is not None and grouping not in solved:
            solved.append(grouping)
    return solved


def unsolved_groupings(session: Session, catalog: Catalog) -> List[Grouping]:
    """Groupings not yet solved, in catalog (difficulty) order."""
    solved = solved_groupings(session, catalog)
    return [grouping for grouping in catalog.groupings if grouping not in solved]


def words_out_of_play(session: Session) -> List[str]:
    return [word for attempt in correct_attempts(session) for word in attempt.words]


def words_in_play(session: Session) -> List[str]:
    out_of_play = set(words_out_of_play(session))
    return [word for word in session.words if word not in out_of_play]


def is_game_over(session: Session, catalog: Catalog) -> bool:
    return attempts_remaining(session) == 0 or len(solved_groupings(session, catalog)) == GRID_SIZE


def word_to_difficulty(word: str, catalog: Catalog) -> int:
    grouping = catalog.find_grouping(word)
    return grouping.difficulty if grouping else 1


def emoji_representation(session: Session, catalog: Catalog) -> List[List[str]]:
    """One row of four difficulty symbols per user attempt, in attempt order."""
    if not catalog.groupings:
        return []

    return [
        [difficulty_to_emoji(word_to_difficulty(word, catalog)) for word in attempt.words]
        for attempt in session.attempts
        if attempt.submitted_by is SubmittedBy.USER
    ]


def share_text(session: Session, catalog: Catalog) -> str:
    rows = ["".join(row) for row in emoji_representation(session, catalog)]
    return "\n".join([f"{SHARE_TITLE} {session.date_key}"] + rows)
