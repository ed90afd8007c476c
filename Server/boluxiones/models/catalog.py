"""
Grouping Catalog Model

The catalog is an explicit tri-state so that "no data yet" is never
confused with a placeholder puzzle.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .game import Grouping


class CatalogStatus(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class Catalog:
    """Groupings of the day's puzzle, sorted by ascending difficulty."""
    status: CatalogStatus
    groupings: Tuple[Grouping, ...] = ()
    source_date: Optional[str] = None  # date of the sheet rows actually used
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> "Catalog":
        return cls(CatalogStatus.LOADING)

    @classmethod
    def loaded(cls, groupings, source_date: Optional[str] = None) -> "Catalog":
        ordered = tuple(sorted(groupings, key=lambda g: g.difficulty))
        return cls(CatalogStatus.LOADED, ordered, source_date)

    @classmethod
    def failed(cls, error: str) -> "Catalog":
        return cls(CatalogStatus.FAILED, error=error)

    @property
    def is_loaded(self) -> bool:
        return self.status is CatalogStatus.LOADED and bool(self.groupings)

    def find_grouping(self, word: str) -> Optional[Grouping]:
        for grouping in self.groupings:
            if word in grouping.words:
                return grouping
        return None

    def find_group(self, word: str) -> str:
        """Group label of a word, '' when the word is not in the catalog."""
        grouping = self.find_grouping(word)
        return grouping.group if grouping else ""

    def grouping_by_label(self, label: str) -> Optional[Grouping]:
        for grouping in self.groupings:
            if grouping.group == label:
                return grouping
        return None
