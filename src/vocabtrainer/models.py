"""Core domain models for vocabulary memorization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Word:
    """One thesaurus entry."""

    term: str
    definition: str


class Category(Enum):
    """Learning stage of a word, derived from its counters."""

    UNLEARNED = "unlearned"
    UNFAMILIAR = "unfamiliar"
    FAMILIAR = "familiar"

    @property
    def label(self) -> str:
        return self.value.capitalize()


CATEGORY_RANK = {Category.UNLEARNED: 0, Category.UNFAMILIAR: 1, Category.FAMILIAR: 2}


@dataclass(frozen=True)
class Thresholds:
    """Scheduling configuration for one thesaurus.

    `learn_threshold` learn successes make a word unfamiliar, `revise_threshold`
    revise successes make it familiar, and `group_size` words are drawn per
    rehearsal round.
    """

    learn_threshold: int = 4
    revise_threshold: int = 4
    group_size: int = 7

    def __post_init__(self) -> None:
        for name in ("learn_threshold", "revise_threshold", "group_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}.")

    def threshold_for(self, learning: bool) -> int:
        """Return the promotion threshold for the learning or revising phase."""
        return self.learn_threshold if learning else self.revise_threshold

    def derive_category(self, learn_count: int, revise_count: int) -> Category:
        """Classify counters; familiar takes precedence over unfamiliar."""
        if revise_count >= self.revise_threshold:
            return Category.FAMILIAR
        if learn_count >= self.learn_threshold:
            return Category.UNFAMILIAR
        return Category.UNLEARNED
