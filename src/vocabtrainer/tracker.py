"""Per-word learn/revise counters and category membership."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .models import CATEGORY_RANK, Category, Thresholds

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Owns every word's counters and the index set of each category.

    Counter edits that change a word's category move the index between sets in
    the same call, so the sets never disagree with the counters they summarize.
    The one exception is `record_success`: it only counts, and the caller
    decides whether to `promote` now or `revert_success` to defer.
    """

    def __init__(self, learn_counts: Sequence[int], revise_counts: Sequence[int], thresholds: Thresholds) -> None:
        if len(learn_counts) != len(revise_counts):
            raise ValueError("Learn and revise counts must have the same length.")
        self._learn = [max(0, int(value)) for value in learn_counts]
        self._revise = [max(0, int(value)) for value in revise_counts]
        self._thresholds = thresholds
        self._members: dict[Category, set[int]] = {category: set() for category in Category}
        for index in range(len(self._learn)):
            category = thresholds.derive_category(self._learn[index], self._revise[index])
            self._members[category].add(index)

    @classmethod
    def load(
        cls,
        word_count: int,
        learn_counts: Sequence[int],
        revise_counts: Sequence[int],
        thresholds: Thresholds,
    ) -> tuple[ProgressTracker, bool]:
        """Build a tracker sized to the word list.

        Returns the tracker and whether the persisted counters had to be padded
        (words added since the last save) or truncated (words removed).
        """
        learn = list(learn_counts)
        revise = list(revise_counts)
        stored = min(len(learn), len(revise))
        changed = len(learn) != word_count or len(revise) != word_count
        learn = learn[:stored][:word_count]
        revise = revise[:stored][:word_count]
        missing = word_count - len(learn)
        if missing > 0:
            learn.extend([0] * missing)
            revise.extend([0] * missing)
        if changed:
            logger.info("Reconciled progress for %d words (%d stored)", word_count, stored)
        return cls(learn, revise, thresholds), changed

    def __len__(self) -> int:
        return len(self._learn)

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    def learn_count(self, index: int) -> int:
        return self._learn[index]

    def revise_count(self, index: int) -> int:
        return self._revise[index]

    def count(self, index: int, learning: bool) -> int:
        """Return the learn count in the learning phase, otherwise the revise count."""
        return self._learn[index] if learning else self._revise[index]

    def category_of(self, index: int) -> Category:
        for category, members in self._members.items():
            if index in members:
                return category
        raise IndexError(index)

    def is_member(self, index: int, category: Category) -> bool:
        return index in self._members[category]

    def members(self, category: Category) -> list[int]:
        """Return sorted word indices currently in a category."""
        return sorted(self._members[category])

    def summary(self) -> dict[Category, int]:
        return {category: len(members) for category, members in self._members.items()}

    def counts(self) -> tuple[list[int], list[int]]:
        """Return copies of (learn_counts, revise_counts) for persistence."""
        return (list(self._learn), list(self._revise))

    def record_success(self, index: int, learning: bool) -> int:
        """Count one correct answer and return the new counter value."""
        counters = self._learn if learning else self._revise
        counters[index] += 1
        return counters[index]

    def revert_success(self, index: int, learning: bool) -> int:
        """Undo the latest `record_success` for a deferred promotion."""
        counters = self._learn if learning else self._revise
        if counters[index] <= 0:
            raise ValueError(f"Word {index} has no success to revert.")
        counters[index] -= 1
        return counters[index]

    def promote(self, index: int, source: Category, target: Category) -> None:
        """Move a word up from `source` to `target`.

        Counters are raised to at least the target's thresholds, so a word made
        familiar straight from unlearned cannot fall back on stale counts.
        """
        if CATEGORY_RANK[target] <= CATEGORY_RANK[source]:
            raise ValueError(f"Cannot promote from {source.value} to {target.value}.")
        if index not in self._members[source]:
            raise ValueError(f"Word {index} is not {source.value}.")
        self._members[source].discard(index)
        self._members[target].add(index)
        self._raise_to(index, target)
        logger.debug("Promoted word %d from %s to %s", index, source.value, target.value)

    def demote_to_unlearned(self, index: int) -> None:
        """Reset both counters and move the word back to unlearned."""
        previous = self.category_of(index)
        self._members[previous].discard(index)
        self._members[Category.UNLEARNED].add(index)
        self._learn[index] = 0
        self._revise[index] = 0
        logger.debug("Demoted word %d from %s to unlearned", index, previous.value)

    def clamp_after_threshold_change(self, thresholds: Thresholds) -> None:
        """Adopt new thresholds without moving any word to a lower category.

        Learned words get their counters raised to the new minimums. Words whose
        counters already satisfy a higher category under lowered thresholds are
        moved up.
        """
        self._thresholds = thresholds
        for index in range(len(self._learn)):
            current = self.category_of(index)
            derived = thresholds.derive_category(self._learn[index], self._revise[index])
            if CATEGORY_RANK[derived] > CATEGORY_RANK[current]:
                self._members[current].discard(index)
                self._members[derived].add(index)
                current = derived
            self._raise_to(index, current)

    def _raise_to(self, index: int, category: Category) -> None:
        if category is Category.UNLEARNED:
            return
        self._learn[index] = max(self._learn[index], self._thresholds.learn_threshold)
        if category is Category.FAMILIAR:
            self._revise[index] = max(self._revise[index], self._thresholds.revise_threshold)
