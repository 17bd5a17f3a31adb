"""Session order scheduling for each word category."""

from __future__ import annotations

import logging
import random

from .models import Category
from .tracker import ProgressTracker

logger = logging.getLogger(__name__)


def build_order(tracker: ProgressTracker, category: Category, group_size: int, rng: random.Random) -> list[int]:
    """Return the word indices to present for one session of a category.

    Unlearned and unfamiliar words go through grouped rehearsal on their learn
    or revise counters; familiar words are presented once each. Only members of
    the category are scheduled, and an empty list means there is nothing to do.
    """
    if group_size < 1:
        raise ValueError(f"group_size must be a positive integer, got {group_size}.")
    members = tracker.members(category)
    if category is Category.FAMILIAR:
        order = _shuffled_once(members, rng)
    else:
        learning = category is Category.UNLEARNED
        threshold = tracker.thresholds.threshold_for(learning)
        counts = {index: tracker.count(index, learning) for index in members}
        order = _rehearsal_order(counts, threshold, group_size, rng)
    logger.debug("Scheduled %d presentations for %d %s words", len(order), len(members), category.value)
    return order


def _rehearsal_order(counts: dict[int, int], threshold: int, group_size: int, rng: random.Random) -> list[int]:
    """Build a rehearsal order from word counters below `threshold`.

    Words are bucketed by counter. For each target bucket, from the highest
    down, up to `group_size` words are drawn from the highest non-empty bucket
    at or below the current branch; a word drawn from bucket `b` for target `t`
    is inserted `t - b + 1` times so one session can lift it to `t + 1`.
    """
    if threshold < 1:
        raise ValueError(f"threshold must be a positive integer, got {threshold}.")
    buckets: list[list[int]] = [[] for _ in range(threshold)]
    for index in sorted(counts):
        count = counts[index]
        if 0 <= count < threshold:
            buckets[count].append(index)

    order: list[int] = []
    branch = threshold - 1
    for target in range(threshold - 1, -1, -1):
        branch = min(branch, target)
        drawn = 0
        while drawn < group_size:
            bucket = buckets[branch]
            if bucket:
                index = bucket.pop(rng.randrange(len(bucket)))
                for _ in range(target - branch + 1):
                    order.insert(rng.randint(0, len(order)), index)
                drawn += 1
                continue
            branch -= 1
            if branch < 0:
                return order
    return order


def _shuffled_once(members: list[int], rng: random.Random) -> list[int]:
    order: list[int] = []
    for index in members:
        order.insert(rng.randint(0, len(order)), index)
    return order
