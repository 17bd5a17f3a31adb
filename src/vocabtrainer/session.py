"""Study session state and the single-question state machine."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from enum import Enum

from .models import Category, Thresholds
from .scheduler import build_order
from .tracker import ProgressTracker
from .words import WordStore

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]

HOME_COMMAND = "home"
EXIT_COMMAND = "exit"
SKIP_COMMAND = "skip"
FAMILIAR_COMMAND = "familiar"
CHOICE_LETTERS = "ABCD"


class Navigation(Enum):
    """Request to leave the current flow, returned instead of an answer."""

    HOME = "home"
    EXIT = "exit"


class Outcome(Enum):
    """Result of one attempt at a question."""

    CORRECT = "correct"
    RETRY = "retry"
    SKIPPED = "skipped"
    PROMOTION_PENDING = "promotion_pending"


AnswerSource = Callable[[], str | Navigation]
WrongAnswerReaction = Callable[[list[int], int], bool | Navigation]


def read_reply(input_fn: InputFn, prompt: str) -> str | Navigation:
    """Read one stripped line, mapping ``home``/``exit`` to `Navigation`."""
    reply = input_fn(prompt).strip()
    lowered = reply.lower()
    if lowered == HOME_COMMAND:
        return Navigation.HOME
    if lowered == EXIT_COMMAND:
        return Navigation.EXIT
    return reply


def source_category(learning: bool) -> Category:
    """Category a word leaves when it reaches the phase threshold."""
    return Category.UNLEARNED if learning else Category.UNFAMILIAR


def target_category(learning: bool) -> Category:
    return Category.UNFAMILIAR if learning else Category.FAMILIAR


class Session:
    """Word store, progress tracker and randomness for one opened thesaurus."""

    def __init__(self, words: WordStore, tracker: ProgressTracker, rng: random.Random | None = None) -> None:
        if len(words) != len(tracker):
            raise ValueError("Progress tracker must cover every word.")
        self.words = words
        self.tracker = tracker
        self.rng = rng if rng is not None else random.Random()

    @property
    def thresholds(self) -> Thresholds:
        return self.tracker.thresholds

    def build_order(self, category: Category) -> list[int]:
        return build_order(self.tracker, category, self.thresholds.group_size, self.rng)

    def attempt(
        self,
        order: list[int],
        position: int,
        correct_answer: str,
        learning: bool,
        get_answer: AnswerSource,
        on_wrong: WrongAnswerReaction | None = None,
    ) -> Outcome | Navigation:
        """Resolve one answer for ``order[position]``.

        The tracker is only changed by a correct answer (counted) or by the
        ``familiar`` command; a `Navigation` is returned with no change at all.
        """
        index = order[position]
        reply = get_answer()
        if isinstance(reply, Navigation):
            return reply

        command = reply.strip().lower()
        if command == SKIP_COMMAND:
            target = self.requeue(order, position)
            logger.debug("Skipped word %d, requeued at %d", index, target)
            return Outcome.SKIPPED
        if learning and command == FAMILIAR_COMMAND:
            current = self.tracker.category_of(index)
            if current is not Category.FAMILIAR:
                self.tracker.promote(index, current, Category.FAMILIAR)
            removed = self.remove_remaining(order, position)
            logger.debug("Marked word %d familiar, dropped %d queued repeats", index, removed)
            return Outcome.SKIPPED

        if reply != correct_answer:
            if on_wrong is None:
                return Outcome.RETRY
            reaction = on_wrong(order, position)
            if isinstance(reaction, Navigation):
                return reaction
            return Outcome.SKIPPED if reaction else Outcome.RETRY

        new_count = self.tracker.record_success(index, learning)
        threshold = self.thresholds.threshold_for(learning)
        if new_count >= threshold and self.tracker.is_member(index, source_category(learning)):
            return Outcome.PROMOTION_PENDING
        return Outcome.CORRECT

    def ask(
        self,
        order: list[int],
        position: int,
        correct_answer: str,
        learning: bool,
        get_answer: AnswerSource,
        on_wrong: WrongAnswerReaction | None = None,
    ) -> Outcome | Navigation:
        """Repeat `attempt` until the question is no longer being retried."""
        while True:
            outcome = self.attempt(order, position, correct_answer, learning, get_answer, on_wrong)
            if outcome is not Outcome.RETRY:
                return outcome

    def requeue(self, order: list[int], position: int) -> int:
        """Insert a copy of ``order[position]`` somewhere after it; return where."""
        target = self.rng.randint(position + 1, len(order))
        order.insert(target, order[position])
        return target

    def remove_remaining(self, order: list[int], position: int) -> int:
        """Drop every later occurrence of ``order[position]``; return how many."""
        index = order[position]
        tail = order[position + 1 :]
        kept = [item for item in tail if item != index]
        order[position + 1 :] = kept
        return len(tail) - len(kept)

    def accept_promotion(self, index: int, learning: bool) -> Category:
        target = target_category(learning)
        self.tracker.promote(index, source_category(learning), target)
        return target

    def decline_promotion(self, index: int, learning: bool) -> int:
        """Defer promotion by undoing the success that reached the threshold."""
        return self.tracker.revert_success(index, learning)

    def choice_options(self, index: int) -> tuple[list[int], str]:
        """Return up to four word indices to choose from and the correct letter.

        Distractors are drawn without replacement from all other words.
        """
        others = [candidate for candidate in range(len(self.words)) if candidate != index]
        distractors = self.rng.sample(others, min(len(CHOICE_LETTERS) - 1, len(others)))
        options = [index, *distractors]
        self.rng.shuffle(options)
        return options, CHOICE_LETTERS[options.index(index)]


def group_bounds(order_length: int, group_start: int, group_size: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of the group beginning at `group_start`."""
    return (group_start, min(order_length, group_start + group_size))
