"""Learning, spelling and choosing drivers over a study session."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .models import Category
from .session import (
    CHOICE_LETTERS,
    AnswerSource,
    InputFn,
    Navigation,
    Outcome,
    PrintFn,
    Session,
    WrongAnswerReaction,
    group_bounds,
    read_reply,
    target_category,
)

logger = logging.getLogger(__name__)

Checkpoint = Callable[[], None]
PROMOTE_COMMAND = "a"
REVEAL_COMMAND = "s"
RETURN_COMMAND = "h"
REVISE_CATEGORIES = (Category.UNFAMILIAR, Category.FAMILIAR)
NAVIGATION_HELP = "Type home to return to the home menu or exit to leave the program."


def run_learning(session: Session, input_fn: InputFn, print_fn: PrintFn, checkpoint: Checkpoint) -> Navigation | None:
    """Learn unlearned words group by group by spelling them from the shown term."""
    order = session.build_order(Category.UNLEARNED)
    if not order:
        print_fn("There's no word in this category.")
        return None

    print_fn("\n=== Learning Mode ===")
    print_fn("Spell each word to memorize it.")
    print_fn("Type skip to see the word again later, familiar to mark it as already known.")
    print_fn(NAVIGATION_HELP)

    group_size = session.thresholds.group_size
    group_start = 0
    while group_start < len(order):
        position = group_start
        while position < group_bounds(len(order), group_start, group_size)[1]:
            index = order[position]
            term = session.words.term(index)
            definition = session.words.definition(index)

            def ask_spelling(
                position: int = position, term: str = term, definition: str = definition
            ) -> str | Navigation:
                _, end = group_bounds(len(order), group_start, group_size)
                print_fn(f"\n{term}\t\t{position - group_start + 1} / {end - group_start}")
                print_fn(definition)
                return read_reply(input_fn, "Spell the word: ")

            reaction = _retry_spelling(print_fn)
            result = _resolve(session, order, position, term, True, ask_spelling, reaction, input_fn, print_fn)
            checkpoint()
            if isinstance(result, Navigation):
                return result
            if result is Outcome.SKIPPED:
                if session.tracker.is_member(index, Category.FAMILIAR):
                    print_fn("This word is familiar now, it won't appear in learning mode anymore.")
                else:
                    print_fn("This word will be skipped, it will appear later.")
            position += 1

        start, end = group_bounds(len(order), group_start, group_size)
        print_fn("\nWords in this group:")
        for index in dict.fromkeys(order[start:end]):
            print_fn(f"\n{session.words.term(index)}")
            print_fn(session.words.definition(index))
        group_start = end

        if group_start >= len(order):
            print_fn("\nThis time's learning is finished.")
            return None
        reply = read_reply(input_fn, "Press enter to continue with the next group or h to return home: ")
        if isinstance(reply, Navigation):
            return reply
        if reply.lower() == RETURN_COMMAND:
            return None
    return None


def run_spelling(
    session: Session, category: Category, input_fn: InputFn, print_fn: PrintFn, checkpoint: Checkpoint
) -> Navigation | None:
    """Revise words by spelling the word that fits each shown definition."""
    _require_revise_category(category)
    order = session.build_order(category)
    if not order:
        print_fn("There's no word in this category.")
        return None

    print_fn(f"\n=== Spelling Mode ({category.label}) ===")
    print_fn("Type the word that fits each definition.")
    print_fn(NAVIGATION_HELP)

    position = 0
    while position < len(order):
        index = order[position]
        term = session.words.term(index)
        definition = session.words.definition(index)

        def ask_term(position: int = position, definition: str = definition) -> str | Navigation:
            print_fn(f"\nDefinition\t\t{position + 1} / {len(order)}")
            print_fn(definition)
            return read_reply(input_fn, "Word: ")

        reaction = _reveal_or_retry(session, term, input_fn, print_fn)
        result = _resolve(session, order, position, term, False, ask_term, reaction, input_fn, print_fn)
        checkpoint()
        if isinstance(result, Navigation):
            return result
        position += 1

    print_fn("\nThis time's revising is finished.")
    return None


def run_choosing(
    session: Session, category: Category, input_fn: InputFn, print_fn: PrintFn, checkpoint: Checkpoint
) -> Navigation | None:
    """Revise words by choosing the right definition among four options."""
    _require_revise_category(category)
    order = session.build_order(category)
    if not order:
        print_fn("There's no word in this category.")
        return None

    print_fn(f"\n=== Choosing Mode ({category.label}) ===")
    print_fn("Choose the letter of the right definition.")
    print_fn(NAVIGATION_HELP)

    position = 0
    while position < len(order):
        index = order[position]
        term = session.words.term(index)
        options, letter = session.choice_options(index)

        def ask_choice(position: int = position, term: str = term, options: list[int] = options) -> str | Navigation:
            print_fn(f"\nWord: {term}\t\t{position + 1} / {len(order)}")
            for option_letter, option in zip(CHOICE_LETTERS, options):
                print_fn(f"{option_letter}) {session.words.definition(option)}")
            reply = read_reply(input_fn, "Choose: ")
            if isinstance(reply, Navigation):
                return reply
            return reply.upper()

        reaction = _reveal_or_retry(session, letter, input_fn, print_fn)
        result = _resolve(session, order, position, letter, False, ask_choice, reaction, input_fn, print_fn)
        checkpoint()
        if isinstance(result, Navigation):
            return result
        position += 1

    print_fn("\nThis time's revising is finished.")
    return None


def _resolve(
    session: Session,
    order: list[int],
    position: int,
    correct_answer: str,
    learning: bool,
    get_answer: AnswerSource,
    on_wrong: WrongAnswerReaction,
    input_fn: InputFn,
    print_fn: PrintFn,
) -> Outcome | Navigation:
    """Ask one question to completion, including the promotion prompt."""
    index = order[position]
    outcome = session.ask(order, position, correct_answer, learning, get_answer, on_wrong)
    if isinstance(outcome, Navigation):
        return outcome

    praise = "Right spelling" if learning else "Right answer"
    if outcome is Outcome.CORRECT:
        print_fn(f"{praise}.")
    elif outcome is Outcome.PROMOTION_PENDING:
        target = target_category(learning)
        verb = "learnt" if learning else "revised"
        threshold = session.thresholds.threshold_for(learning)
        print_fn(f"{praise}, this word has been {verb} {threshold} times.")
        reply = read_reply(input_fn, f"Press a to add it to {target.value} words now, or enter to add it next time: ")
        if isinstance(reply, Navigation):
            # Abandoning here drops the credit for this question.
            session.decline_promotion(index, learning)
            return reply
        if reply.lower() == PROMOTE_COMMAND:
            session.accept_promotion(index, learning)
            print_fn(f"Added to {target.value} words.")
            logger.info("Word %r promoted to %s", session.words.term(index), target.value)
        else:
            session.decline_promotion(index, learning)
            print_fn("It will be offered again next time.")
    return outcome


def _retry_spelling(print_fn: PrintFn) -> WrongAnswerReaction:
    def react(order: list[int], position: int) -> bool:
        print_fn("Wrong spelling, try again.")
        return False

    return react


def _reveal_or_retry(session: Session, answer: str, input_fn: InputFn, print_fn: PrintFn) -> WrongAnswerReaction:
    """Build the revising reaction: reveal the answer and requeue, or retry."""

    def react(order: list[int], position: int) -> bool | Navigation:
        print_fn("Wrong answer.")
        reply = read_reply(input_fn, "Press s to see the answer and skip this word, or enter to retry: ")
        if isinstance(reply, Navigation):
            return reply
        if reply.lower() != REVEAL_COMMAND:
            return False
        session.requeue(order, position)
        print_fn(f"The answer is {answer}, this word will appear later in this time's revising.")
        return True

    return react


def _require_revise_category(category: Category) -> None:
    if category not in REVISE_CATEGORIES:
        raise ValueError(f"Revising needs an unfamiliar or familiar category, got {category.value}.")
