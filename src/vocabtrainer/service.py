"""Application service for thesauruses, study sessions and settings."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path

from .models import Category, Thresholds
from .progress import CURRENT_THESAURUS_SETTING, ProgressStore, ThesaurusInfo
from .session import Session
from .settings import THESAURUS_SETTINGS, apply_setting, thresholds_from_values, thresholds_to_values
from .tracker import ProgressTracker
from .words import WordStore, load_thesaurus_file, validate_thesaurus_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelearnCandidate:
    """A learned word that can be moved back to unlearned."""

    index: int
    term: str
    definition: str
    category: Category
    revise_count: int


@dataclass(frozen=True)
class SettingView:
    """Current value of one thesaurus setting with its schema."""

    name: str
    comment: str
    value: int
    default: int
    minimum: int
    maximum: int


class TrainerService:
    """Coordinates the progress store with the active study session."""

    def __init__(self, db_path: Path | str, rng: random.Random | None = None) -> None:
        """Initialize service with database path."""
        self.progress = ProgressStore(db_path)
        self.rng = rng if rng is not None else random.Random()
        self.thesaurus: ThesaurusInfo | None = None
        self.session: Session | None = None
        self.setting_notes: list[str] = []

    def list_thesauruses(self) -> list[ThesaurusInfo]:
        """Return all stored thesauruses."""
        return self.progress.list_thesauruses()

    def import_thesaurus(self, source: Path | str, name: str) -> ThesaurusInfo:
        """Create a thesaurus from a word file."""
        thesaurus_name = validate_thesaurus_name(name)
        if self.progress.get_thesaurus_by_name(thesaurus_name) is not None:
            raise ValueError(f"Thesaurus {thesaurus_name} already exists.")
        words = load_thesaurus_file(source)
        return self.progress.create_thesaurus(thesaurus_name, words)

    def add_words(self, source: Path | str) -> int:
        """Append words from a file to the open thesaurus and reopen it."""
        thesaurus = self._require_thesaurus()
        words = load_thesaurus_file(source)
        self.save_progress()
        self.progress.append_words(thesaurus.id, words)
        self.open_thesaurus(thesaurus.id)
        return len(words)

    def delete_thesaurus(self, thesaurus_id: int) -> bool:
        if self.thesaurus is not None and self.thesaurus.id == thesaurus_id:
            self.thesaurus = None
            self.session = None
        return self.progress.delete_thesaurus(thesaurus_id)

    def current_thesaurus(self) -> ThesaurusInfo | None:
        """Return the last opened thesaurus if it still exists."""
        stored = self.progress.get_app_setting(CURRENT_THESAURUS_SETTING)
        if stored is None or not stored.isdigit():
            return None
        return self.progress.get_thesaurus(int(stored))

    def open_thesaurus(self, thesaurus_id: int) -> Session:
        """Load words, settings and counters into a fresh session.

        Settings that needed repair and progress that had to be reconciled with
        the word list are written back immediately.
        """
        thesaurus = self.progress.get_thesaurus(thesaurus_id)
        if thesaurus is None:
            raise KeyError(thesaurus_id)

        raw_settings = self.progress.load_settings(thesaurus_id)
        thresholds, notes = thresholds_from_values(raw_settings)
        self.setting_notes = notes if raw_settings else []
        if notes:
            self.progress.save_settings(thesaurus_id, thresholds_to_values(thresholds))

        words = WordStore(self.progress.load_words(thesaurus_id))
        learn_counts, revise_counts = self.progress.load_progress(thesaurus_id)
        tracker, reconciled = ProgressTracker.load(len(words), learn_counts, revise_counts, thresholds)
        if reconciled:
            self.progress.save_progress(thesaurus_id, *tracker.counts())

        self.thesaurus = thesaurus
        self.session = Session(words, tracker, self.rng)
        self.progress.set_app_setting(CURRENT_THESAURUS_SETTING, str(thesaurus_id))
        logger.info("Opened thesaurus %r (%d words)", thesaurus.name, len(words))
        return self.session

    def save_progress(self) -> None:
        """Persist the open session's counters."""
        if self.thesaurus is None or self.session is None:
            return
        self.progress.save_progress(self.thesaurus.id, *self.session.tracker.counts())

    def thresholds(self) -> Thresholds:
        return self._require_session().thresholds

    def list_settings(self) -> list[SettingView]:
        thresholds = self.thresholds()
        return [
            SettingView(
                name=spec.name,
                comment=spec.comment,
                value=getattr(thresholds, spec.name),
                default=spec.default,
                minimum=spec.minimum,
                maximum=spec.maximum,
            )
            for spec in THESAURUS_SETTINGS
        ]

    def update_setting(self, name: str, raw_value: str) -> int:
        """Change one setting; return the value stored after clamping.

        Threshold changes are applied to the tracker so no learned word drops
        to a lower category, and the adjusted counters are saved.
        """
        thesaurus = self._require_thesaurus()
        session = self._require_session()
        updated, value = apply_setting(session.thresholds, name, raw_value)
        self.progress.save_settings(thesaurus.id, thresholds_to_values(updated))
        session.tracker.clamp_after_threshold_change(updated)
        self.save_progress()
        logger.info("Setting %s of %r changed to %d", name, thesaurus.name, value)
        return value

    def category_summary(self) -> dict[Category, int]:
        return self._require_session().tracker.summary()

    def relearn_candidates(self) -> list[RelearnCandidate]:
        """Return unfamiliar then familiar words."""
        session = self._require_session()
        tracker = session.tracker
        candidates: list[RelearnCandidate] = []
        for category in (Category.UNFAMILIAR, Category.FAMILIAR):
            for index in tracker.members(category):
                candidates.append(
                    RelearnCandidate(
                        index=index,
                        term=session.words.term(index),
                        definition=session.words.definition(index),
                        category=category,
                        revise_count=tracker.revise_count(index),
                    )
                )
        return candidates

    def relearn_word(self, index: int) -> Category:
        """Move a learned word back to unlearned; return its former category."""
        tracker = self._require_session().tracker
        previous = tracker.category_of(index)
        if previous is Category.UNLEARNED:
            raise ValueError(f"Word {index} is not learned yet.")
        tracker.demote_to_unlearned(index)
        self.save_progress()
        return previous

    def close(self) -> None:
        """Persist the open session and close resources."""
        self.save_progress()
        self.progress.close()

    def _require_thesaurus(self) -> ThesaurusInfo:
        if self.thesaurus is None:
            raise RuntimeError("No thesaurus is open.")
        return self.thesaurus

    def _require_session(self) -> Session:
        if self.session is None:
            raise RuntimeError("No thesaurus is open.")
        return self.session
