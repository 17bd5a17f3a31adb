from dataclasses import replace

import pytest

from vocabtrainer.models import Category, Thresholds
from vocabtrainer.tracker import ProgressTracker


def _assert_partition(tracker: ProgressTracker) -> None:
    seen: list[int] = []
    for category in Category:
        seen.extend(tracker.members(category))
    assert sorted(seen) == list(range(len(tracker)))
    for index in range(len(tracker)):
        derived = tracker.thresholds.derive_category(tracker.learn_count(index), tracker.revise_count(index))
        assert derived is tracker.category_of(index)


def test_initial_categories_from_counters() -> None:
    tracker = ProgressTracker([0, 4, 5, 0], [0, 0, 4, 9], Thresholds())
    assert tracker.members(Category.UNLEARNED) == [0]
    assert tracker.members(Category.UNFAMILIAR) == [1]
    assert tracker.members(Category.FAMILIAR) == [2, 3]
    assert tracker.summary() == {Category.UNLEARNED: 1, Category.UNFAMILIAR: 1, Category.FAMILIAR: 2}
    _assert_partition(tracker)


def test_negative_counters_are_treated_as_zero() -> None:
    tracker = ProgressTracker([-3], [-1], Thresholds())
    assert tracker.counts() == ([0], [0])


def test_mismatched_lengths_raise() -> None:
    with pytest.raises(ValueError):
        ProgressTracker([0, 0], [0], Thresholds())


def test_load_pads_short_progress() -> None:
    tracker, changed = ProgressTracker.load(3, [4], [0], Thresholds())
    assert changed is True
    assert len(tracker) == 3
    assert tracker.counts() == ([4, 0, 0], [0, 0, 0])
    assert tracker.category_of(0) is Category.UNFAMILIAR
    assert tracker.members(Category.UNLEARNED) == [1, 2]


def test_load_truncates_long_progress_and_reports_unchanged() -> None:
    tracker, changed = ProgressTracker.load(1, [1, 2], [0, 0], Thresholds())
    assert changed is True
    assert tracker.counts() == ([1], [0])

    _, changed = ProgressTracker.load(2, [1, 2], [0, 0], Thresholds())
    assert changed is False


def test_record_success_does_not_move_word() -> None:
    tracker = ProgressTracker([3], [0], Thresholds())
    assert tracker.record_success(0, True) == 4
    assert tracker.category_of(0) is Category.UNLEARNED

    tracker.promote(0, Category.UNLEARNED, Category.UNFAMILIAR)
    assert tracker.category_of(0) is Category.UNFAMILIAR
    _assert_partition(tracker)


def test_revert_success_undoes_count() -> None:
    tracker = ProgressTracker([0], [3], Thresholds())
    assert tracker.record_success(0, False) == 4
    assert tracker.revert_success(0, False) == 3
    with pytest.raises(ValueError):
        tracker.revert_success(0, True)


def test_promote_straight_to_familiar_raises_counters() -> None:
    tracker = ProgressTracker([1, 0], [0, 0], Thresholds())
    tracker.promote(0, Category.UNLEARNED, Category.FAMILIAR)
    assert tracker.learn_count(0) == 4
    assert tracker.revise_count(0) == 4
    assert tracker.category_of(0) is Category.FAMILIAR
    _assert_partition(tracker)


def test_promote_rejects_downward_and_non_members() -> None:
    tracker = ProgressTracker([4, 0], [0, 0], Thresholds())
    with pytest.raises(ValueError, match="Cannot promote"):
        tracker.promote(0, Category.UNFAMILIAR, Category.UNLEARNED)
    with pytest.raises(ValueError, match="is not unfamiliar"):
        tracker.promote(1, Category.UNFAMILIAR, Category.FAMILIAR)


def test_demote_to_unlearned_resets_counters() -> None:
    tracker = ProgressTracker([6], [5], Thresholds())
    tracker.demote_to_unlearned(0)
    assert tracker.counts() == ([0], [0])
    assert tracker.category_of(0) is Category.UNLEARNED
    _assert_partition(tracker)


def test_raising_revise_threshold_keeps_familiar_words() -> None:
    tracker = ProgressTracker([4, 4, 5, 0], [0, 2, 4, 7], Thresholds())
    before_learn, before_revise = tracker.counts()

    tracker.clamp_after_threshold_change(replace(Thresholds(), revise_threshold=6))

    assert tracker.members(Category.FAMILIAR) == [2, 3]
    for index in tracker.members(Category.FAMILIAR):
        assert tracker.revise_count(index) >= 6
    assert tracker.category_of(1) is Category.UNFAMILIAR
    after_learn, after_revise = tracker.counts()
    assert all(after >= before for after, before in zip(after_learn, before_learn))
    assert all(after >= before for after, before in zip(after_revise, before_revise))
    _assert_partition(tracker)


def test_lowering_learn_threshold_moves_words_up() -> None:
    tracker = ProgressTracker([2, 1], [0, 0], Thresholds())
    tracker.clamp_after_threshold_change(replace(Thresholds(), learn_threshold=2))
    assert tracker.category_of(0) is Category.UNFAMILIAR
    assert tracker.category_of(1) is Category.UNLEARNED
    _assert_partition(tracker)
