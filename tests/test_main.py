import random
from pathlib import Path
from typing import Any

import pytest

import vocabtrainer.main as main
from vocabtrainer.models import Category
from vocabtrainer.service import TrainerService
from vocabtrainer.session import Navigation


def _memory_service(monkeypatch: Any) -> TrainerService:
    service = TrainerService(":memory:", rng=random.Random(0))
    monkeypatch.setattr(main, "_service", lambda *args, **kwargs: service)
    return service


def _opened(word_file: Path) -> TrainerService:
    service = TrainerService(":memory:", rng=random.Random(0))
    thesaurus = service.import_thesaurus(word_file, "gre")
    service.open_thesaurus(thesaurus.id)
    return service


def test_run_enters_play_shell(monkeypatch: Any) -> None:
    monkeypatch.setattr(main, "play_shell", lambda **kwargs: 0)
    assert main.run([]) == 0


def test_run_import_command(tmp_path: Path, word_file: Path) -> None:
    db_path = tmp_path / "data" / "progress.db"
    assert main.run(["import", str(word_file), "--name", "words", "--db", str(db_path)]) == 0
    service = TrainerService(db_path)
    assert [item.name for item in service.list_thesauruses()] == ["words"]
    service.close()


def test_run_import_requires_source() -> None:
    with pytest.raises(SystemExit):
        main.run(["import"])


def test_import_command_reports_failure(tmp_path: Path) -> None:
    outputs: list[str] = []
    code = main.import_command(str(tmp_path / "missing.txt"), None, db_path=":memory:", print_fn=outputs.append)
    assert code == 1
    assert any(line.startswith("Import failed:") for line in outputs)


def test_play_shell_quit_at_thesaurus_selection(monkeypatch: Any) -> None:
    _memory_service(monkeypatch)
    outputs: list[str] = []
    code = main.play_shell(input_fn=lambda _: "q", print_fn=outputs.append)
    assert code == 0
    assert "No thesauruses yet." in outputs


def test_play_shell_import_then_status(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(word_file), "", "4", "q"])
    outputs: list[str] = []

    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)

    assert code == 0
    assert "Imported thesaurus 'gre' with 5 words." in outputs
    assert "Thesaurus: gre" in outputs
    assert "Unlearned   5" in outputs
    assert "Total       5" in outputs


def test_play_shell_import_failure(monkeypatch: Any, tmp_path: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(tmp_path / "missing.txt"), "", "x", "q"])
    outputs: list[str] = []

    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)

    assert code == 0
    assert any(line.startswith("Import failed:") for line in outputs)
    assert "Invalid thesaurus selection." in outputs


def test_play_shell_exit_during_learning(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(word_file), "gre", "1", "exit"])
    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=lambda _: None)
    assert code == 0


def test_play_shell_home_during_learning(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(word_file), "gre", "1", "home", "9", "q"])
    outputs: list[str] = []

    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)

    assert code == 0
    assert "Progress saved." in outputs
    assert "Invalid choice." in outputs


def test_play_shell_routes_menu_choices(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    called: list[str] = []
    monkeypatch.setattr(main, "run_learning", lambda *args: called.append("learning"))
    monkeypatch.setattr(
        main, "run_spelling", lambda session, category, *args: called.append(f"spelling-{category.value}")
    )
    monkeypatch.setattr(
        main, "run_choosing", lambda session, category, *args: called.append(f"choosing-{category.value}")
    )
    monkeypatch.setattr(main, "_settings_flow", lambda *args: called.append("settings"))
    monkeypatch.setattr(main, "_relearn_flow", lambda *args: called.append("relearn"))

    inputs = iter(["i", str(word_file), "gre", "1", "2", "1", "3", "2", "3", "b", "5", "6", "q"])
    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=lambda _: None)

    assert code == 0
    assert called == ["learning", "spelling-unfamiliar", "choosing-familiar", "settings", "relearn"]


def test_play_shell_exit_at_category_prompt(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(word_file), "gre", "2", "exit"])
    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=lambda _: None)
    assert code == 0


def test_play_shell_empty_category(monkeypatch: Any, word_file: Path) -> None:
    _memory_service(monkeypatch)
    inputs = iter(["i", str(word_file), "gre", "3", "1", "q"])
    outputs: list[str] = []
    main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)
    assert "There's no word in this category." in outputs


def test_play_shell_reopens_last_thesaurus(tmp_path: Path, word_file: Path) -> None:
    db_path = tmp_path / "progress.db"
    inputs = iter(["i", str(word_file), "gre", "q"])
    assert main.play_shell(input_fn=lambda _: next(inputs), print_fn=lambda _: None, db_path=db_path) == 0

    outputs: list[str] = []
    assert main.play_shell(input_fn=lambda _: "q", print_fn=outputs.append, db_path=db_path) == 0
    assert "Thesaurus: gre" in outputs
    assert "\n=== Thesauruses ===" not in outputs


def test_play_shell_switch_thesaurus(monkeypatch: Any, tmp_path: Path, word_file: Path) -> None:
    service = _memory_service(monkeypatch)
    other = tmp_path / "toefl.txt"
    other.write_text("fervent\npassionate\n", encoding="utf-8")
    service.import_thesaurus(other, "toefl")

    inputs = iter(["i", str(word_file), "gre", "b", "2", "b", "q"])
    outputs: list[str] = []
    code = main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)

    assert code == 0
    assert "Thesaurus: toefl" in outputs
    assert "1) gre (5 words)" in outputs


def test_play_shell_add_words(monkeypatch: Any, tmp_path: Path, word_file: Path) -> None:
    _memory_service(monkeypatch)
    extra = tmp_path / "extra.txt"
    extra.write_text("fervent\npassionate\n", encoding="utf-8")
    inputs = iter(["i", str(word_file), "gre", "7", str(extra), "4", "q"])
    outputs: list[str] = []

    main.play_shell(input_fn=lambda _: next(inputs), print_fn=outputs.append)

    assert "Added 1 words." in outputs
    assert "Unlearned   6" in outputs


def test_delete_thesaurus_flow(word_file: Path) -> None:
    service = TrainerService(":memory:")
    service.import_thesaurus(word_file, "gre")
    outputs: list[str] = []

    inputs = iter(["1", "no"])
    main._delete_thesaurus_flow(service, lambda _: next(inputs), outputs.append)
    assert "Deletion cancelled." in outputs

    inputs = iter(["1", "YES"])
    main._delete_thesaurus_flow(service, lambda _: next(inputs), outputs.append)
    assert "Deleted thesaurus 'gre'." in outputs
    assert service.list_thesauruses() == []

    main._delete_thesaurus_flow(service, lambda _: "", outputs.append)
    assert "No thesauruses available to delete." in outputs


def test_settings_flow(word_file: Path) -> None:
    service = _opened(word_file)
    inputs = iter(["2", "6", "1", "99", "3", "abc", "7", "b"])
    outputs: list[str] = []

    main._settings_flow(service, lambda _: next(inputs), outputs.append)

    assert "revise_threshold set to 6." in outputs
    assert "Value is out of range, set to 10." in outputs
    assert "Setting group_size needs an integer, got 'abc'." in outputs
    assert "Invalid choice." in outputs
    assert service.thresholds().learn_threshold == 10


def test_relearn_flow(word_file: Path) -> None:
    service = _opened(word_file)
    outputs: list[str] = []
    main._relearn_flow(service, lambda _: "b", outputs.append)
    assert "No learned words yet." in outputs

    assert service.session is not None
    service.session.tracker.promote(2, Category.UNLEARNED, Category.FAMILIAR)
    inputs = iter(["1"])
    main._relearn_flow(service, lambda _: next(inputs), outputs.append)

    assert "1) candid (Familiar, revised 4 times)" in outputs
    assert "'candid' moved back to unlearned words." in outputs
    assert service.session.tracker.category_of(2) is Category.UNLEARNED


def test_choose_category() -> None:
    assert main._choose_category(lambda _: "1", lambda _: None) is Category.UNFAMILIAR
    assert main._choose_category(lambda _: "2", lambda _: None) is Category.FAMILIAR
    assert main._choose_category(lambda _: "home", lambda _: None) is None
    assert main._choose_category(lambda _: "EXIT", lambda _: None) is Navigation.EXIT
    outputs: list[str] = []
    assert main._choose_category(lambda _: "7", outputs.append) is None
    assert "Invalid choice." in outputs
