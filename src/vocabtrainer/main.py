"""CLI entrypoint for the vocabulary memorization trainer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .models import Category
from .modes import run_choosing, run_learning, run_spelling
from .progress import ThesaurusInfo
from .service import TrainerService
from .session import InputFn, Navigation, PrintFn, Session, read_reply

DEFAULT_DB_PATH = Path(".vocabtrainer") / "progress.db"
MENU_QUIT_COMMANDS = {"q", "exit"}
MENU_BACK_COMMANDS = {"b", "home"}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _service(db_path: Path | str = DEFAULT_DB_PATH) -> TrainerService:
    """Create app service with local database path."""
    return TrainerService(db_path=db_path)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="vocabtrainer", description="Vocabulary memorization trainer")
    parser.add_argument("command", nargs="?", default="play", choices=["play", "import"])
    parser.add_argument("source", nargs="?", help="word file to import (text or .json)")
    parser.add_argument("--name", help="thesaurus name for import, defaults to the file name")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="progress database path")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, help="diagnostic log level")
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "import":
        if args.source is None:
            parser.error("import needs a source file")
        return import_command(args.source, args.name, db_path=args.db)
    return play_shell(db_path=args.db)


def import_command(
    source: str, name: str | None, db_path: Path | str = DEFAULT_DB_PATH, print_fn: PrintFn = print
) -> int:
    """Import one word file as a new thesaurus without entering the shell."""
    service = _service(db_path)
    try:
        thesaurus_name = name if name is not None else Path(source).stem
        try:
            created = service.import_thesaurus(source, thesaurus_name)
        except (OSError, ValueError) as exc:
            print_fn(f"Import failed: {exc}")
            return 1
        print_fn(f"Imported thesaurus '{created.name}' with {created.word_count} words.")
        return 0
    finally:
        service.close()


def play_shell(input_fn: InputFn = input, print_fn: PrintFn = print, db_path: Path | str = DEFAULT_DB_PATH) -> int:
    """Run persistent menu-driven shell."""
    service = _service(db_path)
    try:
        thesaurus = service.current_thesaurus()
        if thesaurus is None:
            thesaurus = _select_thesaurus(service, input_fn, print_fn)
            if thesaurus is None:
                return 0
        session = _open(service, thesaurus, print_fn)

        while True:
            print_fn("\n=== Vocabulary Trainer ===")
            print_fn(f"Thesaurus: {thesaurus.name}")
            print_fn("1) Learning")
            print_fn("2) Spelling")
            print_fn("3) Choosing")
            print_fn("4) Status")
            print_fn("5) Settings")
            print_fn("6) Relearn words")
            print_fn("7) Add words from file")
            print_fn("b) Switch thesaurus")
            print_fn("q) Quit")
            choice = input_fn("Choose: ").strip().lower()

            navigation: Navigation | None = None
            if choice == "1":
                navigation = run_learning(session, input_fn, print_fn, service.save_progress)
            elif choice in {"2", "3"}:
                category = _choose_category(input_fn, print_fn)
                if isinstance(category, Category):
                    runner = run_spelling if choice == "2" else run_choosing
                    navigation = runner(session, category, input_fn, print_fn, service.save_progress)
                else:
                    navigation = category
            elif choice == "4":
                _status_flow(service, print_fn)
            elif choice == "5":
                _settings_flow(service, input_fn, print_fn)
            elif choice == "6":
                _relearn_flow(service, input_fn, print_fn)
            elif choice == "7":
                session = _add_words_flow(service, input_fn, print_fn) or session
            elif choice in MENU_BACK_COMMANDS:
                switched = _select_thesaurus(service, input_fn, print_fn)
                if switched is None:
                    return 0
                thesaurus = switched
                session = _open(service, thesaurus, print_fn)
            elif choice in MENU_QUIT_COMMANDS:
                return 0
            else:
                print_fn("Invalid choice.")

            if navigation is Navigation.EXIT:
                return 0
            if navigation is Navigation.HOME:
                print_fn("Progress saved.")
    finally:
        service.close()


def _open(service: TrainerService, thesaurus: ThesaurusInfo, print_fn: PrintFn) -> Session:
    session = service.open_thesaurus(thesaurus.id)
    for note in service.setting_notes:
        print_fn(note)
    return session


def _select_thesaurus(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> ThesaurusInfo | None:
    """Select an existing thesaurus or import a new one."""
    while True:
        thesauruses = service.list_thesauruses()
        print_fn("\n=== Thesauruses ===")
        if thesauruses:
            for idx, thesaurus in enumerate(thesauruses, start=1):
                print_fn(f"{idx}) {thesaurus.name} ({thesaurus.word_count} words)")
        else:
            print_fn("No thesauruses yet.")
        print_fn("i) Import thesaurus from file")
        print_fn("d) Delete thesaurus")
        print_fn("q) Quit")

        choice = input_fn("Select thesaurus: ").strip().lower()
        if choice in MENU_QUIT_COMMANDS:
            return None
        if choice == "i":
            imported = _import_thesaurus_flow(service, input_fn, print_fn)
            if imported is not None:
                return imported
            continue
        if choice == "d":
            _delete_thesaurus_flow(service, input_fn, print_fn)
            continue

        if choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(thesauruses):
                return thesauruses[index]

        print_fn("Invalid thesaurus selection.")


def _import_thesaurus_flow(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> ThesaurusInfo | None:
    """Import a word file as a new thesaurus."""
    print_fn("\n=== Import Thesaurus ===")
    path_text = input_fn("Word file path: ").strip()
    if not path_text:
        print_fn("File path is required.")
        return None
    name = input_fn(f"Thesaurus name [{Path(path_text).stem}]: ").strip() or Path(path_text).stem
    try:
        created = service.import_thesaurus(path_text, name)
    except (OSError, ValueError) as exc:
        print_fn(f"Import failed: {exc}")
        return None
    print_fn(f"Imported thesaurus '{created.name}' with {created.word_count} words.")
    return created


def _delete_thesaurus_flow(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Delete a thesaurus with explicit confirmation safeguard."""
    thesauruses = service.list_thesauruses()
    if not thesauruses:
        print_fn("No thesauruses available to delete.")
        return

    print_fn("\nDelete thesaurus")
    for idx, thesaurus in enumerate(thesauruses, start=1):
        print_fn(f"{idx}) {thesaurus.name}")
    print_fn("b) Back")
    choice = input_fn("Choose thesaurus to delete: ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return
    if not choice.isdigit() or not (0 <= int(choice) - 1 < len(thesauruses)):
        print_fn("Invalid choice.")
        return

    target = thesauruses[int(choice) - 1]
    print_fn(f"WARNING: This permanently deletes thesaurus '{target.name}' with its words, progress and settings.")
    confirm = input_fn("Type YES to confirm deletion: ").strip()
    if confirm != "YES":
        print_fn("Deletion cancelled.")
        return
    if service.delete_thesaurus(target.id):
        print_fn(f"Deleted thesaurus '{target.name}'.")
    else:
        print_fn("Thesaurus was not found.")


def _choose_category(input_fn: InputFn, print_fn: PrintFn) -> Category | Navigation | None:
    """Ask which learned category to revise."""
    print_fn("\nRevise which words?")
    print_fn(f"1) {Category.UNFAMILIAR.label}")
    print_fn(f"2) {Category.FAMILIAR.label}")
    print_fn("b) Back")
    reply = read_reply(input_fn, "Choose: ")
    if isinstance(reply, Navigation):
        return None if reply is Navigation.HOME else reply
    choice = reply.lower()
    if choice == "1":
        return Category.UNFAMILIAR
    if choice == "2":
        return Category.FAMILIAR
    if choice not in MENU_BACK_COMMANDS:
        print_fn("Invalid choice.")
    return None


def _status_flow(service: TrainerService, print_fn: PrintFn) -> None:
    """Print word counts per category and the active thresholds."""
    print_fn("\n=== Status ===")
    summary = service.category_summary()
    width = max(len(category.label) for category in Category)
    for category in Category:
        print_fn(f"{category.label:<{width}}  {summary[category]}")
    print_fn(f"{'Total':<{width}}  {sum(summary.values())}")
    thresholds = service.thresholds()
    print_fn(
        f"Learn threshold {thresholds.learn_threshold}, revise threshold {thresholds.revise_threshold}, "
        f"group size {thresholds.group_size}."
    )


def _settings_flow(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Show thesaurus settings and change one."""
    while True:
        settings = service.list_settings()
        print_fn("\n=== Settings ===")
        for idx, setting in enumerate(settings, start=1):
            print_fn(f"{idx}) {setting.name} = {setting.value} [{setting.minimum}-{setting.maximum}]")
            print_fn(f"   {setting.comment}")
        print_fn("b) Back")
        choice = input_fn("Choose setting: ").strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return
        if not choice.isdigit() or not (0 <= int(choice) - 1 < len(settings)):
            print_fn("Invalid choice.")
            continue

        setting = settings[int(choice) - 1]
        raw = input_fn(f"New value for {setting.name} [{setting.value}]: ").strip()
        if not raw:
            continue
        try:
            value = service.update_setting(setting.name, raw)
        except ValueError as exc:
            print_fn(str(exc))
            continue
        if str(value) != raw:
            print_fn(f"Value is out of range, set to {value}.")
        else:
            print_fn(f"{setting.name} set to {value}.")


def _relearn_flow(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Move learned words back to unlearned."""
    while True:
        candidates = service.relearn_candidates()
        print_fn("\n=== Relearn Words ===")
        if not candidates:
            print_fn("No learned words yet.")
            return
        for idx, candidate in enumerate(candidates, start=1):
            print_fn(f"{idx}) {candidate.term} ({candidate.category.label}, revised {candidate.revise_count} times)")
        print_fn("b) Back")
        choice = input_fn("Choose word to relearn: ").strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return
        if not choice.isdigit() or not (0 <= int(choice) - 1 < len(candidates)):
            print_fn("Invalid choice.")
            continue
        candidate = candidates[int(choice) - 1]
        service.relearn_word(candidate.index)
        print_fn(f"'{candidate.term}' moved back to unlearned words.")


def _add_words_flow(service: TrainerService, input_fn: InputFn, print_fn: PrintFn) -> Session | None:
    """Append words from a file to the open thesaurus."""
    path_text = input_fn("Word file path: ").strip()
    if not path_text:
        print_fn("File path is required.")
        return None
    try:
        added = service.add_words(path_text)
    except (OSError, ValueError) as exc:
        print_fn(f"Import failed: {exc}")
        return None
    print_fn(f"Added {added} words.")
    return service.session


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
