"""Thesaurus word store and loaders for text and JSON word lists."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from .models import Word

logger = logging.getLogger(__name__)

NUMBERED_DEFINITION_DIGITS = "123456789"


class WordStore:
    """Immutable, position-indexed list of words for one session."""

    def __init__(self, words: Iterable[Word]) -> None:
        self._words = tuple(words)

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> Word:
        return self._words[index]

    def __iter__(self) -> Iterator[Word]:
        return iter(self._words)

    @property
    def words(self) -> tuple[Word, ...]:
        return self._words

    def term(self, index: int) -> str:
        return self._words[index].term

    def definition(self, index: int) -> str:
        return self._words[index].definition


def parse_thesaurus_text(text: str) -> list[Word]:
    """Parse alternating term/definition lines.

    A definition is either the single line following its term, or a run of
    lines starting with a digit where the first one starts with ``1``; such a
    run is kept as one multi-line definition. Blank lines are ignored.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    words: list[Word] = []
    index = 0
    while index < len(lines):
        term = lines[index]
        index += 1
        if index >= len(lines):
            raise ValueError(f"Term '{term}' has no definition.")
        if lines[index].startswith("1"):
            parts = [lines[index]]
            index += 1
            while index < len(lines) and lines[index][0] in NUMBERED_DEFINITION_DIGITS:
                parts.append(lines[index])
                index += 1
            definition = "\n".join(parts)
        else:
            definition = lines[index]
            index += 1
        words.append(Word(term=term, definition=definition))
    return words


def _word_from_json(raw: Any, position: int) -> Word:
    """Build a word from one JSON list entry."""
    if isinstance(raw, dict):
        term = str(raw.get("term", "")).strip()
        definition = str(raw.get("definition", "")).strip()
    elif isinstance(raw, list) and len(raw) == 2:
        term = str(raw[0]).strip()
        definition = str(raw[1]).strip()
    else:
        raise ValueError(f"Entry {position} must be an object or a [term, definition] pair.")
    if not term or not definition:
        raise ValueError(f"Entry {position} needs both a term and a definition.")
    return Word(term=term, definition=definition)


def parse_thesaurus_json(text: str) -> list[Word]:
    """Parse a JSON list of word entries."""
    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("Thesaurus JSON root must be a list.")
    return [_word_from_json(item, position) for position, item in enumerate(raw, start=1)]


def load_thesaurus_file(path: Path | str) -> list[Word]:
    """Load words from a ``.json`` file or an alternating-lines text file."""
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8-sig")
    if file_path.suffix.lower() == ".json":
        words = parse_thesaurus_json(text)
    else:
        words = parse_thesaurus_text(text)
    if not words:
        raise ValueError(f"No words found in {file_path}.")
    logger.info("Loaded %d words from %s", len(words), file_path)
    return words


def validate_thesaurus_name(name: str) -> str:
    """Return the stripped name or raise when it is empty or has spaces."""
    stripped = name.strip()
    if not stripped:
        raise ValueError("Thesaurus name is required.")
    if " " in stripped:
        raise ValueError("Thesaurus name should not contain spaces.")
    return stripped
