from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

SAMPLE_THESAURUS = """\
abate
to become less intense

benign
1. gentle and kind
2. not harmful

candid
truthful and straightforward

diligent
showing care in one's work

eloquent
fluent and persuasive in speaking
"""


@pytest.fixture
def word_file(tmp_path: Path) -> Path:
    """Write a five-word text thesaurus and return its path."""
    path = tmp_path / "gre.txt"
    path.write_text(SAMPLE_THESAURUS, encoding="utf-8")
    return path
