"""Module entrypoint for `python -m vocabtrainer`."""

from __future__ import annotations

from .main import main_entry


def main() -> None:
    """Run the trainer CLI."""
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
