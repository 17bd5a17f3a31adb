"""Thesaurus settings schema, parsing and range clamping."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .models import Thresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingSpec:
    """One integer thesaurus setting with its accepted range."""

    name: str
    comment: str
    default: int
    minimum: int
    maximum: int

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, value))


THESAURUS_SETTINGS: tuple[SettingSpec, ...] = (
    SettingSpec(
        name="learn_threshold",
        comment="When a word has been learnt this many times, it becomes a learned word.",
        default=4,
        minimum=2,
        maximum=10,
    ),
    SettingSpec(
        name="revise_threshold",
        comment="When a word has been revised this many times, it becomes a familiar word.",
        default=4,
        minimum=2,
        maximum=10,
    ),
    SettingSpec(
        name="group_size",
        comment="Words per learning / revising round, also the group size in learning mode.",
        default=7,
        minimum=5,
        maximum=20,
    ),
)
SETTINGS_BY_NAME = {spec.name: spec for spec in THESAURUS_SETTINGS}


def default_thresholds() -> Thresholds:
    return Thresholds(**{spec.name: spec.default for spec in THESAURUS_SETTINGS})


def thresholds_from_values(raw: Mapping[str, str]) -> tuple[Thresholds, list[str]]:
    """Build thresholds from stored values.

    Missing or unparsable values fall back to defaults and out-of-range values
    are clamped. Returns the thresholds and one note per corrected setting.
    """
    values: dict[str, int] = {}
    notes: list[str] = []
    for spec in THESAURUS_SETTINGS:
        text = raw.get(spec.name)
        if text is None:
            values[spec.name] = spec.default
            notes.append(f"Setting {spec.name} was missing, using default {spec.default}.")
            continue
        try:
            parsed = int(str(text).strip())
        except ValueError:
            values[spec.name] = spec.default
            notes.append(f"Setting {spec.name} could not be parsed, using default {spec.default}.")
            continue
        clamped = spec.clamp(parsed)
        if clamped != parsed:
            bound = "max" if parsed > spec.maximum else "min"
            notes.append(f"Setting {spec.name} value {parsed} is out of range, set to {bound} value {clamped}.")
        values[spec.name] = clamped
    for note in notes:
        logger.warning(note)
    return Thresholds(**values), notes


def apply_setting(current: Thresholds, name: str, raw: str) -> tuple[Thresholds, int]:
    """Return `current` with one setting changed and the clamped value used."""
    spec = SETTINGS_BY_NAME.get(name)
    if spec is None:
        raise ValueError(f"Unknown setting: {name}")
    try:
        parsed = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Setting {name} needs an integer, got {raw!r}.") from exc
    value = spec.clamp(parsed)
    return replace(current, **{name: value}), value


def thresholds_to_values(thresholds: Thresholds) -> dict[str, str]:
    return {spec.name: str(getattr(thresholds, spec.name)) for spec in THESAURUS_SETTINGS}
