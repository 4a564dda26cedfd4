"""Compression tiers and the save profiles each tier tries."""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..backends.base import SaveProfile
from ..exceptions import InputInvalidError

COMPATIBILITY_PROFILE = SaveProfile(name="compatibility")
STANDARD_PROFILE = SaveProfile(name="standard", compress_streams=True, compression_level=6)


class CompressionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    MAXIMUM = "maximum"

    @classmethod
    def parse(cls, value: Any) -> "CompressionLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(level.value for level in cls)
            raise InputInvalidError(
                f"Unknown compression level {value!r}; expected one of {choices}."
            ) from exc

    @property
    def rank(self) -> int:
        return LEVEL_ORDER.index(self)

    @property
    def description(self) -> str:
        return LEVEL_DESCRIPTIONS[self]

    def next_levels(self) -> list["CompressionLevel"]:
        return LEVEL_ORDER[self.rank + 1:]


LEVEL_ORDER: list[CompressionLevel] = [
    CompressionLevel.LOW,
    CompressionLevel.MEDIUM,
    CompressionLevel.HIGH,
    CompressionLevel.MAXIMUM,
]

LEVEL_DESCRIPTIONS = {
    CompressionLevel.LOW: "Minimal compression, preserves maximum quality",
    CompressionLevel.MEDIUM: "Balanced compression with good quality",
    CompressionLevel.HIGH: "Strong compression, slight quality reduction",
    CompressionLevel.MAXIMUM: "Maximum compression, quality may be affected",
}

# Profiles introduced by each tier; a tier also tries everything below it.
_TIER_PROFILES: dict[CompressionLevel, tuple[SaveProfile, ...]] = {
    CompressionLevel.LOW: (
        COMPATIBILITY_PROFILE,
        SaveProfile(name="streams-fast", compress_streams=True, compression_level=1),
    ),
    CompressionLevel.MEDIUM: (
        STANDARD_PROFILE,
    ),
    CompressionLevel.HIGH: (
        SaveProfile(name="streams-best", compress_streams=True, compression_level=9),
        SaveProfile(
            name="streams-best-dedupe",
            compress_streams=True,
            compression_level=9,
            dedupe_objects=True,
        ),
    ),
    CompressionLevel.MAXIMUM: (
        SaveProfile(
            name="streams-best-dedupe-orphans",
            compress_streams=True,
            compression_level=9,
            dedupe_objects=True,
            remove_orphans=True,
        ),
    ),
}


def profiles_for(level: CompressionLevel | str) -> list[SaveProfile]:
    """Return every profile *level* tries, lowest tier first."""

    level = CompressionLevel.parse(level)
    profiles: list[SaveProfile] = []
    for tier in LEVEL_ORDER[: level.rank + 1]:
        profiles.extend(_TIER_PROFILES[tier])
    return profiles


__all__ = [
    "COMPATIBILITY_PROFILE",
    "STANDARD_PROFILE",
    "CompressionLevel",
    "LEVEL_ORDER",
    "LEVEL_DESCRIPTIONS",
    "profiles_for",
]
