"""Pattern tables for notification parsing.

Every field is matched by an ordered tuple of matchers; the first matcher
that captures something wins. The tables are plain data so their priority
order can be read and tested directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache

VIN_CHARS = r"[A-HJ-NPR-Z0-9]{17}"

DEFAULT_BRAND = "DRN"


@dataclass(frozen=True)
class PatternMatcher:
    """Regex returning its first group, stripped. Case-insensitive by default."""

    pattern: str
    flags: int = re.IGNORECASE
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", re.compile(self.pattern, self.flags))

    def __call__(self, text: str) -> str | None:
        match = self.regex.search(text)
        if match is None:
            return None
        value = (match.group(1) or "").strip()
        return value or None


def first_match(matchers: tuple[PatternMatcher, ...], text: str) -> str | None:
    """Return the capture of the first matcher that hits `text`."""

    for matcher in matchers:
        value = matcher(text)
        if value is not None:
            return value
    return None


def _labeled(labels: tuple[str, ...], capture: str) -> tuple[PatternMatcher, ...]:
    return tuple(PatternMatcher(rf"{label}\s+({capture})") for label in labels)


SUBJECT_VIN_PATTERNS: tuple[PatternMatcher, ...] = (PatternMatcher(rf"VIN:\s*({VIN_CHARS})"),)

CONTENT_VIN_PATTERNS: tuple[PatternMatcher, ...] = (
    PatternMatcher(rf"\bVIN:\s+({VIN_CHARS})"),
    PatternMatcher(rf"\bVIN\s+({VIN_CHARS})"),
    PatternMatcher(rf"\bVIN:\s*({VIN_CHARS})"),
    PatternMatcher(rf"\bVIN\s*({VIN_CHARS})"),
)

# Case-sensitive: an unlabeled run must already be upper case.
BARE_VIN_PATTERNS: tuple[PatternMatcher, ...] = (PatternMatcher(rf"({VIN_CHARS})", flags=0),)


@lru_cache(maxsize=8)
def field_patterns(brand: str = DEFAULT_BRAND) -> dict[str, tuple[PatternMatcher, ...]]:
    """Build the table field patterns.

    A model name runs until the next table label. The brand keyword is one
    of those labels, so it is part of the model terminator.
    """

    model_end = rf"(?=\s+Vehicle|\s+Price|\s+{re.escape(brand)}|\s+State|\s+Plate|$)"
    return {
        "plate_id": _labeled((r"Plate\s*ID", "Plate ID", "PlateID", "Plate"), r"[A-Z0-9]{3,8}"),
        "state_id": _labeled((r"State\s*ID", "State ID", "StateID", "State"), r"[A-Z]{2}\b"),
        "vehicle_make": _labeled(
            (r"Vehicle\s*Make", "Vehicle Make", "VehicleMake", "Make"), r"[A-Za-z]+"
        ),
        "vehicle_model": tuple(
            PatternMatcher(rf"{label}\s+([A-Za-z0-9\s]+?){model_end}")
            for label in (r"Vehicle\s*Model", "Vehicle Model", "VehicleModel", "Model")
        ),
        "vehicle_year": _labeled(
            (r"Vehicle\s*Year", "Vehicle Year", "VehicleYear", "Year"), r"\d{4}"
        ),
        "vehicle_color": _labeled(
            (r"Vehicle\s*Color", "Vehicle Color", "VehicleColor", "Color"), r"[A-Za-z]+"
        ),
    }


FIELD_PATTERNS: dict[str, tuple[PatternMatcher, ...]] = field_patterns()

# Positional fallbacks: a year followed by make, model and optionally color.
VEHICLE_FALLBACK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(\d{4})\s+([A-Za-z]+)\s+([A-Za-z0-9]+)\s+([A-Za-z]+)", re.IGNORECASE),
    re.compile(r"(\d{4})\s+([A-Za-z]+)\s+([A-Za-z0-9]+)", re.IGNORECASE),
)
