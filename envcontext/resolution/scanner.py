"""
Placeholder Scanner
===================

Locates ``${NAME}`` placeholders inside raw values and classifies values
that carry an empty (``${}``, ``${  }``) or unterminated (``${NAME``)
placeholder as malformed.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Tuple

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]+)\}")
MALFORMED_PATTERN = re.compile(r"\$\{\s*\}|\$\{[^}]*$")
NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class Placeholder:
    """A ``${NAME}`` occurrence; ``start``/``end`` delimit the whole token."""
    name: str
    start: int
    end: int


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one value."""
    malformed: bool
    placeholders: Tuple[Placeholder, ...] = ()

    @property
    def has_placeholders(self) -> bool:
        return bool(self.placeholders)


def is_valid_name(name: str) -> bool:
    """Check a key or placeholder name against the accepted grammar."""
    return NAME_PATTERN.match(name) is not None


def is_malformed(value: str) -> bool:
    """True if the value holds an empty or unterminated placeholder."""
    return MALFORMED_PATTERN.search(value) is not None


def iter_placeholders(value: str) -> Iterator[Placeholder]:
    """Yield well-formed placeholders left to right, non-overlapping."""
    for match in PLACEHOLDER_PATTERN.finditer(value):
        yield Placeholder(name=match.group(1), start=match.start(), end=match.end())


def scan(value: str) -> ScanResult:
    """
    Scan a raw value.

    Malformed values report no placeholders; the engine never expands them.

    Args:
        value: Raw value text

    Returns:
        ScanResult with the malformed flag and well-formed placeholders
    """
    if is_malformed(value):
        return ScanResult(malformed=True)
    return ScanResult(malformed=False, placeholders=tuple(iter_placeholders(value)))


__all__ = [
    "Placeholder",
    "ScanResult",
    "PLACEHOLDER_PATTERN",
    "MALFORMED_PATTERN",
    "NAME_PATTERN",
    "is_valid_name",
    "is_malformed",
    "iter_placeholders",
    "scan",
]
