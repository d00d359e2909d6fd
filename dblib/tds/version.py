"""Four-part TDS library and server versions."""

from __future__ import annotations

import re
from dataclasses import dataclass

LIBRARY_NAME = "go-ase/tds"

_MAX_UINT8 = 0xFF
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Version:
    """A version of the form major.minor.sp.patch, each part one byte."""

    major: int = 0
    minor: int = 0
    sp: int = 0
    patch: int = 0

    def compare(self, other: Version) -> int:
        """Return 1, 0 or -1 as self is newer than, equal to or older than other."""
        a = (self.major, self.minor, self.sp, self.patch)
        b = (other.major, other.minor, other.sp, other.patch)
        return (a > b) - (a < b)

    def to_bytes(self) -> bytes:
        """Return the four version bytes."""
        return bytes([self.major, self.minor, self.sp, self.patch])

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.sp}.{self.patch}"


LIBRARY_VERSION = Version(major=0, minor=1, sp=0, patch=0)


def new_version(bs: bytes) -> Version:
    """Build a Version from exactly four bytes."""
    bs = bytes(bs)
    if len(bs) != 4:
        raise ValueError(
            f"expected 4 byte array, received {len(bs)} byte array: {list(bs)}"
        )
    return Version(major=bs[0], minor=bs[1], sp=bs[2], patch=bs[3])


def _parse_part(text: str, label: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"error converting {label} to integer: invalid syntax {text!r}")
    value = int(text)
    if value > _MAX_UINT8:
        raise ValueError(
            f"{label} {value} is too large for uint8 (max {_MAX_UINT8})"
        )
    return value & _MAX_UINT8


def new_version_string(s: str) -> Version:
    """Parse a dotted four-part version string such as '16.0.3.1'."""
    parts = s.split(".")
    if len(parts) != 4:
        raise ValueError(f"expected 4 parts, received {len(parts)} part string: {s}")
    major, minor, sp, patch = (
        _parse_part(text, label)
        for text, label in zip(parts, ("major", "minor", "revision", "patch"))
    )
    return Version(major=major, minor=minor, sp=sp, patch=patch)