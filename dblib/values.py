"""Conversion of positional statement arguments into named values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class NamedValue:
    """A statement argument with an optional name and a 1-based ordinal."""

    name: str
    ordinal: int
    value: Any


def values_to_named_values(values: Iterable[Any]) -> list[NamedValue]:
    """Wrap each value in a NamedValue with an empty name and its 1-based position."""
    return [
        NamedValue(name="", ordinal=ordinal, value=value)
        for ordinal, value in enumerate(values, start=1)
    ]