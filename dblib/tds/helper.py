"""Small helpers shared by the TDS wire format code."""

from __future__ import annotations

from enum import IntEnum
from typing import BinaryIO, Callable


def write_string(stream: BinaryIO, s: str, pad_to: int) -> None:
    """Write s zero-padded to pad_to bytes, followed by one byte holding its length."""
    data = s.encode()
    if len(data) > pad_to:
        raise ValueError(
            f"string '{s}' is too large, must be at most {pad_to} bytes long"
        )
    stream.write(data)
    stream.write(bytes(pad_to - len(data)))
    stream.write(bytes([len(data)]))


def de_bitmask(bitmask: int, max_value: int) -> list[int]:
    """Return the single-bit values set in bitmask, up to max_value, ascending."""
    result = []
    current = 1
    while current <= max_value:
        if bitmask & current == current:
            result.append(current)
        current <<= 1
    return result


def de_bitmask_string(
    bitmask: int,
    max_value: int,
    to_string: Callable[[int], str],
    default_value: str,
) -> str:
    """Render the bits of bitmask joined by '|', or default_value when none are set."""
    values = de_bitmask(bitmask, max_value)
    if not values:
        return default_value
    return "|".join(to_string(value) for value in values)


def _enum_name(enum_cls: type[IntEnum], value: int) -> str:
    member = enum_cls._value2member_map_.get(value)
    if member is None:
        return f"{enum_cls.__name__}({int(value)})"
    return member.name