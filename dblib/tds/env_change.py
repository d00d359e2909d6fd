"""Notifications of changes to the session environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token

_STRING_ERRORS = "surrogateescape"


class EnvChangeType(IntEnum):
    """Which part of the environment changed."""

    TDS_ENV_DB = 1
    TDS_ENV_LANG = 2
    TDS_ENV_CHARSET = 3
    TDS_ENV_PACKSIZE = 4


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _encode(s: str) -> bytes:
    return s.encode("utf-8", _STRING_ERRORS)


@dataclass
class EnvChangePackageField:
    """A single environment change."""

    type: int = EnvChangeType.TDS_ENV_DB
    new_value: str = ""
    old_value: str = ""

    def read_from(self, ch: BytesChannel) -> int:
        """Read the field from ch and return the number of bytes read."""
        self.type = _as_enum(EnvChangeType, ch.read_uint8())
        n = 1

        length = ch.read_uint8()
        n += 1
        if length > 0:
            self.new_value = ch.read_string(length)
            n += length

        length = ch.read_uint8()
        n += 1
        if length > 0:
            self.old_value = ch.read_string(length)
            n += length

        return n

    def write_to(self, ch: BytesChannel) -> int:
        """Write the field to ch and return the number of bytes written."""
        new_value = _encode(self.new_value)
        old_value = _encode(self.old_value)
        ch.write_uint8(int(self.type))
        ch.write_uint8(len(new_value))
        ch.write_bytes(new_value)
        ch.write_uint8(len(old_value))
        ch.write_bytes(old_value)
        return 3 + len(new_value) + len(old_value)

    def byte_length(self) -> int:
        """Return the number of bytes the field takes on the wire."""
        return 3 + len(_encode(self.new_value)) + len(_encode(self.old_value))


@dataclass
class EnvChangePackage(Package):
    """Communicates one or more environment changes."""

    members: list[EnvChangePackageField] = field(default_factory=list)

    def read_from(self, ch: BytesChannel) -> None:
        length = ch.read_uint16()
        n = 0
        while n < length:
            member = EnvChangePackageField()
            n += member.read_from(ch)
            self.members.append(member)

        if n > length:
            raise ValueError(f"read too many bytes, {n} instead of expected {length}")

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_uint8(Token.TDS_ENVCHANGE)
        total_length = sum(member.byte_length() for member in self.members)
        ch.write_uint16(total_length)

        length = sum(member.write_to(ch) for member in self.members)
        if length != total_length:
            raise ValueError(
                f"wrote {length} bytes instead of expected {total_length} bytes"
            )

    def __str__(self) -> str:
        changes = "".join(
            f"{_enum_name(EnvChangeType, int(member.type))}"
            f"({member.old_value} -> {member.new_value})"
            for member in self.members
        )
        return f"EnvChangePackage({changes})"