"""The package that carries an SQL statement to execute."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token

_STRING_ERRORS = "surrogateescape"


class LanguageStatus(IntEnum):
    """Option bits of a language package."""

    TDS_LANGUAGE_NOARGS = 0x0
    TDS_LANGUAGE_HASARGS = 0x1
    TDS_LANG_BATCH_PARAMS = 0x4


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class LanguagePackage(Package):
    """Executes an SQL statement."""

    status: int = LanguageStatus.TDS_LANGUAGE_NOARGS
    cmd: str = ""

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint32()
        if total_length < 1:
            raise ValueError(f"language package length {total_length} is too short")
        self.status = _as_enum(LanguageStatus, ch.read_byte())
        self.cmd = ch.read_string(total_length - 1)

    def write_to(self, ch: BytesChannel) -> None:
        cmd = self.cmd.encode("utf-8", _STRING_ERRORS)
        ch.write_byte(Token.TDS_LANGUAGE)
        ch.write_uint32(1 + len(cmd))
        ch.write_byte(int(self.status))
        ch.write_bytes(cmd)

    def __str__(self) -> str:
        status = _enum_name(LanguageStatus, int(self.status))
        return f"LanguagePackage({status}): {self.cmd}"