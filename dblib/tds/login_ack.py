"""The server's answer to a login request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token
from dblib.tds.version import Version, new_version


class LoginAckStatus(IntEnum):
    """State of the login negotiation."""

    TDS_LOG_SUCCEED = 5
    TDS_LOG_FAIL = 6
    TDS_LOG_NEGOTIATE = 7


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class LoginAckPackage(Package):
    """Communicates the state of the login negotiation."""

    length: int = 0
    status: int = LoginAckStatus.TDS_LOG_SUCCEED
    version: Version = field(default_factory=Version)
    name_length: int = 0
    program_name: str = ""
    program_version: Version = field(default_factory=Version)

    def read_from(self, ch: BytesChannel) -> None:
        self.length = ch.read_uint16()
        self.status = _as_enum(LoginAckStatus, ch.read_uint8())
        self.version = new_version(ch.read_bytes(4))
        self.name_length = ch.read_uint8()
        self.program_name = ch.read_string(self.name_length)
        self.program_version = new_version(ch.read_bytes(4))

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_LOGINACK)
        ch.write_uint16(self.length)
        ch.write_uint8(int(self.status))
        ch.write_bytes(self.version.to_bytes())
        ch.write_uint8(self.name_length)
        ch.write_string(self.program_name)
        ch.write_bytes(self.program_version.to_bytes())

    def __str__(self) -> str:
        return f"LoginAckPackage({_enum_name(LoginAckStatus, int(self.status))})"