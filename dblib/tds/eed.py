"""Extended error data: informational and error messages from the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token

_STRING_ERRORS = "surrogateescape"


class EEDStatus(IntEnum):
    """Status of an EED package."""

    TDS_NO_EED = 0x00
    TDS_EED_FOLLOWS = 0x1
    TDS_EED_INFO = 0x2


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _encode(s: str) -> bytes:
    return s.encode("utf-8", _STRING_ERRORS)


@dataclass
class EEDPackage(Package):
    """Carries an informational or error message."""

    msg_number: int = 0
    state: int = 0
    class_: int = 0
    sql_state: bytes = field(default=b"")
    status: int = EEDStatus.TDS_NO_EED
    tran_state: int = 0
    msg: str = ""
    server_name: str = ""
    proc_name: str = ""
    line_nr: int = 0

    def read_from(self, ch: BytesChannel) -> None:
        length = ch.read_uint16()

        self.msg_number = ch.read_uint32()
        self.state = ch.read_uint8()
        self.class_ = ch.read_uint8()
        n = 6

        sql_state_length = ch.read_uint8()
        self.sql_state = ch.read_bytes(sql_state_length)
        n += 1 + sql_state_length

        self.status = _as_enum(EEDStatus, ch.read_uint8())
        self.tran_state = ch.read_uint16()
        n += 3

        msg_length = ch.read_uint16()
        # Some messages carry a trailing newline, others do not.
        self.msg = ch.read_string(msg_length).removesuffix("\n")
        n += 2 + msg_length

        server_length = ch.read_uint8()
        self.server_name = ch.read_string(server_length)
        n += 1 + server_length

        proc_length = ch.read_uint8()
        self.proc_name = ch.read_string(proc_length)
        n += 1 + proc_length

        self.line_nr = ch.read_uint16()
        n += 2

        if n != length:
            raise ValueError(f"expected to read {length} bytes, read {n} bytes instead")

    def write_to(self, ch: BytesChannel) -> None:
        sql_state = bytes(self.sql_state)
        msg = _encode(self.msg)
        server_name = _encode(self.server_name)
        proc_name = _encode(self.proc_name)

        # 4 msgnumber, 1 state, 1 class, 1+x sqlstate, 1 status, 2 transtate,
        # 2+x msg, 1+x servername, 1+x procname, 2 linenr
        length = 16 + len(sql_state) + len(msg) + len(server_name) + len(proc_name)

        ch.write_byte(Token.TDS_EED)
        ch.write_uint16(length)
        ch.write_uint32(self.msg_number)
        ch.write_uint8(self.state)
        ch.write_uint8(self.class_)
        ch.write_uint8(len(sql_state))
        ch.write_bytes(sql_state)
        ch.write_byte(int(self.status))
        ch.write_uint16(self.tran_state)
        ch.write_uint16(len(msg))
        ch.write_bytes(msg)
        ch.write_uint8(len(server_name))
        ch.write_bytes(server_name)
        ch.write_uint8(len(proc_name))
        ch.write_bytes(proc_name)
        ch.write_uint16(self.line_nr)

    def __str__(self) -> str:
        status = _enum_name(EEDStatus, int(self.status))
        return f"EEDPackage({status} - {self.msg_number}: {self.msg})"