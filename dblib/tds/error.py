"""The deprecated error package."""

from __future__ import annotations

from dataclasses import dataclass

from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token

_STRING_ERRORS = "surrogateescape"


def _encode(s: str) -> bytes:
    return s.encode("utf-8", _STRING_ERRORS)


@dataclass
class ErrorPackage(Package):
    """A deprecated package carrying an error message."""

    error_number: int = 0
    state: int = 0
    class_: int = 0
    error_msg: str = ""
    server_name: str = ""
    proc_name: str = ""
    line_nr: int = 0

    def read_from(self, ch: BytesChannel) -> None:
        expect_length = ch.read_uint16()

        self.error_number = ch.read_int32()
        n = 4

        msg_length = ch.read_uint16()
        self.error_msg = ch.read_string(msg_length)
        n += 2 + msg_length

        server_length = ch.read_uint8()
        self.server_name = ch.read_string(server_length)
        n += 1 + server_length

        proc_length = ch.read_uint8()
        self.proc_name = ch.read_string(proc_length)
        n += 1 + proc_length

        self.line_nr = ch.read_uint16()
        n += 2

        if n != expect_length:
            raise ValueError(
                f"expected to read {expect_length} bytes, read {n} bytes instead"
            )

    def write_to(self, ch: BytesChannel) -> None:
        msg = _encode(self.error_msg)
        server_name = _encode(self.server_name)
        proc_name = _encode(self.proc_name)

        # 4 errornumber, 1 state, 1 class, 2+x errormsg, 1+x servername,
        # 1+x procname, 2 linenr
        expect_length = 12 + len(msg) + len(server_name) + len(proc_name)

        ch.write_byte(Token.TDS_ERROR)
        ch.write_uint16(expect_length)
        ch.write_int32(self.error_number)
        ch.write_uint8(self.state)
        ch.write_uint8(self.class_)
        ch.write_uint16(len(msg))
        ch.write_bytes(msg)
        ch.write_uint8(len(server_name))
        ch.write_bytes(server_name)
        ch.write_uint8(len(proc_name))
        ch.write_bytes(proc_name)
        ch.write_uint16(self.line_nr)

    def __str__(self) -> str:
        return f"ErrorPackage({self.error_number}: {self.error_msg})"