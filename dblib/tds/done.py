"""The package that finishes a stream of result packages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from dblib.tds.helper import _enum_name, de_bitmask_string
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token


class DoneState(IntEnum):
    """Status bits of a done package; several may be combined."""

    TDS_DONE_FINAL = 0x0
    TDS_DONE_MORE = 0x1
    TDS_DONE_ERROR = 0x2
    TDS_DONE_INXACT = 0x4
    TDS_DONE_PROC = 0x8
    TDS_DONE_COUNT = 0x10
    TDS_DONE_ATTN = 0x20
    TDS_DONE_EVENT = 0x40
    TDS_DONE_CUMULATIVE = 0x80


class TransState(IntEnum):
    """Transaction state reported by a done package."""

    TDS_NOT_IN_TRAN = 0x0
    TDS_TRAN_IN_PROGRESS = 0x1
    TDS_TRAN_COMPLETED = 0x2
    TDS_TRAN_FAIL = 0x3
    TDS_TRAN_STMT_FAIL = 0x4


@dataclass
class DonePackage(Package):
    """Finishes a package stream, carrying status, transaction state and row count."""

    status: int = DoneState.TDS_DONE_FINAL
    tran_state: int = TransState.TDS_NOT_IN_TRAN
    count: int = 0

    def read_from(self, ch: BytesChannel) -> None:
        self.status = ch.read_uint16()
        self.tran_state = ch.read_uint16()
        self.count = ch.read_int32()

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_DONE)
        ch.write_uint16(int(self.status))
        ch.write_uint16(int(self.tran_state))
        ch.write_int32(self.count)

    def __str__(self) -> str:
        status = de_bitmask_string(
            int(self.status),
            DoneState.TDS_DONE_CUMULATIVE,
            lambda i: _enum_name(DoneState, i),
            DoneState.TDS_DONE_FINAL.name,
        )
        tran_state = de_bitmask_string(
            int(self.tran_state),
            TransState.TDS_TRAN_STMT_FAIL,
            lambda i: _enum_name(TransState, i),
            TransState.TDS_NOT_IN_TRAN.name,
        )
        return f"DonePackage({status}, {tran_state}, Count={self.count})"


DoneProcPackage = DonePackage
DoneInProcPackage = DonePackage