import struct

import pytest

from dblib.tds.done import (
    DoneInProcPackage,
    DonePackage,
    DoneProcPackage,
    DoneState,
    TransState,
)
from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.token import Token


def _queue():
    return PacketQueue(lambda: 512)


def test_round_trip():
    ch = _queue()
    original = DonePackage(
        status=DoneState.TDS_DONE_MORE | DoneState.TDS_DONE_COUNT,
        tran_state=TransState.TDS_TRAN_IN_PROGRESS,
        count=42,
    )
    original.write_to(ch)
    ch.set_position(0, 0)
    assert ch.read_byte() == Token.TDS_DONE
    parsed = DonePackage()
    parsed.read_from(ch)
    assert parsed == original


def test_read_from_little_endian_bytes():
    ch = _queue()
    ch.add_packet(Packet(data=bytearray(struct.pack("<HHi", 0x11, 0x2, -7))))
    pkg = DonePackage()
    pkg.read_from(ch)
    assert pkg.status == DoneState.TDS_DONE_MORE | DoneState.TDS_DONE_COUNT
    assert pkg.tran_state == TransState.TDS_TRAN_COMPLETED
    assert pkg.count == -7


def test_truncated_input_raises():
    ch = _queue()
    ch.add_packet(Packet(data=bytearray(b"\x01\x00\x01")))
    with pytest.raises(NotEnoughBytesError):
        DonePackage().read_from(ch)


def test_str_defaults():
    assert str(DonePackage(count=3)) == (
        "DonePackage(TDS_DONE_FINAL, TDS_NOT_IN_TRAN, Count=3)"
    )


def test_str_combined_status():
    pkg = DonePackage(
        status=DoneState.TDS_DONE_MORE | DoneState.TDS_DONE_ERROR,
        tran_state=TransState.TDS_TRAN_STMT_FAIL,
    )
    assert str(pkg) == (
        "DonePackage(TDS_DONE_MORE|TDS_DONE_ERROR, TDS_TRAN_STMT_FAIL, Count=0)"
    )


@pytest.mark.parametrize("cls", [DoneProcPackage, DoneInProcPackage])
def test_aliases_parse_like_done_package(cls):
    ch = _queue()
    ch.add_packet(Packet(data=bytearray(struct.pack("<HHi", 0x8, 0x0, 5))))
    pkg = cls()
    pkg.read_from(ch)
    assert pkg == DonePackage(
        status=DoneState.TDS_DONE_PROC,
        tran_state=TransState.TDS_NOT_IN_TRAN,
        count=5,
    )
    assert str(pkg) == "DonePackage(TDS_DONE_PROC, TDS_NOT_IN_TRAN, Count=5)"