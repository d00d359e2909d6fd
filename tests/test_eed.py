import pytest

from dblib.tds.eed import EEDPackage, EEDStatus
from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.token import Token


def _queue():
    return PacketQueue(lambda: 512)


def _sample():
    return EEDPackage(
        msg_number=5701,
        state=1,
        class_=10,
        sql_state=b"ZZ000",
        status=EEDStatus.TDS_EED_INFO,
        tran_state=0,
        msg="Changed database context to 'master'.",
        server_name="testserver",
        proc_name="sp_test",
        line_nr=12,
    )


def _written(pkg):
    ch = _queue()
    pkg.write_to(ch)
    ch.set_position(0, 0)
    return ch


def test_round_trip():
    original = _sample()
    ch = _written(original)
    assert ch.read_byte() == Token.TDS_EED
    parsed = EEDPackage()
    parsed.read_from(ch)
    assert parsed == original


def test_trailing_newline_is_stripped():
    original = _sample()
    original.msg = "hello\n"
    ch = _written(original)
    ch.read_byte()
    parsed = EEDPackage()
    parsed.read_from(ch)
    assert parsed.msg == "hello"
    assert parsed.line_nr == original.line_nr


def test_length_mismatch_raises():
    ch = _written(_sample())
    ch.set_position(0, 1)
    ch.write_uint16(0)
    ch.set_position(0, 0)
    ch.read_byte()
    with pytest.raises(ValueError):
        EEDPackage().read_from(ch)


def test_truncated_input_raises():
    ch = _queue()
    ch.add_packet(Packet(data=bytearray(b"\x20\x00\x01\x02")))
    with pytest.raises(NotEnoughBytesError):
        EEDPackage().read_from(ch)


def test_length_field_matches_bytes_following_it():
    ch = _written(_sample())
    ch.read_byte()
    length = ch.read_uint16()
    EEDPackage().read_from(_written(_sample())) if False else None
    ch.set_position(0, 1)
    parsed = EEDPackage()
    parsed.read_from(ch)
    _, end = ch.position()
    assert end - 3 == length


def test_str():
    pkg = EEDPackage(msg_number=5, status=EEDStatus.TDS_EED_INFO, msg="msg")
    assert str(pkg) == "EEDPackage(TDS_EED_INFO - 5: msg)"