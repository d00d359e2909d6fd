import pytest

from dblib.tds.language import LanguagePackage, LanguageStatus
from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.token import Token


def _queue_with(raw: bytes) -> PacketQueue:
    queue = PacketQueue(lambda: 512)
    queue.add_packet(Packet(data=bytearray(raw)))
    return queue


def _written(pkg) -> bytes:
    queue = PacketQueue(lambda: 512)
    pkg.write_to(queue)
    _, index_data = queue.position()
    return bytes(list(queue)[0].data[:index_data])


def _round_trip(pkg):
    queue = PacketQueue(lambda: 512)
    pkg.write_to(queue)
    queue.set_position(0, 0)
    token = queue.read_byte()
    result = LanguagePackage()
    result.read_from(queue)
    return token, result


def test_round_trip_keeps_fields():
    pkg = LanguagePackage(status=LanguageStatus.TDS_LANGUAGE_HASARGS, cmd="select 1")
    token, result = _round_trip(pkg)
    assert token == Token.TDS_LANGUAGE
    assert result == pkg


def test_written_bytes_start_with_token_and_end_with_command():
    data = _written(LanguagePackage(cmd="select @@version"))
    assert data[0] == 0x21
    assert data.endswith(b"select @@version")


def test_length_field_counts_status_and_command():
    cmd = "select name from sysobjects"
    data = _written(LanguagePackage(cmd=cmd))
    assert int.from_bytes(data[1:5], "little") == len(cmd) + 1


def test_read_from_raw_bytes():
    cmd = b"use master"
    raw = (len(cmd) + 1).to_bytes(4, "little") + bytes([0]) + cmd
    pkg = LanguagePackage()
    pkg.read_from(_queue_with(raw))
    assert pkg.cmd == "use master"
    assert pkg.status == LanguageStatus.TDS_LANGUAGE_NOARGS


def test_zero_length_is_rejected():
    with pytest.raises(ValueError):
        LanguagePackage().read_from(_queue_with(bytes(5)))


def test_truncated_input_raises():
    raw = (20).to_bytes(4, "little") + bytes([0]) + b"abc"
    with pytest.raises(NotEnoughBytesError):
        LanguagePackage().read_from(_queue_with(raw))


def test_str_names_status():
    pkg = LanguagePackage(status=LanguageStatus.TDS_LANGUAGE_HASARGS, cmd="go")
    assert str(pkg) == "LanguagePackage(TDS_LANGUAGE_HASARGS): go"