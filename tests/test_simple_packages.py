import pytest

from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet
from dblib.tds.packet_header import PacketHeader
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.simple_packages import (
    ControlPackage,
    HeaderOnlyPackage,
    LogoutPackage,
    ReturnStatusPackage,
    TokenlessPackage,
)
from dblib.tds.token import Token


def _queue():
    return PacketQueue(lambda: 512)


def _filled(data):
    queue = _queue()
    queue.add_packet(Packet(data=bytearray(data)))
    return queue


def test_control_package_writes_nothing():
    queue = _queue()
    ControlPackage().write_to(queue)
    assert queue.position() == (0, 0)
    assert len(queue) == 0
    assert str(ControlPackage()) == ""


def test_header_only_cannot_be_read_or_written():
    pkg = HeaderOnlyPackage(header=PacketHeader(length=512))
    with pytest.raises(TypeError):
        pkg.read_from(_queue())
    with pytest.raises(TypeError):
        pkg.write_to(_queue())
    assert str(pkg).startswith("Header: ")


def test_tokenless_reads_everything():
    pkg = TokenlessPackage()
    pkg.read_from(_filled(b"\x01\x02\x03"))
    assert bytes(pkg.data) == b"\x01\x02\x03"


def test_tokenless_round_trip():
    queue = _queue()
    TokenlessPackage(data=bytearray(b"abc")).write_to(queue)
    queue.set_position(0, 0)
    assert queue.read_bytes(3) == b"abc"


def test_logout_wire_bytes():
    queue = _queue()
    LogoutPackage().write_to(queue)
    queue.set_position(0, 0)
    assert queue.read_bytes(2) == bytes([Token.TDS_LOGOUT, 0])


def test_logout_round_trip():
    queue = _queue()
    LogoutPackage().write_to(queue)
    queue.set_position(0, 0)
    assert queue.read_byte() == Token.TDS_LOGOUT
    pkg = LogoutPackage(options=7)
    pkg.read_from(queue)
    assert pkg.options == 0


def test_logout_rejects_options():
    with pytest.raises(ValueError):
        LogoutPackage().read_from(_filled(b"\x01"))


def test_logout_empty_channel():
    with pytest.raises(NotEnoughBytesError):
        LogoutPackage().read_from(_queue())


@pytest.mark.parametrize("value", [0, -5, 2**31 - 1, -(2**31)])
def test_return_status_round_trip(value):
    queue = _queue()
    ReturnStatusPackage(return_value=value).write_to(queue)
    queue.set_position(0, 0)
    pkg = ReturnStatusPackage()
    pkg.read_from(queue)
    assert pkg.return_value == value


def test_return_status_truncated():
    with pytest.raises(NotEnoughBytesError):
        ReturnStatusPackage().read_from(_filled(b"\x01\x02"))