import pytest

from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet, new_packet
from dblib.tds.packet_header import PacketHeader, PacketHeaderStatus
from dblib.tds.packet_queue import PacketQueue


def fake_packet_size():
    return 512


def fake_packet(*bs):
    packet = new_packet(fake_packet_size())
    packet.data[: len(bs)] = bytes(bs)
    return packet


def data_packet(data):
    return Packet(data=bytearray(data))


def prep_queue(idx_packet, idx_data, *packets):
    queue = PacketQueue(fake_packet_size)
    for packet in packets:
        queue.add_packet(packet if packet is not None else fake_packet())
    queue.set_position(idx_packet, idx_data)
    return queue


@pytest.mark.parametrize(
    "queue, expected",
    [
        (prep_queue(0, 0), prep_queue(0, 0)),
        (prep_queue(1, 0, None, None), prep_queue(0, 0, None)),
        (prep_queue(0, fake_packet_size(), None), prep_queue(0, 0)),
        (
            prep_queue(3, 14, *(data_packet(bytes(35)) for _ in range(6))),
            prep_queue(0, 14, *(data_packet(bytes(35)) for _ in range(3))),
        ),
    ],
    ids=[
        "no action",
        "shift by one by index packet",
        "shift by one by index data",
        "shift multiple by both",
    ],
)
def test_discard_until_current_position(queue, expected):
    queue.discard_until_current_position()
    assert queue.position() == expected.position()
    assert queue.packet_size() == expected.packet_size()
    assert [bytes(p.data) for p in queue] == [bytes(p.data) for p in expected]


@pytest.mark.parametrize(
    "queue, count, expected",
    [
        (prep_queue(0, 0), 0, b""),
        (prep_queue(0, 0, data_packet([0x1])), 1, b"\x01"),
        (
            prep_queue(
                0,
                0,
                data_packet([0x1, 0x2]),
                data_packet([0x3]),
                data_packet([0x4, 0x5]),
            ),
            5,
            b"\x01\x02\x03\x04\x05",
        ),
    ],
    ids=["no action", "read byte", "read over multiple packets"],
)
def test_read_bytes(queue, count, expected):
    assert queue.read_bytes(count) == expected


def test_read_bytes_raises_when_empty():
    queue = prep_queue(0, 0)
    with pytest.raises(NotEnoughBytesError):
        queue.read_bytes(1)


def test_read_bytes_raises_when_short():
    queue = prep_queue(0, 0, data_packet([0x1, 0x2]))
    with pytest.raises(NotEnoughBytesError):
        queue.read_bytes(3)


def test_write_bytes_nothing():
    queue = prep_queue(0, 0)
    queue.write_bytes(b"")
    assert queue.position() == (0, 0)
    assert [bytes(p.data) for p in queue] == []


def test_write_bytes_single_byte():
    queue = prep_queue(0, 0)
    queue.write_bytes(b"\x01")
    assert queue.position() == (0, 1)
    assert [bytes(p.data) for p in queue] == [bytes(fake_packet(0x1).data)]


@pytest.mark.parametrize(
    "queue, expected",
    [
        (prep_queue(0, 0), True),
        (prep_queue(0, 35, data_packet(bytes(35))), True),
        (prep_queue(0, 15, data_packet(bytes(35))), False),
        (prep_queue(1, 0, data_packet(bytes(35))), True),
        (prep_queue(0, 0, data_packet([0x1])), False),
    ],
    ids=[
        "empty queue",
        "finished queue",
        "unfinished queue",
        "indices overshooting",
        "one unread byte",
    ],
)
def test_all_packets_consumed(queue, expected):
    assert queue.all_packets_consumed() is expected


def test_write_spans_packets_little_endian():
    queue = PacketQueue(lambda: 10)
    queue.write_uint32(0x01020304)
    packets = list(queue)
    assert [bytes(p.data) for p in packets] == [b"\x04\x03", b"\x02\x01"]
    assert queue.position() == (1, 2)
    queue.set_position(0, 0)
    assert queue.read_uint32() == 0x01020304


def test_big_endian_layout():
    queue = PacketQueue(fake_packet_size, byte_order="big")
    queue.write_uint16(0x0102)
    assert bytes(list(queue)[0].data[:2]) == b"\x01\x02"


def test_unknown_byte_order_rejected():
    with pytest.raises(ValueError):
        PacketQueue(fake_packet_size, byte_order="middle")


@pytest.mark.parametrize(
    "writer, reader, value",
    [
        ("write_uint8", "read_uint8", 200),
        ("write_int8", "read_int8", -5),
        ("write_uint16", "read_uint16", 0xBEEF),
        ("write_int16", "read_int16", -1234),
        ("write_uint32", "read_uint32", 0xDEADBEEF),
        ("write_int32", "read_int32", -123456),
        ("write_uint64", "read_uint64", 0x0102030405060708),
        ("write_int64", "read_int64", -(2**40)),
        ("write_byte", "read_byte", 0x7F),
    ],
)
def test_integer_round_trip(writer, reader, value):
    queue = PacketQueue(lambda: 12)
    getattr(queue, writer)(value)
    queue.set_position(0, 0)
    assert getattr(queue, reader)() == value


def test_string_round_trip():
    queue = PacketQueue(lambda: 11)
    queue.write_string("héllo world")
    size = len("héllo world".encode())
    queue.set_position(0, 0)
    assert queue.read_string(size) == "héllo world"


def test_read_and_write_file_like():
    queue = PacketQueue(lambda: 12)
    assert queue.write(b"abcdefghij") == 10
    queue.set_position(0, 0)
    assert queue.read(3) == b"abc"
    assert queue.read() == b"defghij" + bytes(len(queue) * 4 - 10)


def test_read_at_end_returns_empty():
    queue = prep_queue(0, 0, data_packet(b"xy"))
    assert queue.read() == b"xy"
    assert queue.read(5) == b""


def test_is_eom_after_final_packet_consumed():
    queue = PacketQueue(fake_packet_size)
    packet = Packet(
        header=PacketHeader(status=PacketHeaderStatus.TDS_BUFSTAT_EOM),
        data=bytearray(b"\x01\x02"),
    )
    queue.add_packet(packet)
    assert queue.is_eom() is False
    assert queue.read_bytes(2) == b"\x01\x02"
    assert queue.is_eom() is True


def test_is_eom_false_without_eom_status():
    queue = prep_queue(0, 0, data_packet(b"\x01"))
    queue.read_bytes(1)
    assert queue.all_packets_consumed() is True
    assert queue.is_eom() is False


def test_reset_clears_state():
    queue = prep_queue(1, 3, None, None)
    queue.reset()
    assert queue.position() == (0, 0)
    assert len(queue) == 0