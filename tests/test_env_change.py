import pytest

from dblib.tds.env_change import EnvChangePackage, EnvChangePackageField, EnvChangeType
from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.token import Token


def _queue():
    return PacketQueue(lambda: 512)


def _sample():
    return EnvChangePackage(
        members=[
            EnvChangePackageField(EnvChangeType.TDS_ENV_DB, "master", "tempdb"),
            EnvChangePackageField(EnvChangeType.TDS_ENV_PACKSIZE, "2048", ""),
        ]
    )


def test_round_trip():
    original = _sample()
    ch = _queue()
    original.write_to(ch)
    ch.set_position(0, 0)
    assert ch.read_byte() == Token.TDS_ENVCHANGE
    parsed = EnvChangePackage()
    parsed.read_from(ch)
    assert parsed == original


def test_field_write_returns_byte_length():
    member = EnvChangePackageField(EnvChangeType.TDS_ENV_LANG, "us_english", "")
    ch = _queue()
    written = member.write_to(ch)
    assert written == member.byte_length()
    _, end = ch.position()
    assert end == written


def test_field_read_returns_bytes_consumed():
    member = EnvChangePackageField(EnvChangeType.TDS_ENV_CHARSET, "utf8", "iso_1")
    ch = _queue()
    member.write_to(ch)
    ch.set_position(0, 0)
    parsed = EnvChangePackageField()
    n = parsed.read_from(ch)
    assert n == member.byte_length()
    assert parsed == member


def test_empty_field_byte_length():
    assert EnvChangePackageField().byte_length() == 3


def test_length_field_counts_members():
    pkg = _sample()
    ch = _queue()
    pkg.write_to(ch)
    ch.set_position(0, 1)
    assert ch.read_uint16() == sum(m.byte_length() for m in pkg.members)


def test_truncated_input_raises():
    ch = _queue()
    ch.add_packet(Packet(data=bytearray(b"\x0a\x00\x01\x05ab")))
    with pytest.raises(NotEnoughBytesError):
        EnvChangePackage().read_from(ch)


def test_str():
    pkg = EnvChangePackage(
        members=[EnvChangePackageField(EnvChangeType.TDS_ENV_DB, "new", "old")]
    )
    assert str(pkg) == "EnvChangePackage(TDS_ENV_DB(old -> new))"