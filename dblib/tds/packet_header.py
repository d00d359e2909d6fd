"""The eight-byte header that precedes every TDS packet."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO

from dblib.tds.helper import _enum_name

PACKET_HEADER_SIZE = 8

# The header is always big endian, whatever the payload uses.
_HEADER_FORMAT = struct.Struct(">BBHHBB")


class EOFAfterZeroReadError(EOFError):
    """The stream ended before a single byte could be read."""

    def __init__(self, message: str = "received EOF after reading 0 bytes") -> None:
        super().__init__(message)


class PacketHeaderType(IntEnum):
    """The kind of message a packet belongs to."""

    TDS_BUF_LANG = 1
    TDS_BUF_LOGIN = 2
    TDS_BUF_RPC = 3
    TDS_BUF_RESPONSE = 4
    TDS_BUF_UNFMT = 5
    TDS_BUF_ATTN = 6
    TDS_BUF_BULK = 7
    TDS_BUF_SETUP = 8
    TDS_BUF_CLOSE = 9
    TDS_BUF_ERROR = 10
    TDS_BUF_PROTACK = 11
    TDS_BUF_ECHO = 12
    TDS_BUF_LOGOUT = 13
    TDS_BUF_ENDPARAM = 14
    TDS_BUF_NORMAL = 15
    TDS_BUF_URGENT = 16
    TDS_BUF_MIGRATE = 17
    TDS_BUF_HELLO = 18
    TDS_BUF_CMDSEQ_NORMAL = 19
    TDS_BUF_CMDSEQ_LOGIN = 20
    TDS_BUF_CMDSEQ_LIVENESS = 21
    TDS_BUF_CMDSEQ_RESERVED1 = 22
    TDS_BUF_CMDSEQ_RESERVED2 = 23


class PacketHeaderStatus(IntEnum):
    """Status bits of a packet; several may be combined."""

    TDS_BUFSTAT_EOM = 0x1
    TDS_BUFSTAT_ATTNACK = 0x2
    TDS_BUFSTAT_ATTN = 0x4
    TDS_BUFSTAT_EVENT = 0x8
    TDS_BUFSTAT_SEAL = 0x10
    TDS_BUFSTAT_ENCRYPT = 0x20
    TDS_BUFSTAT_SYMENCRYPT = 0x40


@dataclass
class PacketHeader:
    """Header fields of a packet; length counts the header itself."""

    msg_type: int = 0
    status: int = 0
    length: int = 0
    channel: int = 0
    packet_nr: int = 0
    window: int = 0

    def to_bytes(self) -> bytes:
        """Encode the header into its eight wire bytes."""
        return _HEADER_FORMAT.pack(
            self.msg_type,
            self.status,
            self.length,
            self.channel,
            self.packet_nr,
            self.window,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> PacketHeader:
        """Decode a header from exactly eight bytes."""
        if len(data) != PACKET_HEADER_SIZE:
            raise ValueError(
                f"passed buffer has unexpected length, expected {PACKET_HEADER_SIZE} "
                f"bytes, buffer length is {len(data)}"
            )
        msg_type, status, length, channel, packet_nr, window = _HEADER_FORMAT.unpack(
            bytes(data)
        )
        return cls(
            msg_type=msg_type,
            status=status,
            length=length,
            channel=channel,
            packet_nr=packet_nr,
            window=window,
        )

    @classmethod
    def read_from(cls, stream: BinaryIO) -> PacketHeader:
        """Read one header from a binary stream."""
        data = stream.read(PACKET_HEADER_SIZE) or b""
        if not data:
            raise EOFAfterZeroReadError()
        if len(data) != PACKET_HEADER_SIZE:
            raise EOFError(
                f"read {len(data)} of {PACKET_HEADER_SIZE} expected bytes from reader"
            )
        return cls.from_bytes(data)

    def write_to(self, stream: BinaryIO) -> int:
        """Write the header to a binary stream and return the bytes written."""
        written = stream.write(self.to_bytes())
        return PACKET_HEADER_SIZE if written is None else written

    def __str__(self) -> str:
        return (
            f"MsgType: {_enum_name(PacketHeaderType, self.msg_type)}, "
            f"Status: {_enum_name(PacketHeaderStatus, self.status)}, "
            f"Length: {self.length}, Channel: {self.channel}, "
            f"PacketNr: {self.packet_nr}, Window: {self.window}"
        )