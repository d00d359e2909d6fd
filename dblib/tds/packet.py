"""A single TDS packet: header plus payload."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import BinaryIO

from dblib.tds.helper import _enum_name, de_bitmask_string
from dblib.tds.packet_header import (
    PACKET_HEADER_SIZE,
    EOFAfterZeroReadError,
    PacketHeader,
    PacketHeaderStatus,
    PacketHeaderType,
)

_IDLE_WAIT = 0.001


@dataclass
class Packet:
    """One packet of a message."""

    header: PacketHeader = field(default_factory=PacketHeader)
    data: bytearray = field(default_factory=bytearray)

    def to_bytes(self) -> bytes:
        """Return header and payload as sent on the wire, sized by header.length."""
        if self.header.length < PACKET_HEADER_SIZE:
            raise ValueError(
                f"packet length {self.header.length} is smaller than the header"
            )
        out = bytearray(self.header.length)
        out[:PACKET_HEADER_SIZE] = self.header.to_bytes()
        count = min(len(out) - PACKET_HEADER_SIZE, len(self.data))
        out[PACKET_HEADER_SIZE:PACKET_HEADER_SIZE + count] = self.data[:count]
        return bytes(out)

    @classmethod
    def read_from(cls, stream: BinaryIO, timeout: float) -> Packet:
        """Read one packet from stream.

        Reads that return no data are retried until a full packet is read;
        EOFAfterZeroReadError is raised once no data arrived for timeout seconds.
        """
        header = PacketHeader.read_from(stream)
        if header.length < PACKET_HEADER_SIZE:
            raise ValueError(
                f"packet length {header.length} is smaller than the header"
            )
        body_length = header.length - PACKET_HEADER_SIZE
        data = bytearray()
        deadline = time.monotonic() + timeout
        while len(data) < body_length:
            chunk = stream.read(body_length - len(data))
            if chunk:
                data += chunk
                deadline = time.monotonic() + timeout
                continue
            if time.monotonic() > deadline:
                raise EOFAfterZeroReadError()
            time.sleep(_IDLE_WAIT)
        return cls(header=header, data=data)

    def write_to(self, stream: BinaryIO) -> int:
        """Write the packet to stream and return the bytes written."""
        payload = self.to_bytes()
        written = stream.write(payload)
        return len(payload) if written is None else written

    def __str__(self) -> str:
        status = de_bitmask_string(
            self.header.status,
            PacketHeaderStatus.TDS_BUFSTAT_SYMENCRYPT,
            lambda i: _enum_name(PacketHeaderStatus, i),
            "no status",
        )
        return (
            f"Type: {_enum_name(PacketHeaderType, self.header.msg_type)}, "
            f"Status: {status}, Length: {self.header.length}, "
            f"Channel: {self.header.channel}, PacketNr: {self.header.packet_nr}, "
            f"Window: {self.header.window}, DataLen: {len(self.data)}"
        )


def new_packet(packet_size: int) -> Packet:
    """Create an empty packet of packet_size bytes including the header."""
    return Packet(
        header=PacketHeader(length=packet_size),
        data=bytearray(packet_size - PACKET_HEADER_SIZE),
    )