"""A byte channel spread over a queue of TDS packets."""

from __future__ import annotations

import struct
import threading
from typing import Callable, Iterator

from dblib.tds.package import NotEnoughBytesError
from dblib.tds.packet import Packet, new_packet
from dblib.tds.packet_header import PACKET_HEADER_SIZE, PacketHeaderStatus

_STRING_ERRORS = "surrogateescape"


class PacketQueue:
    """Reads and writes bytes across packet boundaries.

    Writing creates new packets of the size reported by packet_size as
    needed; reading walks through the queued packets in order.
    """

    def __init__(
        self, packet_size: Callable[[], int], *, byte_order: str = "little"
    ) -> None:
        if byte_order not in ("little", "big"):
            raise ValueError(f"unknown byte order {byte_order!r}")
        self.packet_size = packet_size
        self.byte_order = byte_order
        self._prefix = "<" if byte_order == "little" else ">"
        self._lock = threading.RLock()
        self._queue: list[Packet] = []
        self._index_packet = 0
        self._index_data = 0
        self._recv_eom = False

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[Packet]:
        return iter(list(self._queue))

    def reset(self) -> None:
        """Discard all packets and return to the initial state."""
        with self._lock:
            self._queue = []
            self._index_packet = 0
            self._index_data = 0
            self._recv_eom = False

    def add_packet(self, packet: Packet) -> None:
        """Append a received packet, noting whether it ends the message."""
        with self._lock:
            self._queue.append(packet)
            eom = PacketHeaderStatus.TDS_BUFSTAT_EOM
            if packet.header.status & eom == eom:
                self._recv_eom = True

    def position(self) -> tuple[int, int]:
        """Return the packet index and the data index within that packet."""
        with self._lock:
            return self._index_packet, self._index_data

    def set_position(self, index_packet: int, index_data: int) -> None:
        """Move to the given packet index and data index."""
        with self._lock:
            self._index_packet = index_packet
            self._index_data = index_data

    def discard_until_current_position(self) -> None:
        """Drop every packet that has been consumed completely."""
        with self._lock:
            self._queue = self._queue[self._index_packet:]
            self._index_packet = 0

            if not self._queue:
                self._index_data = 0
                return

            if self._index_data >= len(self._queue[0].data):
                self._queue = self._queue[1:]
                self._index_data = 0

    def all_packets_consumed(self) -> bool:
        """Return True if no unread bytes are left in the queue."""
        with self._lock:
            if not self._queue and self._index_packet == 0 and self._index_data == 0:
                return True
            if self._index_packet >= len(self._queue):
                return True
            return self._index_packet == len(self._queue) - 1 and self._index_data == len(
                self._queue[self._index_packet].data
            )

    def is_eom(self) -> bool:
        """Return True if everything is consumed and the message has ended."""
        with self._lock:
            return self.all_packets_consumed() and self._recv_eom

    def _remaining(self) -> int:
        if self.all_packets_consumed():
            return 0
        total = sum(len(packet.data) for packet in self._queue[self._index_packet:])
        return max(0, total - self._index_data)

    def read(self, n: int = -1) -> bytes:
        """Read up to n bytes, or all remaining bytes when n is negative."""
        with self._lock:
            available = self._remaining()
            count = available if n < 0 else min(n, available)
            return self.read_bytes(count)

    def write(self, data: bytes) -> int:
        """Write data and return the number of bytes written."""
        self.write_bytes(data)
        return len(data)

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes.

        Raises NotEnoughBytesError if the queue runs out first; the bytes
        read up to then stay consumed.
        """
        with self._lock:
            if n == 0:
                return b""
            out = bytearray()
            while len(out) < n:
                if self.all_packets_consumed():
                    raise NotEnoughBytesError()
                data = self._queue[self._index_packet].data
                start = self._index_data
                end = min(start + (n - len(out)), len(data))
                out += data[start:end]
                self._index_data = end
                if end == len(data):
                    self._index_packet += 1
                    self._index_data = 0
            return bytes(out)

    def write_bytes(self, data: bytes) -> None:
        """Write data, adding packets as the current ones fill up."""
        with self._lock:
            offset = 0
            while offset < len(data):
                if self._index_packet == len(self._queue):
                    self._queue.append(new_packet(self.packet_size()))

                current = self._queue[self._index_packet]
                free = current.header.length - PACKET_HEADER_SIZE - self._index_data

                if free <= 0:
                    current = new_packet(self.packet_size())
                    self._queue.append(current)
                    self._index_packet += 1
                    self._index_data = 0
                    free = current.header.length - PACKET_HEADER_SIZE

                free = min(free, len(data) - offset)
                current.data[self._index_data:self._index_data + free] = data[
                    offset:offset + free
                ]
                offset += free
                self._index_data += free

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(self._prefix + fmt, self.read_bytes(size))[0]

    def _pack(self, fmt: str, value: int) -> None:
        self.write_bytes(struct.pack(self._prefix + fmt, value))

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def write_byte(self, b: int) -> None:
        self.write_bytes(bytes([b]))

    def read_uint8(self) -> int:
        return self._unpack("B", 1)

    def write_uint8(self, i: int) -> None:
        self._pack("B", i)

    def read_int8(self) -> int:
        return self._unpack("b", 1)

    def write_int8(self, i: int) -> None:
        self._pack("b", i)

    def read_uint16(self) -> int:
        return self._unpack("H", 2)

    def write_uint16(self, i: int) -> None:
        self._pack("H", i)

    def read_int16(self) -> int:
        return self._unpack("h", 2)

    def write_int16(self, i: int) -> None:
        self._pack("h", i)

    def read_uint32(self) -> int:
        return self._unpack("I", 4)

    def write_uint32(self, i: int) -> None:
        self._pack("I", i)

    def read_int32(self) -> int:
        return self._unpack("i", 4)

    def write_int32(self, i: int) -> None:
        self._pack("i", i)

    def read_uint64(self) -> int:
        return self._unpack("Q", 8)

    def write_uint64(self, i: int) -> None:
        self._pack("Q", i)

    def read_int64(self) -> int:
        return self._unpack("q", 8)

    def write_int64(self, i: int) -> None:
        self._pack("q", i)

    def read_string(self, size: int) -> str:
        """Read size bytes and decode them as UTF-8."""
        return self.read_bytes(size).decode("utf-8", _STRING_ERRORS)

    def write_string(self, s: str) -> None:
        """Write s encoded as UTF-8."""
        self.write_bytes(s.encode("utf-8", _STRING_ERRORS))