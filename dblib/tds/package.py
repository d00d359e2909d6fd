"""The interfaces shared by all TDS packages and the byte channels they use."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


class NotEnoughBytesError(EOFError):
    """The channel ran out of bytes before a package could be parsed fully."""

    def __init__(
        self, message: str = "not enough bytes in channel to parse package"
    ) -> None:
        super().__init__(message)


@runtime_checkable
class BytesChannel(Protocol):
    """A stream that packages read their fields from and write them to."""

    def position(self) -> tuple[int, int]: ...

    def set_position(self, index_packet: int, index_data: int) -> None: ...

    def discard_until_current_position(self) -> None: ...

    def read(self, n: int = -1) -> bytes: ...

    def write(self, data: bytes) -> int: ...

    def read_bytes(self, n: int) -> bytes: ...

    def write_bytes(self, data: bytes) -> None: ...

    def read_byte(self) -> int: ...

    def write_byte(self, b: int) -> None: ...

    def read_uint8(self) -> int: ...

    def write_uint8(self, i: int) -> None: ...

    def read_int8(self) -> int: ...

    def write_int8(self, i: int) -> None: ...

    def read_uint16(self) -> int: ...

    def write_uint16(self, i: int) -> None: ...

    def read_int16(self) -> int: ...

    def write_int16(self, i: int) -> None: ...

    def read_uint32(self) -> int: ...

    def write_uint32(self, i: int) -> None: ...

    def read_int32(self) -> int: ...

    def write_int32(self, i: int) -> None: ...

    def read_uint64(self) -> int: ...

    def write_uint64(self, i: int) -> None: ...

    def read_int64(self) -> int: ...

    def write_int64(self, i: int) -> None: ...

    def read_string(self, size: int) -> str: ...

    def write_string(self, s: str) -> None: ...


class Package(ABC):
    """A unit of the TDS protocol that can be parsed from and written to a channel."""

    @abstractmethod
    def read_from(self, ch: BytesChannel) -> None:
        """Read bytes from ch until the package has all the information it needs.

        Raises NotEnoughBytesError when the channel runs dry first.
        """

    @abstractmethod
    def write_to(self, ch: BytesChannel) -> None:
        """Write the package, including its token, to ch."""