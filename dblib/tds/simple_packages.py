"""Packages with little or no structure of their own."""

from __future__ import annotations

from dataclasses import dataclass, field

from dblib.tds.package import BytesChannel, Package
from dblib.tds.packet_header import PacketHeader
from dblib.tds.token import Token


@dataclass
class ControlPackage(Package):
    """A control package carrying nothing."""

    def read_from(self, ch: BytesChannel) -> None:
        return None

    def write_to(self, ch: BytesChannel) -> None:
        return None

    def __str__(self) -> str:
        return ""


@dataclass
class HeaderOnlyPackage(Package):
    """Carries a bare packet header through the same paths as token packages."""

    header: PacketHeader = field(default_factory=PacketHeader)

    def read_from(self, ch: BytesChannel) -> None:
        raise TypeError("HeaderOnlyPackages cannot be read from a BytesChannel")

    def write_to(self, ch: BytesChannel) -> None:
        raise TypeError("HeaderOnlyPackages cannot be written to a BytesChannel")

    def __str__(self) -> str:
        return f"Header: {self.header}"


@dataclass
class TokenlessPackage(Package):
    """A blob of data sent without a token."""

    data: bytearray = field(default_factory=bytearray)

    def read_from(self, ch: BytesChannel) -> None:
        self.data += ch.read()

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_bytes(bytes(self.data))

    def __str__(self) -> str:
        token = f"{self.data[0]:x}" if self.data else ""
        return f"TokenlessPackage(possibleToken={token}) {bytes(self.data)!r}"


@dataclass
class LogoutPackage(Package):
    """Terminates a connection."""

    options: int = 0

    def read_from(self, ch: BytesChannel) -> None:
        self.options = ch.read_uint8()
        if self.options != 0:
            raise ValueError(f"unhandled logout option {self.options}")

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_LOGOUT)
        ch.write_uint8(self.options)

    def __str__(self) -> str:
        return f"LogoutPackage({self.options})"


@dataclass
class ReturnStatusPackage(Package):
    """The return status of a stored procedure."""

    return_value: int = 0

    def read_from(self, ch: BytesChannel) -> None:
        self.return_value = ch.read_int32()

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_int32(self.return_value)

    def __str__(self) -> str:
        return f"ReturnStatusPackage({self.return_value})"