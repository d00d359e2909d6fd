"""Packages that tell in which order result columns are to be listed."""

from __future__ import annotations

from dataclasses import dataclass, field

from dblib.tds.package import BytesChannel, Package


@dataclass
class OrderByPackage(Package):
    """Column order of a result set, for up to 255 columns."""

    column_order: list[int] = field(default_factory=list)

    def read_from(self, ch: BytesChannel) -> None:
        column_count = ch.read_uint16()
        self.column_order = [ch.read_uint8() for _ in range(column_count)]

    def write_to(self, ch: BytesChannel) -> None:
        raise TypeError(f"{type(self).__name__} cannot be written to a BytesChannel")

    def __str__(self) -> str:
        return f"{type(self).__name__}({len(self.column_order)}): {self.column_order}"


@dataclass
class OrderBy2Package(OrderByPackage):
    """Column order of a result set with more than 255 columns."""

    def read_from(self, ch: BytesChannel) -> None:
        total_bytes = ch.read_uint32()
        column_count = ch.read_uint16()
        self.column_order = [ch.read_uint16() for _ in range(column_count)]
        n = 2 + 2 * column_count
        if n != total_bytes:
            raise ValueError(
                f"expected to read {total_bytes} bytes, read {n} bytes instead"
            )

    def write_to(self, ch: BytesChannel) -> None:
        raise TypeError(f"{type(self).__name__} cannot be written to a BytesChannel")