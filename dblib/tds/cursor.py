"""Packages that open, fetch from, update, delete through and close cursors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from dblib.tds.helper import _enum_name, de_bitmask_string
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token

_STRING_ERRORS = "surrogateescape"


class CursorCloseOption(IntEnum):
    """Options of a cursor close package."""

    TDS_CUR_COPT_UNUSED = 0x0
    TDS_CUR_COPT_DEALLOC = 0x1


class CursorDeleteStatus(IntEnum):
    """Status bitmask of a cursor delete package; currently unused."""

    TDS_CUR_DELSTAT_UNUSED = 0


class CursorFetchType(IntEnum):
    """The direction in which cursor rows are fetched."""

    TDS_CUR_NEXT = 1
    TDS_CUR_PREV = 2
    TDS_CUR_FIRST = 3
    TDS_CUR_LAST = 4
    TDS_CUR_ABS = 5
    TDS_CUR_REL = 6


class CursorOStatus(IntEnum):
    """Status of a cursor when it is opened or updated."""

    TDS_CUR_OSTAT_UNUSED = 0
    TDS_CUR_OSTAT_HASARGS = 1
    TDS_CUR_CONSEC_UPDS = 2


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _byte_len(s: str) -> int:
    return len(s.encode("utf-8", _STRING_ERRORS))


def _check_length(expected: int, read: int) -> None:
    if read != expected:
        raise ValueError(
            f"expected to read {expected} bytes, read {read} bytes instead"
        )


@dataclass
class _CursorReference(Package):
    """A cursor addressed by id, or by name when the id is zero."""

    cursor_id: int = 0
    name: str = ""

    def _read_cursor(self, ch: BytesChannel) -> int:
        self.cursor_id = ch.read_int32()
        n = 4
        if self.cursor_id == 0:
            name_length = ch.read_uint8()
            self.name = ch.read_string(name_length)
            n += 1 + name_length
        return n

    def _write_cursor(self, ch: BytesChannel) -> None:
        ch.write_int32(self.cursor_id)
        if self.cursor_id == 0:
            ch.write_uint8(_byte_len(self.name))
            ch.write_string(self.name)

    def _cursor_length(self) -> int:
        if self.cursor_id == 0:
            return 4 + 1 + _byte_len(self.name)
        return 4


@dataclass
class CurClosePackage(_CursorReference):
    """Closes a cursor."""

    options: int = CursorCloseOption.TDS_CUR_COPT_UNUSED

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        n = self._read_cursor(ch)
        self.options = _as_enum(CursorCloseOption, ch.read_uint8())
        n += 1
        _check_length(total_length, n)

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CURCLOSE)
        ch.write_uint16(self._cursor_length() + 1)
        self._write_cursor(ch)
        ch.write_uint8(int(self.options))

    def __str__(self) -> str:
        options = de_bitmask_string(
            int(self.options),
            CursorCloseOption.TDS_CUR_COPT_DEALLOC,
            lambda i: _enum_name(CursorCloseOption, i),
            CursorCloseOption.TDS_CUR_COPT_UNUSED.name,
        )
        return f"CurClosePackage({self.cursor_id}, {self.name}, {options})"


@dataclass
class CurDeletePackage(_CursorReference):
    """Deletes the current row of a cursor."""

    status: int = CursorDeleteStatus.TDS_CUR_DELSTAT_UNUSED
    table_name: str = ""

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        n = self._read_cursor(ch)
        self.status = _as_enum(CursorDeleteStatus, ch.read_uint8())
        n += 1
        table_name_length = ch.read_uint8()
        n += 1
        self.table_name = ch.read_string(table_name_length)
        n += table_name_length
        _check_length(total_length, n)

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CURDELETE)
        table_name_length = _byte_len(self.table_name)
        ch.write_uint16(self._cursor_length() + 1 + 1 + table_name_length)
        self._write_cursor(ch)
        ch.write_uint8(int(self.status))
        ch.write_uint8(table_name_length)
        ch.write_string(self.table_name)

    def __str__(self) -> str:
        status = _enum_name(CursorDeleteStatus, int(self.status))
        return (
            f"CurDeletePackage({self.cursor_id}, {self.name}, "
            f"{self.table_name}, {status})"
        )


@dataclass
class CurFetchPackage(_CursorReference):
    """Fetches more rows from a cursor."""

    type: int = CursorFetchType.TDS_CUR_NEXT
    row_number: int = 0

    def _has_row_number(self) -> bool:
        return self.type in (CursorFetchType.TDS_CUR_ABS, CursorFetchType.TDS_CUR_REL)

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        n = self._read_cursor(ch)
        self.type = _as_enum(CursorFetchType, ch.read_uint8())
        n += 1
        if self._has_row_number():
            self.row_number = ch.read_int32()
            n += 4
        _check_length(total_length, n)

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CURFETCH)
        total_length = self._cursor_length() + 1
        if self._has_row_number():
            total_length += 4
        ch.write_uint16(total_length)
        self._write_cursor(ch)
        ch.write_uint8(int(self.type))
        if self._has_row_number():
            ch.write_int32(self.row_number)

    def __str__(self) -> str:
        fetch_type = _enum_name(CursorFetchType, int(self.type))
        return (
            f"CurFetchPackage({self.cursor_id}, {self.name}, "
            f"{fetch_type}, {self.row_number})"
        )


@dataclass
class CurOpenPackage(_CursorReference):
    """Opens a declared cursor."""

    status: int = CursorOStatus.TDS_CUR_OSTAT_UNUSED

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        n = self._read_cursor(ch)
        self.status = _as_enum(CursorOStatus, ch.read_uint8())
        n += 1
        _check_length(total_length, n)

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CUROPEN)
        ch.write_uint16(self._cursor_length() + 1)
        self._write_cursor(ch)
        ch.write_uint8(int(self.status))

    def __str__(self) -> str:
        status = _enum_name(CursorOStatus, int(self.status))
        return f"CurOpenPackage({self.cursor_id}, {self.name}, {status})"


@dataclass
class CurUpdatePackage(_CursorReference):
    """Updates the current row of a cursor."""

    status: int = CursorOStatus.TDS_CUR_OSTAT_UNUSED
    table_name: str = ""
    stmt: str = ""

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        n = self._read_cursor(ch)
        self.status = _as_enum(CursorOStatus, ch.read_uint8())
        n += 1
        table_name_length = ch.read_uint8()
        n += 1
        self.table_name = ch.read_string(table_name_length)
        n += table_name_length
        stmt_length = ch.read_uint16()
        n += 2
        self.stmt = ch.read_string(stmt_length)
        n += stmt_length
        _check_length(total_length, n)

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CURUPDATE)
        table_name_length = _byte_len(self.table_name)
        stmt_length = _byte_len(self.stmt)
        total_length = self._cursor_length() + 1 + 1 + table_name_length
        if stmt_length > 0:
            total_length += 2 + stmt_length
        ch.write_uint16(total_length)
        self._write_cursor(ch)
        ch.write_uint8(int(self.status))
        ch.write_uint8(table_name_length)
        ch.write_string(self.table_name)
        if stmt_length > 0:
            ch.write_uint16(stmt_length)
            ch.write_string(self.stmt)

    def __str__(self) -> str:
        status = _enum_name(CursorOStatus, int(self.status))
        return (
            f"CurUpdatePackage({self.cursor_id}, {self.name}, {status}, "
            f"{self.table_name}, {self.stmt!r})"
        )