"""Running statements and printing their results as text tables."""

from __future__ import annotations

import sys
from typing import Any, Protocol, Sequence, TextIO, runtime_checkable

DEFAULT_MAX_COL_LENGTH = 50


@runtime_checkable
class GenericExecer(Protocol):
    """Something that sends a statement to the database.

    generic_exec returns a pair of rows and result, either of which may be None.
    """

    def generic_exec(self, query: str, args: Sequence[Any] | None) -> tuple[Any, Any]: ...


def _output(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def process(
    executor: Any,
    query: str,
    out: TextIO | None = None,
    max_col_length: int = DEFAULT_MAX_COL_LENGTH,
) -> None:
    """Execute query and print its rows and the number of affected rows."""
    if not isinstance(executor, GenericExecer):
        raise TypeError("invalid driver, must support GenericExecer")

    rows, result = executor.generic_exec(query, None)

    if rows is not None:
        try:
            process_rows(rows, out, max_col_length)
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

    if result is not None:
        process_result(result, out)


def _format_cell(cell: Any, type_name: str, width: int) -> str:
    if type_name == "IMAGE":
        return bytes(cell).hex()[:width]
    return str(cell)


def process_rows(
    rows: Any,
    out: TextIO | None = None,
    max_col_length: int = DEFAULT_MAX_COL_LENGTH,
) -> None:
    """Print every result set of rows as a table, one line per row."""
    out = _output(out)
    if not hasattr(rows, "column_type_length"):
        raise TypeError("rows does not support column type lengths")
    if not hasattr(rows, "column_type_database_type_name"):
        raise TypeError("rows does not support column type database type names")

    while True:
        columns = list(rows.columns())
        if not columns:
            return

        widths = []
        header = "|"
        for index, name in enumerate(columns):
            width = len(name)
            type_length = rows.column_type_length(index)
            if type_length is not None:
                width = int(type_length)
            width = min(width, max_col_length)
            widths.append(width)
            header += f" {name:<{width}} |"
        out.write(header + "\n")

        type_names = [
            rows.column_type_database_type_name(index) for index in range(len(columns))
        ]

        for cells in rows:
            line = "|"
            for cell, width, type_name in zip(cells, widths, type_names):
                line += f" {_format_cell(cell, type_name, width):<{width}} |"
            out.write(line + "\n")

        has_next = getattr(rows, "has_next_result_set", None)
        if has_next is None or not has_next():
            return
        advance = getattr(rows, "next_result_set", None)
        if advance is not None:
            advance()


def process_result(result: Any, out: TextIO | None = None) -> None:
    """Print the number of affected rows unless the result reports none."""
    affected_rows = result.rows_affected()
    if affected_rows >= 0:
        _output(out).write(f"Rows affected: {affected_rows}\n")