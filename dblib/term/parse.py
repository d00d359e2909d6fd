"""Splitting input lines into statements and executing them."""

from __future__ import annotations

from typing import Any, Iterator, TextIO

from dblib.term.output import DEFAULT_MAX_COL_LENGTH, process

_QUOTES = "\"'"


class QueryError(Exception):
    """A statement could not be processed."""


def split_queries(line: str) -> Iterator[str]:
    """Yield the statements of line, split at semicolons outside of quotes.

    Any quote character opens or closes quoting; every semicolon outside
    quotes ends a statement, even an empty one, and a non-empty remainder
    is yielded last.
    """
    current: list[str] = []
    quoted = False
    for char in line:
        if char in _QUOTES:
            quoted = not quoted
            current.append(char)
        elif char == ";" and not quoted:
            yield "".join(current)
            current = []
        else:
            current.append(char)

    if current:
        yield "".join(current)


def parse_and_exec_queries(executor: Any, line: str, out: TextIO | None = None) -> None:
    """Execute every statement in line in order, stopping at the first failure."""
    for query in split_queries(line):
        try:
            process(executor, query, out, DEFAULT_MAX_COL_LENGTH)
        except Exception as exc:
            raise QueryError(f"term: failed to process query: {exc}") from exc