# dblib

Building blocks for the TDS protocol spoken by ASE database servers, and
helpers for splitting SQL input into statements, running them and printing
their results as text tables. It needs nothing beyond the standard library.

## Layout

- `dblib.values` – `NamedValue` and `values_to_named_values`, which turn
  positional statement arguments into unnamed values with 1-based ordinals.
- `dblib.tds` – the wire format:
  - `helper`: `write_string`, `de_bitmask`, `de_bitmask_string`
  - `version`: `Version`, `new_version`, `new_version_string`
  - `token`: the `Token` byte that starts each package
  - `packet_header`: `PacketHeader`, `PacketHeaderType`, `PacketHeaderStatus`,
    `EOFAfterZeroReadError`
  - `packet`: `Packet`, `new_packet`
  - `package`: the `Package` base class, the `BytesChannel` protocol and
    `NotEnoughBytesError`
  - `packet_queue`: `PacketQueue`, a `BytesChannel` that spreads bytes over
    packets of a given size and reads across packet boundaries
    (little endian by default, `byte_order="big"` on request)
  - packages: `capability` (`CapabilityPackage`, `ValueMask`,
    `parse_value_mask`, `new_capability_package`), `cursor`
    (`CurClosePackage`, `CurDeletePackage`, `CurFetchPackage`,
    `CurOpenPackage`, `CurUpdatePackage`), `done`, `eed`, `error`,
    `env_change`, `language`, `login_ack`, `msg`, `order_by`, `option_cmd`
    and `simple_packages` (`ControlPackage`, `HeaderOnlyPackage`,
    `TokenlessPackage`, `LogoutPackage`, `ReturnStatusPackage`)
  - `classify`: `is_error` and `is_done`
- `dblib.term` – `parse.split_queries`, `parse.parse_and_exec_queries` and
  the printing functions in `output`.

## Examples

Positional arguments become ordinal, unnamed values:

```python
from dblib.values import values_to_named_values

values_to_named_values([0, "string"])
# [NamedValue(name='', ordinal=1, value=0), NamedValue(name='', ordinal=2, value='string')]
```

Versions are four dotted parts, each fitting in a byte:

```python
from dblib.tds.version import new_version_string

version = new_version_string("99.1.0.4")
version.to_bytes()   # b"c\x01\x00\x04"
```

Packages are written to and read from a `BytesChannel`:

```python
from dblib.tds.done import DonePackage, DoneState
from dblib.tds.packet_queue import PacketQueue
from dblib.tds.token import Token

queue = PacketQueue(lambda: 512)
DonePackage(status=DoneState.TDS_DONE_COUNT, count=3).write_to(queue)

queue.set_position(0, 0)
assert queue.read_byte() == Token.TDS_DONE
done = DonePackage()
done.read_from(queue)
done.count   # 3
```

A line of SQL is split on semicolons that are not inside quotes:

```python
from dblib.term.parse import split_queries

list(split_queries("select 1; select ';'"))
# ['select 1', " select ';'"]
```

`parse_and_exec_queries(executor, line, out)` runs each statement through
`executor.generic_exec(query, None)`, which returns a `(rows, result)` pair
where either may be `None`. Rows must provide `columns()`,
`column_type_length(i)` and `column_type_database_type_name(i)` and be
iterable over their rows; results must provide `rows_affected()`. Output goes
to `out`, or to standard output when it is `None`. A failing statement stops
the run with `dblib.term.parse.QueryError`.

## What the package does not do

- It opens no connections and performs no login: there is no driver, and
  nothing here talks to a server. Packets and packages are built and parsed,
  but sending and receiving them is left to the caller.
- It has no interactive prompt and installs no command; statements are run
  only by calling `parse_and_exec_queries` from Python.
- Row, parameter and dynamic-statement formats and their data are not
  covered; `OrderByPackage` and `OrderBy2Package` can be read but not
  written.

## Tests

The test suite uses pytest and is installed with the `test` extra.