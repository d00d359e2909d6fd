"""Classification of received packages."""

from __future__ import annotations

from dblib.tds.done import DonePackage
from dblib.tds.eed import EEDPackage
from dblib.tds.error import ErrorPackage
from dblib.tds.package import Package


def is_error(pkg: Package) -> bool:
    """Return True if the package signals an error."""
    return isinstance(pkg, (EEDPackage, ErrorPackage))


def is_done(pkg: Package) -> bool:
    """Return True if the package terminates the stream."""
    return isinstance(pkg, DonePackage)