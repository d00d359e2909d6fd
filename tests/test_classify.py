import pytest

from dblib.tds.classify import is_done, is_error
from dblib.tds.done import DoneInProcPackage, DonePackage, DoneProcPackage
from dblib.tds.eed import EEDPackage
from dblib.tds.error import ErrorPackage
from dblib.tds.simple_packages import LogoutPackage


@pytest.mark.parametrize(
    "pkg, expected",
    [
        (EEDPackage(), True),
        (ErrorPackage(), True),
        (DonePackage(), False),
        (LogoutPackage(), False),
    ],
)
def test_is_error(pkg, expected):
    assert is_error(pkg) is expected


@pytest.mark.parametrize(
    "pkg, expected",
    [
        (DonePackage(), True),
        (DoneProcPackage(), True),
        (DoneInProcPackage(), True),
        (EEDPackage(), False),
        (LogoutPackage(), False),
    ],
)
def test_is_done(pkg, expected):
    assert is_done(pkg) is expected