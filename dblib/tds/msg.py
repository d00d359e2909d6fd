"""Miscellaneous messages, mostly used during login negotiation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token


class TDSMsgStatus(IntEnum):
    """Whether a message is followed by arguments."""

    TDS_MSG_HASNOARGS = 0
    TDS_MSG_HASARGS = 1


_MSG_ID_NAMES = """
TDS_MSG_SEC_ENCRYPT TDS_MSG_SEC_LOGPWD TDS_MSG_SEC_REMPWD TDS_MSG_SEC_CHALLENGE
TDS_MSG_SEC_RESPONSE TDS_MSG_SEC_GETLABEL TDS_MSG_SEC_LABEL TDS_MSG_SQL_TBLNAME
TDS_MSG_GW_RESERVED TDS_MSG_OMNI_CAPABILITIES TDS_MSG_SEC_OPAQUE TDS_MSG_HAFAILOVER
TDS_MSG_EMPTY TDS_MSG_SEC_ENCRYPT2 TDS_MSG_SEC_LOGPWD2 TDS_MSG_SEC_SUP_CIPHER2
TDS_MSG_MIG_REQ TDS_MSG_MIG_SYNC TDS_MSG_MIG_CONT TDS_MSG_MIG_IGN TDS_MSG_MIG_FAIL
TDS_MSG_SEC_REMPWD2 TDS_MSG_MIG_RESUME TDS_MSG_HELLO TDS_MSG_LOGINPARAMS
TDS_MSG_GRID_MIGREQ TDS_MSG_GRID_QUIESCE TDS_MSG_GRID_UNQUIESCE TDS_MSG_GRID_EVENT
TDS_MSG_SEC_ENCRYPT3 TDS_MSG_SEC_LOGPWD3 TDS_MSG_SEC_REMPWD3 TDS_MSG_DR_MAP
TDS_MSG_SEC_SYMKEY TDS_MSG_SEC_ENCRYPT4
""".split()

TDSMsgId = IntEnum("TDSMsgId", _MSG_ID_NAMES, start=1, module=__name__)
TDSMsgId.__doc__ = "The kind of a message package."


class TDSOpaqueSecurityToken(IntEnum):
    """Kinds of opaque security tokens."""

    TDS_SEC_SECSESS = 0
    TDS_SEC_FORWARD = 1
    TDS_SEC_SIGN = 2
    TDS_SEC_OTHER = 3


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class MsgPackage(Package):
    """Carries information that does not warrant a package of its own."""

    status: int = TDSMsgStatus.TDS_MSG_HASNOARGS
    msg_id: int = TDSMsgId.TDS_MSG_EMPTY

    def read_from(self, ch: BytesChannel) -> None:
        ch.read_uint8()
        self.status = _as_enum(TDSMsgStatus, ch.read_uint8())
        self.msg_id = _as_enum(TDSMsgId, ch.read_uint16())

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_MSG)
        ch.write_uint8(3)
        ch.write_uint8(int(self.status))
        ch.write_uint16(int(self.msg_id))

    def __str__(self) -> str:
        status = _enum_name(TDSMsgStatus, int(self.status))
        msg_id = _enum_name(TDSMsgId, int(self.msg_id))
        return f"MsgPackage({status}, {msg_id})"