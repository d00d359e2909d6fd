"""Packages that set, reset and query session options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from dblib.tds.helper import _enum_name
from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token


class OptionCmd(IntEnum):
    """What an option package does with its option."""

    TDS_OPT_SET = 1
    TDS_OPT_DEFAULT = 2
    TDS_OPT_LIST = 3
    TDS_OPT_INFO = 4


_OPTION_NAMES = """
TDS_OPT_UNUSED TDS_OPT_DATEFIRST TDS_OPT_TEXTSIZE TDS_OPT_STAT_TIME TDS_OPT_STAT_IO
TDS_OPT_ROWCOUNT TDS_OPT_NATLANG TDS_OPT_DATEFORMAT TDS_OPT_ISOLATION TDS_OPT_AUTHON
TDS_OPT_CHARSET TDS_OPT_PLAN TDS_OPT_ERRLVL TDS_OPT_SHOWPLAN TDS_OPT_NOEXEC
TDS_OPT_ARITHIGNOREON TDS_OPT_ARITHABORTON TDS_OPT_PARSEONLY TDS_OPT_ESTIMATE
TDS_OPT_GETDATA TDS_OPT_NOCOUNT TDS_OPT_FORCEPLAN TDS_OPT_FORMATONLY
TDS_OPT_CHAINXACTS TDS_OPT_CURCLOSEONXACT TDS_OPT_FIPSFLAG TDS_OPT_RESTREES
TDS_OPT_IDENTITYON TDS_OPT_CURREAD TDS_OPT_CURWRITE TDS_OPT_IDENTITYOFF
TDS_OPT_AUTHOFF TDS_OPT_ANSINULL TDS_OPT_QUOTED_IDENT TDS_OPT_ANSIPERM
TDS_OPT_STR_RTRUNC TDS_OPT_SORTMERGE TDS_OPT_JTC TDS_OPT_CLIENTREALNAME
TDS_OPT_CLIENTHOSTNAME TDS_OPT_CLIENTAPPLNAME TDS_OPT_IDENTITYUPD_ON
TDS_OPT_IDENTITYUPD_OFF TDS_OPT_NODATA TDS_OPT_CIPHERTEXT TDS_OPT_SHOW_FI
TDS_OPT_HIDE_VCC TDS_OPT_LOBLOCATOR TDS_REQ_LOBLOCATOR TDS_OPT_LOBLOCATORFETCHSIZE
""".split()

OptionCmdOption = IntEnum(
    "OptionCmdOption",
    [(name, value) for value, name in enumerate(_OPTION_NAMES)]
    + [("TDS_OPT_ISOLATION_MODE", len(_OPTION_NAMES) + 52)],
    module=__name__,
)
OptionCmdOption.__doc__ = "The option an option package configures."


def _as_enum(enum_cls: type[IntEnum], value: int) -> int:
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class OptionCmdPackage(Package):
    """Sets or resets an option; the meaning of option_arg depends on the option."""

    cmd: int = OptionCmd.TDS_OPT_SET
    option: int = OptionCmdOption.TDS_OPT_UNUSED
    option_arg: bytes = field(default=b"")

    def read_from(self, ch: BytesChannel) -> None:
        ch.read_uint16()
        self.cmd = _as_enum(OptionCmd, ch.read_uint8())
        self.option = _as_enum(OptionCmdOption, ch.read_uint8())
        arg_length = ch.read_uint8()
        self.option_arg = ch.read_bytes(arg_length)

    def write_to(self, ch: BytesChannel) -> None:
        arg = bytes(self.option_arg)
        ch.write_byte(Token.TDS_OPTIONCMD)
        ch.write_uint16(3 + len(arg))
        ch.write_uint8(int(self.cmd))
        ch.write_uint8(int(self.option))
        ch.write_uint8(len(arg))
        ch.write_bytes(arg)

    def __str__(self) -> str:
        cmd = _enum_name(OptionCmd, int(self.cmd))
        option = _enum_name(OptionCmdOption, int(self.option))
        return f"OptionCmdPackage({cmd}, {option}, {list(self.option_arg)})"