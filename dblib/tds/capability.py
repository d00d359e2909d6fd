"""Capability negotiation between client and server."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from dblib.tds.package import BytesChannel, Package
from dblib.tds.token import Token


class CapabilityType(IntEnum):
    """The group a set of capabilities belongs to."""

    REQUEST = 1
    RESPONSE = 2
    SECURITY = 3


_REQUEST_NAMES = """
TDS_REQ_LANG TDS_REQ_RPC TDS_REQ_EVT TDS_REQ_MSTMT TDS_REQ_BCP TDS_REQ_CURSOR
TDS_REQ_DYNF TDS_REQ_MSG TDS_REQ_PARAM TDS_DATA_INT1 TDS_DATA_INT2 TDS_DATA_INT4
TDS_DATA_BIT TDS_DATA_CHAR TDS_DATA_VCHAR TDS_DATA_BIN TDS_DATA_VBIN TDS_DATA_MNY8
TDS_DATA_MNY4 TDS_DATA_DATE8 TDS_DATA_DATE4 TDS_DATA_FLT4 TDS_DATA_FLT8 TDS_DATA_NUM
TDS_DATA_TEXT TDS_DATA_IMAGE TDS_DATA_DEC TDS_DATA_LCHAR TDS_DATA_LBIN TDS_DATA_INTN
TDS_DATA_DATETIMEN TDS_DATA_MONEYN TDS_CSR_PREV TDS_CSR_FIRST TDS_CSR_LAST
TDS_CSR_ABS TDS_CSR_REL TDS_CSR_MULTI TDS_CON_OOB TDS_CON_INBAND TDS_CON_LOGICAL
TDS_PROTO_TEXT TDS_PROTO_BULK TDS_REQ_URGEVT TDS_DATA_SENSITIVITY TDS_DATA_BOUNDARY
TDS_PROTO_DYNAMIC TDS_PROTO_DYNPROC TDS_DATA_FLTN TDS_DATA_BITN TDS_DATA_INT8
TDS_DATA_VOID TDS_DOL_BULK TDS_OBJECT_JAVA1 TDS_OBJECT_CHAR TDS_REQ_RESERVED1
TDS_OBJECT_BINARY TDS_DATA_COLUMNSTATUS TDS_WIDETABLES TDS_REQ_RESERVED2
TDS_DATA_UINT2 TDS_DATA_UINT4 TDS_DATA_UINT8 TDS_DATA_UINTN TDS_CUR_IMPLICIT
TDS_DATA_NLBIN TDS_IMAGE_NCHAR TDS_BLOB_NCHAR_16 TDS_BLOB_NCHAR_8 TDS_BLOB_NCHAR_SCSU
TDS_DATA_DATE TDS_DATA_TIME TDS_DATA_INTERVAL TDS_CSR_SCROLL TDS_CSR_SENSITIVE
TDS_CSR_INSENSITIVE TDS_CSR_SEMISENSITIVE TDS_CSR_KEYSETDRIVEN TDS_REQ_SRVPKTSIZE
TDS_DATA_UNITEXT TDS_CAP_CLUSTERFAILOVER TDS_DATA_SINT1 TDS_REQ_LARGEIDENT
TDS_REQ_BLOB_NCHAR_16 TDS_DATA_XML TDS_REQ_CURINFO3 TDS_REQ_DBRPC2 TDS_UNUSED_REQ
TDS_REQ_MIGRATE TDS_MULTI_REQUESTS TDS_REQ_OPTIONCMD2 TDS_REQ_LOGINFO
TDS_DATA_BIGDATETIME TDS_DATA_USECS TDS_RPCPARAM_LOB TDS_REQ_INSTID TDS_REQ_GRID
TDS_REQ_DYN_BATCH TDS_REQ_LANG_BATCH TDS_REQ_RPC_BATCH TDS_DATA_LOBLOCATOR
TDS_REQ_ROWCOUNT_FOR_SELECT TDS_REQ_LOGPARAMS TDS_REQ_DYNAMIC_SUPPRESS_PARAMFMT
TDS_REQ_READONLY TDS_REQ_COMMAND_ENCRYPTION
""".split()

_RESPONSE_NAMES = """
TDS_RES_NOMSG TDS_RES_NOEED TDS_RES_NOPARAM TDS_DATA_NOINT1 TDS_DATA_NOINT2
TDS_DATA_NOINT4 TDS_DATA_NOBIT TDS_DATA_NOCHAR TDS_DATA_NOVCHAR TDS_DATA_NOBIN
TDS_DATA_NOVBIN TDS_DATA_NOMNY8 TDS_DATA_NOMNY4 TDS_DATA_NODATE8 TDS_DATA_NODATE4
TDS_DATA_NOFLT4 TDS_DATA_NOFLT8 TDS_DATA_NONUM TDS_DATA_NOTEXT TDS_DATA_NOIMAGE
TDS_DATA_NODEC TDS_DATA_NOLCHAR TDS_DATA_NOLBIN TDS_DATA_NOINTN TDS_DATA_NODATETIMEN
TDS_DATA_NOMONEYN TDS_CON_NOOOB TDS_CON_NOINBAND TDS_PROTO_NOTEXT TDS_PROTO_NOBULK
TDS_DATA_NOSENSITIVITY TDS_DATA_NOBOUNDARY TDS_RES_NOTDSDEBUG TDS_RES_NOSTRIPBLANKS
TDS_DATA_NOINT8 TDS_OBJECT_NOJAVA1 TDS_OBJECT_NOCHAR TDS_DATA_NOCOLUMNSTATUS
TDS_OBJECT_NOBINARY TDS_RES_RESERVED TDS_DATA_NOUINT2 TDS_DATA_NOUINT4
TDS_DATA_NOUINT8 TDS_DATA_NOUINTN TDS_NOWIDETABLES TDS_DATA_NONLBIN TDS_IMAGE_NONCHAR
TDS_BLOB_NONCHAR_16 TDS_BLOB_NONCHAR_8 TDS_BLOB_NONCHAR_SCSU TDS_DATA_NODATE
TDS_DATA_NOTIME TDS_DATA_NOINTERVAL TDS_DATA_NOUNITEXT TDS_DATA_NOSINT1
TDS_NO_LARGEIDENT TDS_NO_BLOB_NCHAR_16 TDS_NO_SRVPKTSIZE TDS_DATA_NOXML
TDS_NONINT_RETURN_VALUE TDS_RES_NOXNLMETADATA TDS_RES_SUPPRESS_FMT
TDS_RES_SUPPRESS_DONEINPROC TDS_UNUSED_RES TDS_DATA_NOBIGDATETIME TDS_DATA_NOUSECS
TDS_RES_NO_TDSCONTROL TDS_RPCPARAM_NOLOB TDS_DATA_NOLOBLOCATOR
TDS_RES_NOROWCOUNT_FOR_SELECT TDS_RES_CUMULATIVE_DONE TDS_RES_LIST_DR_MAP
TDS_RES_DR_NOKILL
""".split()

RequestCapability = IntEnum(
    "RequestCapability", _REQUEST_NAMES, start=1, module=__name__
)
RequestCapability.__doc__ = "Capabilities a client requests from the server."

ResponseCapability = IntEnum(
    "ResponseCapability", _RESPONSE_NAMES, start=1, module=__name__
)
ResponseCapability.__doc__ = "Capabilities that restrict the server's responses."


@dataclass
class ValueMask:
    """A multi-byte bitmask in which index i holds the state of capability i."""

    capabilities: list[bool] = field(default_factory=lambda: [False])

    @classmethod
    def for_max(cls, max_value: int) -> ValueMask:
        """Create an all-off mask that can hold capabilities 0 through max_value."""
        return cls([False] * (max_value + 1))

    def is_empty(self) -> bool:
        """Return True if no capability can be or is set."""
        if len(self.capabilities) == 1:
            return True
        return not any(self.capabilities)

    def set_capability(self, capability: int, state: bool) -> None:
        """Switch a capability on or off."""
        if capability < 0 or capability >= len(self.capabilities):
            raise ValueError(f"invalid capability: {capability}")
        self.capabilities[capability] = bool(state)

    def get_capability(self, capability: int) -> bool:
        """Return the state of a capability; unknown capabilities are off."""
        if capability < 0 or capability >= len(self.capabilities):
            return False
        return self.capabilities[capability]

    def to_bytes(self) -> bytes:
        """Encode the mask; capability 0 is the lowest bit of the last byte."""
        size = math.ceil(len(self.capabilities) / 8)
        out = bytearray(size)
        for index, state in enumerate(self.capabilities):
            if state:
                out[size - 1 - index // 8] |= 1 << (index % 8)
        return bytes(out)


def parse_value_mask(data: bytes) -> ValueMask:
    """Decode a value mask sent by the server."""
    data = bytes(data)
    mask = ValueMask.for_max(len(data) * 8)
    for byte_index, byte in enumerate(reversed(data)):
        for bit in range(8):
            mask.capabilities[byte_index * 8 + bit] = bool(byte & (1 << bit))
    return mask


def _default_capabilities() -> dict[int, ValueMask]:
    return {
        CapabilityType.REQUEST: ValueMask.for_max(
            RequestCapability.TDS_REQ_COMMAND_ENCRYPTION
        ),
        CapabilityType.RESPONSE: ValueMask.for_max(
            ResponseCapability.TDS_RES_DR_NOKILL
        ),
        CapabilityType.SECURITY: ValueMask.for_max(0),
    }


def _capability_type(value: int) -> int:
    try:
        return CapabilityType(value)
    except ValueError:
        return value


@dataclass
class CapabilityPackage(Package):
    """Communicates the capabilities of client and server."""

    capabilities: dict[int, ValueMask] = field(default_factory=_default_capabilities)

    def _set(self, capability_type: CapabilityType, capability: int, enable: bool) -> None:
        mask = self.capabilities.get(capability_type)
        if mask is None:
            raise ValueError(f"no value mask for capability type {capability_type.name}")
        mask.set_capability(int(capability), enable)

    def set_request_capability(self, capability: int, enable: bool) -> None:
        """Switch a request capability on or off."""
        self._set(CapabilityType.REQUEST, capability, enable)

    def set_response_capability(self, capability: int, enable: bool) -> None:
        """Switch a response capability on or off."""
        self._set(CapabilityType.RESPONSE, capability, enable)

    def set_security_capability(self, capability: int, enable: bool) -> None:
        """Switch a security capability on or off."""
        self._set(CapabilityType.SECURITY, capability, enable)

    def has_capability(self, capability_type: int, capability: int) -> bool:
        """Return whether the capability of the given type is set."""
        mask = self.capabilities.get(capability_type)
        if mask is None:
            return False
        return mask.get_capability(int(capability))

    def has_request_capability(self, capability: int) -> bool:
        return self.has_capability(CapabilityType.REQUEST, capability)

    def has_response_capability(self, capability: int) -> bool:
        return self.has_capability(CapabilityType.RESPONSE, capability)

    def has_security_capability(self, capability: int) -> bool:
        return self.has_capability(CapabilityType.SECURITY, capability)

    def read_from(self, ch: BytesChannel) -> None:
        total_length = ch.read_uint16()
        length = 0
        while length < total_length:
            cap_type = _capability_type(ch.read_uint8())
            cap_length = ch.read_uint8()
            data = ch.read_bytes(cap_length)
            length += 2 + cap_length
            self.capabilities[cap_type] = parse_value_mask(data)

        if length > total_length:
            raise ValueError(f"read {length} bytes instead of {total_length}")

    def write_to(self, ch: BytesChannel) -> None:
        ch.write_byte(Token.TDS_CAPABILITY)

        encoded = [
            (cap_type, mask.to_bytes())
            for cap_type, mask in self.capabilities.items()
            if not mask.is_empty()
        ]
        ch.write_uint16(sum(2 + len(data) for _, data in encoded))

        for cap_type, data in encoded:
            ch.write_byte(int(cap_type))
            ch.write_uint8(len(data))
            ch.write_bytes(data)

    def __str__(self) -> str:
        return f"Capabilities: {self.capabilities!r}"


def new_capability_package(
    request: Iterable[int] | None,
    response: Iterable[int] | None,
    security: Iterable[int] | None,
) -> CapabilityPackage:
    """Create a capability package with the given capabilities switched on."""
    pkg = CapabilityPackage()
    for capability in request or ():
        pkg.set_request_capability(capability, True)
    for capability in response or ():
        pkg.set_response_capability(capability, True)
    for capability in security or ():
        pkg.set_security_capability(capability, True)
    return pkg