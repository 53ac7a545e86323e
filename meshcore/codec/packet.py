"""Over-the-air packet: header, optional transport codes, path and payload."""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass, field
from enum import IntEnum

PH_ROUTE_MASK = 0x03
PH_TYPE_SHIFT = 2
PH_TYPE_MASK = 0x0F
PH_VER_SHIFT = 6
PH_VER_MASK = 0x03

PAYLOAD_VER1 = 0x00
PAYLOAD_VER2 = 0x01
PAYLOAD_VER3 = 0x02
PAYLOAD_VER4 = 0x03

MAX_PATH_SIZE = 64
MAX_PACKET_PAYLOAD = 184

HEADER_DO_NOT_RETRANSMIT = 0xFF


class RouteType(IntEnum):
    TRANSPORT_FLOOD = 0x00
    FLOOD = 0x01
    DIRECT = 0x02
    TRANSPORT_DIRECT = 0x03


class PayloadType(IntEnum):
    REQ = 0x00
    RESPONSE = 0x01
    TXT_MSG = 0x02
    ACK = 0x03
    ADVERT = 0x04
    GRP_TXT = 0x05
    GRP_DATA = 0x06
    ANON_REQ = 0x07
    PATH = 0x08
    TRACE = 0x09
    MULTIPART = 0x0A
    CONTROL = 0x0B
    RAW_CUSTOM = 0x0F


class PacketError(ValueError):
    """A packet could not be decoded."""


class PacketTooShortError(PacketError):
    pass


class PathTooLongError(PacketError):
    pass


class PayloadTooLongError(PacketError):
    pass


class InvalidEncodingError(PacketError):
    pass


_TRANSPORT_ROUTES = (RouteType.TRANSPORT_FLOOD, RouteType.TRANSPORT_DIRECT)


@dataclass
class Packet:
    """A mesh packet. ``snr`` is the raw value (quarter dB) and is not on the wire."""

    header: int = 0
    transport_codes: tuple[int, int] = (0, 0)
    path_len: int = 0
    path: bytes = b""
    payload: bytes = b""
    snr: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        self.path = bytes(self.path)
        self.payload = bytes(self.payload)
        self.transport_codes = tuple(self.transport_codes)

    def route_type(self) -> int:
        return self.header & PH_ROUTE_MASK

    def payload_type(self) -> int:
        return (self.header >> PH_TYPE_SHIFT) & PH_TYPE_MASK

    def payload_version(self) -> int:
        return (self.header >> PH_VER_SHIFT) & PH_VER_MASK

    def is_flood(self) -> bool:
        return self.route_type() in (RouteType.FLOOD, RouteType.TRANSPORT_FLOOD)

    def is_direct(self) -> bool:
        return self.route_type() in (RouteType.DIRECT, RouteType.TRANSPORT_DIRECT)

    def has_transport_codes(self) -> bool:
        return self.route_type() in _TRANSPORT_ROUTES

    def mark_do_not_retransmit(self) -> None:
        self.header = HEADER_DO_NOT_RETRANSMIT

    def is_marked_do_not_retransmit(self) -> bool:
        return self.header == HEADER_DO_NOT_RETRANSMIT

    def snr_db(self) -> float:
        """Signal-to-noise ratio in dB."""
        return self.snr / 4.0

    def clone(self) -> Packet:
        return dataclasses.replace(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Packet:
        """Decode a packet from its wire form; SNR is left at zero."""
        data = bytes(data)
        if len(data) < 2:
            raise PacketTooShortError("packet too short")

        header = data[0]
        i = 1
        codes = (0, 0)
        if header & PH_ROUTE_MASK in _TRANSPORT_ROUTES:
            if len(data) < i + 4:
                raise PacketTooShortError("packet too short")
            codes = struct.unpack_from("<HH", data, i)
            i += 4

        if len(data) < i + 1:
            raise PacketTooShortError("packet too short")
        path_len = data[i]
        i += 1
        if path_len > MAX_PATH_SIZE:
            raise PathTooLongError(f"path length exceeds maximum: {path_len} bytes")
        if len(data) < i + path_len:
            raise PacketTooShortError("packet too short")
        path = data[i : i + path_len]
        i += path_len

        if i >= len(data):
            raise InvalidEncodingError("invalid packet encoding")
        payload = data[i:]
        if len(payload) > MAX_PACKET_PAYLOAD:
            raise PayloadTooLongError(f"payload length exceeds maximum: {len(payload)} bytes")

        return cls(
            header=header,
            transport_codes=codes,
            path_len=path_len,
            path=path,
            payload=payload,
        )

    def to_bytes(self) -> bytes:
        """Encode to wire form; the path length byte is taken from ``path``."""
        parts = [bytes([self.header])]
        if self.has_transport_codes():
            parts.append(struct.pack("<HH", *self.transport_codes))
        parts.append(bytes([len(self.path)]))
        parts.append(self.path)
        parts.append(self.payload)
        return b"".join(parts)

    def raw_length(self) -> int:
        size = 2 + len(self.path) + len(self.payload)
        if self.has_transport_codes():
            size += 4
        return size


def payload_type_name(t: int) -> str:
    try:
        return PayloadType(t).name
    except ValueError:
        return f"UNKNOWN({t})"


def route_type_name(t: int) -> str:
    try:
        return RouteType(t).name
    except ValueError:
        return f"UNKNOWN({t})"