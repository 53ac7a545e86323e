"""Payload layouts carried inside packets, and their decrypted contents."""

from __future__ import annotations

import struct
from dataclasses import dataclass

ADVERT_PUB_KEY_SIZE = 32
ADVERT_TIMESTAMP_SIZE = 4
ADVERT_SIGNATURE_SIZE = 64
ADVERT_MIN_SIZE = ADVERT_PUB_KEY_SIZE + ADVERT_TIMESTAMP_SIZE + ADVERT_SIGNATURE_SIZE

NODE_TYPE_CHAT = 0x01
NODE_TYPE_REPEATER = 0x02
NODE_TYPE_ROOM = 0x03
NODE_TYPE_SENSOR = 0x04

FLAG_HAS_LOCATION = 0x10
FLAG_HAS_FEATURE1 = 0x20
FLAG_HAS_FEATURE2 = 0x40
FLAG_HAS_NAME = 0x80

COORD_SCALE = 1_000_000.0

ACK_SIZE = 4
ADDRESSED_HEADER_SIZE = 4
GROUP_HEADER_SIZE = 3
ANON_REQ_HEADER_SIZE = 35
CONTROL_MIN_SIZE = 1

CONTROL_SUBTYPE_DISCOVER_REQ = 0x08
CONTROL_SUBTYPE_DISCOVER_RESP = 0x09

TXT_TYPE_PLAIN = 0x00
TXT_TYPE_CLI = 0x01
TXT_TYPE_SIGNED = 0x02

REQ_TYPE_LOGIN = 0x00
REQ_TYPE_GET_STATS = 0x01
REQ_TYPE_KEEPALIVE = 0x02
REQ_TYPE_GET_TELEMETRY = 0x03
REQ_TYPE_GET_MIN_MAX_AVG = 0x04
REQ_TYPE_GET_ACCESS_LIST = 0x05
REQ_TYPE_GET_NEIGHBORS = 0x06
REQ_TYPE_GET_OWNER_INFO = 0x07

ANON_REQ_TYPE_REGIONS = 0x01
ANON_REQ_TYPE_OWNER = 0x02
ANON_REQ_TYPE_BASIC = 0x03

RESP_SERVER_LOGIN_OK = 0x00

MSG_SEND_FAILED = 0
MSG_SEND_SENT_FLOOD = 1
MSG_SEND_SENT_DIRECT = 2

MAX_TEXT_LEN = 160

PERM_ACL_ROLE_MASK = 0x03
PERM_ACL_GUEST = 0x00
PERM_ACL_READ_ONLY = 0x01
PERM_ACL_READ_WRITE = 0x02
PERM_ACL_ADMIN = 0x03

_NODE_TYPE_NAMES = {
    NODE_TYPE_CHAT: "chat",
    NODE_TYPE_REPEATER: "repeater",
    NODE_TYPE_ROOM: "room",
    NODE_TYPE_SENSOR: "sensor",
}

_TXT_TYPE_NAMES = {
    TXT_TYPE_PLAIN: "plain",
    TXT_TYPE_CLI: "cli",
    TXT_TYPE_SIGNED: "signed",
}

_REQUEST_TYPE_NAMES = {
    REQ_TYPE_LOGIN: "login",
    REQ_TYPE_GET_STATS: "get_stats",
    REQ_TYPE_KEEPALIVE: "keepalive",
    REQ_TYPE_GET_TELEMETRY: "get_telemetry",
    REQ_TYPE_GET_MIN_MAX_AVG: "get_min_max_avg",
    REQ_TYPE_GET_ACCESS_LIST: "get_access_list",
    REQ_TYPE_GET_NEIGHBORS: "get_neighbors",
    REQ_TYPE_GET_OWNER_INFO: "get_owner_info",
}

_ANON_REQ_TYPE_NAMES = {
    ANON_REQ_TYPE_REGIONS: "regions",
    ANON_REQ_TYPE_OWNER: "owner",
    ANON_REQ_TYPE_BASIC: "basic",
}


class PayloadError(ValueError):
    """A payload or decrypted content could not be parsed."""


def _c_string(data: bytes) -> str:
    """Text up to the first NUL byte."""
    end = data.find(0)
    if end >= 0:
        data = data[:end]
    return data.decode("utf-8", errors="replace")


@dataclass
class AdvertAppData:
    """Optional application data of an advertisement."""

    flags: int = 0
    node_type: int = 0
    name: str = ""
    lat: float | None = None
    lon: float | None = None
    feature1: int | None = None
    feature2: int | None = None

    def has_location(self) -> bool:
        return self.lat is not None and self.lon is not None

    def node_type_name(self) -> str:
        return node_type_name(self.node_type)


@dataclass
class AdvertPayload:
    """A node advertisement."""

    pub_key: bytes
    timestamp: int
    signature: bytes
    app_data: AdvertAppData | None = None


def parse_advert_payload(data: bytes) -> AdvertPayload:
    data = bytes(data)
    if len(data) < ADVERT_MIN_SIZE:
        raise PayloadError(
            f"advert payload too short: expected at least {ADVERT_MIN_SIZE} bytes, got {len(data)}"
        )
    (timestamp,) = struct.unpack_from("<I", data, 32)
    app_data = None
    if len(data) > ADVERT_MIN_SIZE:
        try:
            app_data = parse_advert_app_data(data[ADVERT_MIN_SIZE:])
        except PayloadError as exc:
            raise PayloadError(f"failed to parse appdata: {exc}") from exc
    return AdvertPayload(
        pub_key=data[0:32],
        timestamp=timestamp,
        signature=data[36:100],
        app_data=app_data,
    )


def parse_advert_app_data(data: bytes) -> AdvertAppData:
    data = bytes(data)
    if not data:
        raise PayloadError("appdata too short")

    flags = data[0]
    app = AdvertAppData(flags=flags, node_type=flags & 0x0F)
    offset = 1

    if flags & FLAG_HAS_LOCATION:
        if len(data) < offset + 8:
            raise PayloadError("appdata too short: expected location data")
        lat_raw, lon_raw = struct.unpack_from("<ii", data, offset)
        app.lat = lat_raw / COORD_SCALE
        app.lon = lon_raw / COORD_SCALE
        offset += 8

    if flags & FLAG_HAS_FEATURE1:
        if len(data) < offset + 2:
            raise PayloadError("appdata too short: expected feature1 data")
        (app.feature1,) = struct.unpack_from("<H", data, offset)
        offset += 2

    if flags & FLAG_HAS_FEATURE2:
        if len(data) < offset + 2:
            raise PayloadError("appdata too short: expected feature2 data")
        (app.feature2,) = struct.unpack_from("<H", data, offset)
        offset += 2

    if flags & FLAG_HAS_NAME and offset < len(data):
        app.name = _c_string(data[offset:])

    return app


def node_type_name(t: int) -> str:
    if t in _NODE_TYPE_NAMES:
        return _NODE_TYPE_NAMES[t]
    if t == 0:
        return "unknown"
    return f"unknown({t})"


@dataclass
class AckPayload:
    checksum: int


def parse_ack_payload(data: bytes) -> AckPayload:
    data = bytes(data)
    if len(data) < ACK_SIZE:
        raise PayloadError(
            f"ack payload too short: expected {ACK_SIZE} bytes, got {len(data)}"
        )
    (checksum,) = struct.unpack_from("<I", data, 0)
    return AckPayload(checksum)


@dataclass
class AddressedPayload:
    """Header and ciphertext of TXT_MSG, REQ, RESPONSE and PATH payloads."""

    dest_hash: int
    src_hash: int
    mac: int
    ciphertext: bytes


def parse_addressed_payload(data: bytes) -> AddressedPayload:
    data = bytes(data)
    if len(data) < ADDRESSED_HEADER_SIZE:
        raise PayloadError(
            "addressed payload too short: expected at least "
            f"{ADDRESSED_HEADER_SIZE} bytes, got {len(data)}"
        )
    (mac,) = struct.unpack_from("<H", data, 2)
    return AddressedPayload(
        dest_hash=data[0],
        src_hash=data[1],
        mac=mac,
        ciphertext=data[ADDRESSED_HEADER_SIZE:],
    )


@dataclass
class TxtMsgContent:
    """Decrypted text message."""

    timestamp: int
    txt_type: int
    attempt: int
    message: str = ""
    sender_pub_key_prefix: bytes = b""


def parse_txt_msg_content(data: bytes) -> TxtMsgContent:
    data = bytes(data)
    if len(data) < 5:
        raise PayloadError(f"text message too short: expected at least 5 bytes, got {len(data)}")
    (timestamp,) = struct.unpack_from("<I", data, 0)
    content = TxtMsgContent(
        timestamp=timestamp,
        txt_type=(data[4] >> 2) & 0x3F,
        attempt=data[4] & 0x03,
    )
    start = 5
    if content.txt_type == TXT_TYPE_SIGNED:
        if len(data) < 9:
            raise PayloadError("text message too short: signed message needs pubkey prefix")
        content.sender_pub_key_prefix = data[5:9]
        start = 9
    if start < len(data):
        # Padding after the text is zero-filled, so stop at the first NUL.
        content.message = _c_string(data[start:])
    return content


def txt_type_name(t: int) -> str:
    return _TXT_TYPE_NAMES.get(t, f"unknown({t})")


@dataclass
class RequestContent:
    timestamp: int
    request_type: int
    request_data: bytes


def parse_request_content(data: bytes) -> RequestContent:
    data = bytes(data)
    if len(data) < 5:
        raise PayloadError(
            f"request payload too short: expected at least 5 bytes, got {len(data)}"
        )
    (timestamp,) = struct.unpack_from("<I", data, 0)
    return RequestContent(timestamp=timestamp, request_type=data[4], request_data=data[5:])


def request_type_name(t: int) -> str:
    return _REQUEST_TYPE_NAMES.get(t, f"unknown({t})")


def anon_req_type_name(t: int) -> str:
    return _ANON_REQ_TYPE_NAMES.get(t, f"unknown({t})")


@dataclass
class ResponseContent:
    tag: int
    content: bytes


def parse_response_content(data: bytes) -> ResponseContent:
    data = bytes(data)
    if len(data) < 4:
        raise PayloadError(
            f"response content too short: expected at least 4 bytes, got {len(data)}"
        )
    (tag,) = struct.unpack_from("<I", data, 0)
    return ResponseContent(tag=tag, content=data[4:])


@dataclass
class PathContent:
    """Decrypted returned-path content with its bundled payload."""

    path_len: int
    path: bytes
    extra_type: int
    extra: bytes = b""


def parse_path_content(data: bytes) -> PathContent:
    data = bytes(data)
    if len(data) < 2:
        raise PayloadError(
            f"path content too short: expected at least 2 bytes, got {len(data)}"
        )
    path_len = data[0]
    if len(data) < path_len + 2:
        raise PayloadError(f"path content too short for path length {path_len}")
    extra_offset = 1 + path_len
    return PathContent(
        path_len=path_len,
        path=data[1:extra_offset],
        extra_type=data[extra_offset],
        extra=data[extra_offset + 1 :],
    )