"""Group, anonymous-request, control/discovery and multipart payloads."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from meshcore.codec.payload import (
    ANON_REQ_HEADER_SIZE,
    CONTROL_MIN_SIZE,
    CONTROL_SUBTYPE_DISCOVER_REQ,
    CONTROL_SUBTYPE_DISCOVER_RESP,
    GROUP_HEADER_SIZE,
    PayloadError,
)

_CONTROL_SUBTYPE_NAMES = {
    CONTROL_SUBTYPE_DISCOVER_REQ: "DISCOVER_REQ",
    CONTROL_SUBTYPE_DISCOVER_RESP: "DISCOVER_RESP",
}


@dataclass
class GroupPayload:
    """Header and ciphertext of GRP_TXT and GRP_DATA payloads."""

    channel_hash: int
    mac: int
    ciphertext: bytes


def parse_group_payload(data: bytes) -> GroupPayload:
    data = bytes(data)
    if len(data) < GROUP_HEADER_SIZE:
        raise PayloadError(
            "group payload too short: expected at least "
            f"{GROUP_HEADER_SIZE} bytes, got {len(data)}"
        )
    (mac,) = struct.unpack_from("<H", data, 1)
    return GroupPayload(channel_hash=data[0], mac=mac, ciphertext=data[GROUP_HEADER_SIZE:])


@dataclass
class AnonReqPayload:
    """Anonymous request: destination hash, sender's ephemeral key, MAC and ciphertext."""

    dest_hash: int
    pub_key: bytes
    mac: int
    ciphertext: bytes = b""


def parse_anon_req_payload(data: bytes) -> AnonReqPayload:
    data = bytes(data)
    if len(data) < ANON_REQ_HEADER_SIZE:
        raise PayloadError(
            "anonymous request payload too short: expected at least "
            f"{ANON_REQ_HEADER_SIZE} bytes, got {len(data)}"
        )
    (mac,) = struct.unpack_from("<H", data, 33)
    return AnonReqPayload(
        dest_hash=data[0],
        pub_key=data[1:33],
        mac=mac,
        ciphertext=data[ANON_REQ_HEADER_SIZE:],
    )


@dataclass
class ControlPayload:
    """Control payload; ``subtype`` is the upper four bits of ``flags``."""

    flags: int
    subtype: int
    data: bytes


def parse_control_payload(data: bytes) -> ControlPayload:
    data = bytes(data)
    if len(data) < CONTROL_MIN_SIZE:
        raise PayloadError(
            "control payload too short: expected at least "
            f"{CONTROL_MIN_SIZE} bytes, got {len(data)}"
        )
    return ControlPayload(flags=data[0], subtype=(data[0] >> 4) & 0x0F, data=data[1:])


@dataclass
class DiscoverReqPayload:
    prefix_only: bool = False
    type_filter: int = 0
    tag: int = 0
    since: int = 0


def parse_discover_req_payload(data: bytes) -> DiscoverReqPayload:
    """Parse the body of a DISCOVER_REQ (the bytes after the flags byte)."""
    data = bytes(data)
    if len(data) < 5:
        raise PayloadError(
            f"discover request too short: expected at least 5 bytes, got {len(data)}"
        )
    (tag,) = struct.unpack_from("<I", data, 1)
    since = struct.unpack_from("<I", data, 5)[0] if len(data) >= 9 else 0
    return DiscoverReqPayload(type_filter=data[0], tag=tag, since=since)


def parse_discover_req_from_control(ctrl: ControlPayload) -> DiscoverReqPayload:
    if ctrl.subtype != CONTROL_SUBTYPE_DISCOVER_REQ:
        raise PayloadError(f"not a DISCOVER_REQ: subtype {ctrl.subtype}")
    payload = parse_discover_req_payload(ctrl.data)
    payload.prefix_only = bool(ctrl.flags & 0x01)
    return payload


@dataclass
class DiscoverRespPayload:
    """DISCOVER_RESP; ``snr`` is the raw signed value in quarter dB."""

    node_type: int = 0
    snr: int = 0
    tag: int = 0
    pub_key: bytes = b""

    def snr_db(self) -> float:
        return self.snr / 4.0


def parse_discover_resp_payload(data: bytes) -> DiscoverRespPayload:
    """Parse the body of a DISCOVER_RESP (the bytes after the flags byte)."""
    data = bytes(data)
    if len(data) < 5:
        raise PayloadError(
            f"discover response too short: expected at least 5 bytes, got {len(data)}"
        )
    snr, tag = struct.unpack_from("<bI", data, 0)
    return DiscoverRespPayload(snr=snr, tag=tag, pub_key=data[5:])


def parse_discover_resp_from_control(ctrl: ControlPayload) -> DiscoverRespPayload:
    if ctrl.subtype != CONTROL_SUBTYPE_DISCOVER_RESP:
        raise PayloadError(f"not a DISCOVER_RESP: subtype {ctrl.subtype}")
    payload = parse_discover_resp_payload(ctrl.data)
    payload.node_type = ctrl.flags & 0x0F
    return payload


@dataclass
class MultipartPayload:
    """One MULTIPART packet: fragments still to follow, inner type and data."""

    remaining: int
    inner_type: int
    data: bytes


def parse_multipart_payload(data: bytes) -> MultipartPayload:
    data = bytes(data)
    if not data:
        raise PayloadError("multipart payload too short")
    return MultipartPayload(
        remaining=(data[0] >> 4) & 0x0F,
        inner_type=data[0] & 0x0F,
        data=data[1:],
    )


def control_subtype_name(t: int) -> str:
    return _CONTROL_SUBTYPE_NAMES.get(t, f"UNKNOWN({t})")