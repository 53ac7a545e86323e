"""Builders for the wire form of payloads and their decrypted contents."""

from __future__ import annotations

import math
import struct

from meshcore.codec.payload import (
    ADVERT_PUB_KEY_SIZE,
    ADVERT_SIGNATURE_SIZE,
    CONTROL_SUBTYPE_DISCOVER_REQ,
    CONTROL_SUBTYPE_DISCOVER_RESP,
    COORD_SCALE,
    FLAG_HAS_FEATURE1,
    FLAG_HAS_FEATURE2,
    FLAG_HAS_LOCATION,
    FLAG_HAS_NAME,
    TXT_TYPE_SIGNED,
    AdvertAppData,
)

MAC_SIZE = 2

_U32 = 0xFFFFFFFF


def _round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(-whole if x < 0 else whole)


def _check_size(value: bytes, size: int, what: str) -> bytes:
    value = bytes(value)
    if len(value) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(value)}")
    return value


def split_mac(encrypted: bytes) -> tuple[int, bytes]:
    """Split MAC(2)+ciphertext into the little-endian MAC and the ciphertext."""
    encrypted = bytes(encrypted)
    if len(encrypted) < MAC_SIZE:
        return 0, encrypted
    (mac,) = struct.unpack_from("<H", encrypted, 0)
    return mac, encrypted[MAC_SIZE:]


def prepend_mac(mac: int, ciphertext: bytes) -> bytes:
    """Join a separately stored MAC and ciphertext back into MAC(2)+ciphertext."""
    return struct.pack("<H", mac) + bytes(ciphertext or b"")


def build_advert_payload(
    pub_key: bytes, timestamp: int, signature: bytes, app_data: AdvertAppData | None
) -> bytes:
    """ADVERT payload: public key, timestamp, signature and optional app data."""
    pub_key = _check_size(pub_key, ADVERT_PUB_KEY_SIZE, "public key")
    signature = _check_size(signature, ADVERT_SIGNATURE_SIZE, "signature")
    return (
        pub_key
        + struct.pack("<I", timestamp & _U32)
        + signature
        + build_advert_app_data(app_data)
    )


def build_advert_app_data(app_data: AdvertAppData | None) -> bytes:
    """Wire form of advert app data; flags are derived from the fields set."""
    if app_data is None:
        return b""

    flags = app_data.node_type & 0x0F
    if app_data.lat is not None and app_data.lon is not None:
        flags |= FLAG_HAS_LOCATION
    if app_data.feature1 is not None:
        flags |= FLAG_HAS_FEATURE1
    if app_data.feature2 is not None:
        flags |= FLAG_HAS_FEATURE2
    if app_data.name:
        flags |= FLAG_HAS_NAME

    parts = [bytes([flags])]
    if flags & FLAG_HAS_LOCATION:
        lat_raw = _round_half_away(app_data.lat * COORD_SCALE) & _U32
        lon_raw = _round_half_away(app_data.lon * COORD_SCALE) & _U32
        parts.append(struct.pack("<II", lat_raw, lon_raw))
    if flags & FLAG_HAS_FEATURE1:
        parts.append(struct.pack("<H", app_data.feature1 & 0xFFFF))
    if flags & FLAG_HAS_FEATURE2:
        parts.append(struct.pack("<H", app_data.feature2 & 0xFFFF))
    if flags & FLAG_HAS_NAME:
        parts.append(app_data.name.encode("utf-8"))
    return b"".join(parts)


def build_ack_payload(checksum: int) -> bytes:
    return struct.pack("<I", checksum & _U32)


def build_addressed_payload(dest_hash: int, src_hash: int, mac: int, ciphertext: bytes | None) -> bytes:
    """TXT_MSG / REQ / RESPONSE / PATH payload."""
    return struct.pack("<BBH", dest_hash, src_hash, mac) + bytes(ciphertext or b"")


def build_group_payload(channel_hash: int, mac: int, ciphertext: bytes | None) -> bytes:
    """GRP_TXT / GRP_DATA payload."""
    return struct.pack("<BH", channel_hash, mac) + bytes(ciphertext or b"")


def build_anon_req_payload(
    dest_hash: int, pub_key: bytes, mac: int, ciphertext: bytes | None
) -> bytes:
    pub_key = _check_size(pub_key, ADVERT_PUB_KEY_SIZE, "public key")
    return (
        bytes([dest_hash])
        + pub_key
        + struct.pack("<H", mac)
        + bytes(ciphertext or b"")
    )


def build_control_payload(flags: int, payload: bytes | None) -> bytes:
    return bytes([flags]) + bytes(payload or b"")


def build_discover_req_payload(prefix_only: bool, type_filter: int, tag: int, since: int) -> bytes:
    """Complete DISCOVER_REQ control payload; ``since`` is omitted when zero."""
    flags = CONTROL_SUBTYPE_DISCOVER_REQ << 4
    if prefix_only:
        flags |= 0x01
    data = struct.pack("<BBI", flags, type_filter, tag & _U32)
    if since:
        data += struct.pack("<I", since & _U32)
    return data


def build_discover_resp_payload(node_type: int, snr: int, tag: int, pub_key: bytes | None) -> bytes:
    """Complete DISCOVER_RESP control payload; ``snr`` is the raw signed value."""
    flags = ((CONTROL_SUBTYPE_DISCOVER_RESP << 4) | (node_type & 0x0F)) & 0xFF
    return struct.pack("<BBI", flags, snr & 0xFF, tag & _U32) + bytes(pub_key or b"")


def build_txt_msg_content(
    timestamp: int,
    txt_type: int,
    attempt: int,
    message: str,
    sender_prefix: bytes | None = None,
) -> bytes:
    """Decrypted text message; signed messages carry a 4-byte sender key prefix."""
    type_attempt = ((txt_type << 2) | (attempt & 0x03)) & 0xFF
    header = struct.pack("<IB", timestamp & _U32, type_attempt)
    msg = message.encode("utf-8")
    if txt_type != TXT_TYPE_SIGNED:
        return header + msg
    prefix = bytes(sender_prefix or b"")
    if len(prefix) >= 4:
        return header + prefix[:4] + msg
    # Without a usable prefix the message takes its place and the space stays zeroed.
    return header + msg + bytes(4)


def build_request_content(timestamp: int, request_type: int, request_data: bytes | None) -> bytes:
    return struct.pack("<IB", timestamp & _U32, request_type) + bytes(request_data or b"")


def build_response_content(tag: int, content: bytes | None) -> bytes:
    return struct.pack("<I", tag & _U32) + bytes(content or b"")


def build_path_content(path: bytes, extra_type: int, extra: bytes | None) -> bytes:
    path = bytes(path or b"")
    return bytes([len(path) & 0xFF]) + path + bytes([extra_type]) + bytes(extra or b"")


def build_multipart_payload(remaining: int, inner_type: int, data: bytes | None) -> bytes:
    """MULTIPART payload: remaining count in the high nibble, inner type in the low."""
    header = ((remaining << 4) | (inner_type & 0x0F)) & 0xFF
    return bytes([header]) + bytes(data or b"")