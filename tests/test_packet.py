import pytest

from meshcore.codec.packet import (
    MAX_PATH_SIZE,
    PAYLOAD_VER1,
    PH_TYPE_SHIFT,
    PH_VER_SHIFT,
    InvalidEncodingError,
    Packet,
    PacketTooShortError,
    PathTooLongError,
    PayloadTooLongError,
    PayloadType,
    RouteType,
    payload_type_name,
    route_type_name,
)


def hdr(ptype, route, ver=PAYLOAD_VER1):
    return (ptype << PH_TYPE_SHIFT) | route | (ver << PH_VER_SHIFT)


@pytest.mark.parametrize(
    "ptype, route",
    [
        (PayloadType.ADVERT, RouteType.FLOOD),
        (PayloadType.TXT_MSG, RouteType.DIRECT),
        (PayloadType.GRP_TXT, RouteType.TRANSPORT_FLOOD),
        (PayloadType.REQ, RouteType.TRANSPORT_DIRECT),
    ],
)
def test_header_fields(ptype, route):
    packet = Packet(header=hdr(ptype, route))
    assert packet.route_type() == route
    assert packet.payload_type() == ptype
    assert packet.payload_version() == PAYLOAD_VER1


@pytest.mark.parametrize(
    "route, expected",
    [
        (RouteType.FLOOD, False),
        (RouteType.DIRECT, False),
        (RouteType.TRANSPORT_FLOOD, True),
        (RouteType.TRANSPORT_DIRECT, True),
    ],
)
def test_has_transport_codes(route, expected):
    assert Packet(header=route).has_transport_codes() is expected


def test_flood_and_direct():
    assert Packet(header=RouteType.TRANSPORT_FLOOD).is_flood() is True
    assert Packet(header=RouteType.TRANSPORT_FLOOD).is_direct() is False
    assert Packet(header=RouteType.DIRECT).is_direct() is True
    assert Packet(header=RouteType.DIRECT).is_flood() is False


@pytest.mark.parametrize(
    "packet",
    [
        Packet(header=hdr(PayloadType.ADVERT, RouteType.FLOOD), payload=b"\x01\x02\x03\x04"),
        Packet(
            header=hdr(PayloadType.TXT_MSG, RouteType.FLOOD),
            path_len=3,
            path=b"\xaa\xbb\xcc",
            payload=b"\x01\x02\x03\x04\x05",
        ),
        Packet(
            header=hdr(PayloadType.GRP_TXT, RouteType.TRANSPORT_FLOOD),
            transport_codes=(0x1234, 0x5678),
            path_len=2,
            path=b"\x11\x22",
            payload=b"\xde\xad\xbe\xef",
        ),
        Packet(
            header=hdr(PayloadType.PATH, RouteType.DIRECT),
            path_len=MAX_PATH_SIZE,
            path=bytes(MAX_PATH_SIZE),
            payload=b"\x42",
        ),
    ],
)
def test_read_write_round_trip(packet):
    decoded = Packet.from_bytes(packet.to_bytes())
    assert decoded.header == packet.header
    assert decoded.transport_codes == packet.transport_codes
    assert decoded.path_len == packet.path_len
    assert decoded.path == packet.path
    assert decoded.payload == packet.payload


def test_transport_codes_little_endian():
    packet = Packet(
        header=RouteType.TRANSPORT_DIRECT, transport_codes=(0x1234, 0x5678), payload=b"\x01"
    )
    assert packet.to_bytes() == bytes([0x03, 0x34, 0x12, 0x78, 0x56, 0x00, 0x01])
    assert packet.raw_length() == 7


@pytest.mark.parametrize(
    "data, error",
    [
        (b"", PacketTooShortError),
        (b"\x01", PacketTooShortError),
        (bytes([RouteType.TRANSPORT_FLOOD, 0x00]), PacketTooShortError),
        (bytes([RouteType.FLOOD, 0xFF]), PathTooLongError),
        (bytes([RouteType.FLOOD, 0x03, 0x01]), PacketTooShortError),
        (bytes([RouteType.FLOOD, 0x01, 0xAA]), InvalidEncodingError),
        (bytes([RouteType.FLOOD, 0x00]) + bytes(185), PayloadTooLongError),
    ],
)
def test_read_errors(data, error):
    with pytest.raises(error):
        Packet.from_bytes(data)


def test_clone_is_equal_and_independent():
    packet = Packet(header=0x05, path=b"\x01", path_len=1, payload=b"\x02", snr=8)
    copy = packet.clone()
    assert copy == packet
    assert copy.snr == 8
    copy.mark_do_not_retransmit()
    assert packet.header == 0x05


def test_do_not_retransmit():
    packet = Packet(header=0x05)
    assert packet.is_marked_do_not_retransmit() is False
    packet.mark_do_not_retransmit()
    assert packet.header == 0xFF
    assert packet.is_marked_do_not_retransmit() is True


def test_snr_db():
    assert Packet(snr=40).snr_db() == 10.0
    assert Packet(snr=-6).snr_db() == -1.5


@pytest.mark.parametrize(
    "value, name",
    [
        (0x00, "REQ"),
        (0x01, "RESPONSE"),
        (0x02, "TXT_MSG"),
        (0x03, "ACK"),
        (0x04, "ADVERT"),
        (0x05, "GRP_TXT"),
        (0x06, "GRP_DATA"),
        (0x07, "ANON_REQ"),
        (0x08, "PATH"),
        (0x09, "TRACE"),
        (0x0A, "MULTIPART"),
        (0x0B, "CONTROL"),
        (0x0F, "RAW_CUSTOM"),
        (0x0E, "UNKNOWN(14)"),
    ],
)
def test_payload_type_name(value, name):
    assert payload_type_name(value) == name


@pytest.mark.parametrize(
    "value, name",
    [
        (0x00, "TRANSPORT_FLOOD"),
        (0x01, "FLOOD"),
        (0x02, "DIRECT"),
        (0x03, "TRANSPORT_DIRECT"),
        (0x07, "UNKNOWN(7)"),
    ],
)
def test_route_type_name(value, name):
    assert route_type_name(value) == name