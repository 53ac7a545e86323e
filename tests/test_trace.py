import pytest

from meshcore.codec.packet import PH_TYPE_SHIFT, Packet, PayloadType, RouteType
from meshcore.codec.payload import PayloadError
from meshcore.codec.trace import build_trace_payload, parse_trace_payload


def test_parse_trace_payload():
    data = build_trace_payload(0x12345678, 0xAABBCCDD, 0x00, bytes([0xAA, 0xBB, 0xCC]))
    tp = parse_trace_payload(data)
    assert tp.tag == 0x12345678
    assert tp.auth_code == 0xAABBCCDD
    assert tp.flags == 0x00
    assert tp.hash_size == 1
    assert len(tp.path_hashes) == 3


def test_parse_trace_payload_too_short():
    with pytest.raises(PayloadError):
        parse_trace_payload(bytes(5))


def test_parse_trace_payload_header_only():
    tp = parse_trace_payload(build_trace_payload(1, 2, 0, None))
    assert tp.path_hashes == b""
    assert tp.hop_count() == 0


@pytest.mark.parametrize(
    "flags, hashes_len, hops",
    [(0x00, 3, 3), (0x01, 6, 3), (0x02, 8, 2), (0x00, 0, 0)],
)
def test_hop_count(flags, hashes_len, hops):
    tp = parse_trace_payload(build_trace_payload(0, 0, flags, bytes(hashes_len)))
    assert tp.hop_count() == hops


def test_hash_at():
    tp = parse_trace_payload(build_trace_payload(0, 0, 0x01, bytes([0xAA, 0xBB, 0xCC, 0xDD])))
    assert tp.hash_at(0) == bytes([0xAA, 0xBB])
    assert tp.hash_at(1) == bytes([0xCC, 0xDD])
    assert tp.hash_at(2) is None


def test_build_trace_payload_round_trip():
    hashes = bytes(range(1, 9))
    tp = parse_trace_payload(build_trace_payload(0xDEADBEEF, 0xCAFEBABE, 0x02, hashes))
    assert tp.tag == 0xDEADBEEF
    assert tp.auth_code == 0xCAFEBABE
    assert tp.flags == 0x02
    assert tp.hash_size == 4
    assert tp.hop_count() == 2
    assert tp.path_hashes == hashes


def test_build_trace_payload_full_stack():
    payload = build_trace_payload(0x11223344, 0x55667788, 0x00, bytes([0xAA, 0xBB, 0xCC]))
    pkt = Packet(header=(PayloadType.TRACE << PH_TYPE_SHIFT) | RouteType.DIRECT, payload=payload)
    decoded = Packet.from_bytes(pkt.to_bytes())
    tp = parse_trace_payload(decoded.payload)
    assert tp.tag == 0x11223344
    assert tp.hop_count() == 3