import struct
import time

import pytest

from meshcore.codec.builder import build_multipart_payload
from meshcore.codec.packet import PayloadType
from meshcore.codec.payload import PayloadError
from meshcore.multipart import Fragment, Reassembler, parse_fragment


def test_parse_fragment():
    frag = parse_fragment(bytes([(2 << 4) | PayloadType.ACK, 0xAA, 0xBB, 0xCC, 0xDD]))
    assert frag.remaining == 2
    assert frag.inner_type == PayloadType.ACK
    assert frag.data == b"\xaa\xbb\xcc\xdd"


def test_parse_fragment_empty():
    with pytest.raises(PayloadError):
        parse_fragment(b"")


def test_single_fragment():
    r = Reassembler()
    frag = Fragment(remaining=0, inner_type=PayloadType.ACK, data=struct.pack("<I", 0x12345678))
    pkt = r.handle_fragment(frag, 0xAA)
    assert pkt is not None
    assert pkt.payload_type() == PayloadType.ACK
    assert struct.unpack("<I", pkt.payload)[0] == 0x12345678


def test_two_fragments():
    r = Reassembler()
    first = Fragment(remaining=1, inner_type=PayloadType.ACK, data=b"\x78\x56")
    last = Fragment(remaining=0, inner_type=PayloadType.ACK, data=b"\x34\x12")
    assert r.handle_fragment(first, 0xBB) is None
    assert r.pending_count() == 1
    pkt = r.handle_fragment(last, 0xBB)
    assert pkt is not None
    assert r.pending_count() == 0
    assert pkt.payload == b"\x78\x56\x34\x12"


def test_three_fragments():
    r = Reassembler()
    frags = [
        Fragment(2, PayloadType.TXT_MSG, b"hel"),
        Fragment(1, PayloadType.TXT_MSG, b"lo "),
        Fragment(0, PayloadType.TXT_MSG, b"world"),
    ]
    assert r.handle_fragment(frags[0], 0x01) is None
    assert r.handle_fragment(frags[1], 0x01) is None
    pkt = r.handle_fragment(frags[2], 0x01)
    assert pkt is not None
    assert pkt.payload == b"hello world"
    assert pkt.payload_type() == PayloadType.TXT_MSG


def test_different_senders():
    r = Reassembler()
    r.handle_fragment(Fragment(1, PayloadType.ACK, b"\xaa\xaa"), 0x01)
    r.handle_fragment(Fragment(1, PayloadType.ACK, b"\xbb\xbb"), 0x02)
    assert r.pending_count() == 2

    pkt = r.handle_fragment(Fragment(0, PayloadType.ACK, b"\xcc\xcc"), 0x01)
    assert pkt is not None
    assert pkt.payload == b"\xaa\xaa\xcc\xcc"
    assert r.pending_count() == 1

    pkt = r.handle_fragment(Fragment(0, PayloadType.ACK, b"\xdd\xdd"), 0x02)
    assert pkt is not None
    assert pkt.payload == b"\xbb\xbb\xdd\xdd"
    assert r.pending_count() == 0


def test_timeout():
    r = Reassembler(0.05)
    r.handle_fragment(Fragment(1, PayloadType.ACK, b"\x01"), 0xCC)
    assert r.pending_count() == 1
    time.sleep(0.06)
    r.handle_fragment(Fragment(0, PayloadType.TXT_MSG, b"\x02"), 0xDD)
    assert r.pending_count() == 0


def test_clear():
    r = Reassembler()
    r.handle_fragment(Fragment(1, PayloadType.ACK, b"\x01"), 0xAA)
    r.clear()
    assert r.pending_count() == 0


def test_build_and_parse_round_trip():
    payload = build_multipart_payload(1, PayloadType.ACK, struct.pack("<I", 0xDEADBEEF))
    frag = parse_fragment(payload)
    assert frag.remaining == 1
    assert frag.inner_type == PayloadType.ACK
    assert struct.unpack("<I", frag.data)[0] == 0xDEADBEEF