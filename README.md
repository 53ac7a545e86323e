# meshcore

Building blocks for working with MeshCore mesh radio traffic in Python:
packet encoding and decoding, payload parsers and builders, serial bridge
framing, node identities, timestamps, duplicate detection, multipart
reassembly, and the cryptography used for group channels, addressed
messages, anonymous requests and signed adverts.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `meshcore.node` – `MeshCoreID`, a node's 32-byte Ed25519 public key
  (`str()` gives hex, `bytes()` the raw key, plus `hash()`, `is_zero()` and
  `is_hash_match(prefix)`), and `parse_mesh_core_id(hex_string)`.
- `meshcore.clock` – `Clock`, whose `get_current_time_unique()` returns
  strictly increasing 32-bit UNIX timestamps; `set_current_time(t)` sets the
  clock, which then advances with real time. A custom time source can be
  passed as `Clock(now_fn=...)`.
- `meshcore.codec.packet` – `Packet` with `from_bytes` / `to_bytes`,
  `raw_length()`, header accessors (`route_type()`, `payload_type()`,
  `payload_version()`, `is_flood()`, `is_direct()`, `has_transport_codes()`),
  `snr_db()`, `clone()`, the `RouteType` and `PayloadType` enums, and
  `payload_type_name` / `route_type_name`.
- `meshcore.codec.payload` – parsers for adverts and their app data, ACKs,
  addressed payloads, and decrypted text messages, requests, responses and
  paths, plus the name helpers `node_type_name`, `txt_type_name`,
  `request_type_name` and `anon_req_type_name`.
- `meshcore.codec.control` – parsers for group payloads, anonymous requests,
  control payloads (DISCOVER_REQ / DISCOVER_RESP) and multipart payloads, and
  `control_subtype_name`.
- `meshcore.codec.trace` – `parse_trace_payload`, `build_trace_payload` and
  `TracePayload.hop_count()` / `hash_at(index)`.
- `meshcore.codec.builder` – the wire-format builders matching the parsers,
  and `split_mac` / `prepend_mac` for moving between the `MAC(2)+ciphertext`
  form and payloads that store the MAC separately.
- `meshcore.codec.rs232` and `meshcore.codec.fletcher16` – serial bridge
  frames (`encode_rs232_frame`, `decode_rs232_frame`) checked with
  Fletcher-16.
- `meshcore.crypto.keys` – `generate_key_pair`, `key_pair_from_private_key`,
  Ed25519 to X25519 key conversion and `compute_shared_secret`.
- `meshcore.crypto.cipher` – `encrypt_then_mac` / `mac_then_decrypt`:
  AES-128 ECB with a 2-byte HMAC-SHA256 tag in front.
- `meshcore.crypto.group` – channel messages under a pre-shared key,
  including `DEFAULT_CHANNEL_KEY` of the public channel.
- `meshcore.crypto.addressed` – peer-to-peer and anonymous encryption.
- `meshcore.crypto.advert` – `sign_advert`, `verify_advert` and
  `build_advert_signed_message`.
- `meshcore.crypto.ack` – `compute_ack_hash`.
- `meshcore.dedupe` – `PacketDeduplicator.has_seen(packet)` and
  `calculate_packet_hash`.
- `meshcore.multipart` – `parse_fragment` and `Reassembler`.

## Examples

Send a message on the public channel and frame it for a serial bridge:

```python
from meshcore.codec.builder import build_group_payload, split_mac
from meshcore.codec.packet import PH_TYPE_SHIFT, Packet, PayloadType, RouteType
from meshcore.codec.rs232 import encode_rs232_frame
from meshcore.crypto.group import (
    DEFAULT_CHANNEL_KEY,
    build_grp_txt_plaintext,
    compute_channel_hash,
    encrypt_group_message,
)

sealed = encrypt_group_message(build_grp_txt_plaintext(1704067200, "hello"), DEFAULT_CHANNEL_KEY)
mac, ciphertext = split_mac(sealed)
payload = build_group_payload(compute_channel_hash(DEFAULT_CHANNEL_KEY), mac, ciphertext)
packet = Packet(header=(PayloadType.GRP_TXT << PH_TYPE_SHIFT) | RouteType.FLOOD, payload=payload)
frame = encode_rs232_frame(packet.to_bytes())
```

And read it back:

```python
from meshcore.codec.builder import prepend_mac
from meshcore.codec.control import parse_group_payload
from meshcore.codec.rs232 import decode_rs232_frame
from meshcore.crypto.group import decrypt_group_message, parse_grp_txt_plaintext

decoded, rest = decode_rs232_frame(frame)
packet = Packet.from_bytes(decoded.payload)
group = parse_group_payload(packet.payload)
plaintext = decrypt_group_message(prepend_mac(group.mac, group.ciphertext), DEFAULT_CHANNEL_KEY)
timestamp, txt_type, message = parse_grp_txt_plaintext(plaintext)
```

Encrypt a message for a peer:

```python
from meshcore.crypto.addressed import decrypt_addressed, encrypt_addressed
from meshcore.crypto.keys import generate_key_pair

alice = generate_key_pair()
bob = generate_key_pair()

sealed = encrypt_addressed(b"hello", alice.private_key, bob.public_key)
opened = decrypt_addressed(sealed, bob.private_key, alice.public_key)
assert opened.startswith(b"hello")  # zero padding is left in place
```

Sign and verify an advert:

```python
from meshcore.codec.builder import build_advert_app_data, build_advert_payload
from meshcore.codec.payload import NODE_TYPE_CHAT, AdvertAppData, parse_advert_payload
from meshcore.crypto.advert import sign_advert, verify_advert

app = AdvertAppData(node_type=NODE_TYPE_CHAT, name="Node-1")
signature = sign_advert(alice.private_key, alice.public_key, 1704067200, build_advert_app_data(app))
advert = parse_advert_payload(build_advert_payload(alice.public_key, 1704067200, signature, app))
assert verify_advert(advert)
```

Drop duplicates and reassemble multipart packets:

```python
from meshcore.dedupe import PacketDeduplicator
from meshcore.multipart import Reassembler, parse_fragment

seen = PacketDeduplicator()
reassembler = Reassembler(timeout=5.0)

if not seen.has_seen(packet) and packet.payload_type() == PayloadType.MULTIPART:
    inner = reassembler.handle_fragment(parse_fragment(packet.payload), src_hash=0x01)
```

## Errors

Failures raise exceptions, all subclasses of `ValueError`: for example
`PacketTooShortError` and `PathTooLongError` from `Packet.from_bytes`,
`ChecksumMismatchError` and `IncompleteFrameError` from `decode_rs232_frame`,
`PayloadError` from the payload parsers, `MACMismatchError` when a message
fails authentication, and `InvalidPrivKeySizeError` for malformed keys.

## What this package does not do

It works on bytes only. It does not open serial ports, radios or network
connections, keeps no contact or message storage, and contains no node that
routes or answers packets on its own; those are left to the program that
uses it.