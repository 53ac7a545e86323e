"""Node identity: the 32-byte Ed25519 public key that names a node."""

from __future__ import annotations

import binascii
from dataclasses import dataclass

ID_SIZE = 32


@dataclass(frozen=True)
class MeshCoreID:
    """A node's 32-byte Ed25519 public key."""

    key: bytes = bytes(ID_SIZE)

    def __post_init__(self) -> None:
        key = bytes(self.key)
        if len(key) != ID_SIZE:
            raise ValueError(f"invalid length: expected {ID_SIZE} bytes, got {len(key)}")
        object.__setattr__(self, "key", key)

    def __str__(self) -> str:
        return self.key.hex()

    def __bytes__(self) -> bytes:
        return self.key

    def hash(self) -> int:
        """First byte of the key, used as a V1 path hash for routing."""
        return self.key[0]

    def is_zero(self) -> bool:
        """True if every byte of the key is zero (an unset ID)."""
        return not any(self.key)

    def is_hash_match(self, prefix: bytes | None) -> bool:
        """True if the key starts with the given non-empty prefix of at most 32 bytes."""
        if not prefix or len(prefix) > ID_SIZE:
            return False
        return self.key.startswith(bytes(prefix))


def parse_mesh_core_id(s: str) -> MeshCoreID:
    """Parse a hex string into a MeshCoreID, raising ValueError when it is invalid."""
    try:
        raw = binascii.unhexlify(s)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid hex string: {exc}") from exc
    if len(raw) != ID_SIZE:
        raise ValueError(f"invalid length: expected {ID_SIZE} bytes, got {len(raw)}")
    return MeshCoreID(raw)