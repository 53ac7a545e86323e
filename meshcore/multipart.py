"""Reassembly of MULTIPART packets.

Each fragment's header byte holds the number of fragments still to follow
(upper four bits) and the inner payload type (lower four bits). Fragments
arrive in order, the count falling to zero on the last one.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from meshcore.codec.control import parse_multipart_payload
from meshcore.codec.packet import PH_TYPE_SHIFT, Packet, RouteType

DEFAULT_TIMEOUT = 5.0


@dataclass
class Fragment:
    """One MULTIPART fragment with its header byte stripped."""

    remaining: int
    inner_type: int
    data: bytes


def parse_fragment(payload: bytes) -> Fragment:
    """Parse a MULTIPART packet payload into a Fragment."""
    mp = parse_multipart_payload(payload)
    return Fragment(remaining=mp.remaining, inner_type=mp.inner_type, data=mp.data)


@dataclass
class _Pending:
    expected: int
    started: float
    fragments: list[bytes] = field(default_factory=list)


class Reassembler:
    """Collects fragments per (inner type, sender) and emits complete packets."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout
        self._pending: dict[tuple[int, int], _Pending] = {}

    def handle_fragment(self, fragment: Fragment, src_hash: int) -> Packet | None:
        """Add a fragment; return the reassembled inner packet once the last one arrives."""
        self._expire()
        key = (fragment.inner_type, src_hash)
        state = self._pending.get(key)
        if state is None:
            state = _Pending(expected=fragment.remaining + 1, started=time.monotonic())
            self._pending[key] = state
        state.fragments.append(bytes(fragment.data))

        if fragment.remaining != 0:
            return None
        del self._pending[key]
        return Packet(
            header=((fragment.inner_type << PH_TYPE_SHIFT) | RouteType.FLOOD) & 0xFF,
            payload=b"".join(state.fragments),
        )

    def _expire(self) -> None:
        now = time.monotonic()
        for key in [k for k, s in self._pending.items() if now - s.started > self._timeout]:
            del self._pending[key]

    def pending_count(self) -> int:
        """Number of reassemblies in progress."""
        return len(self._pending)

    def clear(self) -> None:
        """Drop every reassembly in progress."""
        self._pending.clear()