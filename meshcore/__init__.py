"""Packet codec, cryptography, deduplication and multipart helpers for MeshCore mesh radio networks."""

__version__ = "0.1.0"