"""Keys, shared secrets, ciphers, advert signatures and ACK hashes used by MeshCore nodes."""