"""Wire formats of MeshCore packets, payloads, trace payloads and serial bridge frames."""