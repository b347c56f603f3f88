"""
Security Constants
==================

Exchange-format constants shared with the tunnel protocol layer.
These values are part of the wire contract and must not be changed
independently of the peer implementation.
"""

from typing import Final

# AEAD framing
IV_LEN: Final[int] = 12  # 96 bits, GCM and IETF ChaCha20-Poly1305
AUTH_TAG_LEN: Final[int] = 16  # 128 bits

# Key sizes
CHACHA20_POLY1305_KEY_LEN: Final[int] = 32  # 256 bits, no variants

# Output buffers must be distinct from input buffers
SUPPORTS_IN_PLACE_ENCRYPT: Final[bool] = False

# Defaults
DEFAULT_ALGORITHM: Final[str] = "AES-256-GCM"
