"""
tunnelaead - Algorithm-Agnostic AEAD for Secure Tunnels
=======================================================

One cipher context, configured for AES-GCM (128/192/256) or
ChaCha20-Poly1305, with a uniform encrypt/decrypt contract for the
tunnel data channel.

Security Notice:
- No key material is logged
- Authentication is verified before any plaintext is released
- Authentication failures are results, not exceptions
"""

from tunnelaead.core.config import TunnelConfig
from tunnelaead.core.crypto import (
    AEADCipherContext,
    CryptoAlg,
    DecryptResult,
    Mode,
)
from tunnelaead.core.logging import get_secure_logger

__version__ = "0.1.0"

__all__ = [
    "AEADCipherContext",
    "CryptoAlg",
    "DecryptResult",
    "Mode",
    "TunnelConfig",
    "get_secure_logger",
    "__version__",
]
