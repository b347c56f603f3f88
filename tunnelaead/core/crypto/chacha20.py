"""
ChaCha20-Poly1305 Native Backend
================================

Wraps the ``cryptography`` ChaCha20Poly1305 AEAD primitive (RFC 8439).

Conventions of this backend:
    - Fixed 256-bit key, no key-size variants
    - 96-bit nonce (IETF variant)
    - 128-bit Poly1305 tag APPENDED to the ciphertext on encryption
    - Tag expected at the END of the input on decryption

WARNING:
    - Never reuse (key, nonce) pairs
"""

from __future__ import annotations

from typing import Optional

from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from tunnelaead.security.constants import CHACHA20_POLY1305_KEY_LEN, IV_LEN


class ChaChaPolyBackend:
    """
    Keyed ChaCha20-Poly1305 context.

    Usage:
        backend = ChaChaPolyBackend(key)
        sealed = backend.encrypt_and_tag(nonce, plaintext, ad)
        plaintext = backend.auth_decrypt(nonce, sealed, ad)
        backend.close()

    Security Notes:
        - ChaCha20 is constant-time in software (no lookup tables)
        - The underlying library verifies the tag before returning
    """

    __slots__ = ("_aead",)

    def __init__(self, key: bytes) -> None:
        """
        Install a ChaCha20-Poly1305 key.

        Raises:
            ValueError: If the key is not exactly 32 bytes
            cryptography.exceptions.UnsupportedAlgorithm: If the linked
                OpenSSL lacks ChaCha20-Poly1305
        """
        if len(key) != CHACHA20_POLY1305_KEY_LEN:
            raise ValueError(f"Key must be exactly {CHACHA20_POLY1305_KEY_LEN} bytes")
        self._aead: Optional[ChaCha20Poly1305] = ChaCha20Poly1305(key)

    @property
    def is_open(self) -> bool:
        return self._aead is not None

    def _require_open(self) -> ChaCha20Poly1305:
        if self._aead is None:
            raise ValueError("ChaCha20-Poly1305 backend has been closed")
        return self._aead

    def encrypt_and_tag(self, nonce: bytes, plaintext: bytes, ad: bytes) -> bytes:
        """
        Encrypt and authenticate.

        Returns:
            ciphertext || tag
        """
        if len(nonce) != IV_LEN:
            raise ValueError(f"Nonce must be exactly {IV_LEN} bytes")
        return self._require_open().encrypt(nonce, plaintext, ad or None)

    def auth_decrypt(self, nonce: bytes, sealed: bytes, ad: bytes) -> bytes:
        """
        Verify and decrypt ``ciphertext || tag``.

        Raises:
            cryptography.exceptions.InvalidTag: If verification fails
        """
        if len(nonce) != IV_LEN:
            raise ValueError(f"Nonce must be exactly {IV_LEN} bytes")
        return self._require_open().decrypt(nonce, sealed, ad or None)

    def close(self) -> None:
        """Release the keyed AEAD object."""
        self._aead = None

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        state = "open" if self._aead is not None else "closed"
        return f"ChaChaPolyBackend({state})"
