"""
AES-GCM Native Backend
======================

Wraps the ``cryptography`` Cipher/GCM primitive for AES-128/192/256.

Conventions of this backend:
    - 96-bit IV supplied per call
    - 128-bit tag returned in a SEPARATE buffer on encryption
    - Tag supplied SEPARATELY on decryption

NIST SP 800-38D:
    - Never reuse a (key, IV) pair
    - Plaintext from the decryptor is only valid after finalize()
      succeeds; this backend never returns bytes before that point
"""

from __future__ import annotations

from typing import Final, Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from tunnelaead.security.constants import AUTH_TAG_LEN, IV_LEN

# AES key sizes accepted by GCM setup (bytes)
GCM_KEY_SIZES: Final[frozenset[int]] = frozenset({16, 24, 32})


class GcmBackend:
    """
    Keyed AES-GCM context.

    The expanded key lives in the AES algorithm object for the lifetime
    of the backend; per-call Cipher objects are built around it.

    Usage:
        backend = GcmBackend(key)
        ciphertext, tag = backend.crypt_and_tag(iv, plaintext, ad)
        plaintext = backend.auth_decrypt(iv, ciphertext, tag, ad)
        backend.close()
    """

    __slots__ = ("_aes", "_key_bits")

    def __init__(self, key: bytes) -> None:
        """
        Install an AES key.

        Args:
            key: 16, 24 or 32 key bytes

        Raises:
            ValueError: If the key size is not an AES key size
        """
        if len(key) not in GCM_KEY_SIZES:
            raise ValueError(f"Invalid AES key size ({len(key) * 8} bits)")
        self._aes: Optional[algorithms.AES] = algorithms.AES(key)
        self._key_bits = len(key) * 8

    @property
    def key_bits(self) -> int:
        return self._key_bits

    @property
    def is_open(self) -> bool:
        return self._aes is not None

    def _cipher(self, iv: bytes, tag: Optional[bytes] = None) -> Cipher:
        if self._aes is None:
            raise ValueError("GCM backend has been closed")
        if tag is None:
            mode = modes.GCM(iv)
        else:
            mode = modes.GCM(iv, tag, min_tag_length=AUTH_TAG_LEN)
        return Cipher(self._aes, mode)

    def crypt_and_tag(self, iv: bytes, plaintext: bytes, ad: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt and authenticate.

        Returns:
            Tuple of (ciphertext, tag); ciphertext has the plaintext length
        """
        if len(iv) != IV_LEN:
            raise ValueError(f"IV must be exactly {IV_LEN} bytes")

        encryptor = self._cipher(iv).encryptor()
        if ad:
            encryptor.authenticate_additional_data(ad)
        ciphertext = encryptor.update(plaintext) + encryptor.finalize()

        return ciphertext, encryptor.tag

    def auth_decrypt(self, iv: bytes, ciphertext: bytes, tag: bytes, ad: bytes) -> bytes:
        """
        Verify and decrypt.

        Returns:
            Plaintext, only once the tag has verified

        Raises:
            cryptography.exceptions.InvalidTag: If verification fails
        """
        if len(iv) != IV_LEN:
            raise ValueError(f"IV must be exactly {IV_LEN} bytes")
        if len(tag) != AUTH_TAG_LEN:
            raise InvalidTag()

        decryptor = self._cipher(iv, tag).decryptor()
        if ad:
            decryptor.authenticate_additional_data(ad)
        # update() output is unverified until finalize() returns
        buffered = decryptor.update(ciphertext)
        tail = decryptor.finalize()

        return buffered + tail

    def close(self) -> None:
        """Release the keyed AES object."""
        self._aes = None

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        state = "open" if self._aes is not None else "closed"
        return f"GcmBackend(AES-{self._key_bits}, {state})"
