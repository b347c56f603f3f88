"""
tunnelaead Cryptographic Core
=============================

AEAD encryption for the tunnel data channel.

Architecture:
    1. algorithms: catalog of cipher names, key sizes and families
    2. aes_gcm / chacha20: keyed native backends with their own tag conventions
    3. aead_context: AEADCipherContext, the single external contract

Security Properties:
    - All encryption is authenticated (AEAD)
    - Tag verified before any plaintext is released
    - Tag always travels at the end of the ciphertext

WARNING: This module handles sensitive cryptographic material.
         Never reuse an IV under the same key.
"""

from tunnelaead.core.crypto.aead_context import AEADCipherContext, Mode
from tunnelaead.core.crypto.algorithms import AlgInfo, CipherFamily, CryptoAlg
from tunnelaead.core.crypto.errors import (
    AEADError,
    AuthenticationFailed,
    BackendInitError,
    EncryptionFailed,
    InsufficientKeyMaterial,
    InvalidArgument,
    NotInitialized,
    UnsupportedAlgorithm,
)
from tunnelaead.core.crypto.result import DecryptResult

__all__ = [
    "AEADCipherContext",
    "Mode",
    "AlgInfo",
    "CipherFamily",
    "CryptoAlg",
    "DecryptResult",
    "AEADError",
    "AuthenticationFailed",
    "BackendInitError",
    "EncryptionFailed",
    "InsufficientKeyMaterial",
    "InvalidArgument",
    "NotInitialized",
    "UnsupportedAlgorithm",
]
