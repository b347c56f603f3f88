"""
AEAD Error Taxonomy
===================

Every failure raised by the AEAD layer derives from AEADError.

Contract violations (NotInitialized, InvalidArgument) are programming
errors and are raised. AuthenticationFailed is an expected outcome of
decrypting data from the network; the context reports it through a
DecryptResult rather than raising it.
"""

from __future__ import annotations

from typing import Optional


class AEADError(Exception):
    """Base class for all AEAD layer errors."""
    pass


class NativeCipherError(AEADError):
    """
    Error wrapping a failure reported by the underlying cipher library.

    Attributes:
        status: Native status reported by the backend (never key material)
    """

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        if status:
            message = f"{message} (status={status})"
        super().__init__(message)
        self.status = status


class UnsupportedAlgorithm(AEADError):
    """The requested algorithm has no AEAD backend."""
    pass


class InsufficientKeyMaterial(AEADError):
    """Fewer key bytes were supplied than the algorithm requires."""
    pass


class BackendInitError(NativeCipherError):
    """The cipher backend rejected key setup."""
    pass


class NotInitialized(AEADError):
    """An operation was attempted on an uninitialized context."""
    pass


class InvalidArgument(AEADError, ValueError):
    """Malformed call-time parameters (bad IV size, conflicting tag, aliasing)."""
    pass


class EncryptionFailed(NativeCipherError):
    """The cipher backend failed to encrypt."""
    pass


class AuthenticationFailed(AEADError):
    """
    Tag verification failed during decryption.

    This indicates tampering, corruption, or a wrong key/IV/AD. No
    plaintext is ever released alongside it.
    """
    pass
