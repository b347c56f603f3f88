"""
Decryption Outcome
==================

Explicit result type for AEAD decryption.

A failed authentication is routine on a tunnel (replayed, corrupted or
forged packets), so decrypt() reports it as a value. A result either
carries verified output or an AuthenticationFailed, never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, cast

from tunnelaead.core.crypto.errors import AuthenticationFailed

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DecryptResult(Generic[T]):
    """
    Outcome of a decrypt call.

    Attributes:
        ok: True if the tag verified
        value: Plaintext (or byte count for decrypt_into); None on failure
        failure: The AuthenticationFailed error; None on success
    """

    ok: bool
    value: Optional[T] = None
    failure: Optional[AuthenticationFailed] = None

    def __post_init__(self) -> None:
        if self.ok and self.failure is not None:
            raise ValueError("successful result cannot carry a failure")
        if not self.ok and self.value is not None:
            raise ValueError("failed result cannot carry output")
        if not self.ok and self.failure is None:
            object.__setattr__(self, "failure", AuthenticationFailed("authentication failed"))

    @staticmethod
    def success(value: T) -> "DecryptResult[T]":
        return DecryptResult(ok=True, value=value)

    @staticmethod
    def failed(reason: str = "authentication failed") -> "DecryptResult[T]":
        return DecryptResult(ok=False, failure=AuthenticationFailed(reason))

    @property
    def authentication_failed(self) -> bool:
        return not self.ok

    def unwrap(self) -> T:
        """
        Return the verified value.

        Raises:
            AuthenticationFailed: If the result is a failure
        """
        if not self.ok:
            raise cast(AuthenticationFailed, self.failure)
        return cast(T, self.value)

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        """Safe representation without exposing plaintext."""
        if not self.ok:
            return f"DecryptResult(failed: {self.failure})"
        if isinstance(self.value, (bytes, bytearray)):
            return f"DecryptResult(ok, plaintext_len={len(self.value)})"
        return f"DecryptResult(ok, value={self.value!r})"
