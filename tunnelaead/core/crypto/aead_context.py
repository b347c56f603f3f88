"""
AEAD Cipher Context
===================

Algorithm-agnostic authenticated encryption for the tunnel data channel.

One AEADCipherContext is bound to exactly one AEAD algorithm after
init() and exposes the same encrypt/decrypt contract whichever backend
is active:

    AES-128/192/256-GCM  -> GcmBackend         (tag in a separate buffer)
    ChaCha20-Poly1305    -> ChaChaPolyBackend  (tag appended to ciphertext)

External conventions (shared with the peer, not reconfigurable):
    - IV is exactly 12 bytes
    - Tag is exactly 16 bytes and travels at the END of the ciphertext
    - Input and output buffers never alias

Threading:
    A context holds no locks. Use one context per connection direction
    and serialize all calls on it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Final, Optional, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.exceptions import UnsupportedAlgorithm as _NativeUnsupported

from tunnelaead.core.crypto import algorithms
from tunnelaead.core.crypto.aes_gcm import GcmBackend
from tunnelaead.core.crypto.algorithms import AlgInfo, CipherFamily, CryptoAlg
from tunnelaead.core.crypto.chacha20 import ChaChaPolyBackend
from tunnelaead.core.crypto.errors import (
    BackendInitError,
    EncryptionFailed,
    InsufficientKeyMaterial,
    InvalidArgument,
    NotInitialized,
    UnsupportedAlgorithm,
)
from tunnelaead.core.crypto.result import DecryptResult
from tunnelaead.core.memory.zeroization import ZeroizeContext
from tunnelaead.security.constants import (
    AUTH_TAG_LEN,
    IV_LEN,
    SUPPORTS_IN_PLACE_ENCRYPT,
)

_log = logging.getLogger("tunnelaead.crypto")


class Mode(Enum):
    """Cipher direction requested at init time."""
    UNDEF = auto()
    ENCRYPT = auto()
    DECRYPT = auto()


# =============================================================================
# Backend sessions (one class per algorithm family)
# =============================================================================

class _AEADSession(ABC):
    """
    A keyed backend adapted to the external convention.

    seal() returns ciphertext || tag and open() takes ciphertext || tag,
    whatever the native backend does with its tag.
    """

    __slots__ = ()

    @abstractmethod
    def seal(self, iv: bytes, plaintext: bytes, ad: bytes) -> bytes:
        ...

    @abstractmethod
    def open(self, iv: bytes, sealed: bytes, ad: bytes) -> bytes:
        """Raises InvalidTag if verification fails."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class _GcmSession(_AEADSession):
    """AES-GCM: splits/joins the separate tag buffer."""

    __slots__ = ("backend",)

    def __init__(self, key: bytes) -> None:
        self.backend = GcmBackend(key)

    def seal(self, iv: bytes, plaintext: bytes, ad: bytes) -> bytes:
        ciphertext, tag = self.backend.crypt_and_tag(iv, plaintext, ad)
        return ciphertext + tag

    def open(self, iv: bytes, sealed: bytes, ad: bytes) -> bytes:
        split = len(sealed) - AUTH_TAG_LEN
        return self.backend.auth_decrypt(iv, sealed[:split], sealed[split:], ad)

    def close(self) -> None:
        self.backend.close()


class _ChaChaPolySession(_AEADSession):
    """ChaCha20-Poly1305: the native layout already matches."""

    __slots__ = ("backend",)

    def __init__(self, key: bytes) -> None:
        self.backend = ChaChaPolyBackend(key)

    def seal(self, iv: bytes, plaintext: bytes, ad: bytes) -> bytes:
        return self.backend.encrypt_and_tag(iv, plaintext, ad)

    def open(self, iv: bytes, sealed: bytes, ad: bytes) -> bytes:
        return self.backend.auth_decrypt(iv, sealed, ad)

    def close(self) -> None:
        self.backend.close()


# New AEAD families are added here and in the algorithm catalog.
_SESSION_TYPES: Final[dict[CipherFamily, type[_AEADSession]]] = {
    CipherFamily.GCM: _GcmSession,
    CipherFamily.CHACHA20_POLY1305: _ChaChaPolySession,
}


# =============================================================================
# Buffer helpers
# =============================================================================

def _byte_view(buf: Any, field: str) -> memoryview:
    """Flat unsigned-byte view of a caller buffer."""
    try:
        view = memoryview(buf)
    except TypeError as e:
        raise InvalidArgument(f"{field} must be a bytes-like object") from e
    if not view.c_contiguous:
        raise InvalidArgument(f"{field} must be a contiguous buffer")
    return view.cast("B")


def _prefix(buf: Any, length: Optional[int], field: str) -> bytes:
    """Copy the first ``length`` bytes of ``buf`` (all of it when None)."""
    if buf is None:
        buf = b""
    view = _byte_view(buf, field)
    if length is None:
        return bytes(view)
    if not isinstance(length, int) or isinstance(length, bool):
        raise InvalidArgument(f"{field} length must be an integer")
    if length < 0 or length > len(view):
        raise InvalidArgument(
            f"{field} length {length} outside buffer of {len(view)} bytes"
        )
    return bytes(view[:length])


def _shares_buffer(a: Any, b: Any) -> bool:
    """True if both objects expose the same underlying buffer."""
    if a is b:
        return True
    return memoryview(a).obj is memoryview(b).obj


def _output_view(output: Any, source: Any, needed: int) -> memoryview:
    view = _byte_view(output, "output")
    if view.readonly:
        raise InvalidArgument("output buffer is read-only")
    if _shares_buffer(output, source):
        raise InvalidArgument("input and output buffers must not alias")
    if len(view) < needed:
        raise InvalidArgument(
            f"output buffer too small ({len(view)} < {needed} bytes)"
        )
    return view


# =============================================================================
# Context
# =============================================================================

class AEADCipherContext:
    """
    Stateful AEAD context bound to one algorithm at a time.

    Usage:
        ctx = AEADCipherContext()
        ctx.init(CryptoAlg.AES_256_GCM, key, mode=Mode.ENCRYPT)

        sealed = ctx.encrypt(packet, iv, ad=header)   # ciphertext || tag

        result = peer.decrypt(sealed, iv, ad=header)
        if not result.ok:
            drop_packet()
        else:
            deliver(result.value)

        ctx.erase()

    A failed tag check is reported as a DecryptResult, never raised and
    never accompanied by plaintext. Contract violations raise
    (NotInitialized, InvalidArgument, ...).
    """

    IV_LEN: Final[int] = IV_LEN
    AUTH_TAG_LEN: Final[int] = AUTH_TAG_LEN
    SUPPORTS_IN_PLACE_ENCRYPT: Final[bool] = SUPPORTS_IN_PLACE_ENCRYPT

    __slots__ = ("_session", "_alg", "_mode")

    def __init__(self) -> None:
        self._session: Optional[_AEADSession] = None
        self._alg: Optional[CryptoAlg] = None
        self._mode: Mode = Mode.UNDEF

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(
        self,
        algorithm: CryptoAlg | str,
        key: bytes | bytearray | memoryview,
        key_len: Optional[int] = None,
        mode: Mode = Mode.ENCRYPT,
    ) -> None:
        """
        Bind the context to an algorithm and key.

        Any previously initialized backend is torn down first. On failure
        the context is left uninitialized.

        Args:
            algorithm: CryptoAlg member or catalog name ("AES-256-GCM")
            key: Key material; only the first key_size bytes are used
            key_len: Bytes of key material available (default: len(key))
            mode: Mode.ENCRYPT or Mode.DECRYPT

        Checks run in this order: algorithm, key_len against the key size,
        key_len against the key buffer, mode.

        Raises:
            UnsupportedAlgorithm: Unknown or non-AEAD algorithm
            InsufficientKeyMaterial: key_len below the algorithm's key size
            InvalidArgument: Negative key_len, key_len beyond the key
                buffer, or a bad mode
            BackendInitError: The backend rejected key setup
        """
        self.erase()

        alg, entry = self._resolve(algorithm)

        key_view = _byte_view(key, "key")
        available = len(key_view) if key_len is None else key_len
        if not isinstance(available, int) or isinstance(available, bool):
            raise InvalidArgument("key_len must be an integer")
        if available < 0:
            raise InvalidArgument(f"key_len must not be negative ({available})")
        if available < entry.key_size:
            raise InsufficientKeyMaterial(
                f"{entry.name}: insufficient key material "
                f"({available} of {entry.key_size} bytes)"
            )
        if available > len(key_view):
            raise InvalidArgument(
                f"key_len {available} outside key buffer of {len(key_view)} bytes"
            )

        self._check_mode(mode)

        session_type = _SESSION_TYPES[entry.family]
        key_copy = bytearray(key_view[:entry.key_size])
        with ZeroizeContext(key_copy):
            try:
                session = session_type(bytes(key_copy))
            except (ValueError, TypeError, _NativeUnsupported) as e:
                _log.warning("%s: backend setup failed", entry.name)
                raise BackendInitError(f"{entry.name}: backend setup failed", status=str(e)) from e

        self._session = session
        self._alg = alg
        self._mode = mode
        _log.debug("AEAD context initialized: %s (%s)", entry.name, mode.name)

    def erase(self) -> None:
        """Release the backend; no-op when already uninitialized."""
        session = self._session
        if session is None:
            return

        self._session = None
        session.close()
        _log.debug("AEAD context erased: %s", algorithms.name(self._alg))
        self._alg = None
        self._mode = Mode.UNDEF

    close = erase

    def __enter__(self) -> "AEADCipherContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.erase()

    def __del__(self) -> None:
        if getattr(self, "_session", None) is not None:
            self.erase()

    def __copy__(self) -> "AEADCipherContext":
        raise TypeError("AEADCipherContext cannot be copied")

    def __deepcopy__(self, memo: dict) -> "AEADCipherContext":
        raise TypeError("AEADCipherContext cannot be copied")

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    @property
    def algorithm(self) -> Optional[CryptoAlg]:
        return self._alg

    @property
    def algorithm_name(self) -> str:
        return algorithms.name(self._alg) if self._alg is not None else "UNDEF"

    @property
    def mode(self) -> Mode:
        return self._mode

    @staticmethod
    def requires_authtag_at_end() -> bool:
        """The tag always travels at the end of the ciphertext."""
        return True

    @staticmethod
    def is_supported(algorithm: CryptoAlg | str) -> bool:
        """
        Check whether init() can use ``algorithm``.

        Pure catalog lookup; needs no context instance.
        """
        try:
            AEADCipherContext._resolve(algorithm)
        except UnsupportedAlgorithm:
            return False
        return True

    # -------------------------------------------------------------------------
    # Encryption
    # -------------------------------------------------------------------------

    def encrypt(
        self,
        input: bytes | bytearray | memoryview,
        iv: bytes,
        ad: Optional[bytes] = b"",
        *,
        length: Optional[int] = None,
        ad_len: Optional[int] = None,
    ) -> bytes:
        """
        Encrypt and authenticate.

        Args:
            input: Plaintext (may be empty)
            iv: 12-byte IV; never reuse one under the same key
            ad: Associated data (authenticated, not encrypted)
            length: Use only the first ``length`` bytes of input
            ad_len: Use only the first ``ad_len`` bytes of ad

        Returns:
            ciphertext || tag (length + 16 bytes)

        Raises:
            NotInitialized: Context has no backend
            InvalidArgument: Bad IV size or lengths
            EncryptionFailed: The backend failed to encrypt
        """
        session, plaintext, iv_bytes, aad = self._prepare(input, iv, ad, length, ad_len)
        try:
            return session.seal(iv_bytes, plaintext, aad)
        except (ValueError, OverflowError) as e:
            raise EncryptionFailed(f"{self.algorithm_name}: encryption failed", status=str(e)) from e

    def encrypt_into(
        self,
        input: bytes | bytearray | memoryview,
        output: bytearray | memoryview,
        iv: bytes,
        ad: Optional[bytes] = b"",
        *,
        length: Optional[int] = None,
        ad_len: Optional[int] = None,
    ) -> int:
        """
        Encrypt into a caller-owned buffer.

        ``output`` must hold at least length + 16 bytes and must not share
        a buffer with ``input`` (any view of the same object is rejected).

        Returns:
            Number of bytes written (ciphertext plus tag)
        """
        sealed = self.encrypt(input, iv, ad, length=length, ad_len=ad_len)
        out = _output_view(output, input, len(sealed))
        out[:len(sealed)] = sealed
        return len(sealed)

    # -------------------------------------------------------------------------
    # Decryption
    # -------------------------------------------------------------------------

    def decrypt(
        self,
        input: bytes | bytearray | memoryview,
        iv: bytes,
        ad: Optional[bytes] = b"",
        tag: Optional[bytes] = None,
        *,
        length: Optional[int] = None,
        ad_len: Optional[int] = None,
    ) -> DecryptResult[bytes]:
        """
        Verify and decrypt ``ciphertext || tag``.

        Args:
            input: Ciphertext followed by the 16-byte tag
            iv: 12-byte IV used for encryption
            ad: Associated data used for encryption
            tag: Must be None; the tag is read from the end of input
            length: Use only the first ``length`` bytes of input (tag included)
            ad_len: Use only the first ``ad_len`` bytes of ad

        Returns:
            DecryptResult with the plaintext, or a failed result carrying
            AuthenticationFailed and no plaintext

        Raises:
            NotInitialized: Context has no backend
            InvalidArgument: Bad IV size, lengths, or a separate tag given
        """
        session, sealed, iv_bytes, aad = self._prepare(input, iv, ad, length, ad_len)
        if tag is not None:
            raise InvalidArgument("tag must be None: the tag is read from the end of the input")

        if len(sealed) < AUTH_TAG_LEN:
            _log.debug("%s: input shorter than tag", self.algorithm_name)
            return DecryptResult.failed("input shorter than authentication tag")

        try:
            plaintext = session.open(iv_bytes, sealed, aad)
        except InvalidTag:
            _log.debug("%s: authentication failed", self.algorithm_name)
            return DecryptResult.failed()

        return DecryptResult.success(plaintext)

    def decrypt_into(
        self,
        input: bytes | bytearray | memoryview,
        output: bytearray | memoryview,
        iv: bytes,
        ad: Optional[bytes] = b"",
        tag: Optional[bytes] = None,
        *,
        length: Optional[int] = None,
        ad_len: Optional[int] = None,
    ) -> DecryptResult[int]:
        """
        Verify and decrypt into a caller-owned buffer.

        ``output`` must hold at least length - 16 bytes and must not share
        a buffer with ``input``. It is written only after the tag
        verifies; on failure it is left untouched.

        Returns:
            DecryptResult with the number of bytes written, or a failed result
        """
        result = self.decrypt(input, iv, ad, tag, length=length, ad_len=ad_len)

        sealed_len = len(_byte_view(input, "input")) if length is None else length
        out = _output_view(output, input, max(sealed_len - AUTH_TAG_LEN, 0))
        if not result.ok:
            return DecryptResult(ok=False, failure=result.failure)

        plaintext = result.value
        out[:len(plaintext)] = plaintext
        return DecryptResult.success(len(plaintext))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _prepare(
        self,
        input: Any,
        iv: Any,
        ad: Any,
        length: Optional[int],
        ad_len: Optional[int],
    ) -> Tuple[_AEADSession, bytes, bytes, bytes]:
        session = self._session
        if session is None:
            raise NotInitialized("AEAD context is not initialized")

        iv_bytes = _prefix(iv, None, "iv")
        if len(iv_bytes) != IV_LEN:
            raise InvalidArgument(f"IV must be exactly {IV_LEN} bytes")

        return (
            session,
            _prefix(input, length, "input"),
            iv_bytes,
            _prefix(ad, ad_len, "ad"),
        )

    @staticmethod
    def _check_mode(mode: Any) -> None:
        if mode not in (Mode.ENCRYPT, Mode.DECRYPT):
            raise InvalidArgument(f"invalid cipher mode: {mode!r}")

    @staticmethod
    def _resolve(algorithm: Any) -> Tuple[CryptoAlg, AlgInfo]:
        alg = algorithm if isinstance(algorithm, CryptoAlg) else algorithms.lookup(algorithm)
        entry = algorithms.info(alg) if alg is not None else None
        if entry is None or entry.family not in _SESSION_TYPES:
            shown = entry.name if entry is not None else str(algorithm)
            raise UnsupportedAlgorithm(f"{shown}: not usable")
        return alg, entry

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        if self._session is None:
            return "AEADCipherContext(uninitialized)"
        return f"AEADCipherContext({self.algorithm_name}, {self._mode.name})"
