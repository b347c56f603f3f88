"""
Cipher Algorithm Catalog
========================

Static metadata for the ciphers known to the tunnel stack.

The catalog is shared by all cipher contexts: it names each algorithm,
records its key and IV sizes and tells which family it belongs to.
Not every entry is usable by every context; the AEAD context only
accepts members whose family is an AEAD family.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Optional


class CipherFamily(Enum):
    """Broad classification of a catalog entry."""
    CBC_HMAC = auto()
    GCM = auto()
    CHACHA20_POLY1305 = auto()


class CryptoAlg(Enum):
    """Algorithms known to the catalog."""
    AES_128_CBC = auto()
    AES_192_CBC = auto()
    AES_256_CBC = auto()
    AES_128_GCM = auto()
    AES_192_GCM = auto()
    AES_256_GCM = auto()
    CHACHA20_POLY1305 = auto()


@dataclass(frozen=True, slots=True)
class AlgInfo:
    """
    Immutable catalog entry.

    Attributes:
        name: Canonical algorithm name (as used in tunnel configuration)
        family: Cipher family
        key_size: Required key size in bytes
        iv_length: IV/nonce length in bytes
    """

    name: str
    family: CipherFamily
    key_size: int
    iv_length: int

    @property
    def is_aead(self) -> bool:
        return self.family in _AEAD_FAMILIES


_AEAD_FAMILIES: Final[frozenset[CipherFamily]] = frozenset({
    CipherFamily.GCM,
    CipherFamily.CHACHA20_POLY1305,
})

_CATALOG: Final[dict[CryptoAlg, AlgInfo]] = {
    CryptoAlg.AES_128_CBC: AlgInfo("AES-128-CBC", CipherFamily.CBC_HMAC, 16, 16),
    CryptoAlg.AES_192_CBC: AlgInfo("AES-192-CBC", CipherFamily.CBC_HMAC, 24, 16),
    CryptoAlg.AES_256_CBC: AlgInfo("AES-256-CBC", CipherFamily.CBC_HMAC, 32, 16),
    CryptoAlg.AES_128_GCM: AlgInfo("AES-128-GCM", CipherFamily.GCM, 16, 12),
    CryptoAlg.AES_192_GCM: AlgInfo("AES-192-GCM", CipherFamily.GCM, 24, 12),
    CryptoAlg.AES_256_GCM: AlgInfo("AES-256-GCM", CipherFamily.GCM, 32, 12),
    CryptoAlg.CHACHA20_POLY1305: AlgInfo("CHACHA20-POLY1305", CipherFamily.CHACHA20_POLY1305, 32, 12),
}

_BY_NAME: Final[dict[str, CryptoAlg]] = {
    info.name: alg for alg, info in _CATALOG.items()
}


def info(alg: CryptoAlg) -> Optional[AlgInfo]:
    """Return the catalog entry for ``alg``, or None if it has none."""
    return _CATALOG.get(alg)


def lookup(alg_name: str) -> Optional[CryptoAlg]:
    """
    Resolve an algorithm name to its catalog member.

    Names are matched case-insensitively and ``_`` is accepted in place
    of ``-`` (``aes_256_gcm`` resolves like ``AES-256-GCM``).

    Returns:
        The matching CryptoAlg, or None if the name is unknown
    """
    if not isinstance(alg_name, str):
        return None
    return _BY_NAME.get(alg_name.strip().upper().replace("_", "-"))


def name(alg: CryptoAlg) -> str:
    """Canonical name of ``alg`` ("UNDEF" for values outside the catalog)."""
    entry = _CATALOG.get(alg)
    return entry.name if entry is not None else "UNDEF"


def key_length(alg: CryptoAlg) -> int:
    """Required key size in bytes; raises KeyError for unknown members."""
    return _CATALOG[alg].key_size


def is_aead(alg: CryptoAlg) -> bool:
    entry = _CATALOG.get(alg)
    return entry is not None and entry.is_aead


def aead_algorithms() -> list[CryptoAlg]:
    """All catalog members belonging to an AEAD family, in catalog order."""
    return [alg for alg, entry in _CATALOG.items() if entry.is_aead]
