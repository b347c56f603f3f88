"""
Shared test configuration for tunnelaead.

Provides key/IV fixtures for every AEAD algorithm and resets the
configuration singleton between tests.
"""

import secrets

import pytest

from tunnelaead.core.config import TunnelConfig
from tunnelaead.core.crypto import algorithms
from tunnelaead.core.crypto.aead_context import AEADCipherContext, Mode
from tunnelaead.core.crypto.algorithms import CryptoAlg


AEAD_ALGORITHMS = [
    CryptoAlg.AES_128_GCM,
    CryptoAlg.AES_192_GCM,
    CryptoAlg.AES_256_GCM,
    CryptoAlg.CHACHA20_POLY1305,
]

NON_AEAD_ALGORITHMS = [
    CryptoAlg.AES_128_CBC,
    CryptoAlg.AES_192_CBC,
    CryptoAlg.AES_256_CBC,
]


@pytest.fixture(params=AEAD_ALGORITHMS, ids=lambda alg: algorithms.name(alg))
def aead_alg(request):
    """Each supported AEAD algorithm in turn."""
    return request.param


@pytest.fixture
def key_for():
    """Factory returning a random key of the right size for an algorithm."""
    def _make(alg):
        return secrets.token_bytes(algorithms.key_length(alg))
    return _make


@pytest.fixture
def iv():
    return secrets.token_bytes(12)


@pytest.fixture
def ctx(aead_alg, key_for):
    """Initialized context for each AEAD algorithm."""
    context = AEADCipherContext()
    context.init(aead_alg, key_for(aead_alg), mode=Mode.ENCRYPT)
    yield context
    context.erase()


@pytest.fixture(autouse=True)
def _reset_config():
    TunnelConfig.reset_instance()
    yield
    TunnelConfig.reset_instance()
