"""
Security module - Constants and startup self-tests.
"""

from tunnelaead.security.constants import (
    AUTH_TAG_LEN,
    CHACHA20_POLY1305_KEY_LEN,
    DEFAULT_ALGORITHM,
    IV_LEN,
)
from tunnelaead.security.hardening import (
    CheckResult,
    CryptoSelfTest,
    SecurityCheckResult,
    StartupSecurityValidator,
)

__all__ = [
    "AUTH_TAG_LEN",
    "CHACHA20_POLY1305_KEY_LEN",
    "DEFAULT_ALGORITHM",
    "IV_LEN",
    "CheckResult",
    "CryptoSelfTest",
    "SecurityCheckResult",
    "StartupSecurityValidator",
]
