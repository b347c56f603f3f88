"""
Configuration Module
====================

Immutable, environment-aware configuration for the AEAD layer.

Security Features:
- Immutable configuration after initialization
- Environment variable override support (TUNNELAEAD_ prefix)
- Key-like settings are never read from the environment
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from typing import Any, Final, Optional

from tunnelaead.core.crypto.aead_context import AEADCipherContext
from tunnelaead.security.constants import DEFAULT_ALGORITHM


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key_material", "psk", "token", "private", "credential",
})

_VALID_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class CipherConfig:
    """Immutable cipher selection settings."""

    default_algorithm: str = DEFAULT_ALGORITHM
    self_test_on_startup: bool = True

    def __post_init__(self) -> None:
        if not AEADCipherContext.is_supported(self.default_algorithm):
            raise ValueError(f"Unsupported default algorithm: {self.default_algorithm}")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    enable_console: bool = True
    enable_json: bool = False

    def __post_init__(self) -> None:
        if self.level.upper() not in _VALID_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}")


class TunnelConfig:
    """
    Centralized, immutable configuration with environment overrides.

    Usage:
        config = TunnelConfig.load()
        alg = config.cipher.default_algorithm
        level = config.logging.level
    """

    __slots__ = ("_cipher", "_logging", "_frozen", "_config_hash")

    _instance: Optional[TunnelConfig] = None

    def __init__(
        self,
        cipher: Optional[CipherConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use TunnelConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_cipher", cipher or CipherConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        config_str = f"{self._cipher}|{self._logging}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def cipher(self) -> CipherConfig:
        return self._cipher

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "TUNNELAEAD") -> TunnelConfig:
        """
        Load configuration with environment variable overrides.

        Variables use the prefix and double underscores for nesting:

            TUNNELAEAD_CIPHER__DEFAULT_ALGORITHM=CHACHA20-POLY1305
            TUNNELAEAD_CIPHER__SELF_TEST_ON_STARTUP=false
            TUNNELAEAD_LOGGING__LEVEL=DEBUG

        Raises:
            ValueError: If an override is invalid
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        cipher_kwargs: dict[str, Any] = {}
        if "cipher.default_algorithm" in env_overrides:
            cipher_kwargs["default_algorithm"] = env_overrides["cipher.default_algorithm"]
        if "cipher.self_test_on_startup" in env_overrides:
            cipher_kwargs["self_test_on_startup"] = _parse_bool(env_overrides["cipher.self_test_on_startup"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"]
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = _parse_bool(env_overrides["logging.enable_console"])
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = _parse_bool(env_overrides["logging.enable_json"])

        return cls(
            cipher=CipherConfig(**cipher_kwargs) if cipher_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # TUNNELAEAD_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> TunnelConfig:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        return f"TunnelConfig(hash={self._config_hash}, default={self._cipher.default_algorithm})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("TunnelConfig is immutable after initialization")
        super().__setattr__(name, value)
