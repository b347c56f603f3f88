"""
Core module - Contains configuration, logging, and the AEAD context.
"""

from tunnelaead.core.config import TunnelConfig
from tunnelaead.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["TunnelConfig", "get_secure_logger", "SecureLogFilter"]
