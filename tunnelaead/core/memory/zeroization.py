"""
Memory Zeroization Utilities
============================

Explicit wiping of mutable buffers that held key material.

Security Properties:
- Explicit zeroization (no GC reliance)
- Exception-safe cleanup

Python's memory model doesn't guarantee secure erasure: immutable
``bytes`` objects cannot be wiped, and libraries may keep their own
copies. These helpers only shorten the lifetime of copies we own.
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray | memoryview) -> None:
    """
    Securely zero a mutable byte buffer in place.

    Uses ctypes memset for bytearrays, with a Python-level loop for
    memoryviews and as a fallback.

    Args:
        data: Mutable byte buffer to zero

    Raises:
        TypeError: If the buffer is read-only
    """
    if isinstance(data, memoryview) and data.readonly:
        raise TypeError("cannot zero a read-only buffer")
    if len(data) == 0:
        return

    if isinstance(data, bytearray):
        try:
            addr = ctypes.addressof(
                (ctypes.c_char * len(data)).from_buffer(data)
            )
            ctypes.memset(addr, 0, len(data))
            return
        except (TypeError, ValueError, BufferError):
            pass

    view = data.cast("B") if isinstance(data, memoryview) else memoryview(data)
    for i in range(len(view)):
        view[i] = 0


@contextmanager
def ZeroizeContext(*buffers: bytearray | memoryview) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        key_copy = bytearray(key)

        with ZeroizeContext(key_copy):
            backend = make_backend(bytes(key_copy))
        # key_copy is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
