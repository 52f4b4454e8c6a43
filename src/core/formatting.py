"""Display formatting for keys, values, and byte sizes."""

from __future__ import annotations

from core.constants import BYTE_SIZE_SUFFIXES


def format_hex(payload: bytes) -> str:
    """Render bytes as a ``0x``-prefixed hex string; empty input renders empty."""
    if not payload:
        return ""
    return "0x" + payload.hex()


def format_byte_size(size: int) -> str:
    """Render a byte count with a binary unit suffix.

    Args:
        size: Non-negative byte count.

    Returns:
        ``"0"``, ``"<n>b"`` below 1 KiB, else one decimal with K/M/G/T.
    """
    exponent = _size_exponent(size)
    if exponent == 0:
        return "0"
    if exponent == 1:
        return f"{size}b"
    unit_index = min(exponent, len(BYTE_SIZE_SUFFIXES)) - 1
    scaled = size / (1024**unit_index)
    return f"{scaled:.1f}{BYTE_SIZE_SUFFIXES[unit_index]}"


def _size_exponent(size: int) -> int:
    """Count base-1024 digits of a byte count."""
    exponent = 0
    while size > 0:
        exponent += 1
        size //= 1024
    return exponent
