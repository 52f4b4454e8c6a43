"""Runtime configuration model for boltnav.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_BUSY_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PREVIEW_LIMIT,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import BoltConfigError


@dataclass(frozen=True)
class BoltConfig:
    """Validated runtime configuration.

    Attributes:
        busy_timeout: Seconds a writer waits for the database write lock.
        preview_limit: Scalar values shorter than this are printed by ``ls``.
        log_level: Minimum structured log level written to stderr.
    """

    busy_timeout: float
    preview_limit: int
    log_level: str

    @classmethod
    def from_env(cls) -> "BoltConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BoltConfigError: If environment values are invalid.
        """
        busy_timeout = _parse_busy_timeout(
            os.getenv("BOLTNAV_BUSY_TIMEOUT", str(DEFAULT_BUSY_TIMEOUT_SECONDS))
        )
        preview_limit = _parse_preview_limit(
            os.getenv("BOLTNAV_PREVIEW_LIMIT", str(DEFAULT_PREVIEW_LIMIT))
        )
        log_level = _parse_log_level(os.getenv("BOLTNAV_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            busy_timeout=busy_timeout,
            preview_limit=preview_limit,
            log_level=log_level,
        )


def _parse_busy_timeout(raw_value: str) -> float:
    """Parse the busy timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Non-negative timeout in seconds.

    Raises:
        BoltConfigError: If value is not a non-negative number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise BoltConfigError(
            "Invalid BOLTNAV_BUSY_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set BOLTNAV_BUSY_TIMEOUT to a numeric value."
        ) from error
    if timeout < 0:
        raise BoltConfigError(
            f"Invalid BOLTNAV_BUSY_TIMEOUT value: {timeout} is negative. "
            "Use 0 to fail immediately when the database is locked."
        )
    return timeout


def _parse_preview_limit(raw_value: str) -> int:
    """Parse the ls preview limit environment value."""
    try:
        limit = int(raw_value)
    except ValueError as error:
        raise BoltConfigError(
            "Invalid BOLTNAV_PREVIEW_LIMIT value: "
            f"expected integer, got '{raw_value}'. "
            "Set BOLTNAV_PREVIEW_LIMIT to a numeric value."
        ) from error
    if limit < 0:
        raise BoltConfigError(
            f"Invalid BOLTNAV_PREVIEW_LIMIT value: {limit} is negative."
        )
    return limit


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value."""
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise BoltConfigError(
            f"Invalid BOLTNAV_LOG_LEVEL value '{raw_value}'. "
            f"Expected one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level
