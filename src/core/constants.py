"""Core constants used across boltnav modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

BOLT_URI_SCHEME = "bolt"
DATABASE_FILE_SUFFIX = ".db"
PATH_SEPARATOR = "/"
KEY_ENCODING = "utf-8"
ROOT_BUCKET_ID = 0
DEFAULT_BUSY_TIMEOUT_SECONDS = 5.0
DEFAULT_PREVIEW_LIMIT = 50
DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
UNBOUNDED_DEPTH = -1
TREE_INDENT_WIDTH = 2
EXPORT_FILE_MODE = 0o644
BYTE_SIZE_SUFFIXES = ("b", "K", "M", "G", "T")
LEAF_ELEMENT_HEADER_SIZE = 16
READ_ONLY_URI_SUFFIX = "?mode=ro"
