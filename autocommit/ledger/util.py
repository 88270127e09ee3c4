"""
Small utilities for the commit ledger.

This module intentionally avoids third-party dependencies.
"""

from __future__ import annotations

import hashlib
import os
import time
from datetime import datetime, timezone

SHORT_HASH_LENGTH = 12


def now_ms() -> int:
    """Current wall-clock time in integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def short_hash(content: bytes) -> str:
    """First 12 hex chars of the SHA-256 of `content`."""
    return hashlib.sha256(content).hexdigest()[:SHORT_HASH_LENGTH]


def new_commit_id(timestamp_ms: int, message: str, author: str) -> str:
    """
    Derive a commit id from its header fields plus a random salt.

    Ids are short and only need to be unique within one project's history;
    the caller re-draws on collision.
    """
    salt = os.urandom(8).hex()
    seed = f"{timestamp_ms}:{message}:{author}:{salt}"
    return short_hash(seed.encode("utf-8"))


def iso_timestamp(timestamp_ms: int) -> str:
    """Render epoch milliseconds as an ISO-8601 UTC string."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
