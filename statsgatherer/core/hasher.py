"""Canonical serialization helpers for status record payloads.

Every sink that writes JSON goes through :func:`canonical_json_bytes` so
the same record always produces the same bytes, whichever sink emits it.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from statsgatherer.models.records import StatusRecord

TIMESTAMP_FIELDS = frozenset({"createdAt", "updatedAt"})


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def record_json_bytes(record: StatusRecord) -> bytes:
    """Serialize a record to canonical JSON using its wire (camelCase) names."""
    return canonical_json_bytes(record.to_payload())


def record_fingerprint(record: StatusRecord) -> str:
    """SHA-256 of the record's payload with timestamp fields removed.

    Two records built from the same item/user/config snapshot share a
    fingerprint even when built at different times.
    """
    payload = {
        k: v for k, v in record.to_payload().items() if k not in TIMESTAMP_FIELDS
    }
    return sha256_hex(canonical_json_bytes(payload))
