"""GELF 1.1 record assembly and serialization."""

import json
import logging
import math
import time
from typing import Any

from tplink_gelf.carryover import CanonicalFields

logger = logging.getLogger(__name__)

GELF_VERSION = "1.1"
DEFAULT_LEVEL = 6  # Informational

# Used only to build the record, never emitted as custom fields.
_TRANSIENT_FIELDS = frozenset({"timestamp", "rest"})
_RESERVED_FIELDS = frozenset({"short_message", "category"})


def custom_field_key(name: str) -> str:
    """GELF additional fields are underscore prefixed; don't double it up."""
    return name if name.startswith("_") else f"_{name}"


def gelf_timestamp(value: Any, now: float | None = None) -> float:
    """Coerce a captured timestamp to a number, falling back to the current time.

    GELF receivers reject string timestamps, so anything that does not convert
    to a finite number (a date string from a JSON payload, a nested object) is
    replaced by the current time instead of being passed through.
    """
    fallback = time.time() if now is None else now
    if value is None or value == "" or isinstance(value, bool):
        return fallback
    try:
        timestamp = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring non-numeric timestamp %r", value)
        return fallback
    if not math.isfinite(timestamp):
        logger.debug("Ignoring non-finite timestamp %r", value)
        return fallback
    return timestamp


def assemble(canonical: CanonicalFields, host: str, line: str,
             default_level: int = DEFAULT_LEVEL, now: float | None = None) -> dict[str, Any]:
    """Build the GELF record for one line."""
    fields = canonical.fields
    record: dict[str, Any] = {
        "version": GELF_VERSION,
        "host": host,
        "short_message": fields["short_message"],
        "full_message": line,
        "level": canonical.severity if canonical.severity is not None else default_level,
        "timestamp": gelf_timestamp(fields.get("timestamp"), now),
        "_tp_link": fields["category"],
    }
    if canonical.facility is not None:
        record["_facility"] = canonical.facility

    for key, value in fields.items():
        if key in _TRANSIENT_FIELDS or key in _RESERVED_FIELDS:
            continue
        record[custom_field_key(key)] = value
    return record


def serialize(record: dict[str, Any]) -> bytes:
    """Canonical JSON: sorted keys, compact separators, UTF-8."""
    return json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
                      allow_nan=False).encode("utf-8")
