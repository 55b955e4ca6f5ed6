"""Syslog PRIVAL decoding: priority value -> (facility, severity)."""

import re

_DIGITS_RE = re.compile(r"[0-9]+")

# RFC 5424 defines facilities 0..23 only.
MAX_FACILITY = 23


def decode_prival(value) -> tuple[int | None, int | None]:
    """Split a syslog PRIVAL into (facility, severity).

    Only non-negative integers (or their decimal string form) are accepted;
    anything else yields (None, None). A facility above 23 is reported as
    None while the severity remainder is still returned.
    """
    if isinstance(value, bool) or value is None:
        return None, None
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str) or not _DIGITS_RE.fullmatch(value):
        return None, None

    prival = int(value)
    facility = prival // 8
    severity = prival % 8
    if facility > MAX_FACILITY:
        facility = None
    return facility, severity
