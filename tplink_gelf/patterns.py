"""Line classifier for TP-Link access point and Omada controller syslog lines.

Patterns are tried in a fixed order and the first match wins:
  1. First line of a multi-line AP message (PRI, BSD date, AP address)
  2. Additional line of that message (bracketed timestamp only)
  3. Controller operation (RFC 5424 header + JSON object body)
  4. Controller DHCP/info (RFC 5424 header + free text body)
  5. Unparsed
"""

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from tplink_gelf.prival import decode_prival

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

# <6>Sep 20 21:42:02 192.168.40.5 [1758400919.541010111] AP MAC=98:ba:... MAC SRC=...
_FIRST_LINE_RE = re.compile(
    r"""
    ^
    < (?P<prival> \d+ ) > ( (?P<version> \d+ ) \s+ )?
        (?: Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec ) \s+ \d+ \s+ [0-9]{2}:[0-9]{2}:[0-9]{2} \s+
        [0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3} \s+
        \[ (?P<timestamp> \d+ [.] \d+ ) \] \s+
        (?P<rest> AP \s MAC= .* )
    $
    """,
    re.VERBOSE,
)

# [1758400919.891010111] AP MAC=98:ba:... MAC SRC=...
_ADDITIONAL_LINE_RE = re.compile(
    r"""
    ^
        \[ (?P<timestamp> \d+ [.] \d+ ) \] \s+
        (?P<rest> AP \s+ MAC= .* )
    $
    """,
    re.VERBOSE,
)

_CONTROLLER_HEADER = r"""
    ^
    < (?P<prival> \d+ ) > (?P<version> \d+ )? \s+
        [0-9]{4}-[0-9]{2}-[0-9]{2} \s+ [0-9]{2}:[0-9]{2}:[0-9]{2} \s+
        (?P<origin> \S+ ) \s+ (?P<appname> -|\S+ ) \s+ (?P<procid> -|\S+ ) \s+ (?P<msgid> -|\S+ ) \s+
"""

# <158>1 2025-07-19 23:00:18 Omada-Controller-XXXX - - - {"details":{},"operation":"..."}
_CONTROLLER_OPERATION_RE = re.compile(
    _CONTROLLER_HEADER + r"(?P<json> \{ .* \} ) $",
    re.VERBOSE,
)

# <134>1 2025-07-19 19:21:46 Omada-Controller-XXXX-YYYYYYYYYY - - - 2.5G WAN1: DHCP client lease expired.
_DHCP_INFO_RE = re.compile(
    _CONTROLLER_HEADER + r"(?P<rest> .* ) $",
    re.VERBOSE,
)

# Network tuple carried in the body of AP lines; searched anywhere in the text.
_NETWORK_FIELDS_RE = re.compile(
    r"""
    AP \s MAC =   (?P<AP_MAC> [0-9a-fA-F:]{17} ) \s+
    MAC \s SRC =  (?P<MAC_SRC> [0-9a-fA-F:]{17} ) \s+
    IP \s SRC =   (?P<IP_SRC> [0-9.]{7,15} ) \s+
    IP \s DST =   (?P<IP_DST> [0-9.]{7,15} ) \s+
    IP \s proto = (?P<IP_PROTO> [0-9]+ ) \s+
    SPT = (?P<SPT> [0-9]+ ) \s+
    DPT = (?P<DPT> [0-9]+ )
    """,
    re.VERBOSE,
)

# Consumed by the classifier, never exposed in captures.
_HEADER_GROUPS = ("prival", "version")


class LineKind(enum.Enum):
    FIRST_LINE = "first_line"
    ADDITIONAL_LINE = "additional_line"
    CONTROLLER_OPERATION = "controller_operation"
    DHCP_INFO = "dhcp_info"
    UNPARSED = "unparsed"


@dataclass(frozen=True)
class Classification:
    kind: LineKind
    line: str
    captures: Mapping[str, str] = field(default_factory=dict)
    facility: int | None = None
    severity: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "captures", MappingProxyType(dict(self.captures)))


# Priority order. Operation must be tried before DHCP info since the latter's
# free text body would also accept a JSON object.
LINE_PATTERNS: tuple[tuple[LineKind, re.Pattern], ...] = (
    (LineKind.FIRST_LINE, _FIRST_LINE_RE),
    (LineKind.ADDITIONAL_LINE, _ADDITIONAL_LINE_RE),
    (LineKind.CONTROLLER_OPERATION, _CONTROLLER_OPERATION_RE),
    (LineKind.DHCP_INFO, _DHCP_INFO_RE),
)


def _classification_from_match(kind: LineKind, line: str, m: re.Match) -> Classification:
    groups = {k: v for k, v in m.groupdict().items() if v is not None}
    facility, severity = None, None
    if "prival" in groups:
        facility, severity = decode_prival(groups["prival"])
    captures = {k: v for k, v in groups.items() if k not in _HEADER_GROUPS}
    return Classification(kind=kind, line=line, captures=captures,
                          facility=facility, severity=severity)


def classify(line: str) -> Classification:
    """Classify a single trimmed line. Always returns exactly one variant."""
    for kind, pattern in LINE_PATTERNS:
        m = pattern.match(line)
        if m:
            return _classification_from_match(kind, line, m)
    return Classification(kind=LineKind.UNPARSED, line=line)


def extract_network_fields(text: str) -> dict[str, str]:
    """Pull the AP/MAC/IP/port tuple out of an AP message body, if present."""
    m = _NETWORK_FIELDS_RE.search(text)
    if not m:
        return {}
    return m.groupdict()
