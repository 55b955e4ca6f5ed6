"""Projection of classified lines onto canonical GELF-bound fields."""

import json
from typing import Callable

from tplink_gelf.carryover import CanonicalFields, Carryover, merge_fields
from tplink_gelf.errors import OperationPayloadError
from tplink_gelf.patterns import Classification, LineKind, extract_network_fields

CATEGORY_AP = "AP"
CATEGORY_DHCP = "DHCP"
CATEGORY_OPERATION = "OPERATION"
CATEGORY_UNPARSED = "UNPARSED"


def _project_first_line(result: Classification, carryover: Carryover) -> CanonicalFields:
    fields = merge_fields(result.captures, {
        "short_message": f"TP-Link: {result.captures['rest']}",
        "category": CATEGORY_AP,
    })
    return CanonicalFields(fields, result.facility, result.severity)


def _project_additional_line(result: Classification, carryover: Carryover) -> CanonicalFields:
    # Continuation lines have no PRI of their own; the first line's wins.
    base = carryover.snapshot
    fields = merge_fields(base.fields, result.captures, {
        "short_message": f"TP-Link: {result.captures['rest']}",
        "category": CATEGORY_AP,
    })
    facility = result.facility if result.facility is not None else base.facility
    severity = result.severity if result.severity is not None else base.severity
    return CanonicalFields(fields, facility, severity)


def _project_dhcp_info(result: Classification, carryover: Carryover) -> CanonicalFields:
    fields = merge_fields(result.captures, {
        "short_message": f"TP-Link DHCP: {result.captures.get('rest') or result.line}",
        "category": CATEGORY_DHCP,
    })
    return CanonicalFields(fields, result.facility, result.severity)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON; GELF inputs refuse them.
    raise ValueError(f"non-standard JSON constant {name}")


def _decode_operation_payload(result: Classification) -> dict:
    try:
        decoded = json.loads(result.captures["json"], parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise OperationPayloadError(result.line, f"invalid JSON payload ({exc.msg})") from exc
    except ValueError as exc:
        raise OperationPayloadError(result.line, f"invalid JSON payload ({exc})") from exc
    if not isinstance(decoded, dict):
        raise OperationPayloadError(result.line, "JSON payload is not an object")
    return decoded


def _project_controller_operation(result: Classification, carryover: Carryover) -> CanonicalFields:
    fields = merge_fields({"origin": result.captures["origin"]}, _decode_operation_payload(result))
    fields = merge_fields(fields, {
        "short_message": f"TP-Link OPERATION: {fields.get('operation') or result.line}",
        "category": CATEGORY_OPERATION,
    })
    return CanonicalFields(fields, result.facility, result.severity)


def _project_unparsed(result: Classification, carryover: Carryover) -> CanonicalFields:
    return CanonicalFields({
        "short_message": f"TP-Link Unknown: {result.line}",
        "category": CATEGORY_UNPARSED,
    })


_PROJECTORS: dict[LineKind, Callable[[Classification, Carryover], CanonicalFields]] = {
    LineKind.FIRST_LINE: _project_first_line,
    LineKind.ADDITIONAL_LINE: _project_additional_line,
    LineKind.DHCP_INFO: _project_dhcp_info,
    LineKind.CONTROLLER_OPERATION: _project_controller_operation,
    LineKind.UNPARSED: _project_unparsed,
}


def project(result: Classification, carryover: Carryover) -> CanonicalFields:
    """Turn a classification into canonical fields.

    Runs the projector for the classification's kind, then merges the
    AP/MAC/IP network tuple found in ``rest`` (or the raw line) on top.
    Raises OperationPayloadError for controller operations whose body is not
    a JSON object.
    """
    canonical = _PROJECTORS[result.kind](result, carryover)
    rest = canonical.fields.get("rest")
    # An operation payload may carry its own non-string "rest" key.
    network = extract_network_fields(rest if isinstance(rest, str) and rest else result.line)
    if network:
        canonical = canonical.with_fields(network)
    return canonical


def next_carryover(result: Classification, canonical: CanonicalFields,
                   carryover: Carryover) -> Carryover:
    """Only a first line replaces the carryover; every other kind keeps it."""
    if result.kind is LineKind.FIRST_LINE:
        return carryover.replaced_by(canonical)
    return carryover
