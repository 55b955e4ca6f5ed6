"""Datagram -> lines -> GELF records -> sink."""

import logging
from typing import Protocol

from tplink_gelf.carryover import Carryover
from tplink_gelf.errors import DeliveryError, OperationPayloadError
from tplink_gelf.error_tracker import ErrorTracker
from tplink_gelf.gelf import DEFAULT_LEVEL, assemble, serialize
from tplink_gelf.metrics import Metrics
from tplink_gelf.patterns import LineKind, classify
from tplink_gelf.projector import next_carryover, project

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\r\n"
MIN_LINE_LENGTH = 4


class Sink(Protocol):
    def deliver(self, payload: bytes): ...


def split_lines(payload: str) -> list[str]:
    """Split a datagram on CRLF, trim, and drop lines of three chars or fewer."""
    lines = []
    for raw in payload.split(LINE_SEPARATOR):
        line = raw.strip()
        if len(line) >= MIN_LINE_LENGTH:
            lines.append(line)
    return lines


class ForwardingPipeline:
    """Turns each syslog datagram into one GELF record per line.

    Lines of a datagram are handled strictly in order; the carryover from a
    first line lives only for the datagram it arrived in. Any failure is
    contained to the line that caused it.
    """

    def __init__(self, sink: Sink, default_level: int = DEFAULT_LEVEL,
                 metrics: Metrics | None = None, error_tracker: ErrorTracker | None = None):
        self._sink = sink
        self._default_level = default_level
        self.metrics = metrics or Metrics()
        self.error_tracker = error_tracker or ErrorTracker()

    def process_datagram(self, data: bytes, addr: tuple[str, int]) -> list[dict]:
        """Forward every line of one datagram; return the records delivered."""
        self.metrics.record_datagram()
        host = addr[0]
        text = data.decode("utf-8", errors="replace")

        carryover = Carryover()
        delivered = []
        for line in split_lines(text):
            try:
                record, carryover = self._process_line(line, host, carryover)
            except OperationPayloadError as exc:
                logger.warning("Could not decode operation payload from %s: %s", host, exc)
                self._record_parse_failure(host, line, exc)
                continue
            except Exception as exc:
                logger.exception("Failed to process line from %s: %s", host, line)
                self._record_parse_failure(host, line, exc)
                continue

            try:
                self._sink.deliver(serialize(record))
            except DeliveryError as exc:
                logger.error("Could not send to GELF endpoint: %s: %r", exc, record)
                self._record_delivery_failure(host, line, exc)
                continue
            except Exception as exc:
                logger.exception("Unexpected delivery failure for record %r", record)
                self._record_delivery_failure(host, line, exc)
                continue

            self.metrics.record_forwarded(record["_tp_link"])
            delivered.append(record)
        return delivered

    def _process_line(self, line: str, host: str, carryover: Carryover) -> tuple[dict, Carryover]:
        result = classify(line)
        if result.kind is LineKind.UNPARSED:
            logger.warning("Could not parse line from %s: %s", host, line)

        canonical = project(result, carryover)
        record = assemble(canonical, host, line, self._default_level)
        return record, next_carryover(result, canonical, carryover)

    def _record_parse_failure(self, host: str, line: str, exc: Exception):
        self.metrics.record_parse_failure()
        self.error_tracker.record("parse", host, line, exc)

    def _record_delivery_failure(self, host: str, line: str, exc: Exception):
        self.metrics.record_delivery_failure()
        self.error_tracker.record("delivery", host, line, exc)
