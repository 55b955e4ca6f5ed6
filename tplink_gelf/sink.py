"""GELF UDP delivery - compresses serialized records and sends them to Graylog."""

import gzip
import logging
import socket
import zlib

from tplink_gelf.errors import DeliveryError

logger = logging.getLogger(__name__)

COMPRESSION_ALGORITHMS = ("zlib", "gzip", "none")

# Largest datagram a GELF UDP input accepts without chunking.
GELF_MAX_DATAGRAM = 8192


def compress_payload(data: bytes, algorithm: str = "zlib", level: int = 6) -> bytes:
    """Compress a payload the way GELF UDP inputs expect it."""
    algo = algorithm.lower()
    if algo == "zlib":
        return zlib.compress(data, level)
    elif algo == "gzip":
        return gzip.compress(data, compresslevel=level)
    elif algo == "none":
        return data
    else:
        raise ValueError(f"Unsupported algorithm: {algo}")


class GELFUDPSink:
    """Sends one GELF message per datagram to a Graylog GELF UDP input.

    Chunking is not implemented: payloads above GELF_MAX_DATAGRAM are still
    sent as a single datagram and logged so they can be spotted.
    """

    def __init__(self, host: str, port: int, compression: str = "zlib"):
        if compression.lower() not in COMPRESSION_ALGORITHMS:
            raise ValueError(f"Unsupported algorithm: {compression}")
        self._address = (host, port)
        self._compression = compression.lower()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sent_count = 0

    def deliver(self, payload: bytes):
        """Compress and send a serialized GELF record."""
        if self._sock is None:
            raise DeliveryError("sink is closed")
        data = compress_payload(payload, self._compression)
        if len(data) > GELF_MAX_DATAGRAM:
            logger.warning(
                "GELF payload of %d bytes exceeds %d and is sent unchunked",
                len(data), GELF_MAX_DATAGRAM,
            )
        try:
            self._sock.sendto(data, self._address)
        except OSError as exc:
            raise DeliveryError(f"send to {self._address[0]}:{self._address[1]} failed: {exc}") from exc
        self.sent_count += 1
        logger.debug("Sent %d bytes to %s:%d", len(data), *self._address)

    def close(self):
        if self._sock:
            self._sock.close()
            self._sock = None
