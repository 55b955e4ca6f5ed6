"""Syslog UDP receiver - feeds each datagram through the forwarding pipeline."""

import logging
import socket
import threading

from tplink_gelf.config import Config
from tplink_gelf.pipeline import ForwardingPipeline

logger = logging.getLogger(__name__)


class SyslogUDPServer:
    def __init__(self, config: Config, pipeline: ForwardingPipeline, shutdown_event: threading.Event):
        self._config = config
        self._pipeline = pipeline
        self._shutdown = shutdown_event
        self._sock = None
        self.server_address = None

    def start(self):
        """Bind and process datagrams until the shutdown event is set."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(1.0)
        sock.bind((self._config.listen_host, self._config.listen_port))
        self._sock = sock

        self.server_address = sock.getsockname()
        logger.info(
            "Listening for TP-Link syslog messages on UDP %s:%d; forwarding to GELF %s:%d",
            self.server_address[0], self.server_address[1],
            self._config.graylog_ip, self._config.graylog_port,
        )

        while not self._shutdown.is_set():
            try:
                data, addr = sock.recvfrom(self._config.buffer_size)
            except socket.timeout:
                continue
            except OSError:
                if self._shutdown.is_set():
                    break
                raise

            logger.debug("Received %d bytes from %s:%d", len(data), addr[0], addr[1])
            self._pipeline.process_datagram(data, addr)

    def stop(self):
        self._shutdown.set()
        if self._sock:
            self._sock.close()
            self._sock = None
        logger.info("Syslog server stopped. Stats: %s", self._pipeline.metrics.snapshot())
