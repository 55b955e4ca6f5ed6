"""Entry point for the TP-Link syslog to GELF forwarder."""

import argparse
import logging
import os
import signal
import sys
import threading

from tplink_gelf.config import load_config, load_yaml_config
from tplink_gelf.dashboard import create_dashboard_app, run_dashboard
from tplink_gelf.error_tracker import ErrorTracker
from tplink_gelf.errors import ConfigError
from tplink_gelf.metrics import Metrics
from tplink_gelf.pipeline import ForwardingPipeline
from tplink_gelf.server import SyslogUDPServer
from tplink_gelf.sink import GELFUDPSink


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TP-Link syslog to Graylog GELF forwarder")
    parser.add_argument(
        "--config", default=os.environ.get("FORWARDER_CONFIG"),
        help="Path to YAML config file (default: $FORWARDER_CONFIG)",
    )
    return parser


def main(argv=None):
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    args = build_cli_parser().parse_args(argv)
    try:
        config = load_config(load_yaml_config(args.config))
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    metrics = Metrics()
    error_tracker = ErrorTracker(config.max_errors)
    sink = GELFUDPSink(config.graylog_ip, config.graylog_port, config.compression)
    pipeline = ForwardingPipeline(sink, config.default_level, metrics, error_tracker)
    server = SyslogUDPServer(config, pipeline, shutdown_event)

    if config.dashboard_port:
        app = create_dashboard_app(metrics, error_tracker)
        dash_thread = threading.Thread(target=run_dashboard, args=(app, config.dashboard_port), daemon=True)
        dash_thread.start()
        logger.info("Status endpoints running on port %d", config.dashboard_port)

    try:
        server.start()
    finally:
        server.stop()
        sink.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
