"""TP-Link syslog to Graylog GELF forwarder."""

__version__ = "0.1.0"
