"""Exception types raised by the forwarder."""


class ForwarderError(Exception):
    """Base class for forwarder errors."""


class ConfigError(ForwarderError):
    """Configuration is missing or invalid."""


class OperationPayloadError(ForwarderError, ValueError):
    """A controller operation line carried a body that is not a JSON object."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line}")
        self.line = line
        self.reason = reason


class DeliveryError(ForwarderError):
    """A GELF payload could not be handed to the network."""
