"""Shared sample lines and fakes."""

import pytest

FIRST_LINE = (
    "<6>Sep 20 21:42:02 192.168.40.5 [1758400919.541010111] AP MAC=aa:bb:5f:e0:a6:aa "
    "MAC SRC=bb:aa:da:c8:1e:54 IP SRC=192.168.50.73 IP DST=52.45.111.111 IP proto=6 SPT=49808 DPT=1883"
)
ADDITIONAL_LINE = (
    "[1758400919.891010111] AP MAC=aa:bb:5f:e0:a6:aa MAC SRC=bb:aa:da:c8:1e:54 "
    "IP SRC=192.168.50.73 IP DST=52.45.111.111 IP proto=6 SPT=49808 DPT=1883"
)
DHCP_LINE = (
    "<134>1 2025-07-19 19:21:46 Omada-Controller-XXXX-YYYYYYYYYY - - - "
    "2.5G WAN1: DHCP client lease expired. Began renewing the lease."
)
OPERATION_LINE = (
    '<158>1 2025-07-19 23:00:18 Omada-Controller-XXXX - - - '
    '{"details":{},"operation":"logged in successfully."}'
)


class FakeSink:
    """Collects delivered payloads; optionally fails on chosen calls."""

    def __init__(self, fail_on=(), exc_factory=None):
        self.payloads: list[bytes] = []
        self._fail_on = set(fail_on)
        self._exc_factory = exc_factory
        self._calls = 0

    def deliver(self, payload: bytes):
        self._calls += 1
        if self._calls in self._fail_on:
            raise self._exc_factory()
        self.payloads.append(payload)


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def first_line():
    return FIRST_LINE


@pytest.fixture
def additional_line():
    return ADDITIONAL_LINE


@pytest.fixture
def dhcp_line():
    return DHCP_LINE


@pytest.fixture
def operation_line():
    return OPERATION_LINE


@pytest.fixture
def make_sink():
    return FakeSink
