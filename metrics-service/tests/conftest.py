"""
Shared fixtures - recorder wired to fake probes and a controllable clock.
"""

import pytest
from fakes import FakeClock, FakeDiskProbe, FakeResourceProbe
from metrics import MetricsRecorder


@pytest.fixture
def resource_probe():
    return FakeResourceProbe(uptime=100.0)


@pytest.fixture
def disk_probe():
    return FakeDiskProbe()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder(resource_probe, disk_probe, clock):
    return MetricsRecorder(
        resource_probe=resource_probe,
        disk_probe=disk_probe,
        window_capacity=10,
        throughput_scale=1000,
        clock=clock,
    )
