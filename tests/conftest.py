"""
Pytest configuration for API health exporter tests.
"""

import os
import sys
import threading
import time

import pytest

# Add the src directory to the Python path
src_path = os.path.join(os.path.dirname(__file__), '..', 'src')
sys.path.insert(0, os.path.abspath(src_path))

from api_health_exporter.metrics.registry import HealthMetrics


class FakeProber:
    """Stands in for EndpointProber: marks the endpoint healthy and waits to be cancelled."""

    def __init__(self, name, address, metrics, cancel):
        self.name = name
        self.address = address
        self.metrics = metrics
        self.cancel = cancel
        self.started = threading.Event()
        self.stopped = threading.Event()

    def run(self):
        self.metrics.set_status(self.name, self.address, 1)
        self.started.set()
        self.cancel.wait()
        self.metrics.remove_status(self.name, self.address)
        self.stopped.set()


class RecordingProberFactory:
    def __init__(self):
        self.created = []

    def __call__(self, name, address, metrics, cancel):
        prober = FakeProber(name, address, metrics, cancel)
        self.created.append(prober)
        return prober

    def names(self):
        return [p.name for p in self.created]


@pytest.fixture
def metrics():
    return HealthMetrics()


@pytest.fixture
def prober_factory():
    return RecordingProberFactory()


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds or the timeout expires."""

    def _wait(predicate, timeout=2.0, interval=0.01):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
