"""Pytest configuration and shared fixtures."""

import pytest

from ts3query.adapter import ServerQueryAdapter
from ts3query.profiler import Profiler
from ts3query.signals import SignalBus
from ts3query.transport.mock import MockTransport


@pytest.fixture
def transport():
    """Blocking mock transport with a TS3 greeting queued."""
    return MockTransport(["TS3"])


@pytest.fixture
def signals():
    return SignalBus()


@pytest.fixture
def profiler():
    return Profiler()


@pytest.fixture
def adapter(transport, signals, profiler):
    """Connected adapter over the mock transport."""
    adapter = ServerQueryAdapter(transport=transport, signals=signals, profiler=profiler)
    adapter.connect()
    return adapter


@pytest.fixture
def recorded(signals):
    """List of (signal, *args) tuples for every signal emitted."""
    calls = []
    signals.subscribe_all(lambda name, *args: calls.append((name, *args)))
    return calls
