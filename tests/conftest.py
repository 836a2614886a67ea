"""Shared fixtures for spanflow tests."""

import pytest

from spanflow import runtime_config
from spanflow.context import set_active_scope
from spanflow.tracer import Tracer
from spanflow.writer import InMemoryWriter


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now_ns: int = 1_000_000_000) -> None:
        self.now_ns = now_ns

    def time_ns(self) -> int:
        return self.now_ns

    def advance(self, delta_ns: int) -> None:
        self.now_ns += delta_ns


@pytest.fixture(autouse=True)
def _reset_runtime_config():
    runtime_config.reset()
    yield
    runtime_config.reset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def writer():
    return InMemoryWriter()


@pytest.fixture
def tracer(writer, clock):
    return Tracer(writer=writer, service_name="test-service", clock=clock)


@pytest.fixture(autouse=True)
def _clear_active_scope():
    set_active_scope(None)
    yield
    set_active_scope(None)
