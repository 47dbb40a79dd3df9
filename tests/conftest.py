"""
Pytest configuration for unit tests.

Configures pytest-asyncio for async test support and quiets session
logging unless a test raises the level itself.
"""

import tempfile
from typing import Generator

import pytest

from resumable.logging import LoggingConfig
from resumable.protocol.journal import Journal
from resumable.protocol.messages import StartMessage, StateEntry
from resumable.protocol.session import SessionConfig
from resumable.protocol.transport import MemoryMessageStream


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    config.update(log_level="error")


@pytest.fixture
def temp_log_directory() -> Generator[str, None, None]:
    with tempfile.TemporaryDirectory() as temp_directory:
        yield temp_directory


@pytest.fixture
def invocation_id() -> bytes:
    return b"\x01\x02\x03\x04invocation"


@pytest.fixture
def journal(invocation_id: bytes) -> Journal:
    return Journal(invocation_id=invocation_id, debug_id="inv-test")


@pytest.fixture
def start_message(invocation_id: bytes) -> StartMessage:
    return StartMessage(
        id=invocation_id,
        debug_id="inv-test",
        known_entries=0,
        state_map=(StateEntry(key=b"present", value=b"stored"),),
        partial_state=True,
    )


@pytest.fixture
def session_config() -> SessionConfig:
    return SessionConfig(suspension_timeout=None)


@pytest.fixture
def memory_stream() -> MemoryMessageStream:
    return MemoryMessageStream()
