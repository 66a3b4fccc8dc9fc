"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from datapipe.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def sink():
    """Create in-memory telemetry sink."""
    from datapipe.telemetry import MemoryTelemetrySink

    return MemoryTelemetrySink()


@pytest.fixture
def signal():
    """Create a fresh execution signal."""
    from datapipe.models import ExecutionSignal

    return ExecutionSignal()


@pytest.fixture
def message():
    """Create a sample message."""
    from support import SampleMessage

    return SampleMessage()


@pytest.fixture
def service():
    """Create a service identity."""
    from datapipe.models import ServiceIdentity

    return ServiceIdentity(
        name="Orders.Api", environment="Test", version="1.2.3", instance_id="host-1"
    )
