import asyncio
from typing import Any, Dict, List, Optional

import pytest

from cordrest import main as main_module
from cordrest.core.dispatcher import set_default_dispatcher, set_default_request_options
from cordrest.domain.interfaces.transport import Transport
from cordrest.domain.models.request import TransportResult
from cordrest.infrastructure.config.settings import clear_test_config


class ScriptedTransport(Transport):
    """Transport that replays a fixed list of results/exceptions and records every call."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def perform(self, url, method, headers, timeout_ms, body=None):
        self.calls.append({
            "url": url,
            "method": method,
            "headers": dict(headers),
            "timeout_ms": timeout_ms,
            "body": body,
        })
        if not self.responses:
            raise AssertionError("ScriptedTransport ran out of responses")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _response(status_code: int, body: Optional[str] = None) -> TransportResult:
    return TransportResult(status_code=status_code, body=body)


@pytest.fixture
def make_response():
    """Builds TransportResult objects: make_response(429, '{"retry_after": 1}')."""
    return _response


@pytest.fixture
def scripted_transport():
    """Factory fixture: scripted_transport([make_response(200, '{}'), ...])."""
    return ScriptedTransport


@pytest.fixture
def sleep_calls(monkeypatch):
    """Records every delay the dispatcher sleeps for, without actually waiting."""
    delays: List[float] = []
    real_sleep = asyncio.sleep

    async def recording_sleep(delay, *args, **kwargs):
        delays.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("cordrest.core.dispatcher.asyncio.sleep", recording_sleep)
    return delays


@pytest.fixture(autouse=True)
def reset_global_state():
    """Keeps process-wide defaults from leaking between tests."""
    yield
    set_default_request_options(None)
    set_default_dispatcher(None)
    clear_test_config()
    main_module.reset_dependencies()
