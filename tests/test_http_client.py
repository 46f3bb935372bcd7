"""
Unit tests for upstream retry behaviour
"""

import asyncio

import httpx
import pytest

from cropfit.core.errors import UpstreamUnavailable
from cropfit.services.http_client import fetch_json


class ScriptedUpstream:
    """Replays a list of responses (or exceptions) and counts calls."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        step = self.steps[min(self.calls, len(self.steps) - 1)]
        self.calls += 1
        if isinstance(step, type) and issubclass(step, Exception):
            raise step("upstream failure", request=request)
        status, body = step
        return httpx.Response(status, json=body)


def _fetch(upstream: ScriptedUpstream, **kwargs):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
            return await fetch_json(client, "https://provider.test/data", {"a": 1}, kind="weather", **kwargs)

    return asyncio.run(run())


class TestFetchJson:
    def test_success_first_try(self):
        upstream = ScriptedUpstream((200, {"ok": True}))

        assert _fetch(upstream) == {"ok": True}
        assert upstream.calls == 1

    def test_server_errors_are_retried(self):
        upstream = ScriptedUpstream((503, {}), (502, {}), (200, {"ok": True}))

        assert _fetch(upstream) == {"ok": True}
        assert upstream.calls == 3

    def test_rate_limit_is_retried(self):
        upstream = ScriptedUpstream((429, {}), (200, {"ok": True}))

        assert _fetch(upstream) == {"ok": True}
        assert upstream.calls == 2

    def test_timeouts_are_retried(self):
        upstream = ScriptedUpstream(httpx.ReadTimeout, (200, {"ok": True}))

        assert _fetch(upstream) == {"ok": True}
        assert upstream.calls == 2

    def test_retry_budget_is_bounded(self):
        upstream = ScriptedUpstream((500, {}))

        with pytest.raises(UpstreamUnavailable) as exc_info:
            _fetch(upstream)

        assert upstream.calls == 3
        assert exc_info.value.kind == "weather"

    def test_custom_attempt_count(self):
        upstream = ScriptedUpstream((500, {}))

        with pytest.raises(UpstreamUnavailable):
            _fetch(upstream, max_attempts=5)

        assert upstream.calls == 5

    def test_client_errors_are_not_retried(self):
        upstream = ScriptedUpstream((401, {"message": "Invalid API key"}))

        with pytest.raises(UpstreamUnavailable):
            _fetch(upstream)

        assert upstream.calls == 1

    def test_connection_errors_are_not_retried(self):
        upstream = ScriptedUpstream(httpx.ConnectError)

        with pytest.raises(UpstreamUnavailable):
            _fetch(upstream)

        assert upstream.calls == 1
