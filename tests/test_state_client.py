"""Tests for the upstream state client and its payload mappings."""

from __future__ import annotations

import httpx
import pytest

from spaceapi.config import Settings
from spaceapi.errors import DecodeError, TranslationError, TransportError, UnknownStateError
from spaceapi.state_client import (
    UPSTREAM_MAPPINGS,
    StateReading,
    map_lab_state,
    map_status_field,
    state_source_from_settings,
)

# ------------------------------------------------------------------
# Mappings
# ------------------------------------------------------------------


class TestStatusFieldMapping:
    def test_open(self) -> None:
        assert map_status_field({"status": "open"}) == StateReading(open=True, last_change=None)

    def test_closed(self) -> None:
        assert map_status_field({"status": "closed"}) == StateReading(open=False, last_change=None)

    @pytest.mark.parametrize("value", ["maybe", "", "Open", "on"])
    def test_unknown_literal(self, value: str) -> None:
        with pytest.raises(UnknownStateError) as excinfo:
            map_status_field({"status": value})
        assert excinfo.value.value == value
        assert str(excinfo.value) == f"unknown state: {value}"

    @pytest.mark.parametrize("payload", [{}, {"status": None}, {"status": 1}, {"state": "open"}])
    def test_missing_or_mistyped_field(self, payload: dict) -> None:
        with pytest.raises(DecodeError):
            map_status_field(payload)


class TestLabStateMapping:
    def test_on_with_timestamp(self) -> None:
        reading = map_lab_state({"state": "on", "last_changed": 1700000000, "last_updated": 1700000100})
        assert reading == StateReading(open=True, last_change=1700000000)

    def test_off_without_timestamp(self) -> None:
        assert map_lab_state({"state": "off"}) == StateReading(open=False)

    def test_zero_timestamp_is_unknown(self) -> None:
        assert map_lab_state({"state": "off", "last_changed": 0}).last_change is None

    def test_unknown_literal(self) -> None:
        with pytest.raises(UnknownStateError):
            map_lab_state({"state": "open"})

    @pytest.mark.parametrize("stamp", ["yesterday", True, [1], float("inf"), float("-inf"), float("nan")])
    def test_bad_timestamp(self, stamp: object) -> None:
        with pytest.raises(DecodeError):
            map_lab_state({"state": "on", "last_changed": stamp})

    def test_registered(self) -> None:
        assert UPSTREAM_MAPPINGS["lab_state"] is map_lab_state
        assert UPSTREAM_MAPPINGS["status"] is map_status_field


# ------------------------------------------------------------------
# StateSource
# ------------------------------------------------------------------


class TestStateSource:
    def test_fetch_open(self, make_source) -> None:
        assert make_source({"status": "open"}).fetch() == StateReading(open=True)

    def test_fetch_closed(self, make_source) -> None:
        assert make_source({"status": "closed"}).fetch() == StateReading(open=False)

    def test_request_shape(self, make_source, seen_requests) -> None:
        make_source({"status": "open"}).fetch()
        assert len(seen_requests) == 1
        request = seen_requests[0]
        assert request.method == "GET"
        assert str(request.url) == "http://upstream.test/status.json"
        assert request.headers["content-type"] == "application/json"
        assert request.content == b""

    def test_unknown_state(self, make_source) -> None:
        with pytest.raises(UnknownStateError):
            make_source({"status": "maybe"}).fetch()

    def test_connection_refused(self, make_source) -> None:
        with pytest.raises(TransportError) as excinfo:
            make_source(httpx.ConnectError("Connection refused")).fetch()
        assert "Connection refused" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_timeout(self, make_source) -> None:
        with pytest.raises(TransportError):
            make_source(httpx.ReadTimeout("timed out")).fetch()

    def test_http_error_status(self, make_source) -> None:
        with pytest.raises(TransportError) as excinfo:
            make_source({"status": "open"}, status_code=503).fetch()
        assert excinfo.value.status_code == 503

    @pytest.mark.parametrize("body", ["not json", "[]", '"open"', ""])
    def test_undecodable_body(self, make_source, body: str) -> None:
        with pytest.raises(DecodeError):
            make_source(body).fetch()

    def test_overflowing_timestamp_is_decode_error(self, make_source) -> None:
        source = make_source('{"state": "on", "last_changed": 1e400}', mapping=map_lab_state)
        with pytest.raises(DecodeError):
            source.fetch()

    def test_client_is_reused_across_fetches(self, make_source) -> None:
        source = make_source({"status": "open"})
        client = source._client
        source.fetch()
        source.fetch()
        assert source._client is client
        assert not client.is_closed

    def test_close(self, make_source) -> None:
        source = make_source({"status": "open"})
        source.close()
        assert source._client.is_closed

    def test_custom_mapping(self, make_source) -> None:
        source = make_source({"state": "on", "last_changed": 42}, mapping=map_lab_state)
        assert source.fetch() == StateReading(open=True, last_change=42)

    def test_all_failures_share_base(self) -> None:
        for cls in (TransportError, DecodeError, UnknownStateError):
            assert issubclass(cls, TranslationError)


def test_source_from_settings() -> None:
    settings = Settings(
        UPSTREAM_URL="http://lab.test/state",
        UPSTREAM_SCHEMA="lab_state",
        UPSTREAM_TIMEOUT_SECONDS=2.5,
    )
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"state": "off", "last_changed": 7}))
    source = state_source_from_settings(settings, transport=transport)
    assert source.url == "http://lab.test/state"
    assert source._client.timeout == httpx.Timeout(2.5)
    assert source.fetch() == StateReading(open=False, last_change=7)
