"""Upstream door-state client for the SpaceAPI service.

This module fetches the current open/closed state of the space from the
configured upstream endpoint and maps it onto a tri-state ``StateReading``.
The layout of the upstream payload is pluggable: each supported layout is a
small mapping function registered in ``UPSTREAM_MAPPINGS`` and selected by the
``UPSTREAM_SCHEMA`` setting.

There is deliberately no retry and no fallback to a previous reading. Any
failure is raised as a ``TranslationError`` subclass so the caller can refuse
to serve a document instead of serving a wrong one.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Callable, Dict, Optional, Protocol

import httpx

from .config import Settings
from .errors import DecodeError, TransportError, UnknownStateError

logger = logging.getLogger(__name__)

# The upstream expects a JSON content type even though GET carries no body.
UPSTREAM_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}


@dataclasses.dataclass(frozen=True)
class StateReading:
    """Result of one upstream query.

    ``open`` is ``True`` or ``False``; ``last_change`` is epoch seconds when
    the upstream reports it and ``None`` otherwise.
    """

    open: Optional[bool]
    last_change: Optional[int] = None


StatusMapping = Callable[[Dict[str, Any]], StateReading]


def _string_field(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"upstream field {key!r} is missing or not a string: {value!r}")
    return value


def map_status_field(payload: Dict[str, Any]) -> StateReading:
    """Map ``{"status": "open"|"closed"}``. No change time is reported."""
    status = _string_field(payload, "status")
    if status == "open":
        return StateReading(open=True)
    if status == "closed":
        return StateReading(open=False)
    raise UnknownStateError(status)


def map_lab_state(payload: Dict[str, Any]) -> StateReading:
    """Map ``{"state": "on"|"off", "last_changed": <epoch seconds>}``.

    A missing or zero ``last_changed`` leaves the change time unknown. Non-finite
    values (``1e400``, ``NaN``) are rejected.
    """
    state = _string_field(payload, "state")
    if state == "on":
        is_open = True
    elif state == "off":
        is_open = False
    else:
        raise UnknownStateError(state)

    last_changed = payload.get("last_changed")
    if last_changed is None:
        return StateReading(open=is_open)
    if isinstance(last_changed, bool) or not isinstance(last_changed, (int, float)):
        raise DecodeError(f"upstream field 'last_changed' is not a timestamp: {last_changed!r}")
    if not math.isfinite(last_changed):
        raise DecodeError(f"upstream field 'last_changed' is not a finite timestamp: {last_changed!r}")
    return StateReading(open=is_open, last_change=int(last_changed) if last_changed > 0 else None)


UPSTREAM_MAPPINGS: Dict[str, StatusMapping] = {
    "status": map_status_field,
    "lab_state": map_lab_state,
}


class StateFetcher(Protocol):
    """Anything that can produce a ``StateReading`` on demand."""

    def fetch(self) -> StateReading:
        ...


class StateSource:
    """Query the upstream endpoint over HTTP and map its answer.

    One ``httpx.Client`` is kept for the lifetime of the source so its
    connection pool is reused. The client is thread-safe, so a single source
    can serve concurrent requests. Call ``close()`` on shutdown.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        mapping: StatusMapping = map_status_field,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._mapping = mapping
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> StateReading:
        """Fetch and map the upstream state.

        Raises:
            TransportError: connection failure, timeout or non-2xx status.
            DecodeError: the body is not a JSON object of the expected shape.
            UnknownStateError: the status literal is not recognised.
        """
        try:
            response = self._client.get(self.url, headers=UPSTREAM_HEADERS)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("State endpoint %s answered HTTP %s", self.url, status)
            raise TransportError(
                f"state endpoint returned HTTP {status}", status_code=status, url=self.url
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Error while sending request to state endpoint %s: %s", self.url, exc)
            raise TransportError(f"request to state endpoint failed: {exc}", url=self.url) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("State endpoint %s returned a body that is not JSON", self.url)
            raise DecodeError(f"state endpoint returned invalid JSON: {response.text[:200]!r}") from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"state endpoint returned {type(payload).__name__}, expected an object")

        try:
            reading = self._mapping(payload)
        except UnknownStateError as exc:
            logger.warning("State endpoint %s reported an unknown state %r", self.url, exc.value)
            raise
        logger.debug("State endpoint %s: open=%s last_change=%s", self.url, reading.open, reading.last_change)
        return reading


def state_source_from_settings(settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> StateSource:
    """Build the ``StateSource`` described by the application settings."""
    return StateSource(
        settings.upstream_url,
        timeout=settings.upstream_timeout_seconds,
        mapping=UPSTREAM_MAPPINGS[settings.upstream_schema],
        transport=transport,
    )
