"""Exceptions raised while translating the upstream door state."""

from __future__ import annotations

from typing import Optional


class TranslationError(Exception):
    """Base exception: no status document can be produced for this request."""


class TransportError(TranslationError):
    """The upstream state endpoint could not be reached (network, timeout, non-2xx)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class DecodeError(TranslationError):
    """The upstream response body is not the JSON object we expect."""


class UnknownStateError(TranslationError):
    """The upstream reported a status literal we do not recognise."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"unknown state: {value}")
