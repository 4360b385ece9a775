"""Merge the upstream state into the facility template.

The template is shared by every request and never modified. Each request
gets its own document built from the template plus the state it fetched, so
concurrent requests cannot observe each other's upstream answer.
"""

from __future__ import annotations

from .models import StatusDocument
from .state_client import StateFetcher


def translate(template: StatusDocument, source: StateFetcher) -> StatusDocument:
    """Fetch the current state and return a new document carrying it.

    Errors from ``source.fetch()`` propagate unchanged; no document is built
    when the state is not known.
    """
    reading = source.fetch()
    return template.with_state(reading.open, reading.last_change)


def render(template: StatusDocument, source: StateFetcher) -> bytes:
    """Translate and serialize in one step."""
    return translate(template, source).to_json()
