"""Static facility metadata for the status document.

The template built here is created once at startup and shared by every
request. ``FACILITY_JSON`` may replace the built-in Metalab data with another
space's document, given either inline or as a path to a JSON file.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from .config import Settings
from .models import Contact, Link, Location, SpaceFed, State, StatusDocument

logger = logging.getLogger(__name__)


def build_metalab_template() -> StatusDocument:
    """Return the Metalab document with the open state still unknown."""
    return StatusDocument(
        api_compatibility=("14", "15"),
        space="Metalab",
        logo="https://metalab.at/wiki/images/9/93/Metalab.at.svg",
        url="https://metalab.at",
        location=Location(
            address="Verein Metalab, Rathausstraße 6, 1010 Wien, Austria",
            lat=48.2093723,
            lon=16.356099,
            timezone="Europe/Vienna",
            country_code="AT",
        ),
        spacefed=SpaceFed(spacenet=False, spacesaml=False),
        state=State(open=None),
        contact=Contact(
            phone="+43 720 002323",
            mastodon="@metalab@chaos.social",
            sip="6382",
        ),
        links=(Link(name="Metalab Wiki", url="https://metalab.at/wiki"),),
        projects=(
            "https://github.com/metalab",
            "https://metalab.at/wiki/Projekte_Neu",
        ),
    )


def _load_facility_info(raw: str) -> Dict[str, Any]:
    """Load the facility document from inline JSON or a file path.

    Inline JSON is detected by a leading brace; anything else is read as a
    path on the host filesystem.
    """
    raw = raw.strip()
    if raw.startswith("{"):
        return json.loads(raw)
    with open(raw, "r", encoding="utf-8") as fh:
        return json.load(fh)


def load_template(settings: Settings) -> StatusDocument:
    """Build the template document described by the settings.

    Raises:
        pydantic.ValidationError: if the configured document does not match
            the SpaceAPI schema.
    """
    if not settings.facility_json.strip():
        return build_metalab_template()
    info = _load_facility_info(settings.facility_json)
    template = StatusDocument.model_validate(info)
    logger.info("Loaded facility template for %s", template.space)
    return template
