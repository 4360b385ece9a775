"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables (and a ``.env`` file when one
is present). It centralises all runtime configuration for the service, such
as the upstream state endpoint, the facility template and the listen address.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. Every value has a
    default matching the Metalab deployment, so the service starts without
    any configuration at all.
    """

    # Upstream door state
    upstream_url: str = Field(
        default="https://eingang.metalab.at/status.json",
        alias="UPSTREAM_URL",
        description="Endpoint queried on every request for the open/closed state.",
    )
    upstream_timeout_seconds: float = Field(
        default=5.0,
        alias="UPSTREAM_TIMEOUT_SECONDS",
        gt=0,
        description=(
            "Timeout in seconds for each step of the upstream request (connect, read, "
            "write, pool). Expiry of any step fails the request."
        ),
    )
    upstream_schema: Literal["status", "lab_state"] = Field(
        default="status",
        alias="UPSTREAM_SCHEMA",
        description=(
            "Payload layout of the upstream endpoint. 'status' expects "
            '{"status": "open"|"closed"}; \'lab_state\' expects '
            '{"state": "on"|"off", "last_changed": <epoch seconds>}.'
        ),
    )

    # Facility metadata
    facility_json: str = Field(
        default="",
        alias="FACILITY_JSON",
        description="Inline JSON or path to a JSON file with the static document. Empty uses the built-in Metalab data.",
    )

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3334, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


# Instantiate settings at module import time. This allows other modules to
# import ``settings`` directly without repeatedly reading environment variables.
settings = Settings()
