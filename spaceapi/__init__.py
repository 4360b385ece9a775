# Package initializer for the SpaceAPI status service.

"""
The `spaceapi` package serves a SpaceAPI status document for a hackerspace.

Modules:

- ``config``: application settings loaded from environment variables.
- ``models``: Pydantic models for the SpaceAPI document.
- ``facility``: the static facility template.
- ``state_client``: fetches the open/closed state from the upstream endpoint.
- ``translator``: merges the upstream state into a per-request document.
- ``errors``: exceptions raised when no document can be produced.
- ``main``: the FastAPI application definition.

"""
