"""ASGI entrypoint for the scavenger hunt server."""

from scavenger_hunt.api.app import create_app
from scavenger_hunt.containers import build_container

app = create_app(build_container())
