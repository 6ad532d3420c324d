"""ASGI entrypoint for the SunRay API."""

from sunray.api.app import create_app
from sunray.containers import build_container

app = create_app(build_container())
