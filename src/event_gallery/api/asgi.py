"""ASGI entrypoint for the event gallery API."""

from event_gallery.api.app import create_app
from event_gallery.containers import build_container

app = create_app(build_container())
