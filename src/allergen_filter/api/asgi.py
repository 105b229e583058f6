"""ASGI entrypoint for the allergen filter API."""

from allergen_filter.api.app import create_app
from allergen_filter.containers import build_container

app = create_app(build_container())
