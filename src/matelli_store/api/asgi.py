"""ASGI entrypoint for the storefront API."""

from matelli_store.api.app import create_app
from matelli_store.containers import build_container

app = create_app(build_container())
