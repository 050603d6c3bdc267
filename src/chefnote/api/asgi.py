"""ASGI entrypoint for the ChefNote API."""

from chefnote.api.app import create_app
from chefnote.containers import build_container

app = create_app(build_container())
