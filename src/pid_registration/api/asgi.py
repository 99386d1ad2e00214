"""ASGI entrypoint for the registration site."""

from pid_registration.api.app import create_app
from pid_registration.containers import build_container

app = create_app(build_container())
