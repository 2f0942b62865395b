"""Flask CLI command groups."""

from __future__ import annotations

from flask import Flask

from .seed import seed_cli

COMMAND_GROUPS = (seed_cli,)


def init_app(app: Flask) -> None:
    """Attach every command group to ``app.cli`` (``flask seed run``...)."""
    for group in COMMAND_GROUPS:
        app.cli.add_command(group)
