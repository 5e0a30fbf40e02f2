"""State shared by every command through ``click``'s context object."""

from __future__ import annotations

from dataclasses import dataclass

import click

from backoffice.application.dto import Actor
from backoffice.infrastructure.settings import Settings


@dataclass(frozen=True)
class CliContext:
    settings: Settings
    actor: Actor


pass_cli_context = click.make_pass_decorator(CliContext)
