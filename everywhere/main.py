# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Everywhere CLI entry point."""

import logging

import click

from . import __version__
from .commands.config import config_cmd
from .commands.exec import exec_cmd, run_cmd
from .commands.files import files_cmd
from .commands.login import login_cmd, logout_cmd
from .commands.sandboxes import sandboxes_cmd
from .config import load_config
from .errors import EverywhereError
from .logger import setup_logger


class CliError(click.ClickException):
    """Render an EverywhereError as a single red ``Error:`` line."""

    def show(self, file=None):
        click.echo(
            click.style(f"Error: {self.format_message()}", fg="red"),
            file=file,
            err=True,
        )


class EverywhereGroup(click.Group):
    """Root group with command aliases and uniform error reporting."""

    aliases = {"sandbox": "sandboxes", "s": "sandboxes"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except EverywhereError as e:
            raise CliError(str(e)) from e


@click.group(cls=EverywhereGroup)
@click.version_option(__version__, prog_name="everywhere")
@click.option("--debug", is_flag=True, help="Log HTTP requests to stderr")
@click.pass_context
def cli(ctx, debug: bool):
    """Everywhere CLI - Manage your cloud sandboxes.

    \b
    Examples:
      everywhere login                    # Authenticate with a token
      everywhere sandboxes list           # List your sandboxes
      everywhere exec "ls -la" -s mybox   # Run a command in a sandbox
      everywhere run script.py            # Run Python in a sandbox
    """
    setup_logger("everywhere", level=logging.DEBUG if debug else logging.WARNING)
    # Tests and embedding callers may pass a ready Config as obj
    if ctx.obj is None:
        ctx.obj = load_config()


cli.add_command(login_cmd)
cli.add_command(logout_cmd)
cli.add_command(sandboxes_cmd)
cli.add_command(files_cmd)
cli.add_command(run_cmd)
cli.add_command(exec_cmd)
cli.add_command(config_cmd)


def main():
    cli(prog_name="everywhere")


if __name__ == "__main__":
    main()
