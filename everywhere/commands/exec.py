# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Exec and run commands - execute code inside a sandbox."""

import os

import click

from ..client import EverywhereClient
from ..config import Config
from ..errors import FilesystemError, ValidationError
from . import authenticated_client

AUTO_SANDBOX = "auto"

sandbox_option = click.option(
    "-s",
    "--sandbox",
    default=AUTO_SANDBOX,
    show_default=True,
    help="Sandbox name (use 'auto' to create a temporary sandbox)",
)


@click.command("exec")
@click.argument("command")
@sandbox_option
@click.pass_obj
def exec_cmd(config: Config, command: str, sandbox: str):
    """Execute a shell command in a sandbox.

    \b
    Example:
      everywhere exec "pip list" -s mybox
    """
    client = authenticated_client(config)
    click.echo(client.run_command(sandbox, command))


def run_file(client: EverywhereClient, sandbox: str, file_path: str) -> str:
    """Run a local .py file and return its output."""
    ext = os.path.splitext(file_path)[1].lower()
    if ext != ".py":
        raise ValidationError(
            f"only Python .py files are supported. File extension '{ext}' is not supported"
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(f"failed to read file {file_path}: {e}") from e

    click.echo(f"Running {file_path} as Python in sandbox '{sandbox}'...")
    return client.run_python(sandbox, code)


@click.command("run")
@click.argument("source", metavar="FILE|CODE")
@sandbox_option
@click.pass_obj
def run_cmd(config: Config, source: str, sandbox: str):
    """Run Python in a sandbox.

    Run Python by providing a .py file path or an inline code string.

    \b
    Examples:
      everywhere run script.py
      everywhere run "print('hello')" -s mybox
    """
    client = authenticated_client(config)

    if os.path.exists(source):
        if os.path.isdir(source):
            raise FilesystemError(f"file not found or is a directory: {source}")
        click.echo(run_file(client, sandbox, source))
        return

    # A missing path that looks like a file name is a typo, not code
    if source.lower().endswith(".py") or os.sep in source:
        raise FilesystemError(f"file not found or is a directory: {source}")

    click.echo(client.run_python(sandbox, source))
