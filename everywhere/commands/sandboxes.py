# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Sandboxes command group - create, list and control sandboxes."""

from typing import Dict, Iterable

import click

from ..config import Config
from ..errors import ValidationError
from ..output import format_json, format_sandbox_table, format_yaml
from . import authenticated_client


def parse_env_pairs(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options into a dict.

    Keys and values are stripped; the value may itself contain ``=``.
    """
    secrets = {}
    for kv in pairs:
        key, sep, value = kv.partition("=")
        if not sep:
            raise ValidationError(f"invalid env '{kv}' (expected KEY=VALUE)")
        key = key.strip()
        if not key:
            raise ValidationError(f"empty env key in '{kv}'")
        secrets[key] = value.strip()
    return secrets


@click.group("sandboxes")
def sandboxes_cmd():
    """Manage sandboxes (aliases: sandbox, s).

    \b
    Examples:
      everywhere sandboxes list
      everywhere sandboxes create -n mybox -p 8080 -e API_KEY=secret
      everywhere sandboxes stop mybox
      everywhere sandboxes delete mybox -f
    """
    pass


@sandboxes_cmd.command("list")
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format",
)
@click.pass_obj
def list_sandboxes(config: Config, output_format: str):
    """List all sandboxes."""
    client = authenticated_client(config)
    result = client.list_sandboxes()

    if output_format == "json":
        click.echo(format_json(result.items))
        return
    if output_format == "yaml":
        click.echo(format_yaml(result.items), nl=False)
        return

    if not result.items:
        click.echo("No sandboxes found")
        return
    click.echo(format_sandbox_table(result.items))


@sandboxes_cmd.command("create")
@click.option("-n", "--name", default="", help="Sandbox name (auto-generated if empty)")
@click.option("-p", "--port", default="", help="Upstream port")
@click.option(
    "-e",
    "--env",
    "env_pairs",
    multiple=True,
    help="Environment variables KEY=VALUE (repeatable)",
)
@click.pass_obj
def create_sandbox(config: Config, name: str, port: str, env_pairs):
    """Create a new sandbox."""
    client = authenticated_client(config)
    secrets = parse_env_pairs(env_pairs)

    sandbox = client.create_sandbox(name, port, secrets or None)

    click.echo(f"Sandbox '{sandbox.name}' created")
    click.echo(f"Status: {sandbox.status}")
    if sandbox.ip_address:
        click.echo(f"IP Address: {sandbox.ip_address}")
    if secrets:
        click.echo(f"Environment: {len(secrets)} variables")


@sandboxes_cmd.command("delete")
@click.argument("name")
@click.option(
    "-f", "--force", is_flag=True, help="Force delete without confirmation"
)
@click.pass_obj
def delete_sandbox(config: Config, name: str, force: bool):
    """Delete a sandbox."""
    client = authenticated_client(config)

    if not force:
        answer = click.prompt(
            f"Are you sure you want to delete sandbox '{name}'? (y/N)",
            default="",
            show_default=False,
        )
        if answer.strip().lower() not in ("y", "yes"):
            click.echo("Delete cancelled")
            return

    client.delete_sandbox(name)
    click.echo(f"Sandbox '{name}' deleted")


@sandboxes_cmd.command("start")
@click.argument("name")
@click.pass_obj
def start_sandbox(config: Config, name: str):
    """Start a sandbox."""
    client = authenticated_client(config)
    client.start_sandbox(name)
    click.echo(f"Sandbox '{name}' started")


@sandboxes_cmd.command("stop")
@click.argument("name")
@click.pass_obj
def stop_sandbox(config: Config, name: str):
    """Stop a sandbox."""
    client = authenticated_client(config)
    client.stop_sandbox(name)
    click.echo(f"Sandbox '{name}' stopped")
