# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Config command - inspect CLI configuration."""

import click

from ..config import Config


@click.group("config")
def config_cmd():
    """Manage CLI configuration.

    \b
    Example:
      everywhere config show    # View current config
    """
    pass


@config_cmd.command("show")
@click.pass_obj
def config_show(config: Config):
    """Show current configuration."""
    click.echo(f"Configuration file: {config.path}")
    click.echo(f"API Endpoint: {config.api_endpoint}")
    click.echo(f"User Email: {config.user_email}")
    click.echo(f"Authenticated: {'true' if config.is_authenticated() else 'false'}")
