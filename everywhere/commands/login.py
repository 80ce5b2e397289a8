# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Login command - authenticate with the Everywhere API."""

from typing import Optional

import click

from ..client import EverywhereClient
from ..config import Config
from ..errors import AuthenticationError, EverywhereError, ValidationError


def _resolve_token(token_arg: Optional[str], token_opt: Optional[str]) -> str:
    if token_arg and token_arg.strip():
        return token_arg.strip()
    if token_opt:
        return token_opt
    token = click.prompt("Token", hide_input=True, default="", show_default=False)
    token = token.strip()
    if not token:
        raise ValidationError("token cannot be empty")
    return token


@click.command("login")
@click.argument("token_arg", metavar="[TOKEN]", required=False)
@click.option(
    "-t",
    "--token",
    "token_opt",
    default=None,
    help="Authentication token (optional; can also be provided as a positional argument)",
)
@click.pass_obj
def login_cmd(config: Config, token_arg: Optional[str], token_opt: Optional[str]):
    """Authenticate with Everywhere.

    \b
    Examples:
      everywhere login             # Prompt for the token
      everywhere login TOKEN       # Token as argument
      everywhere login -t TOKEN    # Token as option

    \b
    After successful login, the token is saved to ~/.everywhere/config.json
    and will be used for subsequent commands.
    """
    token = _resolve_token(token_arg, token_opt)

    click.echo("Authenticating with provided token...")
    client = EverywhereClient(config.api_endpoint, token)

    try:
        status = client.get_auth_status()
    except EverywhereError as e:
        # Any failed check means the token could not be verified
        raise AuthenticationError(f"token authentication failed: {e}") from e
    if not status.authenticated:
        raise AuthenticationError("invalid or expired token")

    config.set_credentials(token, status.user.email)
    user = status.user
    click.echo(
        click.style(
            f"Successfully logged in as {user.first_name} {user.last_name} ({user.email})",
            fg="green",
        )
    )


@click.command("logout")
@click.pass_obj
def logout_cmd(config: Config):
    """Logout and clear local credentials."""
    config.clear_auth()
    click.echo(click.style("Successfully logged out", fg="green"))
