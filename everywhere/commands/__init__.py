# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Command implementations for the everywhere CLI."""

from ..client import EverywhereClient
from ..config import Config


def authenticated_client(config: Config) -> EverywhereClient:
    """Check for a local token, then build a client that sends it."""
    config.require_auth()
    return EverywhereClient(config.api_endpoint, config.auth_token)
