# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Configuration management for everywhere CLI."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import AuthenticationError, FilesystemError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".everywhere"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_API_ENDPOINT = "https://api.everywhere.dev/api/v1"
ENV_PREFIX = "EVERYWHERE_"

# Keys persisted in the config file; each can be overridden by
# EVERYWHERE_<KEY> in the environment.
CONFIG_KEYS = ("auth_token", "user_email")


@dataclass
class Config:
    """Local credentials plus the API endpoint they apply to."""

    path: Path
    auth_token: str = ""
    user_email: str = ""
    api_endpoint: str = field(default=DEFAULT_API_ENDPOINT)

    def is_authenticated(self) -> bool:
        return bool(self.auth_token)

    def require_auth(self) -> None:
        """Fail before any network call when no token is configured."""
        if not self.is_authenticated():
            raise AuthenticationError(
                "not authenticated. Please run 'everywhere login' first"
            )

    def set_credentials(self, token: str, email: str) -> None:
        self.auth_token = token
        self.user_email = email
        self.save()

    def clear_auth(self) -> None:
        self.auth_token = ""
        self.user_email = ""
        self.save()

    def to_dict(self) -> dict:
        return {key: getattr(self, key) for key in CONFIG_KEYS}

    def save(self) -> None:
        """Save configuration to file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise FilesystemError(f"failed to write config {self.path}: {e}") from e
        logger.debug("Saved config to %s", self.path)


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from file, then apply environment overrides.

    A missing config file is created with empty values.
    """
    path = Path(path or CONFIG_FILE)
    config = Config(path=path)

    if not path.exists():
        config.save()
    else:
        try:
            with open(path, "r") as f:
                file_config = json.load(f) or {}
        except OSError as e:
            raise FilesystemError(f"failed to read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise FilesystemError(f"invalid config file {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise FilesystemError(
                f"invalid config file {path}: expected a JSON object"
            )

        for key in CONFIG_KEYS:
            value = file_config.get(key)
            if value is not None:
                setattr(config, key, str(value))

    # Environment variables override file config
    for key in CONFIG_KEYS:
        env_value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if env_value:
            setattr(config, key, env_value)

    return config
