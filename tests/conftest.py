# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import io
import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import pytest
import requests
from click.testing import CliRunner

from everywhere.config import Config


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: Optional[str] = None,
    content: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real requests.Response backed by an in-memory body."""
    if content is None:
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        content = text.encode("utf-8")

    response = requests.Response()
    response.status_code = status_code
    response.raw = io.BytesIO(content)
    response.encoding = "utf-8"
    if headers:
        response.headers.update(headers)
    return response


def envelope(data: Any, msg: str = "ok") -> Dict[str, Any]:
    return {"msg": msg, "data": data}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.everywhere and env overrides."""
    monkeypatch.delenv("EVERYWHERE_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("EVERYWHERE_USER_EMAIL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setattr(
        "everywhere.config.CONFIG_FILE", tmp_path / ".everywhere" / "config.json"
    )


@pytest.fixture
def config(tmp_path) -> Config:
    """Config for a logged-in user, stored under tmp_path."""
    return Config(
        path=tmp_path / "config.json",
        auth_token="test-token",
        user_email="a@b.com",
        api_endpoint="http://api.test/api/v1",
    )


@pytest.fixture
def anonymous_config(tmp_path) -> Config:
    return Config(path=tmp_path / "config.json", api_endpoint="http://api.test/api/v1")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def session():
    """Replace requests.Session used by EverywhereClient with a mock."""
    mock_session = MagicMock(spec=requests.Session)
    with patch("everywhere.client.requests.Session", return_value=mock_session):
        yield mock_session
