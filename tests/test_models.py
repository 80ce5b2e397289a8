# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for everywhere/models.py module."""

import pytest

from everywhere.models import (
    AuthStatus,
    DaciteError,
    Sandbox,
    SandboxList,
    decode,
    decode_list,
)


class TestDecode:
    """Tests for dacite-backed payload decoding."""

    def test_nulls_use_defaults(self):
        sandbox = decode(Sandbox, {"name": None, "status": "running", "id": None})
        assert sandbox.name == ""
        assert sandbox.id is None

    def test_nested(self):
        result = decode(SandboxList, {"items": [{"name": "a"}], "total": 1})
        assert result.items[0].name == "a"

    def test_auth_status_user(self):
        status = decode(AuthStatus, {"authenticated": True, "user": {"email": "x@y"}})
        assert status.user.email == "x@y"

    def test_unknown_status_passes_through(self):
        sandbox = decode(Sandbox, {"name": "a", "status": "hibernating-42"})
        assert sandbox.status == "hibernating-42"

    def test_wrong_type(self):
        with pytest.raises(DaciteError):
            decode(Sandbox, {"name": 12})

    def test_not_an_object(self):
        with pytest.raises(TypeError):
            decode(Sandbox, ["a"])

    def test_decode_list_requires_list(self):
        with pytest.raises(TypeError):
            decode_list(Sandbox, {"name": "a"})
