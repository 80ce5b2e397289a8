# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Typed payloads returned by the Everywhere API.

Every JSON response is wrapped in an envelope ``{"msg": ..., "data": ...}``.
Each endpoint has its own ``data`` shape, decoded into one of the
dataclasses below with dacite. Status and error strings are passed
through as-is; their set of values belongs to the server.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Type, TypeVar

from dacite import Config, DaciteError, from_dict

T = TypeVar("T")

DACITE_CONFIG = Config(check_types=True)


@dataclass
class User:
    id: Optional[int] = None
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    tenant_id: Optional[str] = None


@dataclass
class AuthStatus:
    """Response of ``GET /auth/status``; not wrapped in an envelope."""

    authenticated: bool = False
    user: User = field(default_factory=User)


@dataclass
class Sandbox:
    name: str = ""
    status: str = ""
    id: Optional[int] = None
    ip_address: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    tenant_id: Optional[str] = None
    user_id: Optional[int] = None
    description: Optional[str] = None


@dataclass
class SandboxList:
    items: List[Sandbox] = field(default_factory=list)
    total: int = 0


@dataclass
class RemoteFile:
    path: str = ""
    name: str = ""
    content: str = ""


@dataclass
class ExecutionResult:
    output: str = ""
    error: str = ""
    sandbox: str = ""


def _drop_nulls(data: Any) -> Any:
    """Remove null members so that dataclass defaults apply."""
    if isinstance(data, dict):
        return {k: _drop_nulls(v) for k, v in data.items() if v is not None}
    if isinstance(data, list):
        return [_drop_nulls(item) for item in data]
    return data


def decode(data_class: Type[T], data: Any) -> T:
    """Decode a JSON object into ``data_class``.

    Raises:
        DaciteError: data does not match the dataclass
        TypeError: data is not a JSON object
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"expected an object, got {type(data).__name__}")
    return from_dict(
        data_class=data_class, data=_drop_nulls(data), config=DACITE_CONFIG
    )


def decode_list(data_class: Type[T], data: Any) -> List[T]:
    """Decode a JSON array of objects into a list of ``data_class``."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"expected a list, got {type(data).__name__}")
    return [decode(data_class, item) for item in data]


__all__ = [
    "AuthStatus",
    "DaciteError",
    "ExecutionResult",
    "RemoteFile",
    "Sandbox",
    "SandboxList",
    "User",
    "decode",
    "decode_list",
]
