# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Output formatting utilities."""

import json
from dataclasses import asdict, is_dataclass
from typing import Any, List, Optional

import yaml

from .models import Sandbox

PREVIEW_LIMIT = 100


def format_table(
    headers: List[str], rows: List[List[str]], min_widths: Optional[List[int]] = None
) -> str:
    """Format data as a table."""
    # Calculate column widths
    widths = [len(h) for h in headers]
    if min_widths:
        widths = [max(w, mw) for w, mw in zip(widths, min_widths)]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []
    header_line = "  ".join(h.upper().ljust(widths[i]) for i, h in enumerate(headers))
    lines.append(header_line.rstrip())
    for row in rows:
        row_line = "  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row))
        lines.append(row_line.rstrip())

    return "\n".join(lines)


def format_sandbox_table(sandboxes: List[Sandbox]) -> str:
    """Format sandboxes as a NAME/STATUS/IP ADDRESS/CREATED table."""
    headers = ["NAME", "STATUS", "IP ADDRESS", "CREATED"]
    rows = [
        [sb.name, sb.status, sb.ip_address or "", sb.created_at or ""]
        for sb in sandboxes
    ]
    return format_table(headers, rows)


def _plain(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, list):
        return [_plain(item) for item in obj]
    return obj


def format_json(obj: Any) -> str:
    """Format a payload (dataclasses included) as JSON."""
    return json.dumps(_plain(obj), indent=2, ensure_ascii=False, default=str)


def format_yaml(obj: Any) -> str:
    """Format a payload (dataclasses included) as YAML."""
    return yaml.safe_dump(
        _plain(obj), default_flow_style=False, allow_unicode=True, sort_keys=False
    )


def format_preview(content: str, limit: int = PREVIEW_LIMIT) -> str:
    """Shorten file content to a single-line preview."""
    preview = content
    if len(preview) > limit:
        preview = preview[:limit] + "..."
    return preview.replace("\n", " ")
