# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared value types for GitLab resources.

- ISO-8601 helpers: GitLab sends calendar dates ("2019-03-01") for fields like
  epic start/due dates and full timestamps ("2019-03-01T10:12:34.123Z") for
  created_at/updated_at. Both map None <-> null so absent stays absent.
- Response: transport envelope (status, headers, pagination headers).
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict


def parse_iso_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Be lenient with servers that send a timestamp where a date is expected.
    return date.fromisoformat(str(value)[:10])


# datetime.fromisoformat() before 3.11 only takes 3- or 6-digit fractions.
_FRACTION_RE = re.compile(r"\.(\d+)")


def _normalize_fraction(m: "re.Match[str]") -> str:
    return "." + m.group(1)[:6].ljust(6, "0")


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    s = _FRACTION_RE.sub(_normalize_fraction, str(value).replace("Z", "+00:00"), count=1)
    return datetime.fromisoformat(s)


def format_iso_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_iso_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def stringify(obj: Any) -> str:
    """One-line readable form of a record, skipping unset (None) fields."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        parts = []
        for f in dataclasses.fields(obj):
            v = getattr(obj, f.name)
            if v is None:
                continue
            parts.append(f"{f.name}={stringify(v)}")
        return f"{type(obj).__name__}{{{', '.join(parts)}}}"
    if isinstance(obj, (list, tuple)):
        return "[" + ", ".join(stringify(v) for v in obj) + "]"
    if isinstance(obj, datetime):
        return format_iso_datetime(obj) or ""
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, str):
        return repr(obj)
    return str(obj)


def _header_int(headers: Mapping[str, str], name: str) -> Optional[int]:
    raw = str(headers.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class Response:
    """Transport-level metadata returned next to the decoded body.

    GitLab pagination headers:
      X-Total, X-Total-Pages, X-Per-Page, X-Page, X-Next-Page, X-Prev-Page
    X-Next-Page / X-Prev-Page are blank on the last / first page, and X-Total /
    X-Total-Pages are omitted for very large collections; all map to None.
    """

    status_code: int
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict, hash=False)
    total_items: Optional[int] = None
    total_pages: Optional[int] = None
    items_per_page: Optional[int] = None
    current_page: Optional[int] = None
    next_page: Optional[int] = None
    previous_page: Optional[int] = None

    @classmethod
    def from_http(cls, resp: requests.Response) -> "Response":
        headers = resp.headers
        return cls(
            status_code=int(resp.status_code),
            url=str(resp.url or ""),
            headers=CaseInsensitiveDict(headers),
            total_items=_header_int(headers, "X-Total"),
            total_pages=_header_int(headers, "X-Total-Pages"),
            items_per_page=_header_int(headers, "X-Per-Page"),
            current_page=_header_int(headers, "X-Page"),
            next_page=_header_int(headers, "X-Next-Page"),
            previous_page=_header_int(headers, "X-Prev-Page"),
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def has_next_page(self) -> bool:
        return self.next_page is not None
