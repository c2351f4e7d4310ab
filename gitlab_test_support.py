# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Canned HTTP responses and GitLab payloads for the test suite.

Not installed with the package; pytest puts the repository root on sys.path.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

BASE_URL = "https://gitlab.example.com"


def make_http_response(
    status: int = 200,
    body: Any = None,
    *,
    headers: Optional[Dict[str, str]] = None,
    url: str = f"{BASE_URL}/api/v4/groups/1/epics",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    if isinstance(body, bytes):
        resp._content = body
    elif body is None:
        resp._content = b""
    else:
        resp._content = json.dumps(body).encode()
    resp.headers.update(headers or {})
    resp.url = url
    resp.encoding = "utf-8"
    return resp


class FakeSession(requests.Session):
    """requests.Session whose send() returns queued responses (or raises queued errors)."""

    def __init__(self) -> None:
        super().__init__()
        self.queue: List[Any] = []
        self.sent: List[requests.PreparedRequest] = []
        self.timeouts: List[Any] = []

    def respond(self, *args: Any, **kwargs: Any) -> None:
        self.queue.append(make_http_response(*args, **kwargs))

    def fail(self, exc: Exception) -> None:
        self.queue.append(exc)

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        self.sent.append(request)
        self.timeouts.append(kwargs.get("timeout"))
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def epic_json(epic_id: int, **overrides: Any) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": epic_id,
        "iid": epic_id % 100,
        "group_id": 7,
        "title": f"Epic {epic_id}",
        "description": "desc",
        "state": "opened",
        "web_url": f"{BASE_URL}/groups/g/-/epics/{epic_id % 100}",
        "author": {
            "id": 3,
            "name": "Jane Doe",
            "username": "jdoe",
            "state": "active",
            "avatar_url": None,
            "web_url": f"{BASE_URL}/jdoe",
        },
        "start_date": "2024-01-15",
        "start_date_is_fixed": True,
        "start_date_fixed": "2024-01-15",
        "start_date_from_milestone": None,
        "end_date": "2024-03-31",
        "due_date": "2024-03-31",
        "due_date_is_fixed": False,
        "due_date_fixed": None,
        "due_date_from_milestone": "2024-03-31",
        "created_at": "2024-01-10T09:30:00.000Z",
        "updated_at": "2024-02-01T12:00:00.000Z",
        "labels": ["backend", "p1"],
    }
    d.update(overrides)
    return d
