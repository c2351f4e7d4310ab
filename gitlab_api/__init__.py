# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitLab REST API client and typed resource accessors.

Layout:
- `gitlab_api/` defines the shared transport (`GitLabAPIClient`): build a request,
  execute it, classify the status, decode JSON.
- `gitlab_api/api/*.py` contains one module per resource family; each one is a
  thin binding of the generic list accessor in `api/base_list.py`.

Example:
    client = GitLabAPIClient()
    epics, resp = client.epics.list_group_epics("my-group", ListGroupEpicsOptions(state="opened"))
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar
from urllib.parse import urlsplit

import requests

from .config import GitLabConfig, load_config
from .exceptions import (
    GitLabAPIError,
    GitLabAuthError,
    GitLabDecodeError,
    GitLabError,
    GitLabForbiddenError,
    GitLabNotFoundError,
    GitLabRequestError,
    InvalidIdentifierError,
    RequestConstructionError,
)
from .ids import NamedID, NumericID, ResourceID, parse_id, path_segment
from .query import ListOptions, encode_query
from .types import Response

from .api.epics import Epic, EpicAuthor, EpicsService, ListGroupEpicsOptions

_logger = logging.getLogger(__name__)

T = TypeVar("T")

# Per-call request modifier, applied after the request is built.
RequestOption = Callable[[requests.PreparedRequest], None]

_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"})


def with_sudo(user: Any) -> RequestOption:
    """Run the call as another user (admin tokens only)."""

    def _apply(req: requests.PreparedRequest) -> None:
        req.headers["Sudo"] = str(user)

    return _apply


def with_header(name: str, value: str) -> RequestOption:
    def _apply(req: requests.PreparedRequest) -> None:
        req.headers[str(name)] = str(value)

    return _apply


def with_token(token: str) -> RequestOption:
    """Override the client's token for a single call."""

    def _apply(req: requests.PreparedRequest) -> None:
        req.headers["PRIVATE-TOKEN"] = str(token)

    return _apply


def _error_detail(resp: requests.Response) -> str:
    """Best-effort extraction of GitLab's {"message": ...} / {"error": ...} body."""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "")[:200]
    if isinstance(body, dict):
        for k in ("message", "error", "error_description"):
            if body.get(k):
                return str(body[k])
    return str(body)[:200]


class GitLabAPIClient:
    """GitLab REST API client (resource bindings live in `gitlab_api/api/`)."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        config: Optional[GitLabConfig] = None,
        config_path: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        # Token priority: 1) provided token, 2) environment variable, 3) config file(s)
        self.config = config or load_config(config_path, token=token, base_url=base_url)
        self.token = self.config.token
        self.base_url = self.config.base_url.rstrip("/")
        self.timeout_s = float(self.config.timeout_s)
        self.headers: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }
        if self.token:
            self.headers["PRIVATE-TOKEN"] = self.token
        self._session = session or requests.Session()

        # Per-client REST stats, label-based.
        self._stats_mu = threading.Lock()
        self._rest_calls_total: int = 0
        self._rest_calls_by_label: Dict[str, int] = {}
        self._rest_success_total: int = 0
        self._rest_errors_total: int = 0
        self._rest_time_total_s: float = 0.0
        self._rest_time_by_label_s: Dict[str, float] = {}
        self._rest_errors_by_status: Dict[int, int] = {}

        self.epics = EpicsService(self)

    def has_token(self) -> bool:
        return self.token is not None

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GitLabAPIClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.config.api_url}/{str(path or '').lstrip('/')}"

    def _rest_record(self, *, label: str, status_code: Optional[int], dt_s: float) -> None:
        """Record one REST call in this client's stats."""
        lbl = str(label or "").strip() or "unknown"
        dt = max(0.0, float(dt_s or 0.0))
        with self._stats_mu:
            self._rest_calls_total += 1
            self._rest_calls_by_label[lbl] = self._rest_calls_by_label.get(lbl, 0) + 1
            self._rest_time_total_s += dt
            self._rest_time_by_label_s[lbl] = self._rest_time_by_label_s.get(lbl, 0.0) + dt
            if status_code is None:
                return
            if 200 <= status_code < 300:
                self._rest_success_total += 1
            elif status_code >= 400:
                self._rest_errors_total += 1
                self._rest_errors_by_status[status_code] = self._rest_errors_by_status.get(status_code, 0) + 1

    def get_rest_call_stats(self) -> Dict[str, Any]:
        """Return REST call stats for this client."""
        with self._stats_mu:
            return {
                "total": int(self._rest_calls_total),
                "success_total": int(self._rest_success_total),
                "error_total": int(self._rest_errors_total),
                "time_total_s": float(self._rest_time_total_s),
                "by_label": dict(sorted(self._rest_calls_by_label.items(), key=lambda kv: (-kv[1], kv[0]))),
                "time_by_label_s": dict(sorted(self._rest_time_by_label_s.items(), key=lambda kv: (-kv[1], kv[0]))),
                "errors_by_status": dict(sorted(self._rest_errors_by_status.items(), key=lambda kv: (-kv[1], kv[0]))),
            }

    def new_request(
        self,
        method: str,
        path: str,
        opt: Optional[Any] = None,
        options: Iterable[RequestOption] = (),
    ) -> requests.PreparedRequest:
        """Build a request for `path` (relative to the API prefix, already URL-encoded).

        `opt` is an options dataclass or mapping, sent as the query string.
        """
        m = str(method or "").upper()
        if m not in _METHODS:
            raise RequestConstructionError(f"unsupported HTTP method {method!r}")
        params = encode_query(opt)
        url = self._url(path)
        try:
            req = self._session.prepare_request(requests.Request(m, url, headers=dict(self.headers), params=params))
        except (requests.exceptions.RequestException, ValueError) as e:
            raise RequestConstructionError(f"could not build {m} {url}: {e}") from e
        for fn in options:
            fn(req)
        return req

    def do(
        self,
        req: requests.PreparedRequest,
        decode: Optional[Callable[[Any], T]] = None,
        *,
        label: Optional[str] = None,
    ) -> Tuple[Any, Response]:
        """Send `req`, raise on non-2xx, and return (decoded body, envelope).

        `decode` receives the parsed JSON and returns the destination shape; any
        TypeError/ValueError/KeyError it raises becomes GitLabDecodeError.
        """
        ep = urlsplit(str(req.url or "")).path
        lbl = str(label or "").strip() or "unknown"
        status_code: Optional[int] = None
        t0 = time.monotonic()
        try:
            try:
                http_resp = self._session.send(req, timeout=self.timeout_s)
            except requests.exceptions.RequestException as e:
                _logger.warning("GitLab %s %s failed: %s", req.method, ep, e)
                raise GitLabRequestError(
                    status_code=0, endpoint=ep, message=f"GitLab API request failed for {ep}: {e}"
                ) from e

            status_code = int(http_resp.status_code)
            envelope = Response.from_http(http_resp)
            _logger.debug("GitLab %s %s -> %d (%.3fs)", req.method, ep, status_code, time.monotonic() - t0)
            self._check_status(http_resp, envelope, ep)
            return self._decode(http_resp, envelope, ep, decode), envelope
        finally:
            self._rest_record(label=lbl, status_code=status_code, dt_s=time.monotonic() - t0)

    @staticmethod
    def _check_status(http_resp: requests.Response, envelope: Response, ep: str) -> None:
        sc = envelope.status_code
        if 200 <= sc < 300:
            return
        detail = _error_detail(http_resp)
        _logger.warning("GitLab API error %d for %s: %s", sc, ep, detail)
        if sc == 401:
            raise GitLabAuthError(
                status_code=401,
                endpoint=ep,
                message="GitLab API returned 401 Unauthorized. Check your token.",
                response=envelope,
            )
        if sc == 403:
            raise GitLabForbiddenError(
                status_code=403,
                endpoint=ep,
                message="GitLab API returned 403 Forbidden. Token may lack permissions.",
                response=envelope,
            )
        if sc == 404:
            raise GitLabNotFoundError(
                status_code=404, endpoint=ep, message=f"GitLab API returned 404 Not Found for {ep}", response=envelope
            )
        raise GitLabRequestError(
            status_code=sc, endpoint=ep, message=f"GitLab API returned {sc} for {ep}: {detail}", response=envelope
        )

    @staticmethod
    def _decode(
        http_resp: requests.Response,
        envelope: Response,
        ep: str,
        decode: Optional[Callable[[Any], T]],
    ) -> Any:
        data: Any = None
        if http_resp.status_code != 204 and http_resp.content:
            try:
                data = http_resp.json()
            except ValueError as e:
                raise GitLabDecodeError(
                    status_code=envelope.status_code,
                    endpoint=ep,
                    message=f"GitLab API returned invalid JSON for {ep}: {e}",
                    response=envelope,
                ) from e
        if decode is None:
            return data
        try:
            return decode(data)
        except (TypeError, ValueError, KeyError) as e:
            raise GitLabDecodeError(
                status_code=envelope.status_code,
                endpoint=ep,
                message=f"GitLab API response for {ep} did not decode: {e}",
                response=envelope,
            ) from e

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        label: Optional[str] = None,
    ) -> Optional[Any]:
        """Make a GET request to the GitLab API and return JSON (dict/list) or raise."""
        req = self.new_request("GET", endpoint, params)
        data, _ = self.do(req, label=label)
        return data


__all__ = [
    "Epic",
    "EpicAuthor",
    "EpicsService",
    "GitLabAPIClient",
    "GitLabAPIError",
    "GitLabAuthError",
    "GitLabConfig",
    "GitLabDecodeError",
    "GitLabError",
    "GitLabForbiddenError",
    "GitLabNotFoundError",
    "GitLabRequestError",
    "InvalidIdentifierError",
    "ListGroupEpicsOptions",
    "ListOptions",
    "NamedID",
    "NumericID",
    "RequestConstructionError",
    "RequestOption",
    "ResourceID",
    "Response",
    "load_config",
    "parse_id",
    "path_segment",
    "with_header",
    "with_sudo",
    "with_token",
]
