# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitLab connection settings.

Precedence (first non-empty wins):
  1) explicit arguments
  2) environment: GITLAB_TOKEN, GITLAB_URL, GITLAB_TIMEOUT
  3) YAML file (~/.config/gitlab-api.yaml), e.g.:
       base_url: https://gitlab.example.com
       token: glpat-xxxx
       timeout_s: 20
  4) token file ~/.config/gitlab-token
  5) defaults
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

_logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gitlab.com"
DEFAULT_API_PREFIX = "/api/v4"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "gitlab-api-resources"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "gitlab-api.yaml"
DEFAULT_TOKEN_FILE = Path.home() / ".config" / "gitlab-token"


@dataclass(frozen=True)
class GitLabConfig:
    base_url: str = DEFAULT_BASE_URL
    token: Optional[str] = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    api_prefix: str = DEFAULT_API_PREFIX
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_prefix.strip('/')}"


def get_gitlab_token_from_file(token_file: Optional[Path] = None) -> Optional[str]:
    """Get GitLab token from `~/.config/gitlab-token` (best-effort)."""
    path = token_file or DEFAULT_TOKEN_FILE
    try:
        if path.exists():
            return path.read_text().strip() or None
    except OSError as e:
        _logger.warning("Could not read GitLab token file %s: %s", path, e)
    return None


def _read_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        _logger.warning("Ignoring unreadable GitLab config %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        _logger.warning("Ignoring GitLab config %s: expected a mapping, got %s", path, type(data).__name__)
        return {}
    return data


def load_config(
    path: Optional[Path] = None,
    *,
    token: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_s: Optional[float] = None,
    token_file: Optional[Path] = None,
) -> GitLabConfig:
    file_cfg = _read_yaml_config(Path(path) if path is not None else DEFAULT_CONFIG_FILE)

    resolved_token = (
        token
        or os.environ.get("GITLAB_TOKEN")
        or file_cfg.get("token")
        or get_gitlab_token_from_file(token_file)
    )
    resolved_url = base_url or os.environ.get("GITLAB_URL") or file_cfg.get("base_url") or DEFAULT_BASE_URL

    resolved_timeout: float = DEFAULT_TIMEOUT_S
    for candidate in (timeout_s, os.environ.get("GITLAB_TIMEOUT"), file_cfg.get("timeout_s")):
        if candidate is None or candidate == "":
            continue
        try:
            resolved_timeout = float(candidate)
        except (TypeError, ValueError):
            _logger.warning("Ignoring invalid GitLab timeout %r", candidate)
            continue
        break

    return GitLabConfig(
        base_url=str(resolved_url).rstrip("/"),
        token=str(resolved_token) if resolved_token else None,
        timeout_s=resolved_timeout,
        api_prefix=str(file_cfg.get("api_prefix") or DEFAULT_API_PREFIX),
        user_agent=str(file_cfg.get("user_agent") or DEFAULT_USER_AGENT),
    )
