# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitLab API error types.

Kept in their own module so resource accessors can catch specific error
classes (e.g. 404 Not Found) without creating import cycles.

Hierarchy:
  GitLabError
    InvalidIdentifierError      parent ID could not become a path segment
    RequestConstructionError    transport could not build the request
    GitLabAPIError              anything that went wrong on the wire
      GitLabAuthError           401
      GitLabForbiddenError      403
      GitLabNotFoundError       404
      GitLabRequestError        network failure / other non-2xx
      GitLabDecodeError         2xx body that did not decode
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .types import Response


class GitLabError(Exception):
    pass


class InvalidIdentifierError(GitLabError, ValueError):
    def __init__(self, value: object, reason: str = ""):
        msg = f"invalid ID type {value!r}, the ID must be an int or a string"
        if reason:
            msg = f"invalid ID {value!r}: {reason}"
        super().__init__(msg)
        self.value = value


class RequestConstructionError(GitLabError):
    pass


class GitLabAPIError(GitLabError):
    def __init__(
        self,
        *,
        status_code: int,
        endpoint: str,
        message: str,
        response: Optional["Response"] = None,
    ):
        super().__init__(message)
        self.status_code = int(status_code)
        self.endpoint = str(endpoint or "")
        self.response = response


class GitLabAuthError(GitLabAPIError):
    pass


class GitLabForbiddenError(GitLabAPIError):
    pass


class GitLabNotFoundError(GitLabAPIError):
    pass


class GitLabRequestError(GitLabAPIError):
    pass


class GitLabDecodeError(GitLabAPIError):
    pass
