# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Group / project identifiers.

GitLab accepts either the numeric ID or the URL-encoded namespace path
wherever an endpoint takes `:id`:
  GET /api/v4/groups/42/epics
  GET /api/v4/groups/my-group%2Fsub-group/epics
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from urllib.parse import quote

from .exceptions import InvalidIdentifierError


@dataclass(frozen=True)
class NumericID:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class NamedID:
    """Namespace path, e.g. "dl/ai-dynamo"."""

    value: str

    def __str__(self) -> str:
        return self.value


ResourceID = Union[NumericID, NamedID]


def parse_id(value: Union[int, str, NumericID, NamedID]) -> ResourceID:
    """Resolve a caller-supplied identifier to one of the two ID shapes.

    Digit-only strings are kept as NamedID; GitLab resolves them the same way.
    """
    if isinstance(value, NumericID):
        value = value.value
    elif isinstance(value, NamedID):
        value = value.value

    # bool is an int subclass; True is not a group ID.
    if isinstance(value, bool):
        raise InvalidIdentifierError(value)
    if isinstance(value, int):
        if value <= 0:
            raise InvalidIdentifierError(value, "numeric IDs must be positive")
        return NumericID(value)
    if isinstance(value, str):
        if not value.strip():
            raise InvalidIdentifierError(value, "empty namespace path")
        return NamedID(value)
    raise InvalidIdentifierError(value)


def path_segment(value: Union[int, str, NumericID, NamedID]) -> str:
    """Percent-encode an identifier for use as a single URL path segment."""
    return quote(str(parse_id(value)), safe="")
