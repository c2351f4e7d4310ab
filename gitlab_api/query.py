# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Query-string encoding for list options.

Options are dataclasses; each field maps to one query key:

    labels: Optional[List[str]] = query_field("labels", comma=True)

Rules:
  - None means "not set" and is never sent. 0, False and "" are sent as-is.
  - comma=True sequences become one comma-joined value (labels=a,b).
  - Other sequences become repeated `key[]` values (iids[]=1&iids[]=2).
  - Empty sequences are omitted, like None.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .exceptions import RequestConstructionError
from .types import format_iso_date, format_iso_datetime

QUERY_KEY = "query_key"
QUERY_COMMA = "query_comma"

QueryParams = Dict[str, Union[str, List[str]]]


def query_field(key: str, *, comma: bool = False) -> Any:
    """Declare an optional options field serialized under `key`."""
    return dataclasses.field(default=None, metadata={QUERY_KEY: key, QUERY_COMMA: comma})


def _encode_scalar(key: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, datetime):
        return str(format_iso_datetime(value))
    if isinstance(value, date):
        return str(format_iso_date(value))
    raise RequestConstructionError(f"cannot encode query parameter {key!r}: unsupported type {type(value).__name__}")


def _encode_value(key: str, value: Any, *, comma: bool) -> Optional[Union[str, List[str]]]:
    """Encode one value; None means "nothing to send" (empty sequence)."""
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else list(value)
        if not items:
            return None
        encoded = [_encode_scalar(key, v) for v in items]
        if comma:
            return ",".join(encoded)
        return encoded
    return _encode_scalar(key, value)


def encode_query(options: Optional[Any]) -> QueryParams:
    """Encode an options dataclass (or a plain mapping) into query parameters.

    The result is suitable for `requests.Request(params=...)`.
    """
    if options is None:
        return {}

    out: QueryParams = {}
    if isinstance(options, Mapping):
        for k, v in options.items():
            if v is None:
                continue
            encoded = _encode_value(str(k), v, comma=False)
            if encoded is not None:
                out[str(k)] = encoded
        return out

    if not (dataclasses.is_dataclass(options) and not isinstance(options, type)):
        raise RequestConstructionError(f"options must be a dataclass instance or a mapping, got {type(options).__name__}")

    for f in dataclasses.fields(options):
        value = getattr(options, f.name)
        if value is None:
            continue
        key = str(f.metadata.get(QUERY_KEY) or f.name)
        comma = bool(f.metadata.get(QUERY_COMMA, False))
        encoded = _encode_value(key, value, comma=comma)
        if encoded is None:
            continue
        if isinstance(encoded, list):
            out[f"{key}[]"] = encoded
        else:
            out[key] = encoded
    return out


@dataclass
class ListOptions:
    """Pagination parameters shared by every list endpoint."""

    page: Optional[int] = query_field("page")
    per_page: Optional[int] = query_field("per_page")
