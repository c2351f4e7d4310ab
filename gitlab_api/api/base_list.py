# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Generic "list a collection under a parent" accessor.

Every GitLab list endpoint has the same shape:
  GET /api/v4/<parent-kind>/{id}/<collection>?<filters>&page=N&per_page=M
so a resource binding only supplies the path template and a record decoder:

    _EPICS = ListResource(client, "groups/{id}/epics", Epic.from_dict, label="group_epics")
    epics, resp = _EPICS.list("my-group", ListGroupEpicsOptions(state="opened"))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

from ..ids import NamedID, NumericID, path_segment
from ..types import Response

if TYPE_CHECKING:  # pragma: no cover
    from .. import GitLabAPIClient, RequestOption

_logger = logging.getLogger(__name__)

T = TypeVar("T")

ParentID = Union[int, str, NumericID, NamedID]


def decode_list(decode_one: Callable[[Dict[str, Any]], T]) -> Callable[[Any], List[T]]:
    """Lift a single-record decoder to a JSON-array decoder (order preserved)."""

    def _decode(data: Any) -> List[T]:
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        out: List[T] = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise TypeError(f"expected a JSON object at index {i}, got {type(item).__name__}")
            out.append(decode_one(item))
        return out

    return _decode


class ListResource(Generic[T]):
    """One list endpoint bound to a client.

    Holds no mutable state of its own, so one instance may be shared across threads
    as long as the client's session is.
    """

    def __init__(
        self,
        api: "GitLabAPIClient",
        path_template: str,
        decode_one: Callable[[Dict[str, Any]], T],
        *,
        label: Optional[str] = None,
    ):
        if "{id}" not in path_template:
            raise ValueError(f"path template must contain '{{id}}': {path_template!r}")
        self.api = api
        self.path_template = path_template
        self.label = label or path_template.replace("{id}", "_").replace("/", ".")
        self._decode = decode_list(decode_one)

    def resource_path(self, parent: ParentID) -> str:
        return self.path_template.format(id=path_segment(parent))

    def list(
        self,
        parent: ParentID,
        opt: Optional[Any] = None,
        options: Iterable["RequestOption"] = (),
    ) -> Tuple[List[T], Response]:
        """Fetch one page of the collection; errors propagate unchanged."""
        path = self.resource_path(parent)
        req = self.api.new_request("GET", path, opt, options)
        items, resp = self.api.do(req, self._decode, label=self.label)
        _logger.debug("%s: %d item(s), page=%s next=%s", path, len(items), resp.current_page, resp.next_page)
        return items, resp
