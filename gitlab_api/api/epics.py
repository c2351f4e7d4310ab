# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitLab group epics.

Resource:
  GET /api/v4/groups/{id}/epics

Docs: https://docs.gitlab.com/ee/api/epics.html#list-epics-for-a-group

Query parameters (all optional):
  author_id, labels (comma separated), order_by (created_at|updated_at),
  sort (asc|desc), search, state (opened|closed|all), page, per_page
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from ..query import ListOptions, query_field
from ..types import (
    Response,
    format_iso_date,
    format_iso_datetime,
    parse_iso_date,
    parse_iso_datetime,
    stringify,
)
from .base_list import ListResource, ParentID

if TYPE_CHECKING:  # pragma: no cover
    from .. import GitLabAPIClient, RequestOption

GROUP_EPICS_PATH = "groups/{id}/epics"


def _opt_str(v: Any) -> Optional[str]:
    return None if v is None else str(v)


@dataclass(frozen=True)
class EpicAuthor:
    id: int
    username: str = ""
    name: str = ""
    state: str = ""
    web_url: str = ""
    avatar_url: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EpicAuthor":
        return cls(
            id=int(d["id"]),
            username=str(d.get("username") or ""),
            name=str(d.get("name") or ""),
            state=str(d.get("state") or ""),
            web_url=str(d.get("web_url") or ""),
            avatar_url=_opt_str(d.get("avatar_url")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "state": self.state,
            "web_url": self.web_url,
            "avatar_url": self.avatar_url,
        }

    def __str__(self) -> str:
        return stringify(self)


@dataclass(frozen=True)
class Epic:
    """A group epic as returned by the list endpoint.

    Dates that GitLab leaves unset (null) are None here, never a zero date.
    *_fixed / *_from_milestone are the two sources GitLab derives
    start_date / due_date from; *_is_fixed says which one wins.
    """

    id: int
    iid: int
    group_id: int
    title: str = ""
    description: Optional[str] = None
    state: str = ""
    web_url: str = ""
    author: Optional[EpicAuthor] = None
    start_date: Optional[date] = None
    start_date_is_fixed: bool = False
    start_date_fixed: Optional[date] = None
    start_date_from_milestone: Optional[date] = None
    end_date: Optional[date] = None
    due_date: Optional[date] = None
    due_date_is_fixed: bool = False
    due_date_fixed: Optional[date] = None
    due_date_from_milestone: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    labels: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Epic":
        author = d.get("author")
        labels = d.get("labels") or []
        if not isinstance(labels, list):
            raise TypeError(f"epic labels must be a list, got {type(labels).__name__}")
        return cls(
            id=int(d["id"]),
            iid=int(d["iid"]),
            group_id=int(d["group_id"]),
            title=str(d.get("title") or ""),
            description=_opt_str(d.get("description")),
            state=str(d.get("state") or ""),
            web_url=str(d.get("web_url") or ""),
            author=EpicAuthor.from_dict(author) if isinstance(author, dict) else None,
            start_date=parse_iso_date(d.get("start_date")),
            start_date_is_fixed=bool(d.get("start_date_is_fixed")),
            start_date_fixed=parse_iso_date(d.get("start_date_fixed")),
            start_date_from_milestone=parse_iso_date(d.get("start_date_from_milestone")),
            end_date=parse_iso_date(d.get("end_date")),
            due_date=parse_iso_date(d.get("due_date")),
            due_date_is_fixed=bool(d.get("due_date_is_fixed")),
            due_date_fixed=parse_iso_date(d.get("due_date_fixed")),
            due_date_from_milestone=parse_iso_date(d.get("due_date_from_milestone")),
            created_at=parse_iso_datetime(d.get("created_at")),
            updated_at=parse_iso_datetime(d.get("updated_at")),
            labels=tuple(str(x) for x in labels),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict using GitLab's field names; unset dates stay null."""
        return {
            "id": self.id,
            "iid": self.iid,
            "group_id": self.group_id,
            "title": self.title,
            "description": self.description,
            "state": self.state,
            "web_url": self.web_url,
            "author": self.author.to_dict() if self.author is not None else None,
            "start_date": format_iso_date(self.start_date),
            "start_date_is_fixed": self.start_date_is_fixed,
            "start_date_fixed": format_iso_date(self.start_date_fixed),
            "start_date_from_milestone": format_iso_date(self.start_date_from_milestone),
            "end_date": format_iso_date(self.end_date),
            "due_date": format_iso_date(self.due_date),
            "due_date_is_fixed": self.due_date_is_fixed,
            "due_date_fixed": format_iso_date(self.due_date_fixed),
            "due_date_from_milestone": format_iso_date(self.due_date_from_milestone),
            "created_at": format_iso_datetime(self.created_at),
            "updated_at": format_iso_datetime(self.updated_at),
            "labels": list(self.labels),
        }

    def __str__(self) -> str:
        return stringify(self)


@dataclass
class ListGroupEpicsOptions(ListOptions):
    """Filters for list_group_epics(); None means "not applied".

    author_id=0 is sent as author_id=0 (it is not the same as unset).
    """

    author_id: Optional[int] = query_field("author_id")
    labels: Optional[List[str]] = query_field("labels", comma=True)
    order_by: Optional[str] = query_field("order_by")
    sort: Optional[str] = query_field("sort")
    search: Optional[str] = query_field("search")
    state: Optional[str] = query_field("state")


class EpicsService:
    """Epic-related methods of the GitLab API."""

    def __init__(self, api: "GitLabAPIClient"):
        self.api = api
        self._group_epics: ListResource[Epic] = ListResource(api, GROUP_EPICS_PATH, Epic.from_dict, label="group_epics")

    def group_epics_path(self, gid: ParentID) -> str:
        return self._group_epics.resource_path(gid)

    def list_group_epics(
        self,
        gid: ParentID,
        opt: Optional[ListGroupEpicsOptions] = None,
        options: Iterable["RequestOption"] = (),
    ) -> Tuple[List[Epic], Response]:
        """List one page of a group's epics, in server order.

        `gid` is the numeric group ID or its full path ("parent/child").
        """
        return self._group_epics.list(gid, opt, options)
