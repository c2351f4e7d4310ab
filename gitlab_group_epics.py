#!/usr/bin/env python3
# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
List the epics of a GitLab group (one page at a time).

Auth:
  - Pass --token, export GITLAB_TOKEN, put `token:` in ~/.config/gitlab-api.yaml,
    or write it to ~/.config/gitlab-token

Examples:
  # Open epics of a group, by path
  python3 gitlab_group_epics.py my-org/my-group --state opened

  # Epics labeled both "backend" and "p1", second page, as JSON
  python3 gitlab_group_epics.py 1234 --label backend --label p1 --page 2 --format json
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from typing import Optional, Sequence, Union

from gitlab_api import Epic, GitLabAPIClient, GitLabError, ListGroupEpicsOptions, Response

_logger = logging.getLogger(__name__)

CSV_FIELDS = ["id", "iid", "state", "title", "author", "labels", "start_date", "due_date", "web_url"]


def _group_arg(raw: str) -> Union[int, str]:
    # Numeric IDs go out as-is; anything else is a namespace path.
    return int(raw) if raw.isdigit() else raw


def build_options(args: argparse.Namespace) -> ListGroupEpicsOptions:
    return ListGroupEpicsOptions(
        page=args.page,
        per_page=args.per_page,
        author_id=args.author_id,
        labels=list(args.label) if args.label else None,
        order_by=args.order_by,
        sort=args.sort,
        search=args.search,
        state=args.state,
    )


def _epic_row(e: Epic) -> dict:
    return {
        "id": e.id,
        "iid": e.iid,
        "state": e.state,
        "title": e.title,
        "author": e.author.username if e.author else "",
        "labels": ",".join(e.labels),
        "start_date": e.start_date.isoformat() if e.start_date else "",
        "due_date": e.due_date.isoformat() if e.due_date else "",
        "web_url": e.web_url,
    }


def _page_summary(resp: Response, count: int) -> str:
    total = "?" if resp.total_items is None else str(resp.total_items)
    pages = "?" if resp.total_pages is None else str(resp.total_pages)
    s = f"{count} epic(s) on page {resp.current_page or 1}/{pages} (total {total})"
    if resp.next_page is not None:
        s += f"; next page: {resp.next_page}"
    return s


def _print_table(epics: Sequence[Epic]) -> None:
    cols = [
        ("iid", 6),
        ("state", 8),
        ("author", 16),
        ("due_date", 10),
        ("labels", 24),
        ("title", 50),
    ]
    header = "  ".join([name.ljust(width) for name, width in cols])
    print(header)
    print("-" * len(header))
    for e in epics:
        vals = {k: str(v) for k, v in _epic_row(e).items()}
        print("  ".join([vals[name][:width].ljust(width) for name, width in cols]).rstrip())


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="List epics of a GitLab group.")
    ap.add_argument("group", help='Group numeric ID or full path, e.g. "my-org/my-group"')
    ap.add_argument("--state", choices=["opened", "closed", "all"], default=None)
    ap.add_argument("--label", action="append", default=None, help="Label filter (repeatable; all must match)")
    ap.add_argument("--author-id", type=int, default=None)
    ap.add_argument("--search", default=None, help="Search title and description")
    ap.add_argument("--order-by", choices=["created_at", "updated_at"], default=None)
    ap.add_argument("--sort", choices=["asc", "desc"], default=None)
    ap.add_argument("--page", type=int, default=None)
    ap.add_argument("--per-page", type=int, default=None)
    ap.add_argument("--base-url", default=None, help="GitLab base URL (else GITLAB_URL, config file, or gitlab.com)")
    ap.add_argument("--token", default=None, help="GitLab token (else GITLAB_TOKEN or ~/.config/gitlab-token)")
    ap.add_argument("--format", choices=["table", "json", "csv"], default="table", help="Output format")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = GitLabAPIClient(token=args.token, base_url=args.base_url)
    try:
        epics, resp = client.epics.list_group_epics(_group_arg(args.group), build_options(args))
    except GitLabError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    _logger.debug("REST stats: %s", client.get_rest_call_stats())

    if args.format == "json":
        print(json.dumps([e.to_dict() for e in epics], indent=2))
        return 0

    if args.format == "csv":
        w = csv.DictWriter(sys.stdout, fieldnames=CSV_FIELDS)
        w.writeheader()
        for e in epics:
            w.writerow(_epic_row(e))
        return 0

    _print_table(epics)
    print()
    print(_page_summary(resp, len(epics)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
