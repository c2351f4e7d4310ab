# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared pytest fixtures: a GitLabAPIClient wired to a canned-response session."""

from __future__ import annotations

import pytest

from gitlab_api import GitLabAPIClient, GitLabConfig
from gitlab_test_support import BASE_URL, FakeSession


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(fake_session: FakeSession) -> GitLabAPIClient:
    cfg = GitLabConfig(base_url=BASE_URL, token="glpat-test", timeout_s=5.0)
    return GitLabAPIClient(config=cfg, session=fake_session)
