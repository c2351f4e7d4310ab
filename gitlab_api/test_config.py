"""
Pytest tests for gitlab_api/config.py (settings precedence).
"""

import pytest

from gitlab_api.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, GitLabConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in ("GITLAB_TOKEN", "GITLAB_URL", "GITLAB_TIMEOUT"):
        monkeypatch.delenv(k, raising=False)


def test_defaults_when_nothing_configured(tmp_path):
    cfg = load_config(tmp_path / "missing.yaml", token_file=tmp_path / "no-token")
    assert cfg == GitLabConfig()
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.token is None
    assert cfg.timeout_s == DEFAULT_TIMEOUT_S
    assert cfg.api_url == "https://gitlab.com/api/v4"


def test_yaml_file_values(tmp_path):
    path = tmp_path / "gitlab.yaml"
    path.write_text("base_url: https://gitlab.example.com/\ntoken: from-file\ntimeout_s: 30\n")
    cfg = load_config(path, token_file=tmp_path / "no-token")
    assert cfg.base_url == "https://gitlab.example.com"
    assert cfg.token == "from-file"
    assert cfg.timeout_s == 30.0


def test_precedence_args_over_env_over_file(tmp_path, monkeypatch):
    path = tmp_path / "gitlab.yaml"
    path.write_text("base_url: https://file.example.com\ntoken: from-file\n")
    token_file = tmp_path / "gitlab-token"
    token_file.write_text("from-token-file\n")

    monkeypatch.setenv("GITLAB_TOKEN", "from-env")
    monkeypatch.setenv("GITLAB_URL", "https://env.example.com")
    monkeypatch.setenv("GITLAB_TIMEOUT", "7")

    cfg = load_config(path, token_file=token_file)
    assert (cfg.token, cfg.base_url, cfg.timeout_s) == ("from-env", "https://env.example.com", 7.0)

    cfg = load_config(path, token="from-arg", base_url="https://arg.example.com", timeout_s=3, token_file=token_file)
    assert (cfg.token, cfg.base_url, cfg.timeout_s) == ("from-arg", "https://arg.example.com", 3.0)


def test_token_file_is_last_resort(tmp_path):
    token_file = tmp_path / "gitlab-token"
    token_file.write_text("  glpat-abc \n")
    cfg = load_config(tmp_path / "missing.yaml", token_file=token_file)
    assert cfg.token == "glpat-abc"


def test_malformed_yaml_is_ignored(tmp_path, caplog):
    path = tmp_path / "gitlab.yaml"
    path.write_text("base_url: [unterminated\n")
    cfg = load_config(path, token_file=tmp_path / "no-token")
    assert cfg.base_url == DEFAULT_BASE_URL
    assert "Ignoring unreadable GitLab config" in caplog.text


def test_non_mapping_yaml_is_ignored(tmp_path):
    path = tmp_path / "gitlab.yaml"
    path.write_text("- just\n- a list\n")
    assert load_config(path, token_file=tmp_path / "no-token").base_url == DEFAULT_BASE_URL


def test_invalid_timeout_falls_through(tmp_path, monkeypatch):
    path = tmp_path / "gitlab.yaml"
    path.write_text("timeout_s: 12\n")
    monkeypatch.setenv("GITLAB_TIMEOUT", "soon")
    assert load_config(path, token_file=tmp_path / "no-token").timeout_s == 12.0
