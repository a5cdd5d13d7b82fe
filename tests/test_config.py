"""Tests for configuration loading."""

import pytest

from dogwalk.config import Config, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove DOGWALK_ variables from the environment."""
    for key in [
        "DOGWALK_REMOTE_URL",
        "DOGWALK_REMOTE_API_KEY",
        "DOGWALK_REMOTE_TABLE",
        "DOGWALK_REMOTE_TIMEOUT",
        "DOGWALK_STORAGE_DB_PATH",
        "DOGWALK_USER_DEFAULT_NAME",
    ]:
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()

        assert config == Config()
        assert config.remote.url == ""
        assert config.remote.table == "walk_logs"
        assert config.user.default_name == "User"

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            """
remote:
  url: https://project.supabase.co
  api_key: anon-key
  timeout: 5
storage:
  db_path: /tmp/walks.db
user:
  default_name: Jake
"""
        )

        config = load_config(path)

        assert config.remote.url == "https://project.supabase.co"
        assert config.remote.api_key == "anon-key"
        assert config.remote.table == "walk_logs"
        assert config.remote.timeout == 5.0
        assert config.storage.db_path == "/tmp/walks.db"
        assert config.user.default_name == "Jake"


class TestEnvOverrides:
    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("remote:\n  url: https://from-file\n")
        monkeypatch.setenv("DOGWALK_REMOTE_URL", "https://from-env")
        monkeypatch.setenv("DOGWALK_REMOTE_API_KEY", "env-key")
        monkeypatch.setenv("DOGWALK_REMOTE_TIMEOUT", "2.5")

        config = load_config(path)

        assert config.remote.url == "https://from-env"
        assert config.remote.api_key == "env-key"
        assert config.remote.timeout == 2.5

    def test_env_without_file(self, monkeypatch):
        monkeypatch.setenv("DOGWALK_STORAGE_DB_PATH", "/tmp/other.db")
        monkeypatch.setenv("DOGWALK_USER_DEFAULT_NAME", "Riley")
        monkeypatch.setenv("DOGWALK_REMOTE_TABLE", "walks")

        config = load_config()

        assert config.storage.db_path == "/tmp/other.db"
        assert config.user.default_name == "Riley"
        assert config.remote.table == "walks"
