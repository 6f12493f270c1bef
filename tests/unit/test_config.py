"""Tests for service and client configuration."""

from pathlib import Path

import pytest

from waitlist_api.config import Settings
from waitlist_client.config import ClientConfig


class TestSettings:
    def test_explicit_database_url_wins(self):
        settings = Settings(database_url="postgresql://u:p@db:5432/x", postgres_user="other")
        assert settings.database_url == "postgresql://u:p@db:5432/x"

    def test_assembles_postgres_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(
            _env_file=None,
            postgres_user="coach",
            postgres_password="pw",
            postgres_host="db",
            postgres_db="coachgg",
        )
        assert settings.database_url == "postgresql://coach:pw@db:5432/coachgg"

    def test_defaults_to_sqlite(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///./waitlist.db"

    def test_rate_limit_defaults(self, monkeypatch):
        settings = Settings(_env_file=None)
        assert settings.rate_limit_max == 5
        assert settings.rate_limit_window_seconds == 900
        assert settings.port == 3001

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("ADMIN_PASSWORD", "hunter2")
        settings = Settings(_env_file=None)
        assert settings.port == 8080
        assert settings.admin_password == "hunter2"


class TestClientConfig:
    def test_from_yaml(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
api:
  url: http://localhost:3001/api/
  timeout: 3
local:
  path: /tmp/coachgg-test/waitlist.json
  simulated_latency_seconds: 0
"""
        )

        config = ClientConfig.from_yaml(config_file)

        assert config.api.url == "http://localhost:3001/api"
        assert config.api.timeout == 3
        assert config.local.simulated_latency_seconds == 0

    def test_from_yaml_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ClientConfig.from_yaml(tmp_path / "missing.yaml")

    def test_local_path_expanded(self):
        config = ClientConfig(local={"path": "~/waitlist.json"})
        assert not config.local.path.startswith("~")
