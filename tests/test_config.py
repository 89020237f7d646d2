"""Tests for the config module."""

from pathlib import Path

from sheetrows.config import DEFAULT_SCOPES, Settings, _parse_scopes


class TestParseScopes:
    """Test OAuth scope parsing."""

    def test_parse_scopes_with_value(self, monkeypatch):
        monkeypatch.setenv(
            "GOOGLE_SCOPES",
            "https://www.googleapis.com/auth/spreadsheets, https://www.googleapis.com/auth/drive",
        )
        assert _parse_scopes() == [
            "https://www.googleapis.com/auth/spreadsheets",
            "https://www.googleapis.com/auth/drive",
        ]

    def test_parse_scopes_without_value(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SCOPES", raising=False)
        assert _parse_scopes() == DEFAULT_SCOPES

    def test_parse_scopes_blank_string(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_SCOPES", " , ")
        assert _parse_scopes() == DEFAULT_SCOPES


class TestSettings:
    """Test Settings configuration."""

    def test_settings_defaults(self):
        settings = Settings()

        assert settings.cache_ttl_seconds == 60
        assert settings.cache_backend in ("json", "memory")
        assert isinstance(settings.cache_dir, Path)
        assert isinstance(settings.google_scopes, list)

    def test_settings_explicit_values(self, tmp_path):
        settings = Settings(
            google_credentials_path=tmp_path / "creds.json",
            google_token_path=tmp_path / "token.json",
            google_service_account_path=tmp_path / "sa.json",
            cache_backend="memory",
            cache_dir=tmp_path / "cache",
            cache_ttl_seconds=5,
            use_cache=False,
            default_table_position="B:2",
        )

        assert settings.google_credentials_path == tmp_path / "creds.json"
        assert settings.google_service_account_path == tmp_path / "sa.json"
        assert settings.cache_backend == "memory"
        assert settings.cache_ttl_seconds == 5
        assert settings.use_cache is False
        assert settings.default_table_position == "B:2"

    def test_settings_coerces_types(self):
        settings = Settings(cache_ttl_seconds="30", cache_dir="some/dir")
        assert settings.cache_ttl_seconds == 30
        assert settings.cache_dir == Path("some/dir")
