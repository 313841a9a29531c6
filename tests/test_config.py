"""Tests for configuration loading."""

import pytest

from config import Config, load_config, parse_listen_address


class TestParseListenAddress:
    """Test host:port parsing for --url."""

    def test_ipv4(self):
        assert parse_listen_address("127.0.0.1:8080") == ("127.0.0.1", 8080)

    def test_hostname(self):
        assert parse_listen_address("localhost:9000") == ("localhost", 9000)

    def test_bracketed_ipv6(self):
        assert parse_listen_address("[::1]:8080") == ("::1", 8080)

    @pytest.mark.parametrize("value", [
        "localhost",
        ":8080",
        "::1:8080",
        "host:99999",
        "host:http",
        "host:",
    ])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_listen_address(value)


class TestLoadConfig:
    """Test environment and override precedence."""

    def test_defaults(self, monkeypatch):
        for name in ["DB_PATH", "HOST", "PORT", "INDEX_FILE", "CODE_BYTES", "REDIS_URL"]:
            monkeypatch.delenv(name, raising=False)

        config = Config()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.code_bytes == 4
        assert config.index_file is None
        assert config.redis_url is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9300")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = load_config()

        assert config.port == 9300
        assert config.log_level == "debug"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("PORT", "9300")
        monkeypatch.setenv("DB_PATH", "/env/links.db")

        config = load_config(db_path="/cli/links.db", port=7000, host=None)

        assert config.db_path == "/cli/links.db"
        assert config.port == 7000

    def test_none_overrides_fall_through(self, monkeypatch):
        monkeypatch.setenv("HOST", "0.0.0.0")

        config = load_config(host=None, index_file=None)

        assert config.host == "0.0.0.0"
