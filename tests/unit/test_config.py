"""
Configuration Tests

Environment loading, defaults, redaction and start-up warnings.
"""

import dataclasses
import os

import pytest

from config import Config


class TestFromEnv:

    def test_defaults(self):
        cfg = Config.from_env(environ={}, env_file=None)

        assert cfg.base_url == ""
        assert cfg.channel_secret == ""
        assert cfg.access_token == ""
        assert cfg.port == 3000
        assert cfg.send_timeout == 10.0
        assert cfg.msgid_prefix == "wamid"
        assert cfg.dispatch_in_background is False

    def test_reads_variables(self):
        cfg = Config.from_env(
            environ={
                "KOMMO_BASE_URL": "https://wamid.kommo.com/",
                "KOMMO_CLIENT_ID": "client",
                "KOMMO_CLIENT_SECRET": "client-secret",
                "KOMMO_REDIRECT_URI": "https://bot.example.com/oauth/callback",
                "CHAT_CHANNEL_SECRET": "channel",
                "KOMMO_ACCESS_TOKEN": "token",
                "PORT": "8080",
                "LOG_LEVEL": "debug",
                "KOMMO_SEND_TIMEOUT": "2.5",
                "KOMMO_MSGID_PREFIX": "bot",
                "KOMMO_DISPATCH_IN_BACKGROUND": "true",
            },
            env_file=None,
        )

        assert cfg.base_url == "https://wamid.kommo.com"
        assert cfg.client_id == "client"
        assert cfg.client_secret == "client-secret"
        assert cfg.redirect_uri == "https://bot.example.com/oauth/callback"
        assert cfg.channel_secret == "channel"
        assert cfg.access_token == "token"
        assert cfg.port == 8080
        assert cfg.log_level == "DEBUG"
        assert cfg.send_timeout == 2.5
        assert cfg.msgid_prefix == "bot"
        assert cfg.dispatch_in_background is True

    def test_env_file(self, tmp_path, monkeypatch):
        # setenv first so teardown removes whatever load_dotenv writes
        monkeypatch.setenv("KOMMO_ACCESS_TOKEN", "placeholder")
        monkeypatch.delenv("KOMMO_ACCESS_TOKEN")
        env_file = tmp_path / ".env"
        env_file.write_text("KOMMO_ACCESS_TOKEN=from-file\n")

        cfg = Config.from_env(env_file=env_file)

        assert cfg.access_token == "from-file"

    def test_explicit_environ_skips_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KOMMO_MSGID_PREFIX", "placeholder")
        monkeypatch.delenv("KOMMO_MSGID_PREFIX")
        env_file = tmp_path / ".env"
        env_file.write_text("KOMMO_MSGID_PREFIX=from-file\n")

        cfg = Config.from_env(environ={}, env_file=env_file)

        assert cfg.msgid_prefix == "wamid"
        assert "KOMMO_MSGID_PREFIX" not in os.environ

    def test_invalid_port(self):
        with pytest.raises(ValueError):
            Config.from_env(environ={"PORT": "http"}, env_file=None)


class TestConfigValue:

    def test_immutable(self):
        cfg = Config(access_token="t")

        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.access_token = "other"  # type: ignore

    def test_info_hides_secrets(self):
        cfg = Config(
            client_secret="client-secret",
            channel_secret="channel-secret",
            access_token="token-value",
        )

        info = cfg.info()

        assert info["client_secret"] is True
        assert info["channel_secret"] is True
        assert info["access_token"] is True
        assert "token-value" not in repr(info)

    def test_warnings_when_unprovisioned(self):
        warnings = Config().warnings()

        assert any("CHAT_CHANNEL_SECRET" in w for w in warnings)
        assert any("KOMMO_ACCESS_TOKEN" in w for w in warnings)

    def test_warning_for_token_without_base_url(self):
        warnings = Config(channel_secret="s", access_token="t").warnings()
        assert warnings == ["KOMMO_BASE_URL not set: outbound replies will fail"]

    def test_no_warnings_when_provisioned(self):
        cfg = Config(base_url="https://x.kommo.com", channel_secret="s", access_token="t")

        assert cfg.warnings() == []
        assert cfg.signature_required
        assert cfg.can_send
