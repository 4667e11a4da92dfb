"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds the variables documented in
.env.example and that the grouped configuration views are built from them.
"""

from pathlib import Path

import pytest

from aimusic_studio.server.core.config import (
    AuthConfig,
    CORSConfig,
    MurekaConfig,
    OpenAIConfig,
    PollingConfig,
    Settings,
    SunoConfig,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


@pytest.fixture
def example_settings(env_example_vars: dict[str, str], monkeypatch) -> Settings:
    for key, value in env_example_vars.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_binding(self, example_settings: Settings, env_example_vars):
        assert example_settings.server_host == env_example_vars["AIMUSIC_SERVER_HOST"]
        assert example_settings.server_port == int(env_example_vars["AIMUSIC_SERVER_PORT"])
        assert example_settings.log_level == env_example_vars["AIMUSIC_LOG_LEVEL"]

    def test_database_url_binding(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://music:pw@db:5432/music")

        assert Settings(_env_file=None).database_url.startswith("postgresql+asyncpg://")

    def test_defaults_without_environment(self, monkeypatch):
        for key in ("SUNO_API_KEY", "MUREKA_API_KEY", "OPENAI_API_KEY", "AUTH_URL", "ADMIN_TOKEN"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.suno.api_key is None
        assert settings.suno.base_url == "https://api.sunoapi.org/api/v1"
        assert settings.mureka.default_model == "mureka-v6"
        assert settings.openai.model == "gpt-4o-mini"
        assert settings.auth.admin_token is None


class TestGroupedConfig:
    """Grouped views read the same variables as the flat fields."""

    def test_provider_groups(self, example_settings: Settings, env_example_vars):
        assert isinstance(example_settings.suno, SunoConfig)
        assert example_settings.suno.api_key == env_example_vars["SUNO_API_KEY"]
        assert example_settings.suno.callback_url == env_example_vars["SUNO_CALLBACK_URL"]
        assert isinstance(example_settings.mureka, MurekaConfig)
        assert example_settings.mureka.health_url == env_example_vars["MUREKA_HEALTH_URL"]
        assert isinstance(example_settings.openai, OpenAIConfig)
        assert example_settings.openai.api_key == env_example_vars["OPENAI_API_KEY"]

    def test_auth_group(self, example_settings: Settings, env_example_vars):
        auth = example_settings.auth
        assert isinstance(auth, AuthConfig)
        assert auth.url == env_example_vars["AUTH_URL"]
        assert auth.admin_token == env_example_vars["ADMIN_TOKEN"]

    def test_polling_group(self, example_settings: Settings):
        polling = example_settings.polling
        assert isinstance(polling, PollingConfig)
        assert polling.poll_interval_seconds == 5.0
        assert polling.processing_timeout_minutes == 15
        assert polling.pending_timeout_minutes == 30

    def test_cors_group(self, example_settings: Settings):
        cors = example_settings.cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["*"]
        assert cors.allow_credentials is True


def test_config_models_accept_aliases():
    assert SunoConfig.model_validate({"SUNO_API_KEY": "k"}).api_key == "k"
    assert PollingConfig.model_validate({"PROVIDER_MAX_POLL_ATTEMPTS": 3}).max_poll_attempts == 3
