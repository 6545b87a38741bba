import pytest

from multitrack.config import Settings, env_flag, env_int, load_settings


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})
    assert settings.scrape_enabled is False
    assert settings.port == 5000
    assert settings.host == "0.0.0.0"
    assert settings.nav_timeout_ms == 30000
    assert settings.settle_timeout_ms == 20000
    assert settings.headless is True
    assert settings.log_dir is None
    assert settings.log_level == "INFO"
    assert settings.debug is False


def test_values_from_environment():
    settings = Settings.from_env({
        "USE_SCRAPE": "true",
        "PORT": "8080",
        "NAV_TIMEOUT_MS": "15000",
        "HEADLESS": "0",
        "LOG_DIR": "/tmp/multitrack",
        "LOG_LEVEL": "debug",
    })
    assert settings.scrape_enabled is True
    assert settings.port == 8080
    assert settings.nav_timeout_ms == 15000
    assert settings.headless is False
    assert settings.log_dir == "/tmp/multitrack"
    assert settings.log_level == "DEBUG"


def test_env_flag_values():
    for value in ("1", "true", "Yes", " ON "):
        assert env_flag("X", environ={"X": value}) is True
    for value in ("0", "false", "no", "nope"):
        assert env_flag("X", default=True, environ={"X": value}) is False
    assert env_flag("X", default=True, environ={"X": "  "}) is True


def test_env_int_bad_value_uses_default():
    assert env_int("PORT", 5000, environ={"PORT": "abc"}) == 5000
    assert env_int("PORT", 5000, environ={}) == 5000


ENV_KEYS = ("USE_SCRAPE", "PORT", "HOST", "NAV_TIMEOUT_MS", "SETTLE_TIMEOUT_MS",
            "HEADLESS", "LOG_DIR", "LOG_LEVEL", "DEBUG")


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch also removes whatever load_dotenv adds
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_load_settings_reads_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("USE_SCRAPE=1\nPORT=8181\n")

    settings = load_settings(env_file)

    assert settings.scrape_enabled is True
    assert settings.port == 8181


def test_live_environment_wins_over_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=8181\n")
    clean_env.setenv("PORT", "9090")

    assert load_settings(env_file).port == 9090


def test_load_settings_without_env_file(clean_env, tmp_path):
    settings = load_settings(tmp_path / "missing.env")
    assert settings.port == 5000
    assert settings.scrape_enabled is False
