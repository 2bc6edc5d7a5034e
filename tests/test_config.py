"""Environment-driven configuration."""

from __future__ import annotations

import pytest

from teamload.config import BaseConfig, TestConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "TEAMLOAD_DATA_DIR",
        "TEAMLOAD_DATABASE_URL",
        "TEAMLOAD_DEV_MODE",
        "TEAMLOAD_WEEK_COUNT",
        "TEAMLOAD_SYNC_WORKERS",
        "TEAMLOAD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_point_at_sqlite_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("TEAMLOAD_DATA_DIR", str(tmp_path / "data"))

    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'teamload.db'}"
    assert config.WEEK_COUNT == 4
    assert config.SYNC_WORKERS == 1
    assert config.LOG_LEVEL == "INFO"
    assert config.is_sqlite
    assert config.sqlalchemy_engine_options() == {
        "connect_args": {"check_same_thread": False}
    }


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("TEAMLOAD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TEAMLOAD_DATABASE_URL", "postgresql://db/teamload")
    monkeypatch.setenv("TEAMLOAD_DEV_MODE", "off")
    monkeypatch.setenv("TEAMLOAD_WEEK_COUNT", "6")
    monkeypatch.setenv("TEAMLOAD_SYNC_WORKERS", "2")
    monkeypatch.setenv("TEAMLOAD_LOG_LEVEL", "debug")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://db/teamload"
    assert not config.is_sqlite
    assert config.sqlalchemy_engine_options() == {}
    assert config.DEV_MODE is False
    assert config.WEEK_COUNT == 6
    assert config.SYNC_WORKERS == 2
    assert config.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("raw", ["0", "-2", "four"])
def test_week_count_must_be_positive_integer(tmp_path, monkeypatch, raw):
    monkeypatch.setenv("TEAMLOAD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TEAMLOAD_WEEK_COUNT", raw)

    with pytest.raises(ValueError, match="TEAMLOAD_WEEK_COUNT"):
        BaseConfig()


def test_test_config_ignores_env_database(tmp_path, monkeypatch):
    monkeypatch.setenv("TEAMLOAD_DATABASE_URL", "postgresql://db/teamload")
    monkeypatch.setenv("TEAMLOAD_SYNC_WORKERS", "4")

    config = TestConfig(tmp_path)

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL.startswith("sqlite:///")
    assert config.SYNC_WORKERS == 1
    assert config.DEV_MODE is False
