"""Tests for configuration loading."""

from tree_of_growth.core.config import Constants, Settings


def test_settings_defaults(monkeypatch) -> None:
    """Test defaults apply when no environment variables are set."""
    for name in ("SQLITE_DB_PATH", "USER_ASSETS_DIR", "LOGFIRE_TOKEN", "ENVIRONMENT", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.sqlite_db_path.endswith("tree_of_growth.db")
    assert settings.logfire_token is None
    assert settings.environment == "development"
    assert settings.port == 8000


def test_settings_read_from_environment(monkeypatch) -> None:
    """Test environment variables override defaults case-insensitively."""
    monkeypatch.setenv("SQLITE_DB_PATH", "/tmp/custom.db")
    monkeypatch.setenv("port", "9100")

    settings = Settings(_env_file=None)

    assert settings.sqlite_db_path == "/tmp/custom.db"
    assert settings.port == 9100


def test_engine_constants() -> None:
    """Test the fixed progression constants."""
    assert (Constants.POINTS_LOW, Constants.POINTS_MEDIUM, Constants.POINTS_HIGH) == (1, 2, 3)
    assert Constants.POINTS_PER_LEVEL == 10
    assert Constants.MAX_VISIBLE_LEAVES == 100
    assert Constants.STAGE_SPROUT_LEVEL < Constants.STAGE_SMALL_TREE_LEVEL < Constants.STAGE_BIG_TREE_LEVEL
    assert Constants.STAGE_BIG_TREE_LEVEL < Constants.STAGE_BLOOMING_TREE_LEVEL
