"""Pytest configuration and shared fixtures."""

import pytest

from tree_of_growth.core.config import settings


@pytest.fixture(autouse=True)
def isolated_storage_paths(tmp_path, monkeypatch):
    """Keep every test away from the real data directory."""
    monkeypatch.setattr(settings, "sqlite_db_path", str(tmp_path / "tree_of_growth.db"))
    monkeypatch.setattr(settings, "user_assets_dir", str(tmp_path / "user_assets"))
