"""Shared test fixtures."""

import pytest

import database as db


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the database module at a fresh file under tmp_path."""
    path = tmp_path / "DB.db"
    monkeypatch.setattr(db, "DB_FILE", path)
    db.init_db()
    return path
