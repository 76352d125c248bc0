from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError

BACKEND = Path(__file__).resolve().parents[1]


@pytest.fixture
def migrated_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(BACKEND / "alembic"))
    command.upgrade(cfg, "head")
    return url


def test_server_defaults_work_on_sqlite(migrated_url):
    engine = create_engine(migrated_url)
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO hero_content (headline) VALUES ('Serve with joy')"))
        conn.execute(text("INSERT INTO events (title, date) VALUES ('Altar Servers Day', '2024-06-01')"))
        assert conn.execute(text("SELECT updated_at FROM hero_content")).scalar() is not None
        assert conn.execute(text("SELECT created_at FROM events")).scalar() is not None
    engine.dispose()


def test_one_member_per_application(migrated_url):
    engine = create_engine(migrated_url)
    insert = text(
        "INSERT INTO members (full_name, source_kind, source_application_id) VALUES (:name, 'adult', 1)"
    )
    with engine.begin() as conn:
        conn.execute(insert, {"name": "Ana Lim"})
    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(insert, {"name": "Ana Lim"})
    engine.dispose()
