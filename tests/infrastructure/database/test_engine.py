"""Tests for database engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from gigledger.infrastructure.database.engine import DB_FILENAME, create_db_engine, init_database


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        engine.dispose()

    def test_busy_timeout_follows_lock_timeout(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}", lock_timeout=1.5)
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA busy_timeout")).scalar() == 1500
        engine.dispose()


class TestInitDatabase:
    def test_creates_data_dir_and_file(self, tmp_path: Path) -> None:
        data_dir = tmp_path / ".gigledger"
        engine = init_database(data_dir)
        assert (data_dir / DB_FILENAME).exists()
        engine.dispose()

    def test_creates_all_tables(self, db_engine: Engine) -> None:
        table_names = set(inspect(db_engine).get_table_names())
        assert {"profiles", "contracts", "jobs", "event_wal"} <= table_names

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path / ".gigledger").dispose()
        engine = init_database(tmp_path / ".gigledger")
        assert "jobs" in inspect(engine).get_table_names()
        engine.dispose()

    def test_explicit_url(self, tmp_path: Path) -> None:
        db_file = tmp_path / "elsewhere.db"
        engine = init_database(tmp_path / "unused", url=f"sqlite:///{db_file}")
        assert db_file.exists()
        assert not (tmp_path / "unused").exists()
        engine.dispose()
