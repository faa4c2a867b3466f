"""Tests for the migration runner helpers."""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

import run_migrations
from run_migrations import (
    MIGRATIONS_DIR,
    apply_migration,
    checksum_of,
    discover_migrations,
    find_migration,
    select_pending,
)


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    (tmp_path / "002_functions.sql").write_text("SELECT 2;")
    (tmp_path / "001_tables.sql").write_text("SELECT 1;")
    (tmp_path / "notes.txt").write_text("ignored")
    return tmp_path


class TestDiscovery:
    def test_sorted_sql_files_only(self, migrations_dir):
        migrations = discover_migrations(migrations_dir)
        assert [m.name for m in migrations] == ["001_tables.sql", "002_functions.sql"]
        assert migrations[0].checksum == checksum_of("SELECT 1;")
        assert migrations[0].sql == "SELECT 1;"

    def test_missing_directory(self, tmp_path):
        assert discover_migrations(tmp_path / "nope") == []

    def test_repository_migrations(self):
        names = [m.name for m in discover_migrations(MIGRATIONS_DIR)]
        assert names == ["001_profiles_and_reveals.sql", "002_ledger_functions.sql"]


class TestSelection:
    def test_select_pending(self, migrations_dir):
        migrations = discover_migrations(migrations_dir)
        applied = {"001_tables.sql": {"checksum": migrations[0].checksum, "applied_at": None}}

        assert [m.name for m in select_pending(migrations, applied)] == ["002_functions.sql"]

    def test_changed_migration_is_not_rerun(self, migrations_dir):
        migrations = discover_migrations(migrations_dir)
        applied = {
            "001_tables.sql": {"checksum": "stale", "applied_at": datetime.now(timezone.utc)},
            "002_functions.sql": {"checksum": migrations[1].checksum, "applied_at": None},
        }
        assert select_pending(migrations, applied) == []

    def test_find_migration(self, migrations_dir):
        migrations = discover_migrations(migrations_dir)
        assert find_migration("002", migrations).name == "002_functions.sql"
        assert find_migration("00", migrations) is None
        assert find_migration("999", migrations) is None


class TestApply:
    def test_runs_and_records(self, migrations_dir):
        migration = discover_migrations(migrations_dir)[0]
        conn = MagicMock()
        cursor = conn.cursor.return_value.__enter__.return_value

        apply_migration(conn, migration)

        assert cursor.execute.call_args_list[0].args == ("SELECT 1;",)
        assert cursor.execute.call_args_list[-1].args[1] == ("001_tables.sql", migration.checksum)
        conn.commit.assert_called_once()

    def test_dry_run_touches_nothing(self, migrations_dir):
        conn = MagicMock()
        apply_migration(conn, discover_migrations(migrations_dir)[0], dry_run=True)
        conn.cursor.assert_not_called()

    def test_failure_rolls_back(self, migrations_dir):
        conn = MagicMock()
        cursor = conn.cursor.return_value.__enter__.return_value
        cursor.execute.side_effect = run_migrations.psycopg2.Error("syntax error")

        with pytest.raises(run_migrations.psycopg2.Error):
            apply_migration(conn, discover_migrations(migrations_dir)[0])

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
