"""
Tests for the database initialisation script.
"""

import init_record_db
from nr_permitting_api.app.core.db import MIGRATIONS


def test_main_migrates_database(tmp_path, capsys):
    db_path = tmp_path / "cli.db"

    assert init_record_db.main(["--db", str(db_path)]) == 0

    out = capsys.readouterr().out
    assert db_path.exists()
    assert f"schema version {MIGRATIONS[-1][0]}" in out


def test_main_reports_failure(tmp_path, capsys):
    # A directory cannot be opened as a database file.
    assert init_record_db.main(["--db", str(tmp_path)]) == 1
    assert "[!] Failed to initialise" in capsys.readouterr().err
