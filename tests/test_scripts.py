from __future__ import annotations

import pytest

from afritable.config import settings
from afritable.scripts import (
    cleanup_restaurants,
    create_tables,
    enrich_photos,
    photo_status,
    restore_restaurants,
    seed_availability,
    seed_sample_data,
)


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(settings, "cleanup_archive_dir", tmp_path / "archive")
    assert create_tables.main() == 0
    return tmp_path


def test_sample_data_passes_cleanup_policy(database, capsys):
    assert seed_sample_data.main() == 0
    assert "Inserted 5" in capsys.readouterr().out

    assert seed_sample_data.main() == 0
    assert "5 already present" in capsys.readouterr().out

    assert cleanup_restaurants.main(["--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "DRY RUN" in out
    assert "Scanned : 5" in out
    assert "Would remove : 0" in out


def test_seed_availability_cli(database, capsys):
    seed_sample_data.main()
    capsys.readouterr()

    assert seed_availability.main(["--days", "2", "--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "Restaurants : 5" in out
    assert "Created     : 440" in out


def test_seed_availability_rejects_bad_date(database):
    with pytest.raises(SystemExit):
        seed_availability.main(["--from-date", "19/10/2026"])


def test_photo_status_cli(database, capsys):
    seed_sample_data.main()
    capsys.readouterr()

    assert photo_status.main() == 0
    out = capsys.readouterr().out
    assert "Total restaurants : 5" in out
    assert "Without photos    : 5" in out


def test_cleanup_with_missing_keyword_file_exits_1(database, tmp_path):
    assert cleanup_restaurants.main(["--keywords", str(tmp_path / "missing.json")]) == 1


def test_restore_with_missing_archive_exits_1(database, tmp_path):
    assert restore_restaurants.main([str(tmp_path / "nope.jsonl")]) == 1


def test_enrich_photos_without_api_key_exits_1(database, monkeypatch):
    monkeypatch.setattr(settings, "google_places_api_key", None)
    assert enrich_photos.main([]) == 1
