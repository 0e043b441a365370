"""Tests for JSON document I/O primitives.

Covers: round-trip read/write, missing and malformed documents, atomic
replacement, auto-creation of parent directories.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from habitquest.core.errors import DeserializationError, PersistenceError
from habitquest.core.store import load_document, save_document
from habitquest.core.types import ActivityData, NotificationConfig

from conftest import local


class TestDocumentRoundTrip:
    def test_config_round_trip(self, tmp_path: Path) -> None:
        cfg = NotificationConfig(
            enabled=False,
            reminder_start_hour=7,
            reminder_end_hour=21,
            max_reminders_per_day=5,
            sound_enabled=True,
            streak_protection_hours=[9, 13, 19],
        )
        path = save_document(cfg, tmp_path / "notification_config.json")
        assert load_document(NotificationConfig, path) == cfg

    def test_activity_round_trip(self, tmp_path: Path) -> None:
        data = ActivityData(
            last_activity=local(2026, 3, 10, 9, 30),
            daily_sessions=[local(2026, 3, 10, 8), local(2026, 3, 10, 9, 30)],
            habit_completions={
                "morning-run": local(2026, 3, 9, 7),
                "read 20 pages": local(2026, 3, 10, 6, 45),
            },
            notifications_sent_today=1,
            last_notification_date=local(2026, 3, 10, 10),
        )
        path = save_document(data, tmp_path / "activity_data.json")
        loaded = load_document(ActivityData, path)
        assert loaded == data
        assert loaded.habit_completions["read 20 pages"] == local(2026, 3, 10, 6, 45)

    def test_pretty_printed_snake_case(self, tmp_path: Path) -> None:
        path = save_document(NotificationConfig(), tmp_path / "cfg.json")
        text = path.read_text("utf-8")
        assert text.startswith("{\n  ")
        payload = json.loads(text)
        assert "reminder_start_hour" in payload
        assert "max_reminders_per_day" in payload

    def test_returns_written_path(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        assert save_document(NotificationConfig(), target) == target


class TestSaveDocument:
    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        nested = tmp_path / "deep" / "nested" / "cfg.json"
        save_document(NotificationConfig(), nested)
        assert nested.exists()

    def test_overwrites_whole_document(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.json"
        save_document(NotificationConfig(max_reminders_per_day=9), path)
        save_document(NotificationConfig(max_reminders_per_day=1), path)
        assert load_document(NotificationConfig, path).max_reminders_per_day == 1

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        save_document(NotificationConfig(), tmp_path / "cfg.json")
        save_document(NotificationConfig(), tmp_path / "cfg.json")
        assert [p.name for p in tmp_path.iterdir()] == ["cfg.json"]

    def test_unwritable_parent_raises_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", "utf-8")
        with pytest.raises(PersistenceError):
            save_document(NotificationConfig(), blocker / "cfg.json")


class TestLoadDocument:
    def test_missing_returns_none(self, tmp_path: Path) -> None:
        assert load_document(NotificationConfig, tmp_path / "absent.json") is None

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.json"
        path.write_text("NOT VALID JSON", "utf-8")
        with pytest.raises(DeserializationError):
            load_document(NotificationConfig, path)

    def test_invalid_utf8_raises_deserialization_error(self, tmp_path: Path) -> None:
        path = tmp_path / "activity_data.json"
        path.write_bytes(b'{"notifications_sent_today": 0, "x": "\xff\xfe"}')
        with pytest.raises(DeserializationError, match="not UTF-8") as excinfo:
            load_document(ActivityData, path)
        assert excinfo.value.path == path

    def test_schema_violation_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.json"
        path.write_text(
            json.dumps({"reminder_start_hour": 23, "reminder_end_hour": 1}), "utf-8",
        )
        with pytest.raises(DeserializationError, match="NotificationConfig"):
            load_document(NotificationConfig, path)

    def test_deserialization_error_is_persistence_error(self, tmp_path: Path) -> None:
        path = tmp_path / "activity.json"
        path.write_text("[]", "utf-8")
        with pytest.raises(PersistenceError) as excinfo:
            load_document(ActivityData, path)
        assert excinfo.value.path == path

    def test_directory_in_place_of_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.json"
        path.mkdir()
        with pytest.raises(PersistenceError):
            load_document(NotificationConfig, path)

    def test_partial_document_uses_field_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"enabled": False}), "utf-8")
        cfg = load_document(NotificationConfig, path)
        assert cfg.enabled is False
        assert cfg.max_reminders_per_day == 2
