"""Tests for loading and reloading the SLA settings file."""

from datetime import date, time

import pytest
from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from helpdesk_sla.core.exceptions import ConfigurationException
from helpdesk_sla.sla.domain import DEFAULT_SLA_SETTINGS, MONDAY_TO_FRIDAY, Weekday
from helpdesk_sla.sla.infrastructure import (
    SettingsFileHandler,
    SLASettingsManager,
    load_settings_file,
)

NATIVE_YAML = """
priorities:
  urgent:
    response_time_hours: 2
    resolution_time_hours: 4
  low:
    response_time_hours: 24
    resolution_time_hours: 72
    enabled: false
business_hours:
  start_time: "08:00"
  end_time: "16:00"
  working_weekdays: [mon, tue, wed, thu, fri, sat]
  timezone: Europe/Berlin
  holidays:
    - id: christmas
      name: Christmas Day
      date: 2025-12-25
      is_recurring: true
"""

ADMIN_YAML = """
urgent:
  responseTimeHours: 1
  resolutionTimeHours: 4
  businessHoursOnly: false
medium:
  responseTimeHours: 8
  resolutionTimeHours: 24
businessHours:
  start: "09:00"
  end: "17:00"
  days: [1, 2, 3, 4, 5]
  timezone: America/Chicago
  holidays:
    - id: company-event
      name: Company Event
      date: "2025-07-15"
      isRecurring: false
"""


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "sla_settings.yaml"
    path.write_text(NATIVE_YAML, encoding="utf-8")
    return path


class TestLoadSettingsFile:

    def test_native_shape(self, settings_file):
        settings = load_settings_file(settings_file)

        assert sorted(settings.priorities) == ["low", "urgent"]
        assert settings.get_priority("low").enabled is False
        assert settings.business_hours.start_time == time(8, 0)
        assert Weekday.SATURDAY in settings.business_hours.working_weekdays
        assert settings.business_hours.timezone == "Europe/Berlin"
        assert settings.business_hours.holidays[0].date == date(2025, 12, 25)

    def test_admin_shape(self, tmp_path):
        path = tmp_path / "sla_settings.yaml"
        path.write_text(ADMIN_YAML, encoding="utf-8")

        settings = load_settings_file(path)

        assert sorted(settings.priorities) == ["medium", "urgent"]
        assert settings.get_priority("urgent").business_hours_only is False
        assert settings.business_hours.working_weekdays == MONDAY_TO_FRIDAY
        assert settings.business_hours.holidays[0].id == "company-event"

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_settings_file(tmp_path / "absent.yaml") is DEFAULT_SLA_SETTINGS

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("priorities: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationException) as exc_info:
            load_settings_file(path)

        assert exc_info.value.details["path"] == str(path)

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- urgent\n- high\n", encoding="utf-8")

        with pytest.raises(ConfigurationException):
            load_settings_file(path)

    def test_validation_failure(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text(
            'business_hours:\n  start_time: "17:00"\n  end_time: "09:00"\n',
            encoding="utf-8"
        )

        with pytest.raises(ConfigurationException):
            load_settings_file(path)

    def test_infinite_hours_rejected(self, tmp_path):
        path = tmp_path / "infinite.yaml"
        path.write_text(
            "priorities:\n  urgent:\n    response_time_hours: .inf\n    resolution_time_hours: 4\n",
            encoding="utf-8"
        )

        with pytest.raises(ConfigurationException):
            load_settings_file(path)

    def test_admin_shape_missing_field(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("urgent:\n  responseTimeHours: 1\n", encoding="utf-8")

        with pytest.raises(ConfigurationException):
            load_settings_file(path)


class TestSLASettingsManager:

    def test_load(self, settings_file):
        manager = SLASettingsManager()

        loaded = manager.load(settings_file)

        assert manager.settings is loaded
        assert manager.get_settings() is loaded

    def test_settings_before_load(self):
        with pytest.raises(RuntimeError):
            SLASettingsManager().get_settings()

    def test_reload_picks_up_changes(self, settings_file):
        manager = SLASettingsManager()
        manager.load(settings_file)

        settings_file.write_text(NATIVE_YAML.replace("response_time_hours: 2", "response_time_hours: 3"))

        assert manager.reload() is True
        assert manager.settings.get_priority("urgent").response_time_hours == 3

    def test_failed_reload_keeps_previous_snapshot(self, settings_file):
        manager = SLASettingsManager()
        previous = manager.load(settings_file)

        settings_file.write_text("priorities: [unclosed\n", encoding="utf-8")

        assert manager.reload() is False
        assert manager.settings is previous

    def test_reload_without_load(self):
        assert SLASettingsManager().reload() is False

    def test_start_watching_requires_load(self):
        with pytest.raises(RuntimeError):
            SLASettingsManager().start_watching()

    def test_missing_file_is_not_watched(self, tmp_path):
        manager = SLASettingsManager()
        manager.load(tmp_path / "absent.yaml")

        manager.start_watching()

        assert manager.is_watching is False
        assert manager.settings is DEFAULT_SLA_SETTINGS

    def test_stop_watching_is_idempotent(self, settings_file):
        manager = SLASettingsManager()
        manager.load(settings_file)
        manager.start_watching()

        manager.stop_watching()
        manager.stop_watching()

        assert manager.is_watching is False


class RecordingManager:
    def __init__(self):
        self.reloads = 0

    def reload(self):
        self.reloads += 1
        return True


class TestSettingsFileHandler:

    @pytest.fixture
    def manager(self):
        return RecordingManager()

    def test_modified_settings_file_reloads(self, manager, settings_file):
        handler = SettingsFileHandler(manager, settings_file)

        handler.on_modified(FileModifiedEvent(str(settings_file)))
        handler.on_created(FileCreatedEvent(str(settings_file)))

        assert manager.reloads == 2

    def test_rename_onto_settings_file_reloads(self, manager, settings_file):
        handler = SettingsFileHandler(manager, settings_file)
        temp_path = settings_file.with_name("sla_settings.yaml.tmp")

        handler.on_moved(FileMovedEvent(str(temp_path), str(settings_file)))

        assert manager.reloads == 1

    def test_other_files_are_ignored(self, manager, settings_file):
        handler = SettingsFileHandler(manager, settings_file)
        other = settings_file.with_name("notes.txt")

        handler.on_modified(FileModifiedEvent(str(other)))
        handler.on_moved(FileMovedEvent(str(settings_file), str(other)))

        assert manager.reloads == 0
