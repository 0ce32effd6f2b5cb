"""Tests for timestamper.settings."""

from pathlib import Path

import pytest
import yaml

from timestamper.settings import (
    DEFAULT_SETTINGS,
    SETTING_FIELDS,
    MemorySettingsStore,
    StampSettings,
    YamlSettingsStore,
    apply_settings,
    load_settings,
    merge_settings,
    persist_settings,
    resolve_field,
    update_settings,
)


class TestStampSettingsModel:
    def test_defaults(self) -> None:
        s = StampSettings()
        assert s.time_stamp_format == "hh:mm:ss"
        assert s.date_stamp_format == "YYYY-MM-DD"
        assert s.last_format == ""
        assert s.new_line is False
        assert s.make_bold is False
        assert s.extra_string == ""

    def test_accepts_persisted_keys(self) -> None:
        s = StampSettings.model_validate({"makeBold": True, "extraString": "!"})
        assert s.make_bold is True
        assert s.extra_string == "!"

    def test_record_uses_persisted_keys(self) -> None:
        assert StampSettings().to_record() == {
            "timeStampFormat": "hh:mm:ss",
            "dateStampFormat": "YYYY-MM-DD",
            "lastFormat": "",
            "newLine": False,
            "makeBold": False,
            "extraString": "",
        }

    def test_every_field_has_panel_metadata(self) -> None:
        assert {entry.field for entry in SETTING_FIELDS} == set(StampSettings.model_fields)


class TestMerge:
    def test_persisted_field_overrides_default(self) -> None:
        merged = merge_settings({"dateStampFormat": "DD.MM.YYYY"})
        expected = {**DEFAULT_SETTINGS.model_dump(), "date_stamp_format": "DD.MM.YYYY"}
        assert merged.model_dump() == expected

    def test_empty_record_gives_defaults(self) -> None:
        assert merge_settings({}).model_dump() == DEFAULT_SETTINGS.model_dump()

    def test_unknown_keys_ignored(self) -> None:
        merged = merge_settings({"somethingElse": 1, "newLine": True})
        assert merged.new_line is True

    def test_field_names_overlay_defaults(self) -> None:
        merged = merge_settings({"make_bold": True, "date_stamp_format": "DD.MM"})
        assert merged.make_bold is True
        assert merged.date_stamp_format == "DD.MM"
        assert merged.time_stamp_format == "hh:mm:ss"

    def test_field_names_load_from_yaml(self, settings_file: Path) -> None:
        settings_file.write_text("new_line: true\nextraString: ' !'\n", encoding="utf-8")
        settings = load_settings(YamlSettingsStore(settings_file))
        assert settings.new_line is True
        assert settings.extra_string == " !"

    def test_invalid_pattern_is_accepted(self) -> None:
        merged = merge_settings({"timeStampFormat": "not a %real% format"})
        assert merged.time_stamp_format == "not a %real% format"

    def test_wrong_type_raises(self) -> None:
        with pytest.raises(ValueError):
            merge_settings({"makeBold": "definitely"})


class TestYamlSettingsStore:
    def test_missing_file_loads_empty(self, settings_file: Path) -> None:
        assert YamlSettingsStore(settings_file).load() == {}

    def test_empty_file_loads_empty(self, settings_file: Path) -> None:
        settings_file.write_text("", encoding="utf-8")
        assert YamlSettingsStore(settings_file).load() == {}

    def test_non_mapping_raises(self, settings_file: Path) -> None:
        settings_file.write_text("just a string", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            YamlSettingsStore(settings_file).load()

    def test_save_writes_all_keys(self, settings_file: Path) -> None:
        YamlSettingsStore(settings_file).save(StampSettings(make_bold=True))
        data = yaml.safe_load(settings_file.read_text(encoding="utf-8"))
        assert data["makeBold"] is True
        assert data["timeStampFormat"] == "hh:mm:ss"
        assert len(data) == 6

    def test_save_then_load(self, settings_file: Path) -> None:
        store = YamlSettingsStore(settings_file)
        store.save(StampSettings(time_stamp_format="HH:mm", extra_string=": "))
        expected = StampSettings(time_stamp_format="HH:mm", extra_string=": ")
        assert load_settings(store).model_dump() == expected.model_dump()

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "config" / "timestamper.yaml"
        YamlSettingsStore(path).save(StampSettings())
        assert path.exists()


class TestLoadSettings:
    def test_partial_persisted_record(self, settings_file: Path) -> None:
        settings_file.write_text("dateStampFormat: DD.MM.YYYY\n", encoding="utf-8")
        settings = load_settings(YamlSettingsStore(settings_file))
        assert settings.date_stamp_format == "DD.MM.YYYY"
        assert settings.time_stamp_format == "hh:mm:ss"
        assert settings.new_line is False

    def test_memory_store(self) -> None:
        store = MemorySettingsStore({"lastFormat": "YYYY"})
        assert load_settings(store).last_format == "YYYY"


class TestUpdateSettings:
    def test_returns_updated_and_persists(self) -> None:
        store = MemorySettingsStore()
        updated = update_settings(store, StampSettings(), make_bold=True)
        assert updated.make_bold is True
        assert store.saves == 1
        assert store.data["makeBold"] is True

    def test_does_not_mutate_original(self) -> None:
        original = StampSettings()
        update_settings(MemorySettingsStore(), original, last_format="YYYY")
        assert original.last_format == ""

    def test_coerces_boolean_strings(self) -> None:
        updated = update_settings(MemorySettingsStore(), StampSettings(), new_line="yes")
        assert updated.new_line is True

    def test_unknown_field_raises(self) -> None:
        store = MemorySettingsStore()
        with pytest.raises(KeyError):
            update_settings(store, StampSettings(), colour="red")
        assert store.saves == 0


class TestResolveField:
    def test_by_alias(self) -> None:
        assert resolve_field("makeBold").field == "make_bold"

    def test_by_field_name(self) -> None:
        assert resolve_field("extra_string").alias == "extraString"

    def test_unknown(self) -> None:
        with pytest.raises(KeyError):
            resolve_field("fontSize")


class TestApplyAndPersist:
    def test_apply_does_not_persist(self) -> None:
        updated = apply_settings(StampSettings(), last_format="YYYY")
        assert updated.last_format == "YYYY"

    def test_apply_unknown_field_raises(self) -> None:
        with pytest.raises(KeyError):
            apply_settings(StampSettings(), colour="red")

    def test_persist_saves_given_value(self) -> None:
        store = MemorySettingsStore()
        persist_settings(store, StampSettings(last_format="YYYY"))
        assert store.saves == 1
        assert store.data["lastFormat"] == "YYYY"
