import logging
import pytest
import toml
from pathlib import Path

from fpr.config.loader import load_and_merge_configs, save_config_to_profile, settings_from_toml
from fpr.config.settings import PrintConfig, SortMethod
from fpr.exceptions import ConfigError
from fpr.logging_setup import configure_logging


class TestLoadConfigs:
    def test_no_files_gives_empty_config(self, tmp_path: Path):
        assert load_and_merge_configs(project_dir=tmp_path) == {}

    def test_project_file_overrides_user_file(self, tmp_path: Path, isolated_user_config: Path):
        isolated_user_config.write_text('separator = "user"\nrecursive = false\n[profiles.u]\nline_numbers = true\n')
        (tmp_path / ".fpr.toml").write_text('separator = "project"\n[profiles.p]\nsort = "name_desc"\n')
        merged = load_and_merge_configs(project_dir=tmp_path)
        assert merged["separator"] == "project"
        assert merged["recursive"] is False
        assert set(merged["profiles"]) == {"u", "p"}

    def test_pyproject_tool_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.fpr]\nseparator = "***"\n')
        assert load_and_merge_configs(project_dir=tmp_path) == {"separator": "***"}

    def test_malformed_toml_is_a_config_error(self, tmp_path: Path):
        (tmp_path / ".fpr.toml").write_text("separator = \n")
        with pytest.raises(ConfigError):
            load_and_merge_configs(project_dir=tmp_path)


class TestSettingsFromToml:
    def test_keys_map_onto_config_attributes(self):
        raw = {"sort": "date_desc", "output_file": "out.txt", "inputs": "src/(a, b)", "unknown": 1}
        settings = settings_from_toml(raw)
        assert settings == {
            "sort_method": SortMethod.DATE_DESC,
            "output_file": Path("out.txt"),
            "inputs": ["src/(a, b)"],
        }

    def test_profile_overrides_top_level(self):
        raw = {"separator": "top", "profiles": {"review": {"separator": "profile", "line_numbers": True}}}
        settings = settings_from_toml(raw, "review")
        assert settings["separator"] == "profile"
        assert settings["line_numbers"] is True

    def test_missing_profile_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            settings_from_toml({}, "nope")

    def test_invalid_sort_falls_back_to_default(self):
        assert settings_from_toml({"sort": "sideways"})["sort_method"] == SortMethod.NAME_ASC

    def test_invalid_inputs_type_raises(self):
        with pytest.raises(ConfigError):
            settings_from_toml({"inputs": [1, 2]})


class TestSaveProfile:
    def test_only_non_default_options_are_saved(self, tmp_path: Path):
        config = PrintConfig(inputs=["src/(a, -b)"], separator="===", sort_method=SortMethod.NAME_DESC, read_from_stdin=True)
        written = save_config_to_profile(config, "mine", project_dir=tmp_path)
        assert written == tmp_path / ".fpr.toml"
        data = toml.load(written)
        assert data == {"profiles": {"mine": {"inputs": ["src/(a, -b)"], "separator": "===", "sort": "name_desc"}}}

    def test_default_profile_writes_top_level_and_keeps_profiles(self, tmp_path: Path):
        (tmp_path / ".fpr.toml").write_text('[profiles.old]\nseparator = "old"\n')
        save_config_to_profile(PrintConfig(line_numbers=True), "DEFAULT", project_dir=tmp_path)
        data = toml.load(tmp_path / ".fpr.toml")
        assert data["line_numbers"] is True
        assert data["profiles"]["old"]["separator"] == "old"

    def test_nothing_to_save(self, tmp_path: Path):
        assert save_config_to_profile(PrintConfig(), "empty", project_dir=tmp_path) is None
        assert not (tmp_path / ".fpr.toml").exists()


class TestLogging:
    def test_verbosity_sets_package_logger_level(self):
        configure_logging("debug")
        assert logging.getLogger("fpr").level == logging.DEBUG
        configure_logging("warning", force_json_logs=True)
        assert logging.getLogger("fpr").level == logging.WARNING
        assert len(logging.getLogger("fpr").handlers) == 1
