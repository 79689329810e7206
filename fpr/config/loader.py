# fpr/config/loader.py
"""
Handles loading, merging, and saving of configurations from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import asdict, fields as dataclass_fields, MISSING
from enum import Enum
import structlog

from fpr.exceptions import ConfigError

from .settings import PrintConfig, SortMethod

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".fpr.toml", "fpr.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "fpr"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_PRINTCONFIG_ATTR_MAP: Dict[str, str] = {
    "inputs": "inputs",
    "separator": "separator",
    "recursive": "recursive",
    "respect_gitignore": "respect_gitignore",
    "follow_symlinks": "follow_symlinks",
    "line_numbers": "line_numbers",
    "sort": "sort_method",
    "output_file": "output_file",
    "console_show_summary": "console_show_summary",
}

# options that only make sense for a single invocation.
ATTRS_NEVER_SAVED = {"base_dir", "save_profile_name", "read_from_stdin", "nul_separated"}


def _field_default(field_name: str) -> Any:
    fd = next(f for f in dataclass_fields(PrintConfig) if f.name == field_name)
    return fd.default_factory() if fd.default_factory is not MISSING else fd.default


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    # reads settings from one file; pyproject.toml keeps them under [tool.fpr].
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read config file {file_path}: {e}") from e
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("fpr", {})
    return data


def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the user-global config, then the first project-local config found in
    `project_dir` (default: cwd). Project settings override user settings;
    profile tables are merged by name.
    """
    project_dir = project_dir or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict):
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data


def coerce_config_value(pc_attr: str, value: Any) -> Any:
    # converts raw TOML values into the types PrintConfig expects.
    if pc_attr == "sort_method" and isinstance(value, str):
        parsed = SortMethod.from_string(value)
        return parsed if parsed else _field_default(pc_attr)
    if pc_attr == "output_file" and isinstance(value, str):
        return Path(value) if value else None
    if pc_attr == "inputs":
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'inputs' must be a list of strings, got {value!r}")
        return list(value)
    if pc_attr == "separator" and not isinstance(value, str):
        raise ConfigError(f"'separator' must be a string, got {value!r}")
    return value


def settings_from_toml(raw_configs: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Maps merged TOML data (top-level keys, then the named profile) onto
    PrintConfig attribute names.
    """
    effective: Dict[str, Any] = {}
    for toml_key, pc_attr in CONFIG_KEY_TO_PRINTCONFIG_ATTR_MAP.items():
        if toml_key in raw_configs:
            effective[pc_attr] = coerce_config_value(pc_attr, raw_configs[toml_key])

    if profile_name:
        profile_values = raw_configs.get("profiles", {}).get(profile_name, {})
        if profile_values:
            log.info("applying_profile_settings", profile=profile_name)
            for toml_key, pc_attr in CONFIG_KEY_TO_PRINTCONFIG_ATTR_MAP.items():
                if toml_key in profile_values:
                    effective[pc_attr] = coerce_config_value(pc_attr, profile_values[toml_key])
        else:
            raise ConfigError(f"Config profile '{profile_name}' not found")
    return effective


def save_config_to_profile(config_to_save: PrintConfig, profile_name: str, project_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Writes the options of `config_to_save` that differ from the defaults to a
    profile in the project's .fpr.toml. Returns the file written, or None if
    there was nothing to save.
    """
    project_dir = project_dir or Path.cwd()
    target_toml_path = project_dir / ".fpr.toml"
    if not target_toml_path.exists():
        alt_path = project_dir / "fpr.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    attr_to_toml_key = {v: k for k, v in CONFIG_KEY_TO_PRINTCONFIG_ATTR_MAP.items()}
    profile_data: Dict[str, Any] = {}

    for pc_attr, value in asdict(config_to_save).items():
        if pc_attr in ATTRS_NEVER_SAVED:
            continue
        toml_key = attr_to_toml_key.get(pc_attr)
        if not toml_key:
            continue
        if value == _field_default(pc_attr):
            continue

        if isinstance(value, Path):
            profile_data[toml_key] = str(value)
        elif isinstance(value, Enum):
            profile_data[toml_key] = value.value
        elif value is not None:
            profile_data[toml_key] = value

    if not profile_data:
        log.info("no_options_to_save_for_profile", profile=profile_name)
        return None

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == "DEFAULT":
        profiles_bak = existing_data.pop("profiles", None)
        existing_data.update(profile_data)
        if profiles_bak is not None:
            existing_data["profiles"] = profiles_bak
    else:
        existing_data.setdefault("profiles", {})[profile_name] = profile_data

    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return target_toml_path
