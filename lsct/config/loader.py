# lsct/config/loader.py
"""
Handles loading and merging of configuration from TOML files.

Sources are layered user-global first, then the first project-local file
found in the current directory, then an optional named profile. Command-line
options are applied on top of the result by the CLI.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import fields as dataclass_fields, MISSING
import structlog

from lsct.exceptions import ConfigError

from .settings import ListingConfig, ClassifierMode

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".lsct.toml", "lsct.toml", "pyproject.toml"]

CONFIG_KEY_TO_LISTINGCONFIG_ATTR_MAP: Dict[str, str] = {
    "roots": "roots",
    "include_hidden": "include_hidden",
    "all": "include_hidden",
    "mime_format": "mime_format",
    "mime": "mime_format",
    "null_terminator": "null_terminator",
    "null": "null_terminator",
    "ignore_inaccessible_roots": "ignore_inaccessible_roots",
    "ignore_inaccessible": "ignore_inaccessible_roots",
    "classifier_mode": "classifier_mode",
    "magic_file": "magic_file",
    "summary": "console_show_summary",
}

def user_config_file() -> Path:
    return Path.home() / ".config" / "lsct" / "config.toml"

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}")
    return data.get("tool", {}).get("lsct", {}) if file_path.name == "pyproject.toml" else data

def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    merged_toml_data: Dict[str, Any] = {}
    user_file = user_config_file()
    if user_file.is_file():
        log.info("loading_user_global_config", path=str(user_file))
        merged_toml_data.update(_load_toml_file_data(user_file))

    search_dir = project_dir if project_dir is not None else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = search_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            # a pyproject.toml without [tool.lsct] should not shadow the rest.
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
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def _coerce_option(attr: str, value: Any) -> Any:
    # converts raw TOML values into the types ListingConfig expects.
    if attr == "classifier_mode":
        mode = ClassifierMode.from_string(value) if isinstance(value, str) else None
        if mode is None:
            raise ConfigError(f"invalid classifier_mode in config: {value!r}")
        return mode
    if attr == "magic_file":
        if not isinstance(value, str):
            raise ConfigError(f"magic_file must be a path string, got {value!r}")
        return Path(value) if value else None
    if attr == "roots":
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(r, str) for r in value):
            raise ConfigError(f"roots must be a list of paths, got {value!r}")
        return list(value)
    if not isinstance(value, bool):
        raise ConfigError(f"config option '{attr}' must be true or false, got {value!r}")
    return value

def resolve_config_options(raw_configs: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    # flattens global keys and an optional profile into ListingConfig keyword arguments.
    options: Dict[str, Any] = {}
    for fd in dataclass_fields(ListingConfig):
        if fd.init:
            options[fd.name] = fd.default_factory() if fd.default_factory is not MISSING else fd.default

    layers = [raw_configs]
    if profile_name:
        profile_values = raw_configs.get("profiles", {}).get(profile_name, {})
        if profile_values:
            log.info("applying_profile_settings", profile=profile_name)
            layers.append(profile_values)
        else:
            log.warning("profile_not_found_in_config_files", profile_name=profile_name)

    for layer in layers:
        for toml_k, attr in CONFIG_KEY_TO_LISTINGCONFIG_ATTR_MAP.items():
            if toml_k in layer:
                options[attr] = _coerce_option(attr, layer[toml_k])
    return options
