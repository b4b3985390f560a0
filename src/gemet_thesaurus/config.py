"""
Layered configuration for gemet-thesaurus.

Locations are read in this order, later ones overriding earlier ones key by key:
1. /etc/gemet-thesaurus/config.yaml (or .json)
2. ~/.config/gemet-thesaurus/config.yaml (or .json)
3. ./config.yaml, ./gemet-thesaurus.yaml (or .json) in the working directory
4. GEMET_THESAURUS_* environment variables

Example config.yaml:
    lang: de
    service:
      url: https://www.eionet.europa.eu/gemet/
      alternate_language: en
      analyze_max_words: 10
"""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Candidates in the working directory, first hit wins
CONFIG_FILENAMES = ["config.yaml", "config.json", "gemet-thesaurus.yaml", "gemet-thesaurus.json"]
# Candidates in /etc and ~/.config
CONFIG_USER_FILENAMES = ["config.yaml", "config.json"]

ENV_PREFIX = "GEMET_THESAURUS_"

DEFAULTS: dict[str, Any] = {
    "lang": "de",
    "service": {
        "url": "https://www.eionet.europa.eu/gemet/",
        "timeout": 30.0,
        "request_rdf": True,  # get_term reads RDF, which has every language in one document
        "analyze_max_words": 10,
        "ignore_passed_matching_type": False,  # search with CONTAINS whatever the caller asks
        "alternate_language": None,
    },
}


@dataclass(frozen=True)
class ServiceSettings:
    """Settings of one ThesaurusService, replaced as a whole when they change."""

    default_language: str = "de"
    alternate_language: str | None = None
    request_rdf: bool = True
    analyze_max_words: int = 10
    ignore_passed_matching_type: bool = False


def _get_config_dirs() -> list[Path]:
    """Config directories, lowest priority first."""
    return [
        Path("/etc/gemet-thesaurus"),
        Path.home() / ".config" / "gemet-thesaurus",
        Path.cwd(),
    ]


def _candidates(directory: Path) -> Iterator[Path]:
    names = CONFIG_FILENAMES if directory == Path.cwd() else CONFIG_USER_FILENAMES
    return (directory / name for name in names)


def find_config_files() -> list[Path]:
    """Return the config file of every location that has one, lowest priority first."""
    found = []
    for directory in _get_config_dirs():
        match = next((p for p in _candidates(directory) if p.exists()), None)
        if match is not None:
            found.append(match)
    return found


def find_config_file() -> Path | None:
    """Return the config file that overrides all others, or None."""
    found = find_config_files()
    return found[-1] if found else None


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge ``override`` into ``base`` recursively; ``base`` is modified and returned."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _load_config_file(path: Path) -> dict[str, Any]:
    """Read one YAML or JSON config file.

    Raises:
        ImportError: For a YAML file when PyYAML is not installed.
        json.JSONDecodeError: For malformed JSON.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix not in (".yaml", ".yml"):
        return json.loads(text)

    try:
        import yaml
    except ImportError as e:
        raise ImportError(
            "PyYAML required for .yaml config files. Install with: pip install gemet-thesaurus[yaml]"
        ) from e
    return yaml.safe_load(text) or {}


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Build the effective configuration.

    Args:
        path: Read only this file instead of searching the standard
              locations. A missing file leaves the defaults in place.

    Returns:
        DEFAULTS merged with the config file(s) and environment overrides.
    """
    result = copy.deepcopy(DEFAULTS)

    if path is None:
        files = find_config_files()
    else:
        files = [path] if path.exists() else []
    for config_file in files:
        _deep_merge(result, _load_config_file(config_file))

    _apply_env_overrides(result)
    return result


def _apply_env_overrides(config: dict[str, Any]) -> None:
    """Apply GEMET_THESAURUS_* variables, ``__`` separating nested keys.

    GEMET_THESAURUS_SERVICE__ALTERNATE_LANGUAGE=en sets service.alternate_language.
    """
    for name, value in os.environ.items():
        if name.startswith(ENV_PREFIX):
            _set_nested_value(config, name[len(ENV_PREFIX):].lower(), value)


def _set_nested_value(config: dict, key: str, value: str) -> None:
    *parents, leaf = key.split("__")
    target = config
    for part in parents:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]
    target[leaf] = _convert_value(value)


def _convert_value(value: str) -> Any:
    """Interpret an environment string as bool, None, int or float where it looks like one."""
    lowered = value.strip().lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("", "none", "null"):
        return None
    for number in (int, float):
        try:
            return number(value)
        except ValueError:
            continue
    return value


def get_config_value(config: dict[str, Any], key: str, default: Any = None) -> Any:
    """Look up a dotted key such as ``service.url``."""
    value: Any = config
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


def _language(value: Any) -> str | None:
    # A bare `no` (Norwegian) in YAML loads as False
    if value is False:
        return "no"
    return str(value) if value else None


class Config:
    """Effective configuration plus typed accessors."""

    def __init__(self, path: Path | None = None):
        if path is None:
            self._paths = find_config_files()
        else:
            self._paths = [path] if path.exists() else []
        self._data = load_config(path)

    @property
    def path(self) -> Path | None:
        """The config file with the highest priority, None if defaults only."""
        return self._paths[-1] if self._paths else None

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return get_config_value(self._data, key, default)

    @property
    def lang(self) -> str:
        return _language(self.get("lang")) or DEFAULTS["lang"]

    @property
    def service_url(self) -> str:
        return self.get("service.url") or DEFAULTS["service"]["url"]

    def _service_value(self, name: str) -> Any:
        # A blank environment override leaves None behind
        value = self.get(f"service.{name}")
        return DEFAULTS["service"][name] if value is None else value

    @property
    def timeout(self) -> float:
        return float(self._service_value("timeout"))

    @property
    def alternate_language(self) -> str | None:
        return _language(self.get("service.alternate_language"))

    def service_settings(self) -> ServiceSettings:
        """Settings value for ThesaurusService."""
        return ServiceSettings(
            default_language=self.lang,
            alternate_language=self.alternate_language,
            request_rdf=bool(self._service_value("request_rdf")),
            analyze_max_words=int(self._service_value("analyze_max_words")),
            ignore_passed_matching_type=bool(self._service_value("ignore_passed_matching_type")),
        )
