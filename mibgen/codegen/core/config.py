"""
Generator settings.

A run's settings are layered: per-language defaults, then an optional JSON
file, then command line overrides. Keys that are not ``GeneratorConfig``
fields end up in ``GeneratorConfig.custom`` for the language generator.
"""

import copy
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

FORMATTER_MODES = {"auto", "gofmt", "builtin"}
STDOUT_SENTINEL = "-"

_LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "go": {
        "package_name": "mibs",
        "output_dir": ".",
        "formatter": "auto",
        "strict_types": False,
        "custom": {"gofmt_path": "gofmt"},
    },
}


class ConfigError(Exception):
    """Configuration file missing or malformed."""

    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # None splits output per module into output_dir; "-" is stdout
    output_file: Optional[str] = None
    output_dir: str = "."
    package_name: str = "mibs"

    language: str = "go"
    formatter: str = "auto"
    strict_types: bool = False

    # Module search path, before -M options are applied
    search_path: List[str] = field(default_factory=list)

    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def split_output(self) -> bool:
        return not self.output_file

    @property
    def to_stdout(self) -> bool:
        return self.output_file == STDOUT_SENTINEL

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "GeneratorConfig":
        """Build a config, moving unknown keys into ``custom``."""
        names = {f.name for f in fields(cls)}
        known = {key: value for key, value in values.items() if key in names}
        extra = {key: value for key, value in values.items() if key not in names}

        known["custom"] = {**known.get("custom", {}), **extra}
        if isinstance(known.get("search_path"), str):
            known["search_path"] = [known["search_path"]]
        return cls(**known)


def read_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON object of settings.

    Raises:
        ConfigError: If the file is missing, not ``.json``, unreadable or
            does not hold a JSON object
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")
    if path.suffix.lower() != ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        values = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    if not isinstance(values, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")
    return values


class ConfigManager:
    """Merges the configuration layers for a language."""

    def __init__(self, defaults: Optional[Mapping[str, Dict[str, Any]]] = None):
        self._defaults = dict(_LANGUAGE_DEFAULTS if defaults is None else defaults)

    def get_config(
        self,
        language: str = "go",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Merge defaults, ``config_file`` and ``custom_config`` in that order.

        None values in ``custom_config`` are options the user did not give,
        so they never override a lower layer.
        """
        values = copy.deepcopy(self._defaults.get(language, {}))
        values["language"] = language

        if config_file:
            values.update(read_config_file(config_file))
        if custom_config:
            values.update((k, v) for k, v in custom_config.items() if v is not None)

        return GeneratorConfig.from_mapping(values)

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """Return human readable problems with ``config``; empty when it is usable."""
        problems = []
        if config.formatter not in FORMATTER_MODES:
            problems.append(
                f"Invalid formatter: {config.formatter} "
                f"(expected one of {', '.join(sorted(FORMATTER_MODES))})"
            )
        if config.language == "go":
            from ..languages.go.naming import validate_go_package_name

            problems.extend(validate_go_package_name(config.package_name))
        return problems


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "go",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """Shortcut for ``get_config_manager().get_config(...)``."""
    return get_config_manager().get_config(language, custom_config, config_file)
