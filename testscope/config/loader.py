"""
Configuration loading for testscope.

Settings come from three layers, later layers winning key by key:

1. a config file: an explicit ``--config`` path, or the first of
   ``.testscope.toml``, ``.testscope.yml``, ``.testscope.yaml`` and
   ``testscope.toml`` found in the search directory or one of its parents;
2. ``TESTSCOPE_*`` environment variables, with ``__`` between nested keys
   (``TESTSCOPE_NAMING__TEST_DIR=spec``);
3. overrides from the command line.

The merged result is validated into a ``TestScopeConfig``.
"""

import logging
import os
import shlex
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import TestScopeConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (
    ".testscope.toml",  # TOML files (preferred)
    ".testscope.yml",
    ".testscope.yaml",
    "testscope.toml",
)

ENV_PREFIX = "TESTSCOPE_"

# Environment values for these keys are split like a shell command line.
_SHELL_SPLIT_KEYS = {("runner", "command")}

# Environment values for these keys are comma-separated lists.
_LIST_KEYS = {("naming", "source_suffixes")}


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def _read_toml(path: Path) -> Any:
    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


_READERS: dict[str, Callable[[Path], Any]] = {
    ".toml": _read_toml,
    ".yml": _read_yaml,
    ".yaml": _read_yaml,
}


def parse_env_value(value: str) -> Any:
    """Interpret booleans and integers; anything else stays a string."""
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False

    if lowered.lstrip("-").isdigit():
        return int(lowered)

    return value


def merge_settings(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``updates`` over ``base`` without modifying either."""
    merged = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Build a validated configuration from a config file, the environment and the CLI."""

    def __init__(
        self,
        config_file: str | Path | None = None,
        search_dir: str | Path | None = None,
    ):
        """Initialize the configuration loader.

        Args:
            config_file: Explicit configuration file. If None, one is searched for.
            search_dir: Directory where the search starts (defaults to cwd).
        """
        self.config_file = Path(config_file) if config_file else None
        self.search_dir = Path(search_dir) if search_dir else None
        self._config_cache: TestScopeConfig | None = None

    def load_config(
        self,
        env_overrides: dict[str, Any] | None = None,
        cli_overrides: dict[str, Any] | None = None,
        reload: bool = False,
    ) -> TestScopeConfig:
        """Load configuration from all sources.

        Args:
            env_overrides: Settings used instead of the process environment
            cli_overrides: Settings from command-line options
            reload: Force reload even if cached

        Returns:
            Validated testscope configuration

        Raises:
            ConfigurationError: If a source cannot be read or the result is invalid
        """
        if self._config_cache is not None and not reload:
            return self._config_cache

        layers = (
            ("config file", self.file_settings()),
            ("environment", env_overrides if env_overrides is not None else self.env_settings()),
            ("command line", cli_overrides or {}),
        )

        settings: dict[str, Any] = {}
        for source, layer in layers:
            if layer:
                logger.debug(f"Applying {source} settings: {', '.join(sorted(layer))}")
                settings = merge_settings(settings, layer)

        try:
            self._config_cache = TestScopeConfig(**settings)
        except ValidationError as e:
            error_msg = f"Configuration validation failed: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        return self._config_cache

    def find_config_file(self) -> Path | None:
        """The explicit config file, or the nearest known one at or above the search directory."""
        if self.config_file:
            return self.config_file

        start = (self.search_dir or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            for filename in CONFIG_FILENAMES:
                candidate = directory / filename
                if candidate.is_file():
                    return candidate
        return None

    def file_settings(self) -> dict[str, Any]:
        """Settings from the config file, or an empty dict when there is none."""
        path = self.find_config_file()
        if path is None:
            logger.debug("No configuration file found, using defaults")
            return {}

        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        reader = _READERS.get(path.suffix.lower())
        if reader is None:
            logger.warning(f"Unknown configuration file type: {path}")
            return {}

        try:
            content = reader(path)
        except OSError as e:
            error_msg = f"Failed to read {path}: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

        if not content:
            logger.warning(f"Configuration file {path} is empty")
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a table of settings")

        # A relative project_root is taken relative to the file that sets it.
        root = content.get("project_root")
        if isinstance(root, str) and not Path(root).is_absolute():
            content["project_root"] = str(path.parent.resolve() / root)

        logger.debug(f"Loaded configuration from {path}")
        return content

    def env_settings(self, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Settings from ``TESTSCOPE_*`` variables in ``environ`` (default: the process environment)."""
        environ = os.environ if environ is None else environ
        settings: dict[str, Any] = {}

        for name, raw in environ.items():
            if not name.startswith(ENV_PREFIX):
                continue

            # TESTSCOPE_NAMING__TEST_DIR -> ("naming", "test_dir")
            keys = tuple(name[len(ENV_PREFIX) :].lower().split("__"))
            if keys in _SHELL_SPLIT_KEYS:
                value = shlex.split(raw)
            elif keys in _LIST_KEYS:
                value = [item.strip() for item in raw.split(",") if item.strip()]
            else:
                value = parse_env_value(raw)

            node = settings
            for key in keys[:-1]:
                node = node.setdefault(key, {})
            node[keys[-1]] = value

        return settings


def load_config(
    config_file: str | Path | None = None,
    env_overrides: dict[str, Any] | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> TestScopeConfig:
    """Load testscope configuration from all sources.

    Args:
        config_file: Path to configuration file
        env_overrides: Settings used instead of the process environment
        cli_overrides: CLI argument overrides

    Returns:
        Validated testscope configuration
    """
    loader = ConfigLoader(config_file)
    return loader.load_config(env_overrides, cli_overrides)
