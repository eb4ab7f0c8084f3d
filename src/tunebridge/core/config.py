"""Configuration loading for the player bridge.

``config.yaml`` is optional. When present it is parsed with
``yaml.safe_load``, ``${VAR}``/``$VAR``/``~`` references are expanded (after
loading ``.env`` through python-dotenv) and the result is validated into an
``AppConfig``. Every failure surfaces as a ``ConfigurationError``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from tunebridge.core.exceptions import ConfigurationError
from tunebridge.core.models.config_models import AppConfig

YamlValue = dict[str, Any] | list[Any] | str | int | float | bool | None

logger = logging.getLogger("config")
# Until the queue logging setup attaches a real handler
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
logger.setLevel(logging.INFO)

MAX_CONFIG_BYTES = 64 * 1024
DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_PATH_ENV = "CONFIG_PATH"
CONFIG_SUFFIXES = (".yaml", ".yml")


def expand_env(value: YamlValue) -> YamlValue:
    """Expand environment references in every string of a parsed YAML tree.

    A value that is exactly ``${NAME}`` becomes the variable's value, or an
    empty string when it is unset. Other strings go through
    ``os.path.expandvars`` and a leading ``~`` expands to the home directory.
    """
    if isinstance(value, dict):
        return {str(key): expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1], "")

    expanded = os.path.expandvars(value) if "$" in value else value
    if expanded.startswith("~"):
        expanded = str(Path(expanded).expanduser())
    return expanded


def _resolve_config_file(config_path: str) -> Path:
    """Return the absolute path of an existing, readable YAML file.

    Raises:
        FileNotFoundError: Nothing exists at the path, or it is a directory
        ValueError: The file is not ``.yaml``/``.yml``
        PermissionError: The file cannot be read

    """
    try:
        path = Path(config_path).expanduser().resolve(strict=True)
    except FileNotFoundError as e:
        msg = f"No config file at {config_path}"
        raise FileNotFoundError(msg) from e

    if not path.is_file():
        msg = f"{path} is not a file"
        raise FileNotFoundError(msg)
    if path.suffix.lower() not in CONFIG_SUFFIXES:
        msg = f"{path.name}: config must be a .yaml or .yml file"
        raise ValueError(msg)
    if not os.access(path, os.R_OK):
        msg = f"{path} is not readable"
        raise PermissionError(msg)
    return path


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    """Parse *path* as a YAML mapping; an empty document counts as ``{}``.

    Raises:
        ValueError: The file is larger than MAX_CONFIG_BYTES
        TypeError: The document is not a mapping
        yaml.YAMLError: The YAML is malformed

    """
    size = path.stat().st_size
    if size > MAX_CONFIG_BYTES:
        msg = f"{path.name} is {size} bytes, limit is {MAX_CONFIG_BYTES}"
        raise ValueError(msg)

    logger.info("Reading config %s", path)
    document: YamlValue = yaml.safe_load(path.read_text(encoding="utf-8"))
    if document is None:
        return {}
    if not isinstance(document, dict):
        msg = f"{path.name} must contain a mapping at the top level, not {type(document).__name__}"
        raise TypeError(msg)
    return document


def describe_validation_error(error: ValidationError) -> str:
    """One ``dotted.location: message`` line per pydantic error."""
    lines = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        lines.append(f"{location}: {detail['msg']}")
    return "\n".join(lines)


def load_config(config_path: str) -> AppConfig:
    """Read, expand and validate the YAML file at *config_path*.

    Raises:
        ConfigurationError: The file is missing, unreadable, malformed or invalid

    """
    if load_dotenv():
        logger.debug("Loaded environment overrides from .env")

    try:
        raw = expand_env(_load_yaml_mapping(_resolve_config_file(config_path)))
        config = AppConfig.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid configuration in {config_path}:\n{describe_validation_error(e)}"
        logger.critical(msg)
        raise ConfigurationError(msg, config_path) from e
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logger.critical("Cannot load configuration from %s: %s", config_path, e)
        raise ConfigurationError(str(e), config_path) from e

    logger.info("Configuration loaded from %s", config_path)
    return config


def load_config_or_default(config_path: str | None = None) -> AppConfig:
    """Load configuration, or return the defaults when no file exists.

    Args:
        config_path: Explicit path; ``$CONFIG_PATH`` or ``config.yaml`` when None

    Raises:
        ConfigurationError: A file exists but cannot be loaded

    """
    if config_path is None:
        load_dotenv()
        config_path = os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)

    if not Path(config_path).expanduser().exists():
        logger.info("No config file at %s, using defaults", config_path)
        return AppConfig()
    return load_config(config_path)
