"""
Configuration Management for FaceitLens

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables
- Command line arguments

Configuration precedence (highest to lowest):
1. Command line arguments
2. Environment variables (FACEITLENS_*, FACEIT_API_KEY, STEAM_API_KEY)
3. Configuration file
4. Default values
"""

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class FaceitConfig:
    """Configuration for the FACEIT Data API."""

    api_key: str | None = None
    base_url: str = "https://open.faceit.com/data/v4"
    game: str = "cs2"
    timeout_seconds: float = 10.0

    # Recent matches window
    default_match_limit: int = 30
    max_match_limit: int = 100  # FACEIT rejects larger pages

    # Substituted for the {lang} placeholder in profile URLs
    default_language: str = "en"


@dataclass
class SteamConfig:
    """Configuration for the Steam Web API (vanity URL resolution)."""

    api_key: str | None = None
    base_url: str = "https://api.steampowered.com"
    timeout_seconds: float = 10.0


@dataclass
class HistoryConfig:
    """Configuration for the local search history store."""

    path: str | None = None  # defaults to ~/.faceitlens/storage.json
    max_entries: int = 20
    last_search_max_age_hours: float = 24.0
    default_language: str = "en"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class FaceitLensConfig:
    """Main configuration container."""

    faceit: FaceitConfig = field(default_factory=FaceitConfig)
    steam: SteamConfig = field(default_factory=SteamConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    paths = []

    # Explicit path, also how the web server hands its --config to workers
    explicit = os.environ.get("FACEITLENS_CONFIG")
    if explicit:
        paths.append(Path(explicit).expanduser())

    # Current directory
    paths.append(Path.cwd() / "faceitlens.yaml")
    paths.append(Path.cwd() / "faceitlens.toml")
    paths.append(Path.cwd() / "faceitlens.json")
    paths.append(Path.cwd() / ".faceitlens.yaml")

    # User home directory
    home = Path.home()
    paths.append(home / ".config" / "faceitlens" / "config.yaml")
    paths.append(home / ".config" / "faceitlens" / "config.toml")
    paths.append(home / ".faceitlens.yaml")

    # XDG config directory
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "faceitlens" / "config.yaml")

    return paths


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    import yaml

    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path) as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        # Credentials keep the names the upstream docs use
        "FACEIT_API_KEY": ("faceit", "api_key"),
        "STEAM_API_KEY": ("steam", "api_key"),
        "FACEITLENS_FACEIT_BASE_URL": ("faceit", "base_url"),
        "FACEITLENS_TIMEOUT": ("faceit", "timeout_seconds"),
        "FACEITLENS_MATCH_LIMIT": ("faceit", "default_match_limit"),
        "FACEITLENS_LANGUAGE": ("faceit", "default_language"),
        "FACEITLENS_STEAM_BASE_URL": ("steam", "base_url"),
        "FACEITLENS_STORAGE_PATH": ("history", "path"),
        "FACEITLENS_HISTORY_SIZE": ("history", "max_entries"),
        "FACEITLENS_LOG_LEVEL": ("logging", "level"),
        "FACEITLENS_LOG_FILE": ("logging", "file"),
    }
    # Values that must stay strings even when they look numeric
    string_keys = {"api_key", "base_url", "path", "file", "level", "default_language"}

    for env_var, (section, key) in env_mappings.items():
        value: Any = os.environ.get(env_var)
        if value is not None:
            if section not in config:
                config[section] = {}

            # Type conversion
            if key in string_keys:
                pass
            elif value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            else:
                try:
                    value = float(value)
                except ValueError:
                    pass

            config[section][key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> FaceitLensConfig:
    """Convert a dictionary to FaceitLensConfig."""
    config = FaceitLensConfig()

    for section in ("faceit", "steam", "history", "logging"):
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.debug(f"Ignoring unknown config key {section}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> FaceitLensConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged FaceitLensConfig
    """
    config_data: dict[str, Any] = {}

    # Try to find and load a config file
    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    # Merge environment variables
    if include_env:
        env_config = load_env_config()
        config_data = merge_configs(config_data, env_config)

    return dict_to_config(config_data)


# ============================================================================
# Configuration Saving
# ============================================================================


def config_to_dict(config: FaceitLensConfig, include_secrets: bool = False) -> dict[str, Any]:
    """Convert FaceitLensConfig to a dictionary."""
    data = asdict(config)
    if not include_secrets:
        data["faceit"].pop("api_key", None)
        data["steam"].pop("api_key", None)
    return data


def save_config(config: FaceitLensConfig, path: Path) -> None:
    """
    Save configuration to a file.

    API keys are never written; they belong in the environment.

    Args:
        config: Configuration to save
        path: Path to save to (format detected from extension)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        import yaml

        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    else:
        raise ValueError(f"Unknown config format: {suffix}")

    logger.info(f"Saved config to: {path}")


# ============================================================================
# Logging Setup
# ============================================================================


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Apply the logging section: level, format and optional rotating file."""
    config = config or LoggingConfig()
    level = getattr(logging, str(config.level).upper(), logging.INFO)

    logging.basicConfig(level=level, format=config.format)
    logging.getLogger().setLevel(level)

    if config.file:
        handler = RotatingFileHandler(
            config.file,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: FaceitLensConfig | None = None


def get_config() -> FaceitLensConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: FaceitLensConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# FaceitLens Configuration
# API keys are read from FACEIT_API_KEY and STEAM_API_KEY.

# FACEIT Data API
faceit:
  base_url: https://open.faceit.com/data/v4
  game: cs2
  timeout_seconds: 10.0
  default_match_limit: 30
  max_match_limit: 100
  default_language: en

# Steam Web API (only used for /id/<vanity> profile URLs)
steam:
  base_url: https://api.steampowered.com
  timeout_seconds: 10.0

# Local search history
history:
  # path: ~/.faceitlens/storage.json
  max_entries: 20
  last_search_max_age_hours: 24

# Logging settings
logging:
  level: INFO
  # file: /path/to/faceitlens.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML)
    else:
        config = FaceitLensConfig()
        save_config(config, path)

    logger.info(f"Generated default config at: {path}")
