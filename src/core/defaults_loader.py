"""
Layered defaults for engine tunables.

Resolution order (later wins):
1. config/defaults.yaml - Base defaults (checked into repo)
2. config/settings.yaml - Deployment overrides (gitignored)
3. REMINDR_<SECTION>__<KEY> environment variables
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

ENV_PREFIX = "REMINDR_"

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None
_config_path: Optional[Path] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    # Navigate up from src/core/defaults_loader.py
    return Path(__file__).parent.parent.parent


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary."""
    if not file_path.exists():
        return {}

    with open(file_path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)
        return content if isinstance(content, dict) else {}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_nested(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested value from config using dot notation.

    Example:
        get_nested(config, "quota.user_daily_limit", 1)
    """
    value: Any = config
    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect ``REMINDR_SECTION__KEY=value`` variables into a nested dict.

    Values are parsed with YAML so ``"5"`` becomes ``5`` and ``"false"``
    becomes ``False``.
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX) or "__" not in name:
            continue
        parts = [p.lower() for p in name[len(ENV_PREFIX):].split("__") if p]
        if not parts:
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        node = overrides
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value

    return overrides


def load_defaults(
    defaults_path: Optional[Path] = None,
    settings_path: Optional[Path] = None,
    reload: bool = False,
) -> Dict[str, Any]:
    """
    Load configuration from YAML files and the environment.

    Args:
        defaults_path: Path to defaults.yaml (optional, uses project default)
        settings_path: Path to settings.yaml (optional, uses project default)
        reload: Force reload even if cached

    Returns:
        Merged configuration dictionary
    """
    global _config_cache, _config_path

    project_root = get_project_root()

    if defaults_path is None:
        defaults_path = project_root / "config" / "defaults.yaml"

    if settings_path is None:
        settings_path = project_root / "config" / "settings.yaml"

    if not reload and _config_cache is not None and _config_path == defaults_path:
        return _config_cache

    config = load_yaml_file(defaults_path)

    user_settings = load_yaml_file(settings_path)
    if user_settings:
        config = deep_merge(config, user_settings)

    overrides = env_overrides()
    if overrides:
        config = deep_merge(config, overrides)

    _config_cache = config
    _config_path = defaults_path

    return config


def get_config_value(key_path: str, default: Any = None) -> Any:
    """Get a configuration value using dot notation."""
    return get_nested(load_defaults(), key_path, default)


# Convenience functions for common config sections
def get_limit(name: str, default: int = 100) -> int:
    """Get an integer limit from the ``quota`` section."""
    return int(get_config_value(f"quota.{name}", default))


def get_scheduler_value(name: str, default: int) -> int:
    return int(get_config_value(f"scheduler.{name}", default))


def get_timeout(name: str, default: float = 15.0) -> float:
    """Get a timeout (seconds) from the ``generation`` section."""
    return float(get_config_value(f"generation.{name}", default))


def get_model(default: str = "gpt-4.1-mini") -> str:
    return str(get_config_value("generation.model", default))


def clear_cache() -> None:
    """Clear the configuration cache (useful for testing)."""
    global _config_cache, _config_path
    _config_cache = None
    _config_path = None
