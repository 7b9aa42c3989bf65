import os
from functools import lru_cache
from pathlib import Path

EVENT_HOOKS_CONFIG_FILE = "event-hooks.json"


@lru_cache
def _resolve_config_dir() -> Path:
    """Resolve the base directory for ghp configuration."""
    env_dir = os.getenv("GHP_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".config" / "ghp-cli"


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return _resolve_config_dir()


def get_event_hooks_config_path() -> Path:
    """Get the path to the event hooks configuration file."""
    return get_config_dir() / EVENT_HOOKS_CONFIG_FILE


def get_log_dir() -> Path:
    log_dir = get_config_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
