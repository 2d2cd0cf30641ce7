"""Configuration file locations.

profsweep keeps no state between runs. Its only files live in the XDG
config directory: ``$XDG_CONFIG_HOME/profsweep/`` when the variable is
set, ``~/.config/profsweep/`` otherwise.
"""

import os
from pathlib import Path

APP_NAME = "profsweep"


def get_config_dir() -> Path:
    """Return the profsweep config directory (not necessarily existing)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def get_config_path() -> Path:
    """Return the path of ``config.toml``."""
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Return the path of the optional ``theme.toml`` color overrides."""
    return get_config_dir() / "theme.toml"


def ensure_config_dir() -> Path:
    """Create the config directory if needed and return it.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
