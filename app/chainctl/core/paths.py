"""XDG-compliant path management for chainctl.

XDG defaults:
- Config: ~/.config/chainctl/ (settings, repository registry, theme)
- Cache: ~/.cache/chainctl/ (bare repository mirrors)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "chainctl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/chainctl/ (or XDG_CONFIG_HOME/chainctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_cache_dir() -> Path:
    """Get the cache directory path.

    Mirrors live here since they can always be re-cloned.

    Returns:
        Path to ~/.cache/chainctl/ (or XDG_CACHE_HOME/chainctl/).
    """
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/chainctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_registry_path() -> Path:
    """Get the default repository registry path.

    Returns:
        Path to ~/.config/chainctl/repositories.toml.
    """
    return get_config_dir() / "repositories.toml"


def get_default_mirrors_dir() -> Path:
    """Get the default base directory for bare mirrors.

    Returns:
        Path to ~/.cache/chainctl/mirrors.
    """
    return get_cache_dir() / "mirrors"


def get_default_chains_dir() -> Path:
    """Get the default directory holding chain files.

    Returns:
        Path to ~/chains.
    """
    return Path.home() / "chains"
