"""Repository registry I/O.

The registry is a TOML document:

    main = ["git@git.example.com:platform/core-lib.git", ...]

    [forks]
    "jane.doe" = ["git@git.example.com:jane.doe/core-lib.git"]

A `.json` file with `MainRepositories` / `ForkRepositories` keys is read
as well.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from chainctl.models.registry import RepositoryRegistry

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base exception for registry errors."""


class RegistryNotFoundError(RegistryError):
    """Raised when the registry file is not found."""


class RegistryParseError(RegistryError):
    """Raised when the registry file cannot be parsed."""


def _read_document(path: Path) -> dict[str, Any]:
    """Read the raw registry document, TOML or JSON by file suffix."""
    try:
        if path.suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise RegistryParseError(f"Invalid registry syntax in {path}: {e}") from e
    except OSError as e:
        raise RegistryError(f"Failed to read registry {path}: {e}") from e

    if not isinstance(data, dict):
        raise RegistryParseError(f"Registry {path} must contain a table/object at top level")
    return data


def load_registry(path: Path) -> RepositoryRegistry:
    """Load and validate the repository registry.

    Args:
        path: Path to repositories.toml or repositories.json.

    Returns:
        Validated RepositoryRegistry.

    Raises:
        RegistryNotFoundError: If the file doesn't exist.
        RegistryParseError: If the syntax is invalid.
        RegistryError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise RegistryNotFoundError(f"Repository registry not found: {path}")

    data = _read_document(path)

    try:
        registry = RepositoryRegistry.model_validate(data)
    except ValidationError as e:
        raise RegistryError(f"Invalid registry content: {e}") from e

    logger.debug(
        "Loaded registry %s: %d main, %d fork(s)",
        path,
        len(registry.main_repositories),
        len(registry.fork_repositories),
    )
    return registry


class RegistryLoader:
    """Loads the registry once and hands out the cached copy.

    Attributes:
        path: Registry file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._registry: RepositoryRegistry | None = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> RepositoryRegistry:
        """Return the registry, loading it on first use.

        Raises:
            RegistryError: If the registry cannot be loaded.
        """
        if self._registry is None:
            self._registry = load_registry(self._path)
        return self._registry
