"""Chain file storage.

ChainStorage gives the configuration engine read/write/exists/list access
to the chain files under one base directory. It raises the platform
exceptions unchanged; chainctl.core.service translates them into
ChainFileError subclasses.
"""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

logger = logging.getLogger(__name__)

CHAIN_SUFFIX = ".properties"


class ChainStorage:
    """File access for chain files in a base directory.

    Attributes:
        base_dir: Directory that bare chain names resolve against.
    """

    def __init__(self, base_dir: Path) -> None:
        """Initialize storage.

        Args:
            base_dir: Directory holding the chain files.
        """
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        """Directory holding the chain files."""
        return self._base_dir

    def path_for(self, file_name: str) -> Path:
        """Path of a file name inside the base directory."""
        return self._base_dir / file_name

    def resolve(self, identifier: str | Path) -> Path:
        """Resolve a chain identifier to a file path.

        Paths with a directory component are used as given. Bare names
        resolve under the base directory and gain the `.properties`
        suffix when it is missing, so `DEPM-123` and
        `DEPM-123.properties` name the same file.

        Args:
            identifier: File path or bare chain name.

        Returns:
            Path to the chain file.
        """
        path = Path(identifier)
        if path.parent == Path(".") and not path.is_absolute():
            path = self._base_dir / path
        if path.suffix != CHAIN_SUFFIX:
            path = path.with_name(path.name + CHAIN_SUFFIX)
        return path

    def exists(self, path: Path) -> bool:
        """Check if a chain file exists."""
        return path.is_file()

    def read_text(self, path: Path) -> str:
        """Read a chain file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            OSError: If the file cannot be read.
        """
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        """Write a chain file atomically.

        The content is written to a temporary file in the same directory
        and moved into place with os.replace(). The temporary file is
        cleaned up on failure.

        Raises:
            OSError: If the file cannot be written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="\n",
                dir=path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(text)
            os.replace(str(tmp_path), str(path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise

        logger.debug("Wrote chain file %s (%d bytes)", path, len(text))

    def list_matching(self, pattern: str) -> list[Path]:
        """List files in the base directory whose name matches a glob.

        Args:
            pattern: Glob pattern, e.g. "DEPM-123-*.properties".

        Returns:
            Sorted list of matching file paths; empty if the directory is missing.
        """
        if not self._base_dir.is_dir():
            return []
        return sorted(p for p in self._base_dir.glob(pattern) if p.is_file())

    def list_chain_files(self) -> list[Path]:
        """List every chain file in the base directory."""
        return self.list_matching(f"*{CHAIN_SUFFIX}")
