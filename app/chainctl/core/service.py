"""Chain service: the configuration engine's public face.

ChainService ties the chain-file codec, storage, mutations, validation
and the cached analyzer together. Storage failures are translated into
ChainFileError subclasses here; nothing below this layer raises them.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from chainctl.analysis.analyzer import ChainAnalyzer
from chainctl.core import mutations
from chainctl.core.chain_file import (
    ChainFileExistsError,
    ChainFileNotFoundError,
    ChainFileReadError,
    ChainFileWriteError,
    parse_chain_text,
    serialize_chain,
)
from chainctl.core.settings import DEFAULT_VERSION
from chainctl.core.storage import CHAIN_SUFFIX, ChainStorage
from chainctl.core.validation import ValidationResult, validate_chain
from chainctl.models.analysis import AnalysisReport
from chainctl.models.chain import ChainConfiguration, ProjectMode
from chainctl.models.selection import ProjectSelection

logger = logging.getLogger(__name__)

TEMPLATE_FILE_NAME = "$feature-template.properties"


class ChainService:
    """Load, change, validate and save chain configurations.

    Attributes:
        storage: Where chain files are read from and written to.
        analyzer: Cached known-entity analysis used by validate().
        default_version: Global version seeded into new feature chains.
    """

    def __init__(
        self,
        storage: ChainStorage,
        analyzer: ChainAnalyzer,
        *,
        default_version: str = DEFAULT_VERSION,
    ) -> None:
        self._storage = storage
        self._analyzer = analyzer
        self._default_version = default_version

    @property
    def storage(self) -> ChainStorage:
        return self._storage

    @property
    def analyzer(self) -> ChainAnalyzer:
        return self._analyzer

    @property
    def default_version(self) -> str:
        return self._default_version

    def load(self, identifier: str | Path) -> ChainConfiguration:
        """Load and parse a chain file.

        Args:
            identifier: File path or bare chain name (e.g. "DEPM-123").

        Returns:
            Parsed configuration with its path set.

        Raises:
            ChainFileNotFoundError: If the file doesn't exist.
            ChainFileReadError: If the file cannot be read.
        """
        path = self._storage.resolve(identifier)
        if not self._storage.exists(path):
            msg = f"Chain file not found: {path}"
            raise ChainFileNotFoundError(msg)

        try:
            text = self._storage.read_text(path)
        except FileNotFoundError as e:
            msg = f"Chain file not found: {path}"
            raise ChainFileNotFoundError(msg) from e
        except OSError as e:
            msg = f"Failed to read chain file {path}: {e}"
            raise ChainFileReadError(msg) from e

        config = parse_chain_text(text, str(path))
        config.path = path
        logger.debug("Loaded chain %s with %d projects", config.identity, config.project_count)
        return config

    def save(self, config: ChainConfiguration, path: Path | None = None) -> Path:
        """Serialize and write a chain, then invalidate the analysis cache.

        Args:
            config: Configuration to save.
            path: Target file. Defaults to config.path, then to
                `<identity>.properties` in the storage directory.

        Returns:
            Path the chain was written to.

        Raises:
            ChainFileWriteError: If the file cannot be written.
        """
        if path is None:
            path = config.path or self._storage.path_for(f"{config.identity}{CHAIN_SUFFIX}")

        try:
            self._storage.write_text(path, serialize_chain(config))
        except OSError as e:
            msg = f"Failed to write chain file {path}: {e}"
            raise ChainFileWriteError(msg) from e

        config.path = path
        self._analyzer.invalidate()
        logger.info("Saved chain %s to %s", config.identity, path)
        return path

    def validate(self, config: ChainConfiguration) -> ValidationResult:
        """Validate a chain against the current known entities."""
        return validate_chain(config, self._analyzer.report())

    def load_template(self) -> ChainConfiguration | None:
        """Load the feature template chain, or None if there is none."""
        path = self._storage.path_for(TEMPLATE_FILE_NAME)
        if not self._storage.exists(path):
            return None
        return self.load(path)

    def create_chain_for_feature(
        self,
        ticket_id: str,
        selections: Iterable[ProjectSelection],
        *,
        feature_name: str | None = None,
        target_project: str | None = None,
        version: str | None = None,
    ) -> ChainConfiguration:
        """Create a new chain for a feature ticket.

        The chain is built but not saved; its path points at the file it
        should be saved to.

        Args:
            ticket_id: Ticket id; `DEPM-` is prepended when missing.
            selections: Per-project choices.
            feature_name: Optional feature description used in the file name.
            target_project: Project the feature is developed in.
            version: Global version; defaults to the service's default version.

        Returns:
            The new configuration.

        Raises:
            ChainFileExistsError: If a chain file for the ticket already exists.
            ChainFileReadError: If the template exists but cannot be read.
        """
        ticket_id = mutations.normalize_ticket_id(ticket_id)
        existing = self._storage.list_matching(f"{ticket_id}{CHAIN_SUFFIX}")
        existing += self._storage.list_matching(f"{ticket_id}-*{CHAIN_SUFFIX}")
        if existing:
            msg = f"Chain file for {ticket_id} already exists: {existing[0].name}"
            raise ChainFileExistsError(msg)

        template = self.load_template()
        if template is None:
            logger.debug("No feature template found in %s", self._storage.base_dir)

        config = mutations.create_chain_for_feature(
            ticket_id,
            selections,
            template=template,
            target_project=target_project,
            version=self._default_version if version is None else version,
        )
        config.path = self._storage.path_for(
            mutations.feature_file_name(ticket_id, feature_name)
        )
        return config

    def rebase(
        self,
        config: ChainConfiguration,
        new_version: str,
        project_versions: Mapping[str, str] | None = None,
    ) -> None:
        mutations.rebase_chain(config, new_version, project_versions)

    def toggle_tests(
        self,
        config: ChainConfiguration,
        enabled: bool,
        project_names: Iterable[str] | None = None,
    ) -> None:
        mutations.toggle_tests(config, enabled, project_names)

    def switch_mode(
        self,
        config: ChainConfiguration,
        mode: ProjectMode | str,
        project_names: Iterable[str] | None = None,
    ) -> None:
        mutations.switch_mode(config, mode, project_names)

    def get_analysis_report(self) -> AnalysisReport:
        return self._analyzer.report()

    def refresh_analysis(self) -> AnalysisReport:
        return self._analyzer.refresh()

    def get_known_projects(self) -> list[str]:
        return self._analyzer.known_projects()

    def get_known_forks(self) -> list[str]:
        return self._analyzer.known_forks()

    def get_known_branches(self) -> list[str]:
        return self._analyzer.known_branches()

    def get_known_tags(self) -> list[str]:
        return self._analyzer.known_tags()

    def get_known_modes(self) -> list[str]:
        return self._analyzer.known_modes()
