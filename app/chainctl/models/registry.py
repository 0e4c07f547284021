"""Repository registry model.

The registry lists the main repository URLs and, per fork label, the URLs
of that fork's repositories. It is loaded from repositories.toml (or the
legacy repositories.json layout) by chainctl.core.registry.
"""

from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def extract_project_name(url: str) -> str:
    """Derive a project name from a repository URL.

    The name is the final path segment with any extension removed, so
    `git@host:group/core-lib.git` and `https://host/group/core-lib` both
    give `core-lib`.

    Args:
        url: Repository URL or local path.

    Returns:
        Project name.
    """
    segment = url.rstrip("/").replace("\\", "/").split("/")[-1]
    # scp-like URLs without a slash: host:name.git
    segment = segment.rsplit(":", 1)[-1]
    stem, dot, _ext = segment.rpartition(".")
    return stem if dot and stem else segment


class RepositoryRegistry(BaseModel):
    """Static list of main and forked repositories.

    Attributes:
        main_repositories: Ordered URLs of the main repositories.
        fork_repositories: Ordered URLs per fork label.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    main_repositories: Annotated[
        list[str],
        Field(
            default_factory=list,
            validation_alias=AliasChoices("main", "main_repositories", "MainRepositories"),
            description="Main repository URLs",
        ),
    ]
    fork_repositories: Annotated[
        dict[str, list[str]],
        Field(
            default_factory=dict,
            validation_alias=AliasChoices("forks", "fork_repositories", "ForkRepositories"),
            description="Repository URLs per fork label",
        ),
    ]
