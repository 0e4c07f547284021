"""Chain file parsing and serialization.

Chain files are line-oriented `key=value` text with dotted keys
(`global.<property>` or `<project>.<property>`). A line whose first
non-blank character is `#` is never read as data: commenting a directive
out is how a project or an override is switched off without losing its
text. serialize_chain() writes that convention back out.
"""

import logging
import os
import re

from chainctl.models.chain import ChainConfiguration, ProjectConfiguration

logger = logging.getLogger(__name__)

HEADER_LINE = "# Chain configuration file"
COMMENT_MARKER = "#"
TEMPLATE_MARKER = "<"

GLOBAL_PREFIX = "global."
GLOBAL_VERSION_KEY = "global.version.binary"
GLOBAL_DEVS_VERSION_KEY = "global.devs.version.binary"

# Tag placeholder written for projects without a pinned tag
BUILD_PREFIX = "Build_12.25.1."
FORK_TEMPLATE = "<firstname.lastname>/{project}"
BRANCH_FALLBACK = "integration"
TEST_SET_SUFFIX = ".run"

_TRUE_VALUES = frozenset({"true", "yes", "1"})


class ChainFileError(Exception):
    """Base exception for chain file errors."""


class ChainFileNotFoundError(ChainFileError):
    """Raised when a chain file doesn't exist."""


class ChainFileReadError(ChainFileError):
    """Raised when a chain file exists but cannot be read."""


class ChainFileWriteError(ChainFileError):
    """Raised when a chain file cannot be written."""


class ChainFileExistsError(ChainFileError):
    """Raised when a chain file for a ticket already exists."""


def parse_bool(value: str) -> bool:
    """Parse a directive value as a boolean.

    `true`, `yes` and `1` (any case) are true; everything else is false.
    """
    return value.strip().lower() in _TRUE_VALUES


def is_template_value(value: str | None) -> bool:
    """Check if a value is a `<placeholder>` left over from a template."""
    return value is not None and value.startswith(TEMPLATE_MARKER)


def has_real_value(value: str | None) -> bool:
    """Check if a value is set and is not a template placeholder."""
    return bool(value) and not is_template_value(value)


def split_directive(line: str) -> tuple[str, str] | None:
    """Split one line into a trimmed (key, value) pair.

    Args:
        line: Raw line from a chain file.

    Returns:
        The (key, value) pair, or None for blank lines, comments and
        lines without `=`.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    key, sep, value = stripped.partition("=")
    if not sep:
        logger.debug("Skipping malformed chain line: %r", stripped[:100])
        return None
    return key.strip(), value.strip()


def split_project_key(key: str) -> tuple[str, str] | None:
    """Split `<project>.<property>` into its two parts.

    Returns:
        (project, property) or None if the key has no dot or an empty project.
    """
    project, dot, prop = key.partition(".")
    if not dot or not project:
        return None
    return project, prop


def derive_identity(identifier: str) -> str:
    """Derive the chain identity (ticket id) from a path or locator.

    A hyphenated file stem such as `DEPM-123` wins. Otherwise, for
    colon-delimited locators (`<source>:<path>`) the text after the first
    colon is used, reduced to its last path segment.

    Args:
        identifier: File path or locator string.

    Returns:
        Identity string, possibly empty.
    """
    name = re.split(r"[\\/]", identifier)[-1]
    stem = os.path.splitext(name)[0]
    if "-" in stem:
        return stem

    if ":" in identifier:
        locator = identifier.split(":", 1)[1]
        if "/" in locator:
            locator = locator.rsplit("/", 1)[-1]
        return locator

    return stem


def parse_chain_text(text: str, identifier: str = "") -> ChainConfiguration:
    """Parse chain file text into a ChainConfiguration.

    Malformed lines are skipped without error so that files carrying
    directives from newer tooling still load. Template values (`<...>`)
    are stored like any other value.

    Args:
        text: Chain file content.
        identifier: File path or locator the text came from.

    Returns:
        Parsed configuration; every project is marked selected.
    """
    config = ChainConfiguration(identity=derive_identity(identifier) if identifier else "")

    for line in text.splitlines():
        directive = split_directive(line)
        if directive is None:
            continue
        key, value = directive
        _apply_directive(config, key, value)

    return config


def _apply_directive(config: ChainConfiguration, key: str, value: str) -> None:
    """Route one directive to the matching configuration field."""
    if key.startswith(GLOBAL_PREFIX):
        if key == GLOBAL_VERSION_KEY:
            config.global_version = value
        elif key == GLOBAL_DEVS_VERSION_KEY:
            config.global_devs_version = value
        else:
            config.global_properties[key] = value
        return

    parts = split_project_key(key)
    if parts is None:
        logger.debug("Ignoring directive without project prefix: %r", key)
        return

    project_name, prop = parts
    project = config.get_or_create_project(project_name)

    match prop:
        case "mode":
            project.mode = value
        case "mode.devs":
            project.mode_devs = value
        case "fork":
            project.fork = value
        case "branch":
            project.branch = value
        case "tag":
            project.tag = value
        case "tests.unit" | "test.units":
            project.tests_unit = parse_bool(value)
        case _ if prop.endswith(TEST_SET_SUFFIX):
            project.test_sets[prop] = parse_bool(value)
        case _:
            project.custom_properties[prop] = value


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def serialize_chain(config: ChainConfiguration) -> str:
    """Render a configuration as chain file text.

    Output is deterministic: globals first, then projects in ascending
    name order. Directives of unselected projects are commented out, and
    fork/branch/tag lines without a real value are written as commented
    placeholders.

    Args:
        config: Configuration to render.

    Returns:
        Chain file text ending with a newline.
    """
    lines: list[str] = [HEADER_LINE, ""]

    if config.global_version:
        lines.append(f"{GLOBAL_VERSION_KEY}={config.global_version}")
    if config.global_devs_version:
        lines.append(f"{GLOBAL_DEVS_VERSION_KEY}={config.global_devs_version}")
    for key, value in config.global_properties.items():
        lines.append(f"{key}={value}")

    for project in config.sorted_projects():
        lines.append("")
        lines.extend(_project_lines(project, config.global_version))

    return "\n".join(lines) + "\n"


def _project_lines(project: ProjectConfiguration, global_version: str) -> list[str]:
    """Render the directive lines for one project."""
    name = project.project_name
    base_prefix = "" if project.is_selected else COMMENT_MARKER
    lines = [f"{base_prefix}{name}.mode={project.mode}"]

    if project.mode_devs:
        lines.append(f"{base_prefix}{name}.mode.devs={project.mode_devs}")

    if has_real_value(project.fork):
        fork_prefix = base_prefix
        fork_value = project.fork
    else:
        fork_prefix = COMMENT_MARKER
        fork_value = FORK_TEMPLATE.format(project=name)
    lines.append(f"{fork_prefix}{name}.fork={fork_value}")

    if has_real_value(project.branch):
        lines.append(f"{base_prefix}{name}.branch={project.branch}")
    else:
        lines.append(f"{COMMENT_MARKER}{name}.branch={BRANCH_FALLBACK}")

    if has_real_value(project.tag):
        lines.append(f"{base_prefix}{name}.tag={project.tag}")
    else:
        lines.append(f"{COMMENT_MARKER}{name}.tag={BUILD_PREFIX}{global_version}")

    tests_prefix = base_prefix
    lines.append(f"{tests_prefix}{name}.tests.unit={_format_bool(project.tests_unit)}")
    for test_set, enabled in project.test_sets.items():
        lines.append(f"{tests_prefix}{name}.{test_set}={_format_bool(enabled)}")

    for prop, value in project.custom_properties.items():
        lines.append(f"{base_prefix}{name}.{prop}={value}")

    return lines
