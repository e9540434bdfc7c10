"""pubspec.yaml generation and parsing.

Dependency maps are rendered by a minimal, order-preserving emitter: each
value is either a Scalar (written inline as ``key: value``) or a Nested
mapping (written as ``key:`` followed by an indented block, two spaces per
level). Nothing is quoted or escaped, and numbers, lists and booleans are
not supported. Parsing goes through PyYAML.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

_INDENT = "  "

NULL_SAFE_SDK = ">=2.12.0 <3.0.0"
LEGACY_SDK = ">=2.0.0 <3.0.0"

ANALYSIS_OPTIONS = """\
analyzer:
  strong-mode:
    implicit-casts: false
"""


@dataclass(frozen=True)
class Scalar:
    """A version constraint, e.g. ``^3.0.0``."""

    value: str


@dataclass(frozen=True)
class Nested:
    """A nested dependency reference, e.g. ``{"path": "../"}``.

    Entries are kept as an ordered tuple of (name, value) pairs so the
    variant stays hashable; a mapping passed in is converted.
    """

    entries: tuple[tuple[str, Scalar | Nested], ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.entries, Mapping):
            object.__setattr__(self, "entries", tuple(self.entries.items()))

    def as_dict(self) -> dict[str, Scalar | Nested]:
        return dict(self.entries)


DependencyValue = Scalar | Nested


def to_dependency_value(value: object) -> DependencyValue:
    """Convert a plain string/mapping (or an existing variant) into a DependencyValue.

    Raises:
        TypeError: For anything that is not a string or a string-keyed mapping.
    """
    if isinstance(value, (Scalar, Nested)):
        return value
    if isinstance(value, str):
        return Scalar(value)
    if isinstance(value, Mapping):
        return Nested(to_dependency_map(value))
    raise TypeError(
        f"Dependency values must be strings or mappings, got {type(value).__name__}"
    )


def to_dependency_map(deps: Mapping | None) -> dict[str, DependencyValue]:
    """Convert a plain dependency map, keeping insertion order."""
    if not deps:
        return {}
    result: dict[str, DependencyValue] = {}
    for key, value in deps.items():
        if not isinstance(key, str):
            raise TypeError(f"Dependency names must be strings, got {key!r}")
        result[key] = to_dependency_value(value)
    return result


def render_dependencies(deps: Mapping[str, DependencyValue], indent: int = 0) -> str:
    """Render a dependency map as indented ``key: value`` lines."""
    prefix = _INDENT * indent
    lines: list[str] = []
    for key, value in deps.items():
        if isinstance(value, Scalar):
            lines.append(f"{prefix}{key}: {value.value}\n")
        else:
            lines.append(f"{prefix}{key}:\n")
            lines.append(render_dependencies(value.as_dict(), indent + 1))
    return "".join(lines)


def render_pubspec(
    name: str,
    dependencies: Mapping | None = None,
    dev_dependencies: Mapping | None = None,
    *,
    null_safe: bool = True,
    description: str = "desc",
    version: str = "0.0.1",
) -> str:
    """Build pubspec.yaml contents for a scaffolded package."""
    sdk = NULL_SAFE_SDK if null_safe else LEGACY_SDK
    deps = render_dependencies(to_dependency_map(dependencies), indent=1)
    dev_deps = render_dependencies(to_dependency_map(dev_dependencies), indent=1)
    return (
        f"name: {name}\n"
        f"description: {description}\n"
        f"version: {version}\n"
        "\n"
        "environment:\n"
        f'  sdk: "{sdk}"\n'
        "\n"
        "dependencies:\n"
        f"{deps}"
        "\n"
        "dev_dependencies:\n"
        f"{dev_deps}"
    )


def parse_manifest_name(text: str) -> str:
    """Return the ``name`` field of a pubspec.yaml document.

    Raises:
        ValueError: If the document is not a mapping or has no name.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.warning("Failed to parse manifest: %s", e)
        raise ValueError(f"Invalid manifest: {e}") from e

    if not isinstance(data, dict) or not data.get("name"):
        logger.warning("Manifest has no name field")
        raise ValueError("Manifest does not declare a 'name'.")
    return str(data["name"])
