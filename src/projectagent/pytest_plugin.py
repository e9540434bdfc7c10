"""pytest fixtures for package scaffolds.

Registered through the ``pytest11`` entry point, so installing the package
makes these available to any test suite:

  - scaffold_root: one directory per session holding every scaffold,
    removed with ProjectAgent.tear_down_all at session end.
  - project_factory: creates ProjectAgents under scaffold_root.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import pytest

from .project import ProjectAgent
from .settings import AgentSettings, load_settings


@pytest.fixture(scope="session")
def projectagent_settings() -> AgentSettings:
    """Settings resolved from .env and PROJECTAGENT_* variables."""
    return load_settings()


@pytest.fixture(scope="session")
def scaffold_root(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    root = tmp_path_factory.mktemp("projects")
    yield root
    ProjectAgent.tear_down_all(root)


@pytest.fixture
def project_factory(
    scaffold_root: Path, projectagent_settings: AgentSettings
) -> Callable[..., ProjectAgent]:
    """Return a callable(name, dependencies=None, dev_dependencies=None) -> ProjectAgent."""

    def _create(
        name: str,
        dependencies: Mapping | None = None,
        dev_dependencies: Mapping | None = None,
        **kwargs,
    ) -> ProjectAgent:
        return ProjectAgent.create(
            scaffold_root,
            name,
            dependencies,
            dev_dependencies,
            settings=projectagent_settings,
            **kwargs,
        )

    return _create
