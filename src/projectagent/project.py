"""Package scaffolds for tests: a minimal package directory plus export management.

Layout created under a scaffold root:
  <root>/<name>/pubspec.yaml
  <root>/<name>/analysis_options.yaml
  <root>/<name>/lib/<name>.dart    (entry library, a list of export directives)

Key class: ProjectAgent.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from .agent import CommandLineAgent
from .manifest import ANALYSIS_OPTIONS, parse_manifest_name, render_pubspec
from .settings import AgentSettings

logger = logging.getLogger(__name__)


class ProjectAgent:
    """Manages a 'Dart package' directory through a CommandLineAgent.

    Use ProjectAgent.create() for a fresh package under a scaffold root and
    ProjectAgent.existing() to wrap a directory that already holds one.
    Call tear_down_all(root) once the tests using the root are complete.
    """

    def __init__(self, agent: CommandLineAgent, name: str) -> None:
        self.agent = agent
        self.name = name

    @classmethod
    def create(
        cls,
        root: Path,
        name: str,
        dependencies: Mapping | None = None,
        dev_dependencies: Mapping | None = None,
        *,
        null_safe: bool = True,
        settings: AgentSettings | None = None,
    ) -> ProjectAgent:
        """Create a new package at root/name.

        Both dependency maps take version constraints or nested references,
        e.g. ``{"aqueduct": "^3.0.0"}`` or ``{"relative": {"path": "../"}}``.
        """
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)

        agent = CommandLineAgent(root / name, settings=settings)
        project = cls(agent, name)
        project.library_directory.mkdir(parents=True, exist_ok=True)

        cfg = agent.settings
        agent.add_or_replace_file(cfg.analysis_options_filename, ANALYSIS_OPTIONS)
        agent.add_or_replace_file(
            cfg.manifest_filename,
            render_pubspec(name, dependencies, dev_dependencies, null_safe=null_safe),
        )
        agent.add_or_replace_file(project._entry_library, "")
        logger.info("Created project %s at %s", name, agent.working_directory)
        return project

    @classmethod
    def existing(
        cls, path: Path, settings: AgentSettings | None = None
    ) -> ProjectAgent:
        """Wrap an existing package directory, reading its name from the manifest.

        Raises:
            ValueError: If the directory has no manifest or the manifest has no name.
        """
        agent = CommandLineAgent(Path(path), create=False, settings=settings)
        manifest = agent.get_file(agent.settings.manifest_filename)
        if manifest is None:
            raise ValueError(
                f"'{path}' is not a project directory; "
                f"does not contain {agent.settings.manifest_filename}"
            )

        name = parse_manifest_name(manifest.read_text(encoding="utf-8"))
        return cls(agent, name)

    @staticmethod
    def tear_down_all(root: Path) -> None:
        """Delete the scaffold root. Call after tests are complete."""
        try:
            shutil.rmtree(root)
            logger.info("Removed scaffold root %s", root)
        except OSError as e:
            logger.debug("Ignoring teardown error for %s: %s", root, e)

    # --- Paths ---

    @property
    def working_directory(self) -> Path:
        return self.agent.working_directory

    @property
    def library_directory(self) -> Path:
        """lib/ in the project."""
        return self.working_directory / "lib"

    @property
    def src_directory(self) -> Path:
        """lib/src/ in the project."""
        return self.library_directory / "src"

    @property
    def test_directory(self) -> Path:
        """test/ in the project."""
        return self.working_directory / "test"

    @property
    def manifest_path(self) -> Path:
        return self.working_directory / self.agent.settings.manifest_filename

    @property
    def entry_library_path(self) -> Path:
        return self.agent.resolve(self._entry_library)

    @property
    def _entry_library(self) -> str:
        return f"lib/{self._source(self.name)}"

    def _source(self, stem: str) -> str:
        return self.agent.settings.source_filename(stem)

    # --- File operations (delegated) ---

    def add_or_replace_file(
        self, path: str, contents: str, imports: Iterable[str] = ()
    ) -> Path:
        return self.agent.add_or_replace_file(path, contents, imports)

    def modify_file(self, path: str, transform: Callable[[str], str]) -> str:
        return self.agent.modify_file(path, transform)

    def get_file(self, path: str) -> Path | None:
        return self.agent.get_file(path)

    def get_dependencies(self, offline: bool = True) -> subprocess.CompletedProcess:
        return self.agent.get_dependencies(offline=offline)

    # --- Library files ---

    def add_source_file(self, file_name: str, contents: str, export: bool = True) -> Path:
        """Create lib/src/<file_name>.dart importing this project's library file.

        The file is always exported from the entry library; ``export`` is
        accepted for call compatibility only.
        """
        relative = f"src/{self._source(file_name)}"
        path = self._write_library_member(relative, contents)
        self.add_library_export(relative)
        return path

    def add_library_file(self, file_name: str, contents: str, export: bool = True) -> Path:
        """Create lib/<file_name>.dart importing this project's library file.

        Always exported, as with add_source_file.
        """
        relative = self._source(file_name)
        path = self._write_library_member(relative, contents)
        self.add_library_export(relative)
        return path

    def add_library_export(self, export_path: str) -> None:
        """Prepend an export of export_path to the entry library file.

        e.g. ``add_library_export("package:aqueduct/aqueduct.dart")``
        """
        self.agent.modify_file(
            self._entry_library, lambda current: f"export '{export_path}';\n{current}"
        )
        logger.debug("Exported %s from %s", export_path, self.name)

    def _write_library_member(self, relative: str, contents: str) -> Path:
        package_import = f"package:{self.name}/{self._source(self.name)}"
        return self.agent.add_or_replace_file(
            f"lib/{relative}", f"\n{contents}\n", imports=[package_import]
        )
