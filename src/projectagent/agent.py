"""File manipulation scoped to one working directory.

Every path handed to CommandLineAgent is a slash-separated string relative
to its working directory, e.g. "lib/src/file.dart". The agent can also run
the package-fetch command (``pub get``) in that directory.

Key class: CommandLineAgent.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

from .settings import AgentSettings

logger = logging.getLogger(__name__)


class DependencyFetchError(RuntimeError):
    """The package-fetch command exited with a non-zero status."""

    def __init__(self, result: subprocess.CompletedProcess) -> None:
        self.result = result
        self.stderr = result.stderr or ""
        super().__init__(self.stderr.strip() or f"exit code {result.returncode}")


class CommandLineAgent:
    """A utility for manipulating files and directories in working_directory."""

    def __init__(
        self,
        working_directory: Path,
        create: bool = True,
        settings: AgentSettings | None = None,
    ) -> None:
        self.working_directory = Path(working_directory)
        self.settings = settings or AgentSettings()
        if create:
            self.working_directory.mkdir(parents=True, exist_ok=True)

    @classmethod
    def current(cls, settings: AgentSettings | None = None) -> CommandLineAgent:
        """Agent on the process's current directory."""
        return cls(Path.cwd(), settings=settings)

    def resolve(self, path: str) -> Path:
        """Split a relative slash-separated path and resolve it under the working directory."""
        *directories, filename = path.split("/")
        directory = self.working_directory.joinpath(*directories)
        return directory / filename

    @staticmethod
    def copy_directory(src: Path, dst: Path) -> None:
        """Recursively copy every file and subdirectory of src into dst."""
        src = Path(src)
        dst = Path(dst)
        if not dst.exists():
            dst.mkdir(parents=True)

        for entry in src.iterdir():
            if entry.is_file():
                shutil.copyfile(entry, dst / entry.name)
            elif entry.is_dir():
                CommandLineAgent.copy_directory(entry, dst / entry.name)

    def add_or_replace_file(
        self, path: str, contents: str, imports: Iterable[str] = ()
    ) -> Path:
        """Add or replace a file in the working directory.

        Args:
            path: Relative path to the file, e.g. "lib/src/file.dart".
            contents: Text contents of the file.
            imports: Import URIs written as directives above contents,
                     e.g. "package:foo/foo.dart" (without quotes).

        Returns:
            The path of the written file.
        """
        file = self.resolve(path)
        file.parent.mkdir(parents=True, exist_ok=True)

        directives = "".join(f"import '{uri}';\n" for uri in imports)
        file.write_text(f"{directives}{contents}", encoding="utf-8")
        logger.debug("Wrote %s", file)
        return file

    def modify_file(self, path: str, transform: Callable[[str], str]) -> str:
        """Rewrite an existing file with transform(current contents).

        Raises:
            ValueError: If the file does not exist.
        """
        file = self.resolve(path)
        if not file.is_file():
            raise ValueError(f"File at '{file}' doesn't exist.")

        output = transform(file.read_text(encoding="utf-8"))
        file.write_text(output, encoding="utf-8")
        logger.debug("Modified %s", file)
        return output

    def get_file(self, path: str) -> Path | None:
        """Return the resolved file path, or None if it doesn't exist."""
        file = self.resolve(path)
        if not file.is_file():
            return None
        return file

    def get_dependencies(self, offline: bool = True) -> subprocess.CompletedProcess:
        """Run ``<pub> get`` in the working directory.

        Raises:
            DependencyFetchError: If the command exits non-zero.
            subprocess.TimeoutExpired: If it outlives settings.fetch_timeout.
        """
        cmd = [*self.settings.pub_command, "get"]
        if offline:
            cmd.append("--offline")

        logger.debug("Running %s in %s", " ".join(cmd), self.working_directory)
        result = subprocess.run(
            cmd,
            cwd=self.working_directory.absolute(),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=self.settings.fetch_timeout,
        )
        if result.returncode != 0:
            logger.warning(
                "%s failed in %s (exit %d)",
                " ".join(cmd),
                self.working_directory,
                result.returncode,
            )
            raise DependencyFetchError(result)

        return result
