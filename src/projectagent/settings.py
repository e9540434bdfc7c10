"""Agent settings. Reads .env + environment to produce AgentSettings.

Key entities:
  - AgentSettings: frozen dataclass with the resolved package-tool config.
  - load_settings(): parse .env + PROJECTAGENT_* env vars → AgentSettings.
"""

from __future__ import annotations

import logging
import os
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_PUB_COMMAND = "PROJECTAGENT_PUB_COMMAND"
ENV_FETCH_TIMEOUT = "PROJECTAGENT_FETCH_TIMEOUT"

DEFAULT_FETCH_TIMEOUT = 45.0


def default_pub_command() -> tuple[str, ...]:
    """Return the platform's package-fetch executable."""
    return ("pub.bat",) if sys.platform == "win32" else ("pub",)


@dataclass(frozen=True)
class AgentSettings:
    """Resolved configuration shared by CommandLineAgent and ProjectAgent."""

    # Package tool
    pub_command: tuple[str, ...] = field(default_factory=default_pub_command)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT

    # Project layout
    source_extension: str = ".dart"
    manifest_filename: str = "pubspec.yaml"
    analysis_options_filename: str = "analysis_options.yaml"

    def source_filename(self, stem: str) -> str:
        return f"{stem}{self.source_extension}"


def load_settings(env_file: Path | None = None) -> AgentSettings:
    """Read .env + environment and return AgentSettings.

    Values from the .env file are read without being written into
    ``os.environ``; real environment variables take precedence over them.

    Args:
        env_file: Explicit .env file to read. Defaults to ``./.env`` when
                  it exists.

    Raises:
        ValueError: If PROJECTAGENT_FETCH_TIMEOUT is not a positive number
                    or PROJECTAGENT_PUB_COMMAND is blank.
    """
    if env_file is None:
        local_env = Path(".env")
        env_file = local_env if local_env.is_file() else None

    values: dict[str, str | None] = dict(dotenv_values(env_file)) if env_file else {}
    values.update(os.environ)

    kwargs: dict = {}

    raw_command = values.get(ENV_PUB_COMMAND)
    if raw_command is not None:
        command = tuple(shlex.split(raw_command))
        if not command:
            raise ValueError(f"{ENV_PUB_COMMAND} is set but empty.")
        kwargs["pub_command"] = command

    raw_timeout = values.get(ENV_FETCH_TIMEOUT)
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"{ENV_FETCH_TIMEOUT}={raw_timeout!r} is not a number."
            ) from None
        if timeout <= 0:
            raise ValueError(f"{ENV_FETCH_TIMEOUT} must be positive, got {timeout}.")
        kwargs["fetch_timeout"] = timeout

    settings = AgentSettings(**kwargs)
    logger.debug(
        "Loaded settings: command=%s timeout=%ss",
        " ".join(settings.pub_command),
        settings.fetch_timeout,
    )
    return settings
