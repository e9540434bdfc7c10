"""projectagent - disposable package scaffolds for tests.

Provides CommandLineAgent for file manipulation inside a working directory
(plus running the package-fetch command there), and ProjectAgent, which
stands up a minimal package skeleton on top of it and manages the entry
library's exports.
"""

from .agent import CommandLineAgent, DependencyFetchError
from .manifest import Nested, Scalar
from .project import ProjectAgent
from .settings import AgentSettings, load_settings

__version__ = "0.1.0"

__all__ = [
    "AgentSettings",
    "CommandLineAgent",
    "DependencyFetchError",
    "Nested",
    "ProjectAgent",
    "Scalar",
    "load_settings",
]
