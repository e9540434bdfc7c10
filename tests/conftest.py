"""Root conftest — clears PROJECTAGENT_* env vars BEFORE any test runs.

load_settings() reads these variables, so a developer's own package-tool
configuration must not leak into the tests.
"""

import os

# Pop (not just override) so defaults are exercised
os.environ.pop("PROJECTAGENT_PUB_COMMAND", None)
os.environ.pop("PROJECTAGENT_FETCH_TIMEOUT", None)
