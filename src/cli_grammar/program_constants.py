"""program_constants.py

Values that stay constant during a single run of the program. Some of
them, like the log directory, still differ between installations and
operating systems.
"""

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from logging import WARNING

import platformdirs

# The name is needed to look up the version in the package metadata, so it
# is defined before the dataclass below.
_name = "cli-grammar"

try:
    _version = version(_name)
except PackageNotFoundError:  # running from a source checkout
    _version = "0.0.0"


@dataclass(frozen=True, slots=True)
class PROGRAM_CONSTANTS:
    NAME: str = _name
    """The name of the program, also used for `platformdirs` paths."""

    AUTHOR: str = "AULD"
    """The author/publisher of the program."""

    VERSION: str = _version
    """The current version of the program, as read from package metadata."""

    USER_PROMPT: str = "Auld CLI> "
    ADMIN_PROMPT: str = "Auld CLI# "


DEFAULT_LOG_DIR = platformdirs.user_log_path(appname="Auld", ensure_exists=False)
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "console.log"
DEFAULT_LOG_LEVEL = WARNING
