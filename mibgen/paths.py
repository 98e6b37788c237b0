"""
MIB search path handling.

Path option values carry a leading marker: ``+dir`` appends, ``-dir``
prepends, anything else replaces the whole search path.
"""

import os
import pwd
from typing import Iterable, List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)

PATH_ENV_VAR = "MIBGEN_PATH"


class PathResolutionError(Exception):
    """Raised when a home-directory marker cannot be resolved."""

    pass


def _home_directory(username: str) -> str:
    if not username:
        home = os.environ.get("HOME")
        if home:
            return home
        try:
            return pwd.getpwuid(os.getuid()).pw_dir
        except KeyError as e:
            raise PathResolutionError("Cannot determine current user") from e
    try:
        return pwd.getpwnam(username).pw_dir
    except KeyError as e:
        raise PathResolutionError(f"Unknown user: {username}") from e


def resolve_home(path: str) -> str:
    """
    Expand a leading ``~`` or ``~user`` component.

    Raises:
        PathResolutionError: If the user cannot be found
    """
    first, sep, rest = path.partition(os.sep)
    if not first.startswith("~"):
        return path

    home = _home_directory(first[1:])
    if not sep:
        return home
    return os.path.join(home, rest)


def expand_path(path: str) -> str:
    """Expand home-directory markers, falling back to the path as given."""
    try:
        return resolve_home(path)
    except PathResolutionError as e:
        logger.warning("Cannot expand %s (%s), using it unexpanded", path, e)
        return path


class SearchPath:
    """Ordered list of locations searched for module documents."""

    def __init__(self, entries: Optional[Iterable[str]] = None):
        self._entries: List[str] = list(entries or [])

    @classmethod
    def from_environment(cls) -> "SearchPath":
        """Build the default search path from ``MIBGEN_PATH``."""
        raw = os.environ.get(PATH_ENV_VAR, "")
        return cls(entry for entry in raw.split(os.pathsep) if entry)

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def append(self, entry: str):
        self._entries.append(entry)

    def prepend(self, entry: str):
        self._entries.insert(0, entry)

    def set(self, entry: str):
        self._entries = [entry]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SearchPath({self._entries!r})"


def apply_path_options(search_path: SearchPath, values: Iterable[str]) -> SearchPath:
    """
    Apply path option values in order.

    Args:
        search_path: Search path to update in place
        values: Option values such as ``+~/mibs``, ``-/opt/mibs`` or ``/usr/share/mibs``

    Returns:
        The updated search path
    """
    for value in values:
        if not value:
            continue

        marker = value[0]
        if marker == "+":
            expanded = expand_path(value[1:])
            logger.info("Appending path %s", expanded)
            search_path.append(expanded)
        elif marker == "-":
            expanded = expand_path(value[1:])
            logger.info("Prepending path %s", expanded)
            search_path.prepend(expanded)
        else:
            expanded = expand_path(value)
            logger.info("Setting path %s", expanded)
            search_path.set(expanded)

    return search_path
