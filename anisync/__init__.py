"""AniSync: AniList progress synchronisation client."""

from anisync.utils.logging import Logger, get_logger
from anisync.utils.version import get_pyproject_version

__author__ = "AniSync Developers"
__license__ = "MIT"
__version__ = get_pyproject_version()

log: Logger = get_logger()
