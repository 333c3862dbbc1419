"""Binary cache and version marker management."""
from pathlib import Path
from typing import Optional, Union

import appdirs

from deno_bridge.binaries.constants import (
    CACHE_APP_NAME,
    CACHE_SUBDIR,
    DENO_BINARY_NAME,
    DENO_VERSION_FILE,
)
from deno_bridge.binaries.platforms import get_binary_name
from deno_bridge.logging import get_logger

logger = get_logger(__name__)


def get_cache_directory() -> Path:
    """Default directory for the cached binary and its marker."""
    return Path(appdirs.user_cache_dir(CACHE_APP_NAME)) / CACHE_SUBDIR


def get_version_file_path(cache_directory: Union[str, Path]) -> Path:
    return Path(cache_directory) / DENO_VERSION_FILE


def get_cached_binary_path(cache_directory: Union[str, Path]) -> Path:
    """Expected location of the cached binary for this platform."""
    return Path(cache_directory) / get_binary_name(DENO_BINARY_NAME)


async def read_version_file(cache_directory: Union[str, Path]) -> Optional[str]:
    """Read the cached version marker.

    Returns None when the marker is missing, unreadable or empty. The marker
    is never treated as an error: callers fall through to a fresh download.
    """
    version_file = get_version_file_path(cache_directory)

    try:
        version = version_file.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug({
            "event": "version_file_unreadable",
            "path": str(version_file),
            "error": str(e)
        })
        return None

    if not version:
        logger.debug({"event": "version_file_empty", "path": str(version_file)})
        return None

    return version


async def write_version_file(cache_directory: Union[str, Path], version: str) -> Path:
    """Overwrite the version marker with the literal version string."""
    version_file = get_version_file_path(cache_directory)
    version_file.write_text(version, encoding="utf-8")

    logger.debug({
        "event": "version_file_written",
        "path": str(version_file),
        "version": version
    })

    return version_file
