"""Binary management functionality."""
from deno_bridge.binaries.cache import (
    get_cache_directory,
    get_cached_binary_path,
    read_version_file,
    write_version_file,
)
from deno_bridge.binaries.fetcher import download
from deno_bridge.binaries.versions import get_binary_version, satisfies

__all__ = [
    "get_cache_directory",
    "get_cached_binary_path",
    "read_version_file",
    "write_version_file",
    "download",
    "get_binary_version",
    "satisfies",
]
