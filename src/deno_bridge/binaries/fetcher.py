"""Deno release lookup and binary download."""
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiohttp
from packaging.version import Version

from deno_bridge.binaries.constants import (
    DENO_BINARY_NAME,
    DENO_OWNER,
    DENO_REPO,
    DENO_VERSION_RANGE,
    DOWNLOAD_URL_TEMPLATE,
    GITHUB_API_BASE,
    GITHUB_REPOS_PATH,
    RELEASES_PATH,
    RELEASES_PER_PAGE,
)
from deno_bridge.binaries.platforms import get_binary_name, get_platform_info
from deno_bridge.binaries.versions import satisfies
from deno_bridge.logging import get_logger

logger = get_logger(__name__)

MAX_RELEASE_PAGES = 5
CHUNK_SIZE = 8192


def _release_versions(releases: List[Dict[str, Any]]) -> List[str]:
    return [
        release["tag_name"].lstrip("v")
        for release in releases
        if not release.get("draft") and not release.get("prerelease")
    ]


async def get_release_version(version_range: str = DENO_VERSION_RANGE) -> str:
    """Find the newest published release satisfying ``version_range``."""
    url = f"{GITHUB_API_BASE}/{GITHUB_REPOS_PATH}/{DENO_OWNER}/{DENO_REPO}/{RELEASES_PATH}"
    matching: List[str] = []

    async with aiohttp.ClientSession() as session:
        for page in range(1, MAX_RELEASE_PAGES + 1):
            params = {"per_page": RELEASES_PER_PAGE, "page": page}
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                releases = await response.json()

            if not releases:
                break

            matching.extend(
                version for version in _release_versions(releases)
                if satisfies(version, version_range)
            )
            if matching:
                break

    if not matching:
        raise ValueError(f"No deno release satisfies {version_range}")

    version = max(matching, key=Version)
    logger.debug({
        "event": "release_selected",
        "version": version,
        "version_range": version_range
    })
    return version


async def download_file(url: str, dest: Path) -> None:
    """Download a file with streaming."""
    logger.info({"event": "download_started", "url": url, "destination": str(dest)})

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url) as response:
                response.raise_for_status()

                downloaded = 0
                with open(dest, "wb") as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        f.write(chunk)
                        downloaded += len(chunk)

    except aiohttp.ClientError:
        if dest.exists():
            dest.unlink()
        raise

    logger.info({"event": "download_complete", "url": url, "size": downloaded})


def extract_binary(archive_path: Path, binary_name: str, dest_dir: Path) -> Path:
    """Extract a single executable from a zip archive into ``dest_dir``."""
    try:
        archive = zipfile.ZipFile(archive_path)
    except zipfile.BadZipFile as e:
        raise ValueError(f"Failed to read archive {archive_path.name}") from e

    with archive:
        matching_files = [
            name for name in archive.namelist()
            if Path(name).name == binary_name
        ]
        if not matching_files:
            logger.error({
                "event": "binary_not_found",
                "archive": str(archive_path),
                "binary_name": binary_name,
                "available_files": archive.namelist()
            })
            raise ValueError(f"Binary {binary_name} not found in archive")

        extracted_path = dest_dir / binary_name
        # Write beside the target and rename over it; the old binary may be running
        fd, staging_name = tempfile.mkstemp(prefix=f".{binary_name}-", dir=dest_dir)
        staging_path = Path(staging_name)
        try:
            with archive.open(matching_files[0]) as src, os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(src, dst)

            # Set executable permissions on Unix-like systems
            if os.name != "nt":
                staging_path.chmod(0o755)

            os.replace(staging_path, extracted_path)
        except Exception:
            staging_path.unlink(missing_ok=True)
            raise

    logger.info({
        "event": "binary_extracted",
        "archive": str(archive_path),
        "extracted_to": str(extracted_path)
    })

    return extracted_path


def get_download_url(version: str, target: Optional[str] = None) -> str:
    if target is None:
        target = get_platform_info().target
    return DOWNLOAD_URL_TEMPLATE.format(
        owner=DENO_OWNER, repo=DENO_REPO, version=version, target=target
    )


async def download(
    target_directory: Union[str, Path],
    version_range: str = DENO_VERSION_RANGE
) -> Path:
    """Download the deno binary for this platform into ``target_directory``.

    Returns the path of the extracted executable. An unsupported platform
    raises RuntimeError before any request is made. Network and archive
    failures propagate to the caller; nothing is retried.
    """
    platform_info = get_platform_info()
    logger.debug({
        "event": "download_target",
        "os": platform_info.os_name,
        "arch": platform_info.arch,
        "target": platform_info.target
    })

    version = await get_release_version(version_range)
    download_url = get_download_url(version, platform_info.target)

    with tempfile.TemporaryDirectory() as tmpdir:
        archive_path = Path(tmpdir) / Path(download_url).name
        await download_file(download_url, archive_path)

        return extract_binary(
            archive_path,
            get_binary_name(DENO_BINARY_NAME),
            Path(target_directory)
        )
