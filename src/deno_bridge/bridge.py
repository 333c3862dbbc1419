"""Resolution, caching and invocation of the deno binary."""
import asyncio
import dataclasses
import inspect
import json
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from deno_bridge import bundler, manifest
from deno_bridge.binaries import cache, fetcher
from deno_bridge.binaries.constants import DENO_BINARY_NAME, MANIFEST_FILE
from deno_bridge.binaries.versions import get_binary_version, satisfies
from deno_bridge.errors import BinaryVerificationError, log_error
from deno_bridge.execution import run_binary
from deno_bridge.logging import get_logger
from deno_bridge.types import BridgeConfig, BundleResult, Declaration, LifecycleHook

logger = get_logger(__name__)


async def _fire(hook: Optional[LifecycleHook]) -> None:
    if hook is None:
        return
    result = hook()
    if inspect.isawaitable(result):
        await result


class DenoBridge:
    """Locates a compatible deno binary and runs it.

    The binary is resolved on every call, in order: a global install on
    ``PATH`` (when allowed), the cached download (trusted through its version
    marker), and finally a fresh download into the cache directory.
    """

    def __init__(self, config: Optional[BridgeConfig] = None, **overrides):
        config = config or BridgeConfig()
        if overrides:
            config = dataclasses.replace(config, **overrides)
        self.config = config

    @property
    def cache_directory(self) -> Path:
        return self.config.cache_directory

    @property
    def version_range(self) -> str:
        return self.config.version_range

    async def _get_global_binary(self) -> Optional[str]:
        if not self.config.use_global:
            return None

        version = await get_binary_version(DENO_BINARY_NAME)

        if version is None or not satisfies(version, self.version_range):
            logger.debug({
                "event": "global_binary_rejected",
                "version": version,
                "version_range": self.version_range
            })
            return None

        return DENO_BINARY_NAME

    async def _get_cached_binary(self) -> Optional[str]:
        version = await cache.read_version_file(self.cache_directory)

        if version is None or not satisfies(version, self.version_range):
            logger.debug({
                "event": "cached_binary_rejected",
                "version": version,
                "version_range": self.version_range
            })
            return None

        return str(cache.get_cached_binary_path(self.cache_directory))

    async def _get_remote_binary(self) -> str:
        await _fire(self.config.on_before_download)

        self.cache_directory.mkdir(parents=True, exist_ok=True)

        binary_path = await fetcher.download(self.cache_directory, self.version_range)
        version = await get_binary_version(binary_path)

        if version is None:
            error = BinaryVerificationError(binary_path)
            log_error(error, logger=logger)
            raise error

        await cache.write_version_file(self.cache_directory, version)
        await _fire(self.config.on_after_download)

        return str(binary_path)

    async def get_binary_path(self) -> str:
        """Resolve a binary satisfying the configured version range."""
        global_path = await self._get_global_binary()
        if global_path is not None:
            logger.info({"event": "binary_resolved", "tier": "global", "path": global_path})
            return global_path

        cached_path = await self._get_cached_binary()
        if cached_path is not None:
            logger.info({"event": "binary_resolved", "tier": "cache", "path": cached_path})
            return cached_path

        remote_path = await self._get_remote_binary()
        logger.info({"event": "binary_resolved", "tier": "remote", "path": remote_path})
        return remote_path

    async def run(
        self, args: Sequence[str], wait: bool = True
    ) -> Optional[asyncio.subprocess.Process]:
        """Run deno with ``args``; see ``run_binary`` for ``wait`` semantics."""
        binary_path = await self.get_binary_path()
        return await run_binary(binary_path, args, wait=wait)

    async def bundle(
        self,
        source_directories: Iterable[Union[str, Path]],
        dist_directory: Union[str, Path],
        declarations: List[Declaration],
    ) -> BundleResult:
        """Bundle the handlers into ``dist_directory`` and write its manifest.

        The pre-bundle file is removed only after deno bundled it
        successfully; on failure it stays on disk for inspection.
        """
        dist_directory = Path(dist_directory)
        output = await bundler.bundle(source_directories, dist_directory)

        relative_bundle_path = Path(os.path.relpath(output.bundle_path, dist_directory)).as_posix()
        manifest_contents = manifest.generate_manifest(
            relative_bundle_path, output.handlers, declarations
        )
        manifest_path = dist_directory / MANIFEST_FILE
        manifest_path.write_text(json.dumps(manifest_contents), encoding="utf-8")

        await self.run(["bundle", str(output.pre_bundle_path), str(output.bundle_path)])
        output.pre_bundle_path.unlink()

        logger.info({
            "event": "bundle_complete",
            "bundle_path": str(output.bundle_path),
            "manifest_path": str(manifest_path)
        })

        return BundleResult(
            bundle_path=output.bundle_path,
            manifest_path=manifest_path,
            pre_bundle_path=output.pre_bundle_path,
        )

    async def serve(
        self,
        port: int,
        source_directories: Iterable[Union[str, Path]],
        declarations: Optional[List[Declaration]] = None,
    ) -> asyncio.subprocess.Process:
        """Start a detached deno server for the handlers on ``port``."""
        dist_directory = Path(tempfile.mkdtemp(prefix="deno-bridge-"))
        output = await bundler.bundle(source_directories, dist_directory)

        logger.info({
            "event": "serve_starting",
            "port": port,
            "pre_bundle_path": str(output.pre_bundle_path)
        })

        return await self.run(
            ["run", "-A", "--unstable", str(output.pre_bundle_path), str(port)],
            wait=False,
        )
