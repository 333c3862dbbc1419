"""Core type definitions"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from deno_bridge.binaries.cache import get_cache_directory
from deno_bridge.binaries.constants import DENO_VERSION_RANGE

LifecycleHook = Callable[[], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class BridgeConfig:
    """Bridge configuration"""
    cache_directory: Path = field(default_factory=get_cache_directory)
    on_before_download: Optional[LifecycleHook] = None
    on_after_download: Optional[LifecycleHook] = None
    use_global: bool = True
    version_range: str = DENO_VERSION_RANGE

    def __post_init__(self):
        object.__setattr__(self, "cache_directory", Path(self.cache_directory))


@dataclass(frozen=True)
class Declaration:
    """Route declaration for a handler function"""
    function: str
    path: str


@dataclass(frozen=True)
class Handler:
    """Handler source file discovered by the bundler"""
    name: str
    path: Path


@dataclass(frozen=True)
class BundleOutput:
    """Bundler output"""
    bundle_path: Path
    pre_bundle_path: Path
    handlers: List[Handler]


@dataclass(frozen=True)
class BundleResult:
    """Paths produced by a bundle operation"""
    bundle_path: Path
    manifest_path: Path
    pre_bundle_path: Path
