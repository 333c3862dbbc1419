"""Platform detection and mapping."""
import platform
from dataclasses import dataclass
from typing import NamedTuple, Optional


@dataclass(frozen=True)
class PlatformInfo:
    """Platform information."""
    os_name: str
    arch: str
    target: str


class PlatformMapping(NamedTuple):
    """Platform-specific values."""
    vendor_os: str
    binary_extension: str


ARCH_MAPPINGS = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

PLATFORM_MAPPINGS = {
    "Linux": PlatformMapping(vendor_os="unknown-linux-gnu", binary_extension=""),
    "Darwin": PlatformMapping(vendor_os="apple-darwin", binary_extension=""),
    "Windows": PlatformMapping(vendor_os="pc-windows-msvc", binary_extension=".exe"),
}


def get_platform_info() -> PlatformInfo:
    """Get current platform information."""
    system = platform.system()
    machine = platform.machine().lower()

    if system not in PLATFORM_MAPPINGS:
        raise RuntimeError(f"Unsupported operating system: {system}")

    if machine not in ARCH_MAPPINGS:
        raise RuntimeError(f"Unsupported architecture: {machine}")

    arch = ARCH_MAPPINGS[machine]
    platform_map = PLATFORM_MAPPINGS[system]

    return PlatformInfo(
        os_name=system.lower(),
        arch=arch,
        target=f"{arch}-{platform_map.vendor_os}"
    )


def get_binary_extension(system: Optional[str] = None) -> str:
    """Get the executable suffix for a platform."""
    if system is None:
        system = platform.system()

    if system not in PLATFORM_MAPPINGS:
        raise RuntimeError(f"Unsupported operating system: {system}")

    return PLATFORM_MAPPINGS[system].binary_extension


def get_binary_name(name: str, system: Optional[str] = None) -> str:
    return f"{name}{get_binary_extension(system)}"

