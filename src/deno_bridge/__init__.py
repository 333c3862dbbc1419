"""Locate, cache, download and run the deno binary."""
from deno_bridge.bridge import DenoBridge
from deno_bridge.errors import BinaryExecutionError, BinaryVerificationError, BridgeError
from deno_bridge.types import BridgeConfig, BundleResult, Declaration

__all__ = [
    "DenoBridge",
    "BridgeConfig",
    "BundleResult",
    "Declaration",
    "BridgeError",
    "BinaryExecutionError",
    "BinaryVerificationError",
]
