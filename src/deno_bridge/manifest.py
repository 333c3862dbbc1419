"""Manifest generation for bundled handlers."""
import re
from typing import Any, Dict, Iterable

from deno_bridge.types import Declaration, Handler

MANIFEST_VERSION = 1


def path_to_pattern(path: str) -> str:
    """Turn a declaration path into an anchored regular expression."""
    escaped = re.escape(path.rstrip("/") or "/").replace(r"\*", ".*")
    if escaped == "/":
        return "^/$"
    return f"^{escaped}/?$"


def generate_manifest(
    bundle_path: str,
    handlers: Iterable[Handler],
    declarations: Iterable[Declaration],
) -> Dict[str, Any]:
    """Build the manifest document for a bundle.

    Only declarations that point at a discovered handler become routes.
    """
    handler_names = {handler.name for handler in handlers}
    routes = [
        {"function": declaration.function, "pattern": path_to_pattern(declaration.path)}
        for declaration in declarations
        if declaration.function in handler_names
    ]

    return {
        "bundles": [{"asset": bundle_path, "format": "js"}],
        "routes": routes,
        "version": MANIFEST_VERSION,
    }
