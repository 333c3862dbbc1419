"""Handler discovery and pre-bundle entry point generation."""
import hashlib
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from deno_bridge.types import BundleOutput, Handler
from deno_bridge.logging import get_logger

logger = get_logger(__name__)

HANDLER_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
FUNCTION_HEADER = "x-deno-bridge-function"

SERVER_BOOTSTRAP = """
if (import.meta.main) {
  const port = Number(Deno.args[0] ?? 8000);
  const serveConnection = async (conn) => {
    for await (const { request, respondWith } of Deno.serveHttp(conn)) {
      const func = functions[request.headers.get("%s") ?? ""];
      respondWith(func ? func(request) : new Response("Function not found", { status: 404 }));
    }
  };
  for await (const conn of Deno.listen({ port })) {
    serveConnection(conn);
  }
}
""" % FUNCTION_HEADER


def _find_directory_handler(directory: Path) -> Optional[Path]:
    for stem in ("index", directory.name):
        for extension in HANDLER_EXTENSIONS:
            candidate = directory / f"{stem}{extension}"
            if candidate.is_file():
                return candidate
    return None


def find_handlers(source_directories: Iterable[Union[str, Path]]) -> List[Handler]:
    """Discover handler files in the given directories.

    A script directly inside a source directory is a handler named after its
    stem. A subdirectory holding ``index.<ext>`` or ``<dirname>.<ext>`` is a
    handler named after the directory. Earlier directories win on name
    clashes.
    """
    handlers: Dict[str, Handler] = {}

    for source_directory in map(Path, source_directories):
        if not source_directory.is_dir():
            logger.debug({"event": "source_directory_missing", "path": str(source_directory)})
            continue

        for entry in sorted(source_directory.iterdir()):
            if entry.is_file() and entry.suffix in HANDLER_EXTENSIONS:
                name, path = entry.stem, entry
            elif entry.is_dir():
                path = _find_directory_handler(entry)
                if path is None:
                    continue
                name = entry.name
            else:
                continue

            if name in handlers:
                logger.debug({
                    "event": "handler_shadowed",
                    "name": name,
                    "path": str(path),
                    "kept": str(handlers[name].path)
                })
                continue

            handlers[name] = Handler(name=name, path=path.resolve())

    logger.debug({"event": "handlers_found", "handlers": sorted(handlers)})
    return list(handlers.values())


def generate_entry_point(handlers: List[Handler]) -> str:
    """Build the ES module that imports every handler."""
    imports = [
        f"import func{index} from {json.dumps(handler.path.as_uri())};"
        for index, handler in enumerate(handlers)
    ]
    exports = [
        f"  {json.dumps(handler.name)}: func{index},"
        for index, handler in enumerate(handlers)
    ]

    return "\n".join([
        *imports,
        "",
        "export const functions = {",
        *exports,
        "};",
        SERVER_BOOTSTRAP,
    ])


async def bundle(
    source_directories: Iterable[Union[str, Path]],
    dist_directory: Union[str, Path],
) -> BundleOutput:
    """Write the pre-bundle entry point for the handlers in ``source_directories``."""
    dist_directory = Path(dist_directory)
    dist_directory.mkdir(parents=True, exist_ok=True)

    handlers = find_handlers(source_directories)
    contents = generate_entry_point(handlers)
    digest = hashlib.sha256(contents.encode()).hexdigest()

    pre_bundle_path = dist_directory / f"{digest}-pre.js"
    bundle_path = dist_directory / f"{digest}.js"
    pre_bundle_path.write_text(contents, encoding="utf-8")

    logger.info({
        "event": "pre_bundle_written",
        "path": str(pre_bundle_path),
        "handlers": len(handlers)
    })

    return BundleOutput(
        bundle_path=bundle_path,
        pre_bundle_path=pre_bundle_path,
        handlers=handlers,
    )
