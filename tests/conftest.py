from pathlib import Path

import pytest

from deno_bridge.binaries.constants import DENO_VERSION_FILE
from deno_bridge.bridge import DenoBridge

FAKE_DENO_TEMPLATE = """#!/bin/sh
if [ "$1" = "--version" ]; then
  echo "VERSION_LINE"
  echo "v8 9.7.106.15"
  exit 0
fi
echo "$@" > "ARGS_FILE"
echo "fake deno: $1" >&2
BODY
"""



@pytest.fixture
def make_fake_deno():
    """Write an executable shell script that behaves like a deno binary.

    ``--version`` prints ``deno <version>`` (or unrelated text when version is
    None); any other invocation records its arguments next to the script and
    then runs ``body``.
    """
    def _make(path: Path, version: str = "1.17.2", body: str = "exit 0") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        version_line = f"deno {version} (release, x86_64-unknown-linux-gnu)" if version else "hello world"
        script = (
            FAKE_DENO_TEMPLATE
            .replace("VERSION_LINE", version_line)
            .replace("ARGS_FILE", str(path.with_suffix(".args")))
            .replace("BODY", body)
        )
        path.write_text(script)
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def make_cached_bridge(cache_dir, make_fake_deno):
    """Bridge whose cache already holds a verified fake binary."""
    def _make(version: str = "1.17.2", body: str = "exit 0", **overrides) -> DenoBridge:
        make_fake_deno(cache_dir / "deno", version=version, body=body)
        (cache_dir / DENO_VERSION_FILE).write_text(version)
        options = {"cache_directory": cache_dir, "use_global": False, **overrides}
        return DenoBridge(**options)

    return _make
