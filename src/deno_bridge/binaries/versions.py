"""Binary version detection and range matching."""
import asyncio
import re
from pathlib import Path
from typing import List, Optional, Union

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from deno_bridge.binaries.constants import DENO_VERSION_PATTERN
from deno_bridge.logging import get_logger

logger = get_logger(__name__)

WILDCARDS = ("x", "X", "*")
COMPARATOR_PATTERN = re.compile(r"^(\^|~|>=|<=|>|<|=)?\s*v?(.*)$")
# Operators may be separated from their version by whitespace
OPERATOR_SPACE_PATTERN = re.compile(r"(\^|~|>=|<=|>|<|=)\s+")
HYPHEN_PATTERN = re.compile(r"^v?(\S+)\s+-\s+v?(\S+)$")


async def get_binary_version(binary_path: Union[str, Path]) -> Optional[str]:
    """Ask a binary for its version.

    Runs ``<binary> --version`` and parses the first line of stdout. Returns
    None if the binary is missing, fails or prints anything unexpected.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            str(binary_path),
            "--version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await process.communicate()

        if process.returncode != 0:
            logger.debug({
                "event": "version_query_failed",
                "binary": str(binary_path),
                "returncode": process.returncode
            })
            return None

        match = re.match(DENO_VERSION_PATTERN, stdout.decode())
    except Exception as e:
        logger.debug({
            "event": "version_query_failed",
            "binary": str(binary_path),
            "error": str(e)
        })
        return None

    if not match:
        logger.debug({"event": "version_unparseable", "binary": str(binary_path)})
        return None

    return match.group(1)


def _parse_partial(text: str) -> List[int]:
    """Parse ``1``, ``1.2``, ``1.2.x`` or ``1.2.3`` into its numeric parts."""
    numbers = []
    if text in ("", *WILDCARDS):
        return numbers
    for part in text.split("."):
        if part in WILDCARDS:
            break
        numbers.append(int(part))
    if len(numbers) > 3:
        raise ValueError(f"Invalid version: {text}")
    return numbers


def _pad(numbers: List[int]) -> str:
    return ".".join(str(n) for n in (numbers + [0, 0, 0])[:3])


def _bump(numbers: List[int], index: int) -> str:
    bumped = numbers[:index] + [numbers[index] + 1]
    return _pad(bumped)


def _caret(numbers: List[int]) -> List[str]:
    if not numbers:
        return [">=0.0.0"]
    if numbers[0] > 0 or len(numbers) == 1:
        upper = _bump(numbers, 0)
    elif numbers[1] > 0 or len(numbers) == 2:
        upper = _bump(numbers, 1)
    else:
        upper = _bump(numbers, 2)
    return [f">={_pad(numbers)}", f"<{upper}"]


def _tilde(numbers: List[int]) -> List[str]:
    if not numbers:
        return [">=0.0.0"]
    upper = _bump(numbers, 0) if len(numbers) == 1 else _bump(numbers, 1)
    return [f">={_pad(numbers)}", f"<{upper}"]


def _partial(numbers: List[int]) -> List[str]:
    if not numbers:
        return [">=0.0.0"]
    if len(numbers) == 3:
        return [f"=={_pad(numbers)}"]
    return _tilde(numbers)


def _at_most(numbers: List[int]) -> List[str]:
    """Inclusive upper bound; ``<=1.17`` admits every 1.17.x."""
    if not numbers:
        return []
    if len(numbers) == 3:
        return [f"<={_pad(numbers)}"]
    return [f"<{_bump(numbers, len(numbers) - 1)}"]


def _greater_than(numbers: List[int]) -> List[str]:
    """Exclusive lower bound; ``>1.17`` starts at 1.18.0."""
    if not numbers:
        return ["<0.0.0"]
    if len(numbers) == 3:
        return [f">{_pad(numbers)}"]
    return [f">={_bump(numbers, len(numbers) - 1)}"]


def _translate(comparator: str) -> List[str]:
    match = COMPARATOR_PATTERN.match(comparator)
    operator, version = match.group(1), match.group(2).strip()
    numbers = _parse_partial(version)

    if operator == "^":
        return _caret(numbers)
    if operator == "~":
        return _tilde(numbers)
    if operator in (None, "="):
        return _partial(numbers)
    if operator == ">=":
        return [f">={_pad(numbers)}"]
    if operator == ">":
        return _greater_than(numbers)
    if operator == "<":
        return [f"<{_pad(numbers)}"] if numbers else ["<0.0.0"]
    return _at_most(numbers) or [">=0.0.0"]


def _hyphen(low: str, high: str) -> List[str]:
    return [f">={_pad(_parse_partial(low))}", *_at_most(_parse_partial(high))]


def to_specifier_sets(version_range: str) -> List[SpecifierSet]:
    """Translate an npm-style range into PEP 440 specifier sets.

    Alternatives separated by ``||`` become separate sets; a version
    satisfies the range when it is contained in any of them. Partial
    bounds, hyphen ranges and ``>= 1.2`` style spacing follow node-semver.
    """
    specifier_sets = []
    for alternative in version_range.split("||"):
        alternative = OPERATOR_SPACE_PATTERN.sub(r"\1", alternative.replace(",", " ").strip())
        hyphen = HYPHEN_PATTERN.match(alternative)

        if hyphen:
            specifiers = _hyphen(*hyphen.groups())
        else:
            specifiers = []
            for comparator in alternative.split() or ["*"]:
                specifiers.extend(_translate(comparator))

        specifier_sets.append(SpecifierSet(",".join(specifiers)))
    return specifier_sets


def satisfies(version: str, version_range: str) -> bool:
    """Check whether ``version`` falls within ``version_range``."""
    try:
        parsed = Version(version.strip())
        specifier_sets = to_specifier_sets(version_range)
    except (InvalidVersion, InvalidSpecifier, ValueError, AttributeError):
        return False

    return any(specifiers.contains(parsed) for specifiers in specifier_sets)
