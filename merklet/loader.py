"""
Leaf loading for Merklet.

Reads leaf data from a file (or stdin) and wraps each value as a hashable
leaf item. Two input formats are supported:
- lines: one leaf per line, trailing newline removed
- json: a top-level array; strings are hashed as text, any other value is
  hashed as its canonical JSON encoding (sorted keys, compact separators)
"""

import json
import sys
from typing import Any, List

from merklet.exceptions import LeafLoadError
from merklet.hashing import HashFunction, default_hash_function
from merklet.logging_config import get_logger
from merklet.merkle.hashable import TextItem

logger = get_logger(__name__)

LEAF_FORMATS = ("lines", "json")


def canonical_json(value: Any) -> str:
    """Encode a JSON value deterministically."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _read_text(path: str, encoding: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read leaf file '{path}': {e}")
        raise LeafLoadError(f"Failed to read leaf file '{path}': {e}") from e


def parse_lines(content: str, skip_blank: bool = True) -> List[str]:
    """
    Split text content into leaf values, one per line.

    Only LF ends a line; a trailing CR is removed from each line. Other
    Unicode line separators stay inside the leaf value.

    Args:
        content: Raw file content
        skip_blank: Drop lines that are empty or whitespace only

    Returns:
        Leaf values in file order
    """
    values = content.split("\n")
    if values[-1] == "":
        values.pop()
    values = [line[:-1] if line.endswith("\r") else line for line in values]
    if skip_blank:
        values = [line for line in values if line.strip()]
    return values


def parse_json(content: str) -> List[str]:
    """
    Parse a JSON array into leaf values.

    Raises:
        LeafLoadError: If the content is not valid JSON or not an array
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LeafLoadError(f"Invalid JSON leaf data: {e}") from e

    if not isinstance(data, list):
        raise LeafLoadError(
            f"JSON leaf data must be an array, got {type(data).__name__}"
        )

    return [value if isinstance(value, str) else canonical_json(value) for value in data]


def load_leaves(
    path: str,
    fmt: str = "lines",
    encoding: str = "utf-8",
    skip_blank: bool = True,
    hash_function: HashFunction = None,
) -> List[TextItem]:
    """
    Load leaf items from a file.

    Args:
        path: File path, or "-" for stdin
        fmt: "lines" or "json"
        encoding: Text encoding of the file, also used for hashing
        skip_blank: Drop blank lines in "lines" format
        hash_function: Hash primitive for the items (default SHA-256)

    Returns:
        Leaf items in input order (possibly empty)

    Raises:
        LeafLoadError: If the file cannot be read or parsed
    """
    if fmt not in LEAF_FORMATS:
        raise LeafLoadError(f"Unknown leaf format '{fmt}', expected one of {list(LEAF_FORMATS)}")

    if hash_function is None:
        hash_function = default_hash_function()

    content = _read_text(path, encoding)

    if fmt == "json":
        values = parse_json(content)
    else:
        values = parse_lines(content, skip_blank=skip_blank)

    logger.debug(f"Loaded {len(values)} leaves from {path} ({fmt})")

    return [TextItem(value, encoding, hash_function) for value in values]
