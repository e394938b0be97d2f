"""
Path and segment helpers for slash-separated project paths.

All functions are pure and accept any string.
"""
import posixpath
import re
from typing import List, Optional

_PLACEHOLDER = re.compile(r"\[.*\]")
_REPEATED_SLASHES = re.compile(r"/{2,}")
_SPECIAL_CHARS = frozenset("[]^$.|?*+()")


def split_segments(path: str) -> List[str]:
    return path.split("/")


def parse_name(path: str) -> tuple:
    """Return ``(dir, name, ext)`` for the last segment of ``path``."""
    directory, base = posixpath.split(path)
    name, ext = posixpath.splitext(base)
    return directory, name, ext


def segment_name(segment: str) -> Optional[str]:
    """Placeholder name of a segment: ``[id].ts`` -> ``id``, ``users`` -> None."""
    _, name, _ = parse_name(segment)
    if len(name) >= 2 and name.startswith("[") and name.endswith("]"):
        return name[1:-1]
    return None


def join_path(*segments: str) -> str:
    return _REPEATED_SLASHES.sub("/", "/".join(segments))


def normalized_absolute_path(path: str) -> str:
    """
    Drop the extension and replace placeholders with a fixed literal so that
    ``api/[id].ts`` and ``api/1.ts`` both become ``api/1``.
    """
    directory, name, _ = parse_name(path)
    parts = join_path(directory, name).split("/")
    return "/".join(_PLACEHOLDER.sub("1", part, count=1) for part in parts)


def escape_for_pattern(literal: str) -> str:
    return "".join(f"\\{c}" if c in _SPECIAL_CHARS else c for c in literal)


def trailing_placeholder_count(path: str) -> int:
    count = 0
    for segment in split_segments(path):
        count = count + 1 if segment_name(segment) is not None else 0
    return count
