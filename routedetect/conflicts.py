"""
Conflict detection between API files.

Two files conflict when they resolve to the same route once placeholders are
substituted, or when they use differently named placeholders at the same
position of an otherwise matching path.
"""
import logging
from typing import Dict, List, Optional, Sequence

from .errors import ConflictingFilePathError, ConflictingPathSegmentError
from .utils.paths import normalized_absolute_path, segment_name, split_segments
from .utils.text import concat_with_and

logger = logging.getLogger(__name__)


class AbsolutePathCache:
    """Memoizes ``normalized_absolute_path`` for one detection run."""

    def __init__(self):
        self._paths: Dict[str, str] = {}
        self.computed = 0

    def get(self, path: str) -> str:
        normalized = self._paths.get(path)
        if normalized is None:
            normalized = normalized_absolute_path(path)
            self._paths[path] = normalized
            self.computed += 1
        return normalized

    def __len__(self) -> int:
        return len(self._paths)


def conflicting_segment(file_path: str) -> Optional[str]:
    """Placeholder name used by more than one segment of ``file_path``."""
    seen = set()
    for segment in split_segments(file_path):
        name = segment_name(segment)
        if name is not None and name in seen:
            return name
        if name:
            seen.add(name)
    return None


def partially_matches(path_a: str, path_b: str) -> bool:
    """
    True when the leading segments agree except for differently named
    placeholders at the same position.

    Only the first ``min(len_a, len_b)`` segments are compared.
    """
    parts_a = split_segments(path_a)
    parts_b = split_segments(path_b)

    long, short = (parts_a, parts_b) if len(parts_a) > len(parts_b) else (parts_b, parts_a)

    for segment_short, segment_long in zip(short, long):
        name_long = segment_name(segment_long)
        name_short = segment_name(segment_short)

        if segment_short != segment_long and (not name_long or not name_short):
            return False

        if name_long != name_short:
            return True

    return False


def path_occurrences(file_path: str, files: Sequence[str], cache: AbsolutePathCache) -> List[str]:
    """Every other file in ``files`` whose route collides with ``file_path``."""
    current = cache.get(file_path)
    conflicts = []

    for other in files:
        if other == file_path:
            continue
        if cache.get(other) == current or partially_matches(file_path, other):
            conflicts.append(other)

    return conflicts


def check_conflicts(file_path: str, api_files: Sequence[str], cache: AbsolutePathCache) -> None:
    """Raise the conflict error for ``file_path``, if any."""
    segment = conflicting_segment(file_path)
    if segment is not None:
        raise ConflictingPathSegmentError(
            f'The segment "{segment}" occurs more than one time in your path "{file_path}". '
            "Please make sure that every segment in a path is unique."
        )

    occurrences = path_occurrences(file_path, api_files, cache)
    if occurrences:
        logger.debug(f"{file_path} conflicts with {len(occurrences)} file(s)")
        message_paths = concat_with_and([f'"{name}"' for name in occurrences])
        raise ConflictingFilePathError(
            "Two or more files have conflicting paths or names. "
            "Please make sure path segments and filenames, without their extension, are unique. "
            f'The path "{file_path}" has conflicts with {message_paths}.'
        )
