"""
Exclusion patterns shared by the step hasher and the copier

A path is excluded when any pattern matches the whole path, the bare entry
name, or any single path segment. ``*``, ``?`` and ``[...]`` never cross a
``/``; ``**`` stands for any number of segments. Relative patterns float:
they may match the tail of a path, so ``x/**`` and ``**/x/**`` both exclude
everything under any directory named ``x``. Patterns starting with ``/``
are anchored at the root. A pattern without wildcards also matches when its
segments appear consecutively anywhere in the path.
"""
import posixpath
from fnmatch import fnmatchcase
from typing import List, Sequence

RECURSIVE_WILDCARD = "**"
_GLOB_CHARS = frozenset("*?[")


def is_excluded(path: str, name: str, patterns: Sequence[str]) -> bool:
    """
    Check whether path (or its entry name) matches any exclusion pattern.

    Args:
        path: Full path, any separator style
        name: Bare entry name, may be empty
        patterns: Glob patterns

    Returns:
        True if the entry must be skipped
    """
    if not patterns:
        return False

    normalized = normalize_path(path)
    segments = _split(normalized)

    for raw in patterns:
        pattern = raw.replace("\\", "/")
        if not pattern:
            continue
        if _match_path(pattern, normalized):
            return True
        if name and fnmatchcase(name, pattern):
            return True
        if any(fnmatchcase(segment, pattern) for segment in segments):
            return True
        if not _has_glob(pattern) and _contains_run(segments, _split(pattern)):
            return True
    return False


def normalize_path(path: str) -> str:
    """Forward slashes, redundant separators and ./ removed"""
    if not path:
        return ""
    return posixpath.normpath(path.replace("\\", "/"))


def _match_path(pattern: str, path: str) -> bool:
    if not path:
        return False
    pattern_segments = _split(pattern)
    path_segments = _split(path)
    if pattern.startswith("/"):
        if not path.startswith("/"):
            return False
        return _match_segments(pattern_segments, path_segments)
    return _match_segments([RECURSIVE_WILDCARD] + pattern_segments, path_segments)


def _match_segments(pattern: List[str], segments: List[str]) -> bool:
    if not pattern:
        return not segments
    head = pattern[0]
    if head == RECURSIVE_WILDCARD:
        rest = pattern[1:]
        # collapse repeated ** so the search stays linear per level
        while rest and rest[0] == RECURSIVE_WILDCARD:
            rest = rest[1:]
        if not rest:
            return True
        return any(_match_segments(rest, segments[i:]) for i in range(len(segments) + 1))
    if not segments or not fnmatchcase(segments[0], head):
        return False
    return _match_segments(pattern[1:], segments[1:])


def _contains_run(segments: List[str], run: List[str]) -> bool:
    if not run or len(run) > len(segments):
        return False
    width = len(run)
    return any(segments[i:i + width] == run for i in range(len(segments) - width + 1))


def _has_glob(pattern: str) -> bool:
    return any(c in _GLOB_CHARS for c in pattern)


def _split(path: str) -> List[str]:
    return [part for part in path.split("/") if part and part != "."]
