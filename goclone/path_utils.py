"""Turn the path component of a Git URL into a local clone destination.

The result mirrors what ``git clone`` picks on its own, minus the leading
separator, and is guaranteed to stay inside the current working directory.
"""
import os
import re

from .errors import AbsolutePathError, PathEscapeError, PathTraversalError

GIT_SUFFIX = ".git"
SEPARATORS = ("/", "\\")

_SEGMENT_SPLIT = re.compile(r"[/\\]")
_PLATFORM_SEPARATORS = os.sep + (os.altsep or "")


def pre_trim(path):
    """Remove a single leading path separator."""
    if path[:1] in SEPARATORS:
        return path[1:]
    return path


def post_trim(path):
    """Remove a trailing ``.git`` unless it is the whole last segment."""
    if not path.endswith(GIT_SUFFIX):
        return path
    last_segment = _SEGMENT_SPLIT.split(path)[-1]
    if len(last_segment) <= len(GIT_SUFFIX):
        return path
    return path[: -len(GIT_SUFFIX)]


def _is_absolute(path):
    return os.path.isabs(path) or bool(os.path.splitdrive(path)[0])


def _is_within(base, target):
    try:
        return os.path.commonpath([base, target]) == base
    except ValueError:
        # different drives on Windows
        return False


def sanitize(path):
    """Return a relative destination for ``path`` or raise a PathError.

    Empty input, or input made only of separators, sanitizes to ``"."``.
    """
    cleaned = post_trim(pre_trim(path))
    cleaned = os.path.normpath(cleaned)
    cleaned = cleaned.lstrip(_PLATFORM_SEPARATORS) or os.curdir

    if ".." in _SEGMENT_SPLIT.split(cleaned):
        raise PathTraversalError(f"path traversal detected in: {path}")

    if _is_absolute(cleaned):
        raise AbsolutePathError(f"absolute paths not allowed: {path}")

    try:
        cwd = os.path.realpath(os.getcwd())
    except OSError as e:
        raise PathEscapeError(f"cannot get working directory: {e.strerror}") from e
    resolved = os.path.realpath(os.path.join(cwd, cleaned))
    if not _is_within(cwd, resolved):
        raise PathEscapeError(f"path escapes working directory: {path}")

    return cleaned
