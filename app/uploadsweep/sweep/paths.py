"""Path canonicalization for scanning and deletion.

All comparisons between on-disk paths, registry identities and the
uploads root are made on a slash-canonical string form: backslashes
become forward slashes and runs of slashes collapse into one.
"""

import os
import re

_REPEATED_SLASHES = re.compile(r"/+")


def normalize_slashes(path: str) -> str:
    """Convert backslashes to forward slashes and collapse repeated slashes.

    Args:
        path: Filesystem path in any separator style.

    Returns:
        Slash-canonical form of the path.
    """
    return _REPEATED_SLASHES.sub("/", path.replace("\\", "/"))


def normalize_root(root: str | os.PathLike[str]) -> str:
    """Return the slash-canonical root with exactly one trailing slash."""
    return normalize_slashes(os.fspath(root)).rstrip("/") + "/"


def relative_to_root(path: str, root: str | os.PathLike[str]) -> str:
    """Derive the root-relative form of a path.

    The root prefix is stripped only when the path starts with it;
    otherwise the canonical path is returned without its leading slash.

    Args:
        path: Absolute file path.
        root: Root directory the relative path is computed against.

    Returns:
        Relative path without a leading slash.
    """
    canonical = normalize_slashes(path)
    prefix = normalize_slashes(os.fspath(root)).rstrip("/")
    if prefix and (canonical == prefix or canonical.startswith(prefix + "/")):
        canonical = canonical[len(prefix) :]
    return canonical.lstrip("/")


def basename(path: str) -> str:
    """Return the final component of a slash- or backslash-separated path."""
    return normalize_slashes(path).rstrip("/").rsplit("/", 1)[-1]


def dirname(path: str) -> str:
    """Return the directory part of a relative path, or "" at the top level."""
    canonical = normalize_slashes(path).strip("/")
    if "/" not in canonical:
        return ""
    return canonical.rsplit("/", 1)[0]


def has_parent_segment(path: str) -> bool:
    """Check whether a path contains a ``..`` segment."""
    return ".." in normalize_slashes(path).split("/")


def is_within_root(path: str, root: str | os.PathLike[str]) -> bool:
    """Lexically check that a path lies strictly under root.

    This is a string-prefix check on the slash-canonical forms. Paths
    with ``..`` segments are always rejected, even when the prefix
    matches, since they may resolve outside the root.

    Args:
        path: Candidate path.
        root: Root directory.

    Returns:
        True if the canonical path starts with the canonical root plus
        a separator and has no parent segments.
    """
    if has_parent_segment(path):
        return False
    canonical_root = normalize_root(root)
    if canonical_root == "/":
        # An empty or filesystem-root "root" would contain everything.
        return False
    return normalize_slashes(path).startswith(canonical_root)
