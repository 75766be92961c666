"""Orphan matching against the registry index.

Pure functions with no I/O: given a file path, the uploads root and
a built index, decide whether the registry knows the file.
"""

import os

from uploadsweep.sweep.paths import basename, relative_to_root
from uploadsweep.sweep.registry import RegistryIndex


def is_known(path: str, root: str | os.PathLike[str], index: RegistryIndex) -> bool:
    """Check if a file is known to the registry.

    A file is known when either its root-relative path or its bare
    filename is in the index.

    Args:
        path: Absolute path of a walked file.
        root: Uploads root the relative path is computed against.
        index: Registry identity index.

    Returns:
        True if the file matches a registry identity.
    """
    if relative_to_root(path, root) in index:
        return True
    return basename(path) in index


def is_orphan(path: str, root: str | os.PathLike[str], index: RegistryIndex) -> bool:
    """Check if a file is an orphan (unknown to the registry)."""
    return not is_known(path, root, index)
