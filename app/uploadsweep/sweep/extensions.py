"""Supported media file extensions.

This module defines the fixed allow-list of file extensions that the
walker considers candidate media files, grouped by media category.
Changing this list is a versioned configuration change, not a
per-call option.
"""

from uploadsweep.sweep.models import MediaCategory

# Bumped whenever the extension list below changes.
EXTENSIONS_VERSION = 1

# Extensions per category (lowercase, without leading dot).
EXTENSIONS_BY_CATEGORY: dict[MediaCategory, tuple[str, ...]] = {
    MediaCategory.IMAGE: (
        "jpg",
        "jpeg",
        "png",
        "gif",
        "webp",
        "bmp",
        "tiff",
        "tif",
        "svg",
        "ico",
    ),
    MediaCategory.DOCUMENT: (
        "pdf",
        "doc",
        "docx",
        "xls",
        "xlsx",
        "ppt",
        "pptx",
        "odt",
        "ods",
        "odp",
        "txt",
        "rtf",
        "csv",
    ),
    MediaCategory.AUDIO: ("mp3", "wav", "ogg", "flac", "aac", "m4a", "wma"),
    MediaCategory.VIDEO: (
        "mp4",
        "mov",
        "avi",
        "wmv",
        "mkv",
        "webm",
        "flv",
        "m4v",
        "mpeg",
        "mpg",
    ),
    MediaCategory.ARCHIVE: ("zip", "rar", "7z", "tar", "gz"),
}

_CATEGORY_BY_EXTENSION: dict[str, MediaCategory] = {
    ext: category for category, exts in EXTENSIONS_BY_CATEGORY.items() for ext in exts
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(_CATEGORY_BY_EXTENSION)


def get_extension(path: str) -> str:
    """Return the lowercase extension of a path without the leading dot.

    Everything after the last dot of the filename counts, so
    ``backup.tar.gz`` yields ``gz`` and a file named ``.jpg`` yields
    ``jpg``.
    """
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    _, dot, extension = name.rpartition(".")
    return extension.lower() if dot else ""


def is_supported(path: str) -> bool:
    """Check if a path has a supported media extension.

    Args:
        path: File path or bare filename.

    Returns:
        True if the lowercase extension is in SUPPORTED_EXTENSIONS.
    """
    return get_extension(path) in SUPPORTED_EXTENSIONS


def category_for(path: str) -> MediaCategory | None:
    """Return the media category of a path, or None if unsupported."""
    return _CATEGORY_BY_EXTENSION.get(get_extension(path))
