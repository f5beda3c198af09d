"""
Maps a file to its format category and to the path its normalized output goes to.

The decision is a pure function of the file name's extension, compared
case-insensitively. The file's contents are never inspected.
"""
import re
from pathlib import Path
from typing import Optional

from ..config.audio import EXTENSION_CATEGORIES, IN_PLACE_TEMP_PREFIX, TARGET_EXTENSION
from ..domain.models import FormatCategory

# tempfile.mkstemp inserts 8 characters from [a-z0-9_] between prefix and suffix.
_STAGING_NAME_RE = re.compile(re.escape(IN_PLACE_TEMP_PREFIX) + r"[a-z0-9_]{8}" + re.escape(TARGET_EXTENSION))


def classify(file_path: Path) -> FormatCategory:
    """
    Returns the category of `file_path` based on its extension.

    A file without an extension (including dot-files such as `.mp3`, whose
    whole name is the stem) is `UNRECOGNIZED`.
    """
    return EXTENSION_CATEGORIES.get(file_path.suffix.lower(), FormatCategory.UNRECOGNIZED)


def output_path_for(file_path: Path, category: Optional[FormatCategory] = None) -> Path:
    """
    Where the normalized version of `file_path` is written.

    Files already in the target container are re-encoded in place, whatever
    the case of their extension. Lossy sources get a sibling with the same
    base name and the target extension.
    """
    if category is None:
        category = classify(file_path)
    if category is FormatCategory.RECOGNIZED_TARGET:
        return file_path
    return file_path.with_suffix(TARGET_EXTENSION)


def deletes_original(category: FormatCategory) -> bool:
    """Only lossy sources are removed, and only after a successful conversion."""
    return category is FormatCategory.RECOGNIZED_LOSSY


def is_staging_file(file_path: Path) -> bool:
    """True for the temporary file of an in-place re-encode that is still running (or was interrupted)."""
    return _STAGING_NAME_RE.fullmatch(file_path.name) is not None
