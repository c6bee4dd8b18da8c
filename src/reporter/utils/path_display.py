# src/reporter/utils/path_display.py
import os


def displayable_path(path: str) -> str:
    """
    Returns `path` as text that can be written as UTF-8.

    Names that are not valid UTF-8 come back from os.walk with surrogate
    escapes; those bytes are shown as U+FFFD instead.
    """
    return os.fsencode(path).decode("utf-8", "replace")
