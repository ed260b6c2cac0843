from __future__ import annotations

import os

from .resource import ApplicationName, DeepLink, FilesystemPath, Resource, WebURL


FS_MARKER = "fs:"
WEB_PREFIXES = ("http://", "https://")
SCHEME_DELIMITER = "://"


def _expand_home(path_str: str) -> str:
    # os.path.expanduser honours a patched $HOME, which the tests rely on.
    return os.path.expanduser(path_str)


def classify(entry: str) -> Resource:
    """
    Map a raw parcel entry to its resource kind. First match wins:

    1. `fs:<path>`           -> FilesystemPath (marker stripped, leading ~ expanded)
    2. `http://`, `https://` -> WebURL
    3. anything with `://`   -> DeepLink
    4. everything else       -> ApplicationName (the whole string)

    Never raises. Unmarked absolute paths stay application names; the marker
    is required to tell them apart from app names containing slashes.
    """
    if entry.startswith(FS_MARKER):
        return FilesystemPath(_expand_home(entry[len(FS_MARKER) :]))
    if entry[:8].lower().startswith(WEB_PREFIXES):
        return WebURL(entry)
    if SCHEME_DELIMITER in entry:
        return DeepLink(entry)
    return ApplicationName(entry)
