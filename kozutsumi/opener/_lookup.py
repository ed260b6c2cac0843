from __future__ import annotations

import configparser
import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional


_MACOS_APP_DIRS = (
    "/Applications",
    "/Applications/Utilities",
    "/System/Applications",
    "/System/Applications/Utilities",
    "~/Applications",
)


def _xdg_application_dirs() -> List[Path]:
    """
    `applications/` directories in XDG lookup order: $XDG_DATA_HOME first, then $XDG_DATA_DIRS.
    """
    data_home = os.environ.get("XDG_DATA_HOME") or "~/.local/share"
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    roots = [data_home] + [d for d in data_dirs.split(":") if d]
    return [Path(os.path.expanduser(r)) / "applications" for r in roots]


def _desktop_entry_name(path: Path) -> Optional[str]:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError):
        return None
    if not parser.has_section("Desktop Entry"):
        return None
    return parser.get("Desktop Entry", "Name", fallback=None)


def find_desktop_id(name: str, app_dirs: Optional[Iterable[Path]] = None) -> Optional[str]:
    """
    Resolve an application display name to a desktop file id (e.g. "firefox").

    Matches the file stem case-insensitively first, then the `Name=` key.
    """
    dirs = [d for d in (app_dirs if app_dirs is not None else _xdg_application_dirs()) if d.is_dir()]
    wanted = name.casefold()
    for d in dirs:
        for p in sorted(d.glob("*.desktop")):
            if p.stem.casefold() == wanted:
                return p.stem
    for d in dirs:
        for p in sorted(d.glob("*.desktop")):
            display = _desktop_entry_name(p)
            if display is not None and display.casefold() == wanted:
                return p.stem
    return None


def find_macos_app(name: str) -> bool:
    bundle = name if name.endswith(".app") else f"{name}.app"
    for d in _MACOS_APP_DIRS:
        if (Path(os.path.expanduser(d)) / bundle).exists():
            return True
    # Apps outside the standard folders are still known to Spotlight.
    query = 'kMDItemContentType == "com.apple.application-bundle" && kMDItemDisplayName == "{}"'.format(
        name.replace("\\", "\\\\").replace('"', '\\"')
    )
    try:
        cp = subprocess.run(["mdfind", query], capture_output=True, text=True, check=False, timeout=5)
    except (OSError, subprocess.TimeoutExpired):
        # Lookup unavailable: let `open -a` decide.
        return True
    return bool(cp.stdout.strip())


def find_windows_app(name: str) -> bool:
    if shutil.which(name):
        return True
    import winreg  # type: ignore[import-not-found]

    exe = name if name.lower().endswith(".exe") else f"{name}.exe"
    key = rf"Software\Microsoft\Windows\CurrentVersion\App Paths\{exe}"
    for hive in (winreg.HKEY_CURRENT_USER, winreg.HKEY_LOCAL_MACHINE):
        try:
            winreg.CloseKey(winreg.OpenKey(hive, key))
            return True
        except OSError:
            continue
    return False


def has_scheme_handler(scheme: str, platform: str) -> bool:
    """
    Best-effort check for a registered URI scheme handler.

    Returns True when the platform offers no cheap way to tell.
    """
    if platform.startswith("win"):
        import winreg  # type: ignore[import-not-found]

        try:
            winreg.CloseKey(winreg.OpenKey(winreg.HKEY_CLASSES_ROOT, scheme))
            return True
        except OSError:
            return False
    if platform == "darwin":
        return True
    try:
        cp = subprocess.run(
            ["xdg-mime", "query", "default", f"x-scheme-handler/{scheme}"],
            capture_output=True,
            text=True,
            check=False,
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return True
    return bool(cp.stdout.strip())
