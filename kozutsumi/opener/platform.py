from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from kozutsumi.core.resource import (
    LAUNCH_ERROR,
    NOT_FOUND,
    PERMISSION_DENIED,
    ApplicationName,
    DeepLink,
    FilesystemPath,
    OpenResult,
    Resource,
    WebURL,
)

from ._lookup import find_desktop_id, find_macos_app, find_windows_app, has_scheme_handler


# Reported command for targets handed to os.startfile on Windows.
STARTFILE = "os.startfile"


def windows_start_command_line(name: str) -> str:
    """
    Build `cmd /c start "" "<name>"` with cmd metacharacters neutralised.

    Inside double quotes cmd treats `&`, `|`, `<`, `>` and `^` literally; only
    `%` still expands, so it is moved outside the quotes and caret-escaped.
    """
    return 'cmd /c start "" "{}"'.format(name.replace("%", '"^%"'))


class PlatformOpener:
    """
    Opens resources with the platform's default handler.

    Every kind goes through the same primitive: hand the target to the
    platform launcher (`open`, `xdg-open`, `os.startfile`) detached and return
    without waiting for the launched application. Kinds differ only in
    pre-validation and in how an application name becomes a command.
    """

    def __init__(self, platform: Optional[str] = None, app_dirs: Optional[Iterable[Path]] = None):
        self._platform = platform or sys.platform
        self._app_dirs = list(app_dirs) if app_dirs is not None else None

    @property
    def _windows(self) -> bool:
        return self._platform.startswith("win")

    def open(self, resource: Resource, *, dry_run: bool = False) -> OpenResult:
        if isinstance(resource, FilesystemPath):
            if not resource.path or not os.path.exists(resource.path):
                return OpenResult.failure(resource, NOT_FOUND, f"Path does not exist: {resource.path}")
            command = self._launcher(resource.path)
        elif isinstance(resource, ApplicationName):
            if not resource.name:
                return OpenResult.failure(resource, NOT_FOUND, "Application name is empty")
            app_command = self._app_command(resource.name)
            if app_command is None:
                return OpenResult.failure(resource, NOT_FOUND, f"Application not found: {resource.name}")
            command = app_command
        elif isinstance(resource, WebURL):
            command = self._launcher(resource.url)
        elif isinstance(resource, DeepLink):
            if not has_scheme_handler(resource.scheme, self._platform):
                return OpenResult.failure(resource, NOT_FOUND, f"No handler registered for scheme: {resource.scheme}")
            command = self._launcher(resource.uri)
        else:
            raise TypeError(f"Unsupported resource: {resource!r}")

        if dry_run:
            return OpenResult.success(resource, command=command, dry_run=True)

        try:
            self._spawn(command)
        except PermissionError as e:
            return OpenResult.failure(resource, PERMISSION_DENIED, f"Permission denied: {command[0]} ({e})")
        except FileNotFoundError:
            return OpenResult.failure(resource, LAUNCH_ERROR, f"Launcher not found: {command[0]}")
        except OSError as e:
            return OpenResult.failure(resource, LAUNCH_ERROR, f"Failed to launch {command[0]}: {e}")
        return OpenResult.success(resource, command=command)

    def _launcher(self, target: str) -> List[str]:
        if self._platform == "darwin":
            return ["open", target]
        if self._windows:
            return [STARTFILE, target]
        return ["xdg-open", target]

    def _app_command(self, name: str) -> Optional[List[str]]:
        if self._platform == "darwin":
            return ["open", "-a", name] if find_macos_app(name) else None
        if self._windows:
            # `"` cannot appear in a Windows program name and would break the quoting.
            if '"' in name or not find_windows_app(name):
                return None
            return ["cmd", "/c", "start", "", name]

        desktop_id = find_desktop_id(name, self._app_dirs)
        if desktop_id is not None:
            return ["gtk-launch", desktop_id]
        exe = shutil.which(name)
        if exe is not None:
            return [exe]
        return None

    def _spawn(self, command: List[str]) -> None:
        if command[0] == STARTFILE:
            os.startfile(command[1])
            return
        # Fire-and-forget: no wait(), stdio detached so the launcher never holds our terminal.
        subprocess.Popen(
            windows_start_command_line(command[-1]) if self._windows else command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=not self._windows,
        )
