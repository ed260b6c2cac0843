from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Union


@dataclass(frozen=True)
class FilesystemPath:
    kind: ClassVar[str] = "path"

    path: str

    @property
    def target(self) -> str:
        return self.path


@dataclass(frozen=True)
class ApplicationName:
    kind: ClassVar[str] = "app"

    name: str

    @property
    def target(self) -> str:
        return self.name


@dataclass(frozen=True)
class WebURL:
    kind: ClassVar[str] = "url"

    url: str

    @property
    def target(self) -> str:
        return self.url


@dataclass(frozen=True)
class DeepLink:
    kind: ClassVar[str] = "deeplink"

    uri: str

    @property
    def target(self) -> str:
        return self.uri

    @property
    def scheme(self) -> str:
        return self.uri.split("://", 1)[0].lower()


Resource = Union[FilesystemPath, ApplicationName, WebURL, DeepLink]


# OpenResult.code values for failed opens.
NOT_FOUND = "resource.not_found"
LAUNCH_ERROR = "resource.launch_error"
PERMISSION_DENIED = "resource.permission_denied"


@dataclass(frozen=True)
class OpenResult:
    """
    Outcome of opening one resource.

    ok=True means the launcher was spawned (or, in dry-run, would have been).
    On failure `code` is one of NOT_FOUND / LAUNCH_ERROR / PERMISSION_DENIED.
    """

    resource: Resource
    ok: bool
    code: Optional[str] = None
    reason: Optional[str] = None
    command: Optional[List[str]] = None
    dry_run: bool = False

    @classmethod
    def success(cls, resource: Resource, *, command: Optional[List[str]] = None, dry_run: bool = False) -> "OpenResult":
        return cls(resource=resource, ok=True, command=command, dry_run=dry_run)

    @classmethod
    def failure(cls, resource: Resource, code: str, reason: str) -> "OpenResult":
        return cls(resource=resource, ok=False, code=code, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.resource.kind, "target": self.resource.target, "ok": self.ok}
        if self.code is not None:
            out["code"] = self.code
        if self.reason is not None:
            out["reason"] = self.reason
        if self.command is not None:
            out["command"] = list(self.command)
        if self.dry_run:
            out["dry_run"] = True
        return out
