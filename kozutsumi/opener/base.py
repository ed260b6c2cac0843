from __future__ import annotations

from typing import Protocol

from kozutsumi.core.resource import OpenResult, Resource


class Opener(Protocol):
    """
    Port for opening classified resources.

    Implementations report failures through OpenResult instead of raising.
    """

    def open(self, resource: Resource, *, dry_run: bool = False) -> OpenResult: ...
