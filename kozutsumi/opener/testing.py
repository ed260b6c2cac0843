from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from kozutsumi.core.resource import OpenResult, Resource


class RecordingOpener:
    """
    Deterministic opener for tests/examples.

    Records every resource it is asked to open and succeeds unless a scripted
    failure is registered for the resource target.
    """

    def __init__(self, failures: Optional[Dict[str, Tuple[str, str]]] = None) -> None:
        self._failures = dict(failures or {})
        self.opened: List[Resource] = []

    def fail(self, target: str, code: str, reason: str = "scripted failure") -> None:
        self._failures[target] = (code, reason)

    def open(self, resource: Resource, *, dry_run: bool = False) -> OpenResult:
        self.opened.append(resource)
        failure = self._failures.get(resource.target)
        if failure is not None:
            return OpenResult.failure(resource, failure[0], failure[1])
        return OpenResult.success(resource, command=["recorded", resource.target], dry_run=dry_run)
