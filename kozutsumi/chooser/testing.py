from __future__ import annotations

from typing import Any, List, Optional, Sequence

from kozutsumi.core.errors import ChooserUnavailable

from .bridge import parse_selection


class ScriptedChooser:
    """
    Deterministic chooser for tests/examples.

    Replays `output` as if a chooser program had printed it, and records every
    invocation as (candidates, multi).
    """

    def __init__(self, output: str = "", preview: Optional[str] = None, **_kwargs: Any) -> None:
        self._output = output
        self.preview = preview
        self.calls: List[tuple] = []

    def choose(self, candidates: Sequence[str], *, multi: bool) -> List[str]:
        self.calls.append((list(candidates), multi))
        return parse_selection(self._output, candidates, multi=multi)


class PickAllChooser:
    """
    Selects every candidate (multi) or the first one (single).
    """

    def __init__(self, **_kwargs: Any) -> None:
        self.calls: List[tuple] = []

    def choose(self, candidates: Sequence[str], *, multi: bool) -> List[str]:
        self.calls.append((list(candidates), multi))
        return list(candidates) if multi else list(candidates[:1])


class MissingChooser:
    """
    Behaves like a chooser whose program is not installed.
    """

    def __init__(self, program: str = "missing-chooser", **_kwargs: Any) -> None:
        self._program = program

    def choose(self, candidates: Sequence[str], *, multi: bool) -> List[str]:
        _ = (candidates, multi)
        raise ChooserUnavailable(
            code="chooser.unavailable",
            message=f"Chooser program not found: {self._program}",
            data={"program": self._program},
        )
