from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RuntimeContext:
    """
    Per-invocation settings for a dispatch.

    - dry_run: classify and validate every entry but spawn nothing.
    - trace_path: JSONL trace destination; None disables tracing.
    """

    run_id: str
    dry_run: bool = False
    trace_path: Optional[Path] = None
