from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any, Optional

from .store import TraceStoreJSONL


class TraceEmitter:
    """
    Builds trace events for one run. With no store, events are dropped.

    Tracing never stops a run: the first failed write prints a warning to
    stderr and disables the emitter for the rest of the run.
    """

    def __init__(self, store: Optional[TraceStoreJSONL], run_id: str):
        self._store = store
        self._run_id = run_id

    @property
    def enabled(self) -> bool:
        return self._store is not None

    def emit(
        self,
        event_type: str,
        *,
        parcel: str | None = None,
        entry: str | None = None,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        if self._store is None:
            return
        event: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self._run_id,
            "event_type": event_type,
        }
        if parcel is not None:
            event["parcel"] = parcel
        if entry is not None:
            event["entry"] = entry
        if message is not None:
            event["message"] = message
        if data is not None:
            event["data"] = data

        try:
            self._store.append(event)
        except OSError as e:
            print(f"trace.write_failed: {self._store.path}: {e}; tracing disabled for this run", file=sys.stderr)
            self._store = None
