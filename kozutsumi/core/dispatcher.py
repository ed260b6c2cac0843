from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from kozutsumi.chooser.bridge import Chooser
from kozutsumi.chooser.loading import load_chooser
from kozutsumi.opener.base import Opener
from kozutsumi.registry.parcel_registry import ParcelRegistry
from kozutsumi.trace.store import TraceStoreJSONL
from kozutsumi.trace.trace_emitter import TraceEmitter

from .classifier import classify
from .errors import KozutsumiError, ValidationError
from .resource import OpenResult
from .runtime_context import RuntimeContext


@dataclass(frozen=True)
class OpenParcel:
    name: str


@dataclass(frozen=True)
class ChooseRequest:
    """
    Interactive selection request.

    - parcel set: pick entries of that parcel.
    - parcel None: pick parcel names; every entry of each picked parcel is opened.
    """

    program: str = "fzf"
    multi: bool = False
    parcel: Optional[str] = None


Target = Union[OpenParcel, ChooseRequest]
ChooserFactory = Callable[[str], Chooser]


class Dispatcher:
    """
    Resolve -> (Select) -> Open, tracing every step.

    Invalid requests (unknown parcel, unusable chooser) raise before anything
    is opened. Per-entry open failures never raise; they come back as failed
    OpenResults alongside the successes.
    """

    def __init__(
        self,
        registry: ParcelRegistry,
        opener: Opener,
        chooser_factory: ChooserFactory = load_chooser,
    ):
        self._registry = registry
        self._opener = opener
        self._chooser_factory = chooser_factory

    def dispatch(self, ctx: RuntimeContext, target: Target) -> List[OpenResult]:
        store = TraceStoreJSONL(ctx.trace_path) if ctx.trace_path is not None else None
        trace = TraceEmitter(store=store, run_id=ctx.run_id)

        trace.emit("dispatch_received", message="Dispatch received", data=_describe(target))
        try:
            entries = self._resolve(target, trace)
        except KozutsumiError as e:
            trace.emit("error", message=str(e), data={"code": e.code, **(e.data or {})})
            raise

        if entries is None:
            trace.emit("selection_cancelled", message="Nothing selected")
            trace.emit("run_finished", message="Run finished", data={"ok": True, "opened": 0, "failed": 0})
            return []

        results = self._open_all(ctx, entries, trace)
        failed = sum(1 for r in results if not r.ok)
        trace.emit(
            "run_finished",
            message="Run finished",
            data={"ok": failed == 0, "opened": len(results) - failed, "failed": failed, "dry_run": ctx.dry_run},
        )
        return results

    def _resolve(self, target: Target, trace: TraceEmitter) -> Optional[List[Tuple[str, str]]]:
        """
        Returns (parcel, entry) pairs to open, or None when the user selected nothing.
        """
        if isinstance(target, OpenParcel):
            entries = self._registry.require(target.name)
            trace.emit("parcel_resolved", parcel=target.name, data={"entries": len(entries)})
            return [(target.name, e) for e in entries]

        if not isinstance(target, ChooseRequest):
            raise ValidationError(code="dispatch.invalid", message=f"Unsupported dispatch target: {target!r}")

        if target.parcel is not None:
            entries = self._registry.require(target.parcel)
            trace.emit("parcel_resolved", parcel=target.parcel, data={"entries": len(entries)})
            picked = self._select(target, list(entries), trace)
            if not picked:
                return None
            return [(target.parcel, e) for e in picked]

        names = self._registry.names()
        if not names:
            return None
        picked_names = self._select(target, names, trace)
        if not picked_names:
            return None
        out: List[Tuple[str, str]] = []
        for name in picked_names:
            entries = self._registry.require(name)
            trace.emit("parcel_resolved", parcel=name, data={"entries": len(entries)})
            out.extend((name, e) for e in entries)
        return out

    def _select(self, target: ChooseRequest, candidates: Sequence[str], trace: TraceEmitter) -> List[str]:
        chooser = self._chooser_factory(target.program)
        picked = chooser.choose(candidates, multi=target.multi)
        if picked:
            trace.emit("selection_made", parcel=target.parcel, data={"program": target.program, "selected": list(picked)})
        return picked

    def _open_all(self, ctx: RuntimeContext, entries: Sequence[Tuple[str, str]], trace: TraceEmitter) -> List[OpenResult]:
        results: List[OpenResult] = []
        for parcel, entry in entries:
            resource = classify(entry)
            trace.emit("open_started", parcel=parcel, entry=entry, data={"kind": resource.kind, "dry_run": ctx.dry_run})
            result = self._opener.open(resource, dry_run=ctx.dry_run)
            results.append(result)
            trace.emit("open_finished", parcel=parcel, entry=entry, data=result.to_dict())
        return results


def _describe(target: Target) -> dict:
    if isinstance(target, OpenParcel):
        return {"target": "open", "parcel": target.name}
    if isinstance(target, ChooseRequest):
        return {"target": "choose", "program": target.program, "multi": target.multi, "parcel": target.parcel}
    return {"target": repr(target)}
