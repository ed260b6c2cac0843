from __future__ import annotations

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from kozutsumi.chooser.loading import load_chooser
from kozutsumi.config import ParcelConfig, load_config
from kozutsumi.core.dispatcher import ChooseRequest, Dispatcher, OpenParcel, Target
from kozutsumi.core.errors import KozutsumiError
from kozutsumi.core.resource import OpenResult
from kozutsumi.core.runtime_context import RuntimeContext
from kozutsumi.opener.platform import PlatformOpener
from kozutsumi.resources import default_config_path, default_trace_path
from kozutsumi.trace.store import TraceStoreJSONL


DEFAULT_CHOOSER = "fzf"


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting for CLI commands.
    - Always includes code/message (via __str__) when it's a KozutsumiError
    - Includes structured `data` payload when present, except for parcel lookups whose message already lists the options
    """
    if isinstance(e, KozutsumiError) and isinstance(e.data, dict) and e.data and e.code != "parcel.not_found":
        return str(e) + "\n" + json.dumps(e.data, ensure_ascii=False, indent=2)
    return str(e)


def _config_path(args: argparse.Namespace) -> Path:
    return Path(args.config).expanduser() if args.config else default_config_path()


def _trace_path(args: argparse.Namespace) -> Optional[Path]:
    if args.no_trace:
        return None
    if args.trace:
        return Path(args.trace).expanduser()
    return default_trace_path()


def _load(args: argparse.Namespace) -> ParcelConfig:
    return load_config(_config_path(args))


def _preview_command(config_path: Path) -> str:
    # fzf substitutes {} with the quoted highlighted line.
    return "{} -m kozutsumi.cli.kz --config {} list {{}}".format(shlex.quote(sys.executable), shlex.quote(str(config_path)))


def _render_parcels(config: ParcelConfig) -> str:
    lines: List[str] = []
    for name, entries in config.registry.items():
        lines.append(f"{name}:")
        lines.extend(f"- {e}" for e in entries)
    return "\n".join(lines)


def _report(results: List[OpenResult], *, dry_run: bool) -> int:
    if dry_run:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
    for r in results:
        if not r.ok:
            print(f"{r.code}: {r.resource.target}: {r.reason}", file=sys.stderr)
    return 1 if any(not r.ok for r in results) else 0


def _dispatch(args: argparse.Namespace, config: ParcelConfig, target: Target, *, preview: Optional[str] = None) -> int:
    ctx = RuntimeContext(run_id=args.run_id, dry_run=bool(args.dry_run), trace_path=_trace_path(args))
    dispatcher = Dispatcher(
        config.registry,
        PlatformOpener(),
        chooser_factory=lambda program: load_chooser(program, preview=preview),
    )
    results = dispatcher.dispatch(ctx, target)
    return _report(results, dry_run=ctx.dry_run)


def cmd_open(args: argparse.Namespace) -> int:
    config = _load(args)
    return _dispatch(args, config, OpenParcel(name=args.name))


def cmd_choose(args: argparse.Namespace) -> int:
    config = _load(args)
    if args.parcel is None and not len(config.registry):
        print("No parcels available. Please add parcels to the configuration file.", file=sys.stderr)
        return 0
    program = args.chooser or config.chooser or DEFAULT_CHOOSER
    # Previews only make sense when choosing among parcels: they show the parcel's entries.
    preview = None if (args.no_preview or args.parcel) else _preview_command(config.path)
    target = ChooseRequest(program=program, multi=bool(args.multi), parcel=args.parcel)
    return _dispatch(args, config, target, preview=preview)


def cmd_list(args: argparse.Namespace) -> int:
    config = _load(args)
    if args.name:
        entries = config.registry.require(args.name)
        if args.json:
            print(json.dumps(list(entries), ensure_ascii=False, indent=2))
        else:
            for e in entries:
                print(f"- {e}")
        return 0
    if args.json:
        print(json.dumps(config.registry.to_dict(), ensure_ascii=False, indent=2))
    elif len(config.registry):
        print(_render_parcels(config))
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    config = _load(args)
    print(f"Config OK ({len(config.registry)} parcels): {config.path}")
    return 0


def cmd_show_trace(args: argparse.Namespace) -> int:
    path = _trace_path(args)
    if path is None:
        print("trace.disabled: no trace path configured", file=sys.stderr)
        return 2
    events: List[Dict[str, Any]] = list(TraceStoreJSONL(path).iter_events())

    if args.event_type:
        events = [e for e in events if e.get("event_type") == args.event_type]

    if args.tail is not None and args.tail >= 0:
        events = events[-args.tail :] if args.tail else []

    for e in events:
        if args.pretty:
            print(json.dumps(e, ensure_ascii=False, indent=2))
        else:
            print(json.dumps(e, ensure_ascii=False))
    return 0


def _add_run_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--dry-run", action="store_true", help="Validate and print what would be opened; spawn nothing")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kz", description="Open groups of applications, files, and URLs")
    parser.add_argument("-c", "--config", help="Override the config path (default: $KOZUTSUMI_CONFIG or XDG config)")
    parser.add_argument("--trace", help="Trace output path (jsonl) (default: $KOZUTSUMI_TRACE or XDG state)")
    parser.add_argument("--no-trace", action="store_true", help="Do not write a trace")
    parser.add_argument("--run-id", default="run_cli", help="Run ID for trace correlation")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_open = sub.add_parser("open", help="Open a parcel by name")
    p_open.add_argument("name", help="Parcel name")
    _add_run_args(p_open)
    p_open.set_defaults(func=cmd_open)

    p_choose = sub.add_parser("choose", help="Open parcels (or entries of one parcel) picked with a fuzzy finder")
    p_choose.add_argument("--chooser", help=f"Chooser program or 'module:object' spec (default: config `chooser` or {DEFAULT_CHOOSER})")
    p_choose.add_argument("--multi", action="store_true", help="Allow multiple selections")
    p_choose.add_argument("--parcel", help="Choose among the entries of this parcel instead of among parcels")
    p_choose.add_argument("--no-preview", action="store_true", help="Disable the parcel preview pane")
    _add_run_args(p_choose)
    p_choose.set_defaults(func=cmd_choose)

    p_list = sub.add_parser("list", help="List parcels, or the entries of one parcel")
    p_list.add_argument("name", nargs="?", help="Name of the parcel to list entries for")
    p_list.add_argument("--json", action="store_true", help="Output JSON, useful for scripting")
    p_list.set_defaults(func=cmd_list)

    p_check = sub.add_parser("check-config", help="Validate the config file against its schema")
    p_check.set_defaults(func=cmd_check_config)

    p_trace = sub.add_parser("show-trace", help="Print trace events")
    p_trace.add_argument("--event-type", help="Only events of this type")
    p_trace.add_argument("--tail", type=int, help="Only the last N events")
    p_trace.add_argument("--pretty", action="store_true", help="Indent JSON output")
    p_trace.set_defaults(func=cmd_show_trace)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    try:
        return int(ns.func(ns))
    except KozutsumiError as e:
        print(_format_cli_error(e), file=sys.stderr)
        return 2 if e.code == "config.not_found" else 1


if __name__ == "__main__":
    raise SystemExit(main())
