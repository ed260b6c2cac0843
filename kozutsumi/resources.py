from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


APP_NAME = "kozutsumi"


def _package_dir(package_name: str) -> Path:
    """
    Return the on-disk directory for an imported package.

    Note:
    This assumes the package is installed in a filesystem-backed environment
    (typical for pip/wheel installs and editable installs).
    """
    module = __import__(package_name, fromlist=["__file__"])
    p = getattr(module, "__file__", None)
    if not isinstance(p, str) or not p:
        raise RuntimeError(f"Cannot resolve package directory for: {package_name}")
    return Path(p).resolve().parent


def contracts_schemas_dir() -> Path:
    return _package_dir(APP_NAME) / "contracts" / "schemas"


def config_schema_path() -> Path:
    return contracts_schemas_dir() / "parcel_config.schema.json"


def _xdg_dir(env_key: str, fallback: str) -> Path:
    base = os.environ.get(env_key)
    if isinstance(base, str) and base.strip():
        return Path(base).expanduser() / APP_NAME
    return Path(fallback).expanduser() / APP_NAME


def default_config_path() -> Path:
    """
    Per-user config location.

    - $KOZUTSUMI_CONFIG when set
    - else <XDG_CONFIG_HOME or ~/.config>/kozutsumi/parcel.yml, or parcel.yaml when only that exists
    """
    override = os.environ.get("KOZUTSUMI_CONFIG")
    if isinstance(override, str) and override.strip():
        return Path(override).expanduser()
    base = _xdg_dir("XDG_CONFIG_HOME", "~/.config")
    yml = base / "parcel.yml"
    yaml_path = base / "parcel.yaml"
    if not yml.exists() and yaml_path.exists():
        return yaml_path
    return yml


def default_trace_path() -> Optional[Path]:
    """
    $KOZUTSUMI_TRACE when set (empty string disables tracing), else <XDG_STATE_HOME or ~/.local/state>/kozutsumi/trace.jsonl.
    """
    override = os.environ.get("KOZUTSUMI_TRACE")
    if override is not None:
        return Path(override).expanduser() if override.strip() else None
    return _xdg_dir("XDG_STATE_HOME", "~/.local/state") / "trace.jsonl"
