from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from kozutsumi.core.errors import ValidationError
from kozutsumi.registry.parcel_registry import ParcelRegistry
from kozutsumi.resources import config_schema_path


@dataclass(frozen=True)
class ParcelConfig:
    path: Path
    registry: ParcelRegistry
    chooser: Optional[str] = None


def _flatten(entries: List[Any]) -> List[str]:
    # Nested lists are a grouping convenience in YAML; dispatch only sees leaf strings.
    out: List[str] = []
    for e in entries:
        if isinstance(e, list):
            out.extend(_flatten(e))
        else:
            out.append(e)
    return out


def _load_schema() -> Dict[str, Any]:
    schema_path = config_schema_path()
    try:
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ValidationError(code="config.schema_missing", message="Config schema missing or unreadable", data={"path": str(schema_path)}) from e


def parse_config(raw: Any, *, path: Path) -> ParcelConfig:
    if not isinstance(raw, dict):
        raise ValidationError(code="config.invalid", message="Config must be a YAML mapping/object at top-level", data={"path": str(path)})

    try:
        jsonschema.Draft202012Validator(_load_schema()).validate(raw)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            code="config.schema_invalid",
            message="Config does not match schema",
            data={"error": e.message, "path": list(e.path), "schema_path": list(e.schema_path)},
        ) from e

    parcels = {str(name): _flatten(entries) for name, entries in raw["parcels"].items()}
    return ParcelConfig(path=path, registry=ParcelRegistry(parcels), chooser=raw.get("chooser"))


def load_config(config_path: Path) -> ParcelConfig:
    """
    Load and validate a parcel config file:

        chooser: fzf          # optional default for `kz choose`
        parcels:
          anime:
            - Sequel
            - IINA
            - fs:~/Movies/Anime
    """
    p = Path(config_path).expanduser()
    if not p.exists():
        raise ValidationError(code="config.not_found", message=f"Config not found: {p}", data={"path": str(p)})
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(code="config.invalid_yaml", message="Failed to parse YAML config", data={"error": repr(e)}) from e
    return parse_config(raw, path=p)
