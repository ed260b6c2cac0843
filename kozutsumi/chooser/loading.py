from __future__ import annotations

import importlib
import inspect
import re
from typing import Any, Dict, Optional

from kozutsumi.core.errors import ValidationError

from .bridge import Chooser, CommandChooser, FzfChooser


_OBJECT_SPEC_RE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


def _import_object(spec: str) -> Any:
    """
    Import by "module:attr" spec.
    """
    mod_name, _, attr = spec.partition(":")
    if not mod_name or not attr:
        raise ValidationError(code="chooser.invalid", message="chooser spec must be 'module:object'", data={"chooser": spec})
    try:
        mod = importlib.import_module(mod_name)
    except ImportError as e:
        raise ValidationError(code="chooser.invalid", message="Failed to import chooser module", data={"module": mod_name}) from e
    if not hasattr(mod, attr):
        raise ValidationError(code="chooser.invalid", message="Chooser object not found in module", data={"module": mod_name, "attr": attr})
    return getattr(mod, attr)


def _build_with_compatible_kwargs(obj: Any, kwargs: Dict[str, Any]) -> Any:
    """
    Instantiate a class or call a factory with only the kwargs it accepts.
    """
    try:
        sig = inspect.signature(obj)
    except (TypeError, ValueError):
        return obj()

    accepted: Dict[str, Any] = {}
    for name, p in sig.parameters.items():
        if p.kind == inspect.Parameter.VAR_KEYWORD:
            return obj(**kwargs)
        if name in kwargs:
            accepted[name] = kwargs[name]
    return obj(**accepted)


def load_chooser(program: str, *, preview: Optional[str] = None) -> Chooser:
    """
    Resolve a chooser name to an implementation:

    - "fzf" (or a path ending in /fzf): FzfChooser
    - "module:object": imported class/factory; must provide choose()
    - anything else: CommandChooser running that program with --multi for multi-select

    Availability of the program is checked when choose() runs, not here.
    """
    if not isinstance(program, str) or not program.strip():
        raise ValidationError(code="chooser.invalid", message="chooser must be a non-empty string")
    program = program.strip()

    if program == "fzf" or program.endswith("/fzf"):
        return FzfChooser(program, preview=preview)

    if _OBJECT_SPEC_RE.match(program):
        obj = _import_object(program)
        try:
            inst = _build_with_compatible_kwargs(obj, {"preview": preview}) if callable(obj) else obj
        except TypeError as e:
            raise ValidationError(code="chooser.invalid", message="Chooser could not be constructed", data={"chooser": program}) from e
        if not callable(getattr(inst, "choose", None)):
            raise ValidationError(code="chooser.invalid", message="Chooser must have a callable choose() method", data={"chooser": program})
        return inst

    return CommandChooser(program)
