from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KozutsumiError(Exception):
    code: str
    message: str
    data: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(KozutsumiError):
    pass


class ParcelNotFound(KozutsumiError):
    pass


class ChooserUnavailable(KozutsumiError):
    pass


class ClassificationAmbiguous(KozutsumiError):
    """
    Reserved error kind. classify() maps every string to exactly one resource
    kind, so nothing in the package raises this.
    """
