from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from kozutsumi.core.errors import ParcelNotFound, ValidationError


class ParcelRegistry:
    """
    Read-only mapping of parcel name -> ordered entries.

    Built once from the loaded config and passed explicitly to the dispatcher.
    Parcel order follows the config file.
    """

    def __init__(self, parcels: Mapping[str, Sequence[str]]):
        self._parcels: Dict[str, Tuple[str, ...]] = {}
        for name, entries in parcels.items():
            if not isinstance(name, str) or not name:
                raise ValidationError(code="registry.invalid", message="Parcel name must be a non-empty string")
            if isinstance(entries, str) or any(not isinstance(e, str) for e in entries):
                raise ValidationError(
                    code="registry.invalid",
                    message=f"Parcel `{name}` must be a list of strings",
                    data={"parcel": name},
                )
            # Choosers exchange one candidate per line.
            multiline = [s for s in (name, *entries) if _is_multiline(s)]
            if multiline:
                raise ValidationError(
                    code="registry.invalid",
                    message=f"Parcel {name!r} has a name or entry spanning several lines",
                    data={"parcel": name, "values": multiline},
                )
            self._parcels[name] = tuple(entries)

    def __contains__(self, name: object) -> bool:
        return name in self._parcels

    def __len__(self) -> int:
        return len(self._parcels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._parcels)

    def names(self) -> List[str]:
        return list(self._parcels.keys())

    def items(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return list(self._parcels.items())

    def get(self, name: str) -> Optional[Tuple[str, ...]]:
        return self._parcels.get(name)

    def require(self, name: str) -> Tuple[str, ...]:
        entries = self._parcels.get(name)
        if entries is None:
            available = self.names()
            raise ParcelNotFound(
                code="parcel.not_found",
                message="Parcel `{}` not found. Available parcels: {}".format(name, ", ".join(available) or "(none)"),
                data={"parcel": name, "available": available},
            )
        return entries

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(entries) for name, entries in self._parcels.items()}


def _is_multiline(value: str) -> bool:
    return "\n" in value or "\r" in value
