"""Declarative field tables for resource classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional


@dataclass(frozen=True)
class FieldSpec:
    """How one field of a resource is treated on read and save.

    ``resource`` names the class a nested mapping is turned into.
    ``save_with_parent`` sends that nested resource inline with its parent's
    update instead of expecting it to be saved on its own endpoint.
    """

    name: str
    resource: Optional[type] = None
    save_with_parent: bool = False


def field_map(fields: Iterable[FieldSpec]) -> Dict[str, FieldSpec]:
    return {spec.name: spec for spec in fields}


__all__ = ["FieldSpec", "field_map"]
