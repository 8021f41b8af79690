"""Conversion of decoded JSON into SDK objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from .helio_object import HelioObject
from .options import OptionsLike

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient


def object_classes() -> Dict[str, type]:
    from .list_object import ListObject
    from .resources import CustomerList, Participant

    return {klass.OBJECT_NAME: klass for klass in (ListObject, CustomerList, Participant)}


def convert_to_helio_object(data: Any, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> Any:
    """Turn decoded JSON into resources, lists of them, or plain values.

    Mappings tagged with a known ``object`` type become that class; other
    mappings become a generic :class:`HelioObject`.
    """
    if isinstance(data, list):
        return [convert_to_helio_object(item, opts, client=client) for item in data]
    if isinstance(data, dict) and not isinstance(data, HelioObject):
        klass = object_classes().get(data.get("object"), HelioObject)
        return klass.construct_from(data, opts, client=client)
    return data


__all__ = ["convert_to_helio_object", "object_classes"]
