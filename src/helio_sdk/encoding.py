"""Form encoding of request parameters.

Nested structures are flattened with bracket notation, the convention most
form-based REST APIs understand::

    {"customer": {"name": "Ada"}, "tags": ["a", "b"]}
    -> customer[name]=Ada&tags[]=a&tags[]=b

Lists of mappings keep their position so fields of one element stay
together: ``items[0][id]=x&items[0][qty]=2``.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import quote_plus


def encode_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_params(params: Mapping[str, Any], parent_key: Optional[str] = None) -> List[Tuple[str, Any]]:
    result: List[Tuple[str, Any]] = []
    for key, value in params.items():
        calculated_key = f"{parent_key}[{key}]" if parent_key else str(key)
        if isinstance(value, Mapping):
            result.extend(flatten_params(value, calculated_key))
        elif isinstance(value, (list, tuple)):
            result.extend(flatten_params_array(value, calculated_key))
        else:
            result.append((calculated_key, value))
    return result


def flatten_params_array(values: Any, calculated_key: str) -> List[Tuple[str, Any]]:
    result: List[Tuple[str, Any]] = []
    for index, element in enumerate(values):
        if isinstance(element, Mapping):
            result.extend(flatten_params(element, f"{calculated_key}[{index}]"))
        elif isinstance(element, (list, tuple)):
            result.extend(flatten_params_array(element, calculated_key))
        else:
            result.append((f"{calculated_key}[]", element))
    return result


def encode_parameters(params: Mapping[str, Any]) -> str:
    # Brackets stay readable; everything else is escaped as form data.
    return "&".join(
        f"{quote_plus(key, safe='[]')}={quote_plus(encode_value(value))}"
        for key, value in flatten_params(params)
    )


def is_file_like(value: Any) -> bool:
    return hasattr(value, "read") and callable(value.read)


def multipart_fields(params: Mapping[str, Any]) -> List[Tuple[str, Tuple[Optional[str], Any]]]:
    """Shape params for ``httpx``'s ``files=`` so every field goes out as a part."""
    fields: List[Tuple[str, Tuple[Optional[str], Any]]] = []
    for key, value in flatten_params(params):
        if is_file_like(value):
            filename = getattr(value, "name", None)
            fields.append((key, (str(filename).rsplit("/", 1)[-1] if filename else key, value)))
        else:
            fields.append((key, (None, encode_value(value))))
    return fields


def objects_to_ids(value: Any) -> Any:
    """Replace embedded API resources with their ids, recursively.

    Resources flagged ``save_with_parent`` are serialized inline instead.
    """
    from .api_resource import APIResource

    if isinstance(value, APIResource):
        if value.save_with_parent:
            return objects_to_ids(value.serialize_params(force=True))
        return value.id
    if isinstance(value, Mapping):
        return {key: objects_to_ids(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [objects_to_ids(item) for item in value]
    return value


__all__ = [
    "encode_parameters",
    "encode_value",
    "flatten_params",
    "flatten_params_array",
    "is_file_like",
    "multipart_fields",
    "objects_to_ids",
]
