"""Generic field mapping returned for every API object."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Optional, Set, Tuple

from .options import OptionsLike, RequestOptions
from .schema import FieldSpec, field_map

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient

_SKIP = object()


class HelioObject(dict):
    """A ``dict`` of an API object's fields with attribute access.

    Keys assigned after the object was loaded are tracked so that a save
    only sends what changed. Subclasses describe nested resources in
    ``FIELDS``.
    """

    OBJECT_NAME: ClassVar[Optional[str]] = None
    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = ()

    def __init__(self, id: Any = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> None:
        super().__init__()
        retrieve_params: Dict[str, Any] = {}
        if isinstance(id, Mapping):
            retrieve_params = dict(id)
            id = retrieve_params.pop("id", None)
        object.__setattr__(self, "_opts", RequestOptions.normalize(opts))
        object.__setattr__(self, "_client", client)
        object.__setattr__(self, "_unsaved_values", set())
        object.__setattr__(self, "_retrieve_params", retrieve_params)
        if id is not None:
            dict.__setitem__(self, "id", id)

    @classmethod
    def construct_from(
        cls, values: Mapping[str, Any], opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> "HelioObject":
        instance = cls(values.get("id"), opts, client=client)
        instance.refresh_from(values, opts, client=client)
        return instance

    @classmethod
    def field_spec(cls, key: str) -> Optional[FieldSpec]:
        return field_map(cls.FIELDS).get(key)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setitem__(self, key: str, value: Any) -> None:
        if isinstance(value, str) and value == "":
            raise ValueError(
                f"You cannot set {key} to an empty string. We interpret empty strings as None "
                f"in requests. You may set {type(self).__name__}.{key} = None to delete the property"
            )
        spec = self.field_spec(key)
        if spec is not None:
            if spec.resource is not None and isinstance(value, Mapping) and not isinstance(value, HelioObject):
                value = spec.resource.construct_from(value, self._opts, client=self._client)
            # Scalars such as a bare id are left alone.
            if spec.save_with_parent and hasattr(value, "save_with_parent"):
                value.save_with_parent = True
        super().__setitem__(key, value)
        self._unsaved_values.add(key)

    def __delitem__(self, key: str) -> None:
        super().__delitem__(key)
        self._unsaved_values.discard(key)

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    def __repr__(self) -> str:
        ident = f" id={self['id']}" if self.get("id") is not None else ""
        return f"<{type(self).__name__}{ident} at {hex(id(self))}> JSON: {self}"

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, indent=2, default=str)

    def to_dict(self) -> Dict[str, Any]:
        def plain(value: Any) -> Any:
            if isinstance(value, HelioObject):
                return value.to_dict()
            if isinstance(value, list):
                return [plain(item) for item in value]
            return value

        return {key: plain(value) for key, value in self.items()}

    def refresh_from(
        self,
        values: Mapping[str, Any],
        opts: OptionsLike = None,
        *,
        client: Optional["HelioClient"] = None,
        partial: bool = False,
    ) -> None:
        """Load server values, replacing local state and clearing tracked changes."""
        if opts is not None:
            object.__setattr__(self, "_opts", RequestOptions.normalize(opts))
        if client is not None:
            object.__setattr__(self, "_client", client)
        if not partial:
            for key in [key for key in self.keys() if key not in values]:
                dict.__delitem__(self, key)
            self._unsaved_values.clear()
        for key, value in values.items():
            dict.__setitem__(self, key, self._convert_value(key, value))
            self._unsaved_values.discard(key)

    def _convert_value(self, key: str, value: Any) -> Any:
        from .util import convert_to_helio_object

        spec = self.field_spec(key)
        if spec is not None and spec.resource is not None and isinstance(value, Mapping):
            return spec.resource.construct_from(value, self._opts, client=self._client)
        return convert_to_helio_object(value, self._opts, client=self._client)

    def serialize_params(self, force: bool = False) -> Dict[str, Any]:
        """Fields to send on save: changed keys plus nested objects that changed.

        ``force`` sends every field, used when a nested object was assigned
        as a whole.
        """
        params: Dict[str, Any] = {}
        for key, value in self.items():
            unsaved = key in self._unsaved_values
            if not (force or unsaved or isinstance(value, HelioObject)):
                continue
            serialized = _serialize_value(key, value, whole=force or unsaved)
            if serialized is _SKIP:
                continue
            if not (force or unsaved) and serialized == {}:
                continue
            params[key] = serialized
        return params

    @property
    def unsaved_keys(self) -> Set[str]:
        return set(self._unsaved_values)


def _serialize_value(key: str, value: Any, *, whole: bool) -> Any:
    from .api_resource import APIResource

    if value is None:
        return ""
    if isinstance(value, APIResource) and not value.save_with_parent:
        if not whole:
            return _SKIP
        if value.get("id") is not None:
            # Sent as a reference; the executor swaps the object for its id.
            return value
        raise ValueError(
            f"Cannot save property `{key}` containing an API resource. It doesn't appear to be "
            "persisted and is not marked as save_with_parent."
        )
    if isinstance(value, HelioObject):
        return value.serialize_params(force=whole)
    if isinstance(value, Mapping):
        serialized = {k: _serialize_value(k, v, whole=True) for k, v in value.items()}
        return {k: v for k, v in serialized.items() if v is not _SKIP}
    if isinstance(value, (list, tuple)):
        return [item for item in (_serialize_value(key, v, whole=True) for v in value) if item is not _SKIP]
    return value


__all__ = ["HelioObject"]
