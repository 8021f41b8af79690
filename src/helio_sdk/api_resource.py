"""Base class for objects addressable at their own API endpoint."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote_plus

from .api_operations import RequestMixin, escape_id
from .errors import InvalidRequestError
from .helio_object import HelioObject
from .options import OptionsLike

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class APIResource(RequestMixin, HelioObject):
    def __init__(self, id: Any = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> None:
        super().__init__(id, opts, client=client)
        object.__setattr__(self, "_save_with_parent", False)

    @property
    def save_with_parent(self) -> bool:
        """Send this resource inline with its parent's update rather than by id."""
        return getattr(self, "_save_with_parent", False)

    @save_with_parent.setter
    def save_with_parent(self, value: bool) -> None:
        object.__setattr__(self, "_save_with_parent", bool(value))

    @classmethod
    def class_name(cls) -> str:
        return cls.__name__

    @classmethod
    def class_url(cls) -> str:
        if cls is APIResource:
            raise NotImplementedError(
                "APIResource is an abstract class. You should perform actions on its subclasses "
                "(CustomerList, Participant, etc.)"
            )
        resource_path = _CAMEL_BOUNDARY.sub("_", cls.class_name()).lower()
        return f"/{quote_plus(resource_path)}s"

    def instance_url(self) -> str:
        id = self.get("id")
        if not id:
            raise InvalidRequestError(
                f"Could not determine which URL to request: {type(self).__name__} instance has invalid ID: {id!r}",
                "id",
            )
        return f"{self.class_url()}/{escape_id(id)}"

    def refresh(self) -> "APIResource":
        resp, opts = self._request("get", self.instance_url(), self._retrieve_params)
        self.refresh_from(resp.data, opts)
        return self

    @classmethod
    def retrieve(cls, id: Any, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> "APIResource":
        instance = cls(id, opts, client=client)
        instance.refresh()
        return instance


__all__ = ["APIResource"]
