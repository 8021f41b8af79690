"""Generic CRUD operations mixed into resource classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple
from urllib.parse import quote_plus

from .options import OptionsLike, RequestOptions
from .response import HelioResponse

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient

Params = Optional[Mapping[str, Any]]


def escape_id(value: Any) -> str:
    return quote_plus(str(value))


class RequestMixin:
    """Routes requests through an explicit client, or the default one."""

    @classmethod
    def _static_request(
        cls,
        method: str,
        url: str,
        params: Params = None,
        opts: OptionsLike = None,
        *,
        client: Optional["HelioClient"] = None,
    ) -> Tuple[HelioResponse, RequestOptions]:
        from .client import HelioClient

        client = client if client is not None else HelioClient.default()
        return client.request(method, url, params, opts)

    def _request(
        self, method: str, url: str, params: Params = None, opts: OptionsLike = None
    ) -> Tuple[HelioResponse, RequestOptions]:
        merged = self._opts.merge(opts)  # type: ignore[attr-defined]
        return self._static_request(method, url, params, merged, client=self._client)  # type: ignore[attr-defined]


def _convert(resp: HelioResponse, opts: RequestOptions, client: Optional["HelioClient"]) -> Any:
    from .util import convert_to_helio_object

    return convert_to_helio_object(resp.data, opts, client=client)


class CreateMixin:
    @classmethod
    def create(cls, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> Any:
        resp, opts = cls._static_request("post", cls.class_url(), params, opts, client=client)  # type: ignore[attr-defined]
        return _convert(resp, opts, client)


class ListMixin:
    @classmethod
    def list(cls, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None) -> Any:
        resp, opts = cls._static_request("get", cls.class_url(), params, opts, client=client)  # type: ignore[attr-defined]
        result = _convert(resp, opts, client)
        # Kept so next_page() repeats the same filters.
        if hasattr(result, "_filters"):
            result._filters = dict(params or {})
        return result


class UpdateMixin:
    @classmethod
    def modify(
        cls, id: Any, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> Any:
        url = f"{cls.class_url()}/{escape_id(id)}"  # type: ignore[attr-defined]
        resp, opts = cls._static_request("post", url, params, opts, client=client)  # type: ignore[attr-defined]
        return _convert(resp, opts, client)

    def save(self, params: Params = None, opts: OptionsLike = None) -> Any:
        """Send local changes (and ``params``) to the API and reload from the response."""
        if params:
            self.update(params)  # type: ignore[attr-defined]
        values = self.serialize_params()  # type: ignore[attr-defined]
        values.pop("id", None)
        resp, opts = self._request("post", self._save_url(), values, opts)  # type: ignore[attr-defined]
        self.refresh_from(resp.data, opts)  # type: ignore[attr-defined]
        return self

    def _save_url(self) -> str:
        # Objects without an id have not been created yet.
        if self.get("id") is None:  # type: ignore[attr-defined]
            return type(self).class_url()  # type: ignore[attr-defined]
        return self.instance_url()  # type: ignore[attr-defined]


class DeleteMixin:
    @classmethod
    def delete_resource(
        cls, id: Any, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> Any:
        url = f"{cls.class_url()}/{escape_id(id)}"  # type: ignore[attr-defined]
        resp, opts = cls._static_request("delete", url, params, opts, client=client)  # type: ignore[attr-defined]
        return _convert(resp, opts, client)

    def delete(self, params: Params = None, opts: OptionsLike = None) -> Any:
        resp, opts = self._request("delete", self.instance_url(), params, opts)  # type: ignore[attr-defined]
        self.refresh_from(resp.data, opts)  # type: ignore[attr-defined]
        return self


class NestedResourceMixin:
    """Operations on a collection that lives under one parent resource."""

    @classmethod
    def nested_resource_url(cls, id: Any, nested_path: str, nested_id: Any = None) -> str:
        url = f"{cls.class_url()}/{escape_id(id)}/{nested_path}"  # type: ignore[attr-defined]
        if nested_id is not None:
            url = f"{url}/{escape_id(nested_id)}"
        return url

    @classmethod
    def _nested_request(
        cls,
        method: str,
        id: Any,
        nested_path: str,
        nested_id: Any = None,
        params: Params = None,
        opts: OptionsLike = None,
        client: Optional["HelioClient"] = None,
    ) -> Any:
        url = cls.nested_resource_url(id, nested_path, nested_id)
        resp, opts = cls._static_request(method, url, params, opts, client=client)  # type: ignore[attr-defined]
        return _convert(resp, opts, client)

    @classmethod
    def create_nested(cls, id, nested_path, params=None, opts=None, *, client=None):
        return cls._nested_request("post", id, nested_path, None, params, opts, client)

    @classmethod
    def retrieve_nested(cls, id, nested_path, nested_id, opts=None, *, client=None):
        return cls._nested_request("get", id, nested_path, nested_id, None, opts, client)

    @classmethod
    def update_nested(cls, id, nested_path, nested_id, params=None, opts=None, *, client=None):
        return cls._nested_request("post", id, nested_path, nested_id, params, opts, client)

    @classmethod
    def delete_nested(cls, id, nested_path, nested_id, params=None, opts=None, *, client=None):
        return cls._nested_request("delete", id, nested_path, nested_id, params, opts, client)

    @classmethod
    def list_nested(cls, id, nested_path, params=None, opts=None, *, client=None):
        return cls._nested_request("get", id, nested_path, None, params, opts, client)


__all__ = [
    "CreateMixin",
    "DeleteMixin",
    "ListMixin",
    "NestedResourceMixin",
    "RequestMixin",
    "UpdateMixin",
    "escape_id",
]
