"""Paginated collections returned by list endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterator, Optional

from .api_operations import RequestMixin, escape_id
from .helio_object import HelioObject
from .options import OptionsLike

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient


class ListObject(RequestMixin, HelioObject):
    """One page of a collection; iterating yields the page's ``data``."""

    OBJECT_NAME: ClassVar[Optional[str]] = "list"

    _filters: Dict[str, Any] = {}

    def __iter__(self) -> Iterator[Any]:
        return iter(self.get("data") or [])

    def __len__(self) -> int:
        return len(self.get("data") or [])

    @property
    def is_empty(self) -> bool:
        return not self.get("data")

    def _convert(self, data: Any, opts: Any) -> Any:
        from .util import convert_to_helio_object

        return convert_to_helio_object(data, opts, client=self._client)

    def list(self, params: Optional[Dict[str, Any]] = None, opts: OptionsLike = None) -> Any:
        resp, opts = self._request("get", self["url"], params, opts)
        result = self._convert(resp.data, opts)
        if isinstance(result, ListObject):
            result._filters = dict(params or {})
        return result

    def create(self, params: Optional[Dict[str, Any]] = None, opts: OptionsLike = None) -> Any:
        resp, opts = self._request("post", self["url"], params, opts)
        return self._convert(resp.data, opts)

    def retrieve(self, id: Any, params: Optional[Dict[str, Any]] = None, opts: OptionsLike = None) -> Any:
        resp, opts = self._request("get", f"{self['url']}/{escape_id(id)}", params, opts)
        return self._convert(resp.data, opts)

    def next_page(self, params: Optional[Dict[str, Any]] = None, opts: OptionsLike = None) -> "ListObject":
        """Fetch the page after this one, or an empty list when there is none."""
        if not self.get("has_more") or self.is_empty:
            return self.empty_list(opts)
        filters = dict(self._filters)
        filters.update(params or {})
        filters["starting_after"] = self["data"][-1]["id"]
        return self.list(filters, opts)

    def auto_paging_iter(self) -> Iterator[Any]:
        page: ListObject = self
        while True:
            yield from page
            if not page.get("has_more") or page.is_empty:
                return
            page = page.next_page()

    def empty_list(self, opts: OptionsLike = None) -> "ListObject":
        empty = ListObject.construct_from(
            {"object": "list", "data": [], "has_more": False, "url": self.get("url")},
            self._opts.merge(opts),
            client=self._client,
        )
        return empty  # type: ignore[return-value]


__all__ = ["ListObject"]
