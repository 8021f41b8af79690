"""Named Helio API resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .api_operations import CreateMixin, DeleteMixin, ListMixin, NestedResourceMixin, Params, UpdateMixin
from .api_resource import APIResource
from .options import OptionsLike
from .schema import FieldSpec
from .util import convert_to_helio_object

if TYPE_CHECKING:  # pragma: no cover
    from .client import HelioClient


class Participant(CreateMixin, DeleteMixin, UpdateMixin, ListMixin, APIResource):
    OBJECT_NAME = "participant"


class CustomerList(CreateMixin, DeleteMixin, UpdateMixin, ListMixin, NestedResourceMixin, APIResource):
    OBJECT_NAME = "customer_list"

    FIELDS = (FieldSpec("participant", resource=Participant, save_with_parent=True),)

    PARTICIPANTS_PATH = "participants"

    @classmethod
    def create_participant(
        cls, id: Any, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> Any:
        return cls.create_nested(id, cls.PARTICIPANTS_PATH, params, opts, client=client)

    @classmethod
    def retrieve_participant(
        cls, id: Any, participant_id: Any, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> Any:
        return cls.retrieve_nested(id, cls.PARTICIPANTS_PATH, participant_id, opts, client=client)

    @classmethod
    def update_participant(
        cls,
        id: Any,
        participant_id: Any,
        params: Params = None,
        opts: OptionsLike = None,
        *,
        client: Optional["HelioClient"] = None,
    ) -> Any:
        return cls.update_nested(id, cls.PARTICIPANTS_PATH, participant_id, params, opts, client=client)

    @classmethod
    def delete_participant(
        cls,
        id: Any,
        participant_id: Any,
        params: Params = None,
        opts: OptionsLike = None,
        *,
        client: Optional["HelioClient"] = None,
    ) -> Any:
        return cls.delete_nested(id, cls.PARTICIPANTS_PATH, participant_id, params, opts, client=client)

    @classmethod
    def list_participants(
        cls, id: Any, params: Params = None, opts: OptionsLike = None, *, client: Optional["HelioClient"] = None
    ) -> Any:
        return cls.list_nested(id, cls.PARTICIPANTS_PATH, params, opts, client=client)

    def add_participant(self, params: Params = None, opts: OptionsLike = None) -> Any:
        """Create a participant that belongs to this list."""
        values = dict(params or {})
        values["customer_list_id"] = self["id"]
        return Participant.create(values, self._opts.merge(opts), client=self._client)

    def participants(self, params: Params = None, opts: OptionsLike = None) -> Any:
        resp, opts = self._request("get", f"{self.instance_url()}/{self.PARTICIPANTS_PATH}", params, opts)
        return convert_to_helio_object(resp.data, opts, client=self._client)


__all__ = ["CustomerList", "Participant"]
