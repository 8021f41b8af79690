"""Tagged outcome of :meth:`HelioClient.execute`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .context import RequestLogContext
from .errors import HelioError
from .response import HelioResponse


@dataclass(frozen=True)
class Success:
    response: HelioResponse
    context: RequestLogContext

    ok: ClassVar[bool] = True

    def unwrap(self) -> HelioResponse:
        return self.response


@dataclass(frozen=True)
class Failure:
    error: HelioError

    ok: ClassVar[bool] = False

    def unwrap(self) -> HelioResponse:
        raise self.error


RequestResult = Union[Success, Failure]

__all__ = ["Failure", "RequestResult", "Success"]
