"""Per-call overrides for base URL, credentials and headers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Union

OptionsLike = Union["RequestOptions", Mapping[str, Any], str, None]

_KNOWN_KEYS = ("api_base", "api_id", "api_token", "headers")


@dataclass(frozen=True)
class RequestOptions:
    api_base: Optional[str] = None
    api_id: Optional[str] = None
    api_token: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def normalize(cls, opts: OptionsLike) -> "RequestOptions":
        """Accept ``None``, a bare token string, a mapping or an instance."""
        if opts is None:
            return cls()
        if isinstance(opts, RequestOptions):
            return opts
        if isinstance(opts, str):
            return cls(api_token=opts)
        if isinstance(opts, Mapping):
            unknown = set(opts) - set(_KNOWN_KEYS)
            if unknown:
                raise TypeError(f"Unknown request options: {', '.join(sorted(unknown))}")
            return cls(
                api_base=opts.get("api_base"),
                api_id=opts.get("api_id"),
                api_token=opts.get("api_token"),
                headers=dict(opts.get("headers") or {}),
            )
        raise TypeError(f"Request options should be a mapping or a token string, got {type(opts).__name__}")

    def merge(self, other: OptionsLike) -> "RequestOptions":
        """Values set on ``other`` win; headers are combined."""
        other = RequestOptions.normalize(other)
        headers = dict(self.headers)
        headers.update(other.headers)
        return replace(
            self,
            api_base=other.api_base or self.api_base,
            api_id=other.api_id or self.api_id,
            api_token=other.api_token or self.api_token,
            headers=headers,
        )

    def persistable(self) -> "RequestOptions":
        """Options worth carrying onto returned objects; per-call headers are dropped."""
        return replace(self, headers={})


__all__ = ["OptionsLike", "RequestOptions"]
