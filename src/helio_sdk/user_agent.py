"""User-Agent strings describing the SDK and the host it runs on."""

from __future__ import annotations

import json
import platform
import socket
from typing import Any, Dict, Optional

from .config import AppInfo
from .version import VERSION


def user_agent(app_info: Optional[AppInfo]) -> str:
    agent = f"Helio/v1 PythonBindings/{VERSION}"
    if app_info is not None:
        agent = f"{agent} {app_info.format()}"
    return agent


class SystemProfiler:
    """Collects runtime details once so every request can report them."""

    def __init__(self) -> None:
        self._uname = " ".join(part for part in platform.uname() if part)
        try:
            self._hostname = socket.gethostname()
        except OSError:
            self._hostname = "unknown"

    def profile(self, app_info: Optional[AppInfo]) -> Dict[str, Any]:
        profile: Dict[str, Any] = {
            "bindings_version": VERSION,
            "lang": "python",
            "lang_version": platform.python_version(),
            "platform": platform.platform(),
            "engine": platform.python_implementation(),
            "publisher": "helio",
            "uname": self._uname,
            "hostname": self._hostname,
        }
        if app_info is not None:
            profile["application"] = app_info.as_dict()
        return profile

    def headers(self, app_info: Optional[AppInfo]) -> Dict[str, str]:
        profile = self.profile(app_info)
        try:
            return {"X-Helio-Client-User-Agent": json.dumps(profile)}
        except (TypeError, ValueError) as exc:
            # Unencodable app info is sent as a repr instead.
            return {
                "X-Helio-Client-Raw-User-Agent": repr(profile),
                "X-Helio-Client-User-Agent-Error": f"{exc} ({type(exc).__name__})",
            }


__all__ = ["SystemProfiler", "user_agent"]
