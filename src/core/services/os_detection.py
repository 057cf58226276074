"""Host operating system detection.

Bash exposes the host as `$OSTYPE` (`linux-gnu`, `darwin23`, `msys`, ...).
The installer keeps that vocabulary so the same three patterns are accepted
whether it is launched from a login shell (where `OSTYPE` may be exported) or
from a plain Python process (where it is derived from `sys.platform`).
"""

from __future__ import annotations

import os
import sys

from core.domain.models import HostOS
from core.errors import UnsupportedOSError

_PLATFORM_TO_OSTYPE: dict[str, str] = {
    "linux": "linux-gnu",
    "darwin": "darwin",
    "cygwin": "cygwin",
    "msys": "msys",
    "win32": "msys",
}


def os_from_ostype(ostype: str) -> HostOS:
    """Map an `OSTYPE` value to a `HostOS`, rejecting anything unsupported."""

    if ostype.startswith("linux-gnu"):
        return HostOS.LINUX
    if ostype.startswith("darwin"):
        return HostOS.MACOS
    if ostype in ("cygwin", "msys"):
        return HostOS.WINDOWS
    raise UnsupportedOSError(ostype)


def current_ostype() -> str:
    exported = (os.environ.get("OSTYPE") or "").strip()
    if exported:
        return exported
    return _PLATFORM_TO_OSTYPE.get(sys.platform, sys.platform)


def detect_os(ostype: str | None = None) -> HostOS:
    return os_from_ostype(current_ostype() if ostype is None else ostype)
