"""Exceptions raised by the OpenVidu client."""

from __future__ import annotations

from typing import Dict, List, Optional


class OpenViduError(Exception):
    """Base class for every error raised by this package."""


class FormatError(OpenViduError, ValueError):
    """A server snapshot is missing a required field or has the wrong shape."""


class StaleReferenceError(OpenViduError):
    """Subscriptions point at streams that no Connection publishes anymore."""

    def __init__(self, stale: Dict[str, List[str]]):
        self.stale = stale
        details = ", ".join(f"{cid}: {ids}" for cid, ids in sorted(stale.items()))
        super().__init__(f"Stale subscriptions found ({details})")


class OpenViduHttpError(OpenViduError):
    """The OpenVidu server answered a REST call with a non-2xx status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"OpenVidu server returned {status_code}: {message or 'no details'}")
