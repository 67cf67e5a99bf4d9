"""Server-side client for the sessions of an OpenVidu deployment."""

from .client import OpenViduClient
from .config import OpenViduConfig, load_config
from .errors import FormatError, OpenViduError, OpenViduHttpError, StaleReferenceError
from .models import Connection, MediaMode, MediaOptions, OpenViduRole, Publisher, Token, TokenOptions
from .session import Session

__all__ = [
    "Connection",
    "FormatError",
    "MediaMode",
    "MediaOptions",
    "OpenViduClient",
    "OpenViduConfig",
    "OpenViduError",
    "OpenViduHttpError",
    "OpenViduRole",
    "Publisher",
    "Session",
    "StaleReferenceError",
    "Token",
    "TokenOptions",
    "load_config",
]
