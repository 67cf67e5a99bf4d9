"""Domain models for the participants of an OpenVidu session."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .errors import FormatError
from .schemas import ConnectionPayload, MediaOptionsPayload, PublisherPayload

logger = logging.getLogger(__name__)


class OpenViduRole(enum.Enum):
    SUBSCRIBER = "SUBSCRIBER"
    PUBLISHER = "PUBLISHER"
    MODERATOR = "MODERATOR"

    @classmethod
    def from_json(cls, value: Any) -> "OpenViduRole":
        role = _ROLES_BY_NAME.get(value) if isinstance(value, str) else None
        if role is None:
            raise FormatError(f"Unknown role {value!r}")
        return role


_ROLES_BY_NAME = {role.value: role for role in OpenViduRole}


class MediaMode(enum.Enum):
    ROUTED = "ROUTED"
    RELAYED = "RELAYED"


@dataclass(frozen=True)
class MediaOptions:
    has_audio: bool
    has_video: bool
    audio_active: Optional[bool] = None
    video_active: Optional[bool] = None
    frame_rate: Optional[int] = None
    type_of_video: Optional[str] = None
    video_dimensions: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: MediaOptionsPayload) -> "MediaOptions":
        return cls(
            has_audio=payload.has_audio,
            has_video=payload.has_video,
            audio_active=payload.audio_active,
            video_active=payload.video_active,
            frame_rate=payload.frame_rate,
            type_of_video=payload.type_of_video,
            video_dimensions=payload.video_dimensions,
        )

    def to_json(self) -> Dict[str, Any]:
        json: Dict[str, Any] = {"hasAudio": self.has_audio, "hasVideo": self.has_video}
        optional = {
            "audioActive": self.audio_active,
            "videoActive": self.video_active,
            "frameRate": self.frame_rate,
            "typeOfVideo": self.type_of_video,
            "videoDimensions": self.video_dimensions,
        }
        json.update({key: value for key, value in optional.items() if value is not None})
        return json


@dataclass(frozen=True)
class Publisher:
    """One stream a Connection is publishing, identified by its stream id."""

    stream_id: str
    created_at: int
    media_options: MediaOptions

    @classmethod
    def from_payload(cls, payload: PublisherPayload) -> "Publisher":
        return cls(
            stream_id=payload.stream_id,
            created_at=payload.created_at,
            media_options=MediaOptions.from_payload(payload.media_options),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "streamId": self.stream_id,
            "createdAt": self.created_at,
            "mediaOptions": self.media_options.to_json(),
        }


@dataclass(frozen=True)
class TokenOptions:
    role: OpenViduRole = OpenViduRole.PUBLISHER
    data: Optional[str] = None
    record: bool = True
    media_mode: Optional[MediaMode] = None

    def to_json(self) -> Dict[str, Any]:
        json: Dict[str, Any] = {"role": self.role.value, "record": self.record}
        if self.data is not None:
            json["data"] = self.data
        if self.media_mode is not None:
            json["mediaMode"] = self.media_mode.value
        return json


class Token:
    """Credential of one Connection plus the capabilities it was granted."""

    def __init__(self, token: Optional[str], connection_id: str, token_options: TokenOptions):
        self._token = token
        self._connection_id = connection_id
        self._token_options = token_options

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def token_options(self) -> TokenOptions:
        return self._token_options

    @property
    def role(self) -> OpenViduRole:
        return self._token_options.role

    @property
    def data(self) -> Optional[str]:
        return self._token_options.data

    @property
    def record(self) -> bool:
        return self._token_options.record

    def override_token_options(self, token_options: TokenOptions) -> None:
        self._token_options = token_options

    def __repr__(self) -> str:
        return f"Token(connection_id={self._connection_id!r}, options={self._token_options!r})"


class PublisherMap:
    """Stream id to Publisher mapping that can be read while it is being modified.

    Writers serialize on a lock and publish a fresh dict; readers work on
    whichever dict is current when they start, so iteration never fails and
    never observes a half-applied change.
    """

    def __init__(self, entries: Optional[Dict[str, Publisher]] = None):
        self._lock = threading.Lock()
        self._entries: Dict[str, Publisher] = dict(entries or {})

    def put(self, publisher: Publisher) -> Optional[Publisher]:
        with self._lock:
            entries = dict(self._entries)
            previous = entries.get(publisher.stream_id)
            entries[publisher.stream_id] = publisher
            self._entries = entries
        return previous

    def pop(self, stream_id: str) -> Optional[Publisher]:
        with self._lock:
            if stream_id not in self._entries:
                return None
            entries = dict(self._entries)
            removed = entries.pop(stream_id)
            self._entries = entries
        return removed

    def get(self, stream_id: str) -> Optional[Publisher]:
        return self._entries.get(stream_id)

    def keys(self) -> List[str]:
        return list(self._entries)

    def values(self) -> List[Publisher]:
        return list(self._entries.values())

    def __contains__(self, stream_id: object) -> bool:
        return stream_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class _SessionGrant:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<session grant>"


# Only Session holds this; Connection refuses mutations without it.
_SESSION_GRANT = _SessionGrant()


def _check_grant(grant: object) -> None:
    if grant is not _SESSION_GRANT:
        raise PermissionError("Connections can only be modified by their Session")


class Connection:
    """One participant connected to a Session.

    Built from the JSON snapshot the server returns for the connection. Role,
    record flag, publishers and subscriptions change afterwards only through
    the owning :class:`~openvidu_client.session.Session`.
    """

    def __init__(self, json: Dict[str, Any]):
        try:
            payload = ConnectionPayload.model_validate(json)
        except ValidationError as exc:
            raise FormatError(f"Malformed connection: {exc}") from exc

        entries: Dict[str, Publisher] = {}
        for pub_payload in payload.publishers:
            if pub_payload.stream_id in entries:
                logger.debug(
                    "Connection %s lists stream %s twice, keeping the last one",
                    payload.connection_id,
                    pub_payload.stream_id,
                )
            entries[pub_payload.stream_id] = Publisher.from_payload(pub_payload)
        subscribers = [sub.stream_id for sub in payload.subscribers]
        role = OpenViduRole.from_json(payload.role)
        token_options = TokenOptions(role=role, data=payload.server_data, record=payload.record, media_mode=None)

        self._connection_id = payload.connection_id
        self._created_at = payload.created_at
        self._location = payload.location
        self._platform = payload.platform
        self._client_data = payload.client_data
        self._token = Token(payload.token, payload.connection_id, token_options)
        self._publishers = PublisherMap(entries)
        self._subscribers: List[str] = subscribers

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def created_at(self) -> int:
        """Timestamp the connection was established, in UTC milliseconds."""
        return self._created_at

    @property
    def location(self) -> str:
        """Geo location as ``"CITY, COUNTRY"``, or ``"unknown"``."""
        return self._location

    @property
    def platform(self) -> str:
        return self._platform

    @property
    def client_data(self) -> str:
        return self._client_data

    @property
    def role(self) -> OpenViduRole:
        return self._token.role

    @property
    def server_data(self) -> Optional[str]:
        return self._token.data

    @property
    def record(self) -> bool:
        """Whether streams of this connection are recorded in INDIVIDUAL recordings."""
        return self._token.record

    @property
    def token(self) -> Optional[str]:
        """The token string, or None when the snapshot did not include it."""
        return self._token.token

    @property
    def token_connection_id(self) -> str:
        return self._token.connection_id

    def get_publishers(self) -> List[Publisher]:
        return self._publishers.values()

    def get_publisher(self, stream_id: str) -> Optional[Publisher]:
        return self._publishers.get(stream_id)

    def publishes(self, stream_id: str) -> bool:
        return stream_id in self._publishers

    def get_subscribers(self) -> List[str]:
        """Stream ids this connection receives, each published by some other connection."""
        return list(self._subscribers)

    def override_token_options(self, grant: object, token_options: TokenOptions) -> None:
        """Only role and record are updated; server data is kept as it is."""
        _check_grant(grant)
        if token_options is None:
            raise TypeError("token_options must not be None")
        reconciled = TokenOptions(role=token_options.role, data=self._token.data, record=token_options.record)
        self._token.override_token_options(reconciled)

    def set_subscribers(self, grant: object, subscribers: Iterable[str]) -> None:
        _check_grant(grant)
        self._subscribers = list(subscribers)

    def remove_publisher(self, grant: object, stream_id: str) -> Optional[Publisher]:
        _check_grant(grant)
        return self._publishers.pop(stream_id)

    def to_json(self) -> Dict[str, Any]:
        json: Dict[str, Any] = {
            "connectionId": self._connection_id,
            "createdAt": self._created_at,
            "location": self._location,
            "platform": self._platform,
            "clientData": self._client_data,
            "role": self.role.value,
            "serverData": self.server_data,
            "record": self.record,
            "publishers": [publisher.to_json() for publisher in self.get_publishers()],
            "subscribers": [{"streamId": stream_id} for stream_id in self._subscribers],
        }
        if self.token is not None:
            json["token"] = self.token
        return json
