"""Keep track of the Connections of one OpenVidu session."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .client import OpenViduClient
from .errors import FormatError, StaleReferenceError
from .models import _SESSION_GRANT, Connection, TokenOptions
from .schemas import SessionPayload

logger = logging.getLogger(__name__)


class Session:
    """Owns the Connections of a session and applies server-side changes to them."""

    def __init__(self, client: OpenViduClient, session_id: str, created_at: Optional[int] = None):
        self.client = client
        self.session_id = session_id
        self.created_at = created_at
        self._lock = threading.RLock()
        self._connections: Dict[str, Connection] = {}

    def fetch(self) -> bool:
        """Refresh from the server. Returns True if anything changed."""
        snapshot = self.client.get_session(self.session_id)
        return self.reset_with_json(snapshot)

    def reset_with_json(self, json: Dict[str, Any]) -> bool:
        try:
            payload = SessionPayload.model_validate(json)
        except ValidationError as exc:
            raise FormatError(f"Malformed session: {exc}") from exc
        if payload.id != self.session_id:
            raise FormatError(f"Snapshot is for session {payload.id}, not {self.session_id}")

        # Every connection must parse before the index is touched.
        connections = [Connection(item) for item in payload.connections.content]
        fresh = {connection.connection_id: connection for connection in connections}

        with self._lock:
            changed = _describe(self._connections) != _describe(fresh) or self.created_at != payload.created_at
            self.created_at = payload.created_at
            self._connections = fresh
        logger.debug("Session %s refreshed with %d connections", self.session_id, len(fresh))
        return changed

    def get_active_connections(self) -> List[Connection]:
        with self._lock:
            return list(self._connections.values())

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(connection_id)

    def update_connection(self, connection_id: str, token_options: TokenOptions) -> Connection:
        """Change role and record flag of a connection. Server data cannot be updated."""
        json = self.client.update_connection(self.session_id, connection_id, token_options)
        updated = Connection(json)
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                self._connections[updated.connection_id] = updated
                logger.info("Connection %s was not known locally, added from the server reply", connection_id)
                return updated
            connection.override_token_options(_SESSION_GRANT, TokenOptions(role=updated.role, record=updated.record))
        return connection

    def force_disconnect(self, connection_id: str) -> None:
        self.client.force_disconnect(self.session_id, connection_id)
        with self._lock:
            connection = self._connections.pop(connection_id, None)
            if connection is None:
                return
            gone = {publisher.stream_id for publisher in connection.get_publishers()}
            if not gone:
                return
            for other in self._connections.values():
                subscribers = other.get_subscribers()
                if any(stream_id in gone for stream_id in subscribers):
                    other.set_subscribers(
                        _SESSION_GRANT, [stream_id for stream_id in subscribers if stream_id not in gone]
                    )

    def force_unpublish(self, stream_id: str) -> None:
        self.client.force_unpublish(self.session_id, stream_id)
        with self._lock:
            for connection in self._connections.values():
                if connection.remove_publisher(_SESSION_GRANT, stream_id) is not None:
                    continue
                subscribers = connection.get_subscribers()
                if stream_id in subscribers:
                    connection.set_subscribers(_SESSION_GRANT, [sid for sid in subscribers if sid != stream_id])

    def find_stale_subscriptions(self) -> Dict[str, List[str]]:
        """Subscriber stream ids that no connection of this session publishes, by connection id."""
        with self._lock:
            published = {
                publisher.stream_id
                for connection in self._connections.values()
                for publisher in connection.get_publishers()
            }
            stale: Dict[str, List[str]] = {}
            for connection in self._connections.values():
                dangling = [sid for sid in connection.get_subscribers() if sid not in published]
                if dangling:
                    stale[connection.connection_id] = dangling
        return stale

    def validate_subscriptions(self) -> None:
        stale = self.find_stale_subscriptions()
        if stale:
            raise StaleReferenceError(stale)

    def __repr__(self) -> str:
        with self._lock:
            count = len(self._connections)
        return f"Session(session_id={self.session_id!r}, connections={count})"


def _describe(connections: Dict[str, Connection]) -> Dict[str, Dict[str, Any]]:
    described = {}
    for connection_id, connection in connections.items():
        json = connection.to_json()
        json["publishers"] = sorted(json["publishers"], key=lambda publisher: publisher["streamId"])
        described[connection_id] = json
    return described
