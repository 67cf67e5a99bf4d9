"""OpenVidu REST API client wrapper."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import OpenViduConfig
from .errors import OpenViduHttpError
from .models import TokenOptions

logger = logging.getLogger(__name__)

API_PATH = "/openvidu/api"
BASIC_AUTH_USER = "OPENVIDUAPP"


class OpenViduClient:
    """Wrapper around the OpenVidu server REST API for session management."""

    def __init__(self, config: OpenViduConfig, http: Optional[requests.Session] = None):
        self.config = config
        self.http = http or self._build_http()

    def _build_http(self) -> requests.Session:
        http = requests.Session()
        http.auth = (BASIC_AUTH_USER, self.config.secret)
        http.verify = self.config.verify_tls
        http.headers.update({"Content-Type": "application/json"})
        return http

    def _url(self, *parts: str) -> str:
        return "/".join([self.config.base_url + API_PATH, *parts])

    def get_session(self, session_id: str) -> Dict[str, Any]:
        response = self.safe_call(
            "GET", self._url("sessions", session_id), params={"pendingConnections": "true"}
        )
        return response.json()

    def update_connection(self, session_id: str, connection_id: str, token_options: TokenOptions) -> Dict[str, Any]:
        body = {"role": token_options.role.value, "record": token_options.record}
        response = self.safe_call("PATCH", self._url("sessions", session_id, "connection", connection_id), json=body)
        logger.info("Updated connection %s of session %s", connection_id, session_id)
        return response.json()

    def force_disconnect(self, session_id: str, connection_id: str) -> None:
        self.safe_call("DELETE", self._url("sessions", session_id, "connection", connection_id))
        logger.info("Forced disconnection of %s from session %s", connection_id, session_id)

    def force_unpublish(self, session_id: str, stream_id: str) -> None:
        self.safe_call("DELETE", self._url("sessions", session_id, "stream", stream_id))
        logger.info("Forced unpublish of stream %s in session %s", stream_id, session_id)

    def safe_call(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.http.request(method, url, timeout=self.config.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error("OpenVidu API error: %s", exc)
            raise OpenViduHttpError(exc.response.status_code, exc.response.text) from exc
        except requests.RequestException as exc:
            logger.error("OpenVidu API unreachable: %s", exc)
            raise
        return response
