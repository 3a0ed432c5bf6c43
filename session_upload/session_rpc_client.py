"""HTTP transport for session-scoped calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping

import requests

from .config import Settings

logger = logging.getLogger(__name__)


class SessionRpcError(RuntimeError):
    """The remote endpoint answered with something other than a JSON object."""


class HttpTransferChannel:
    """Send session calls as JSON POSTs to the upload server."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.session = requests.Session()

    async def call(self, session_id: str, method: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self.call_sync, session_id, method, params)

    def call_sync(self, session_id: str, method: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Blocking variant of :meth:`call`."""
        url = self.settings.rpc_url(session_id)
        headers = {"Authorization": f"Bearer {self.settings.upload_api_token}"}
        body = {"method": method, "params": dict(params)}

        logger.debug("Calling %s on session %s", method, session_id)
        response = self.session.post(
            url, headers=headers, json=body, timeout=self.settings.upload_timeout_seconds
        )

        if response.status_code >= 400:
            logger.error("Session call %s failed (%s): %s", method, response.status_code, response.text)
            response.raise_for_status()

        payload = self._parse_response_body(response)
        if not isinstance(payload, dict):
            raise SessionRpcError(f"Unexpected response to {method}: {payload!r}")
        return payload

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _parse_response_body(response) -> dict | str:
        try:
            return response.json()
        except ValueError:
            return response.text
