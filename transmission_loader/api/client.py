"""
Async client for the Transmission JSON-RPC endpoint.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from transmission_loader.exceptions import RPCError
from transmission_loader.models.job import SessionContext

log = logging.getLogger(__name__)


class TransmissionRPCClient:
    """
    Async client for a Transmission daemon's ``/transmission/rpc`` endpoint.

    Every call goes to the same URL as a JSON POST. The daemon protects the
    endpoint with a session-id header that must first be obtained with
    `probe_session_id`; once set, it is attached to every later request.
    """

    SESSION_HEADER = "X-Transmission-Session-Id"

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Initializes the RPC client.

        Args:
            url: Full URL of the RPC endpoint.
            username: Basic-auth user; ignored unless `password` is also given.
            password: Basic-auth password; ignored unless `username` is also given.
        """
        self.url = url
        self.auth: Optional[aiohttp.BasicAuth] = None
        if username is not None and password is not None:
            self.auth = aiohttp.BasicAuth(username, password)

        # State set by the session bootstrapper
        self.session_id: Optional[str] = None

        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "TransmissionRPCClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session carrying the session-id header."""
        if self._session is None or self._session.closed:
            headers = {}
            if self.session_id:
                headers[self.SESSION_HEADER] = self.session_id
            self._session = aiohttp.ClientSession(headers=headers)
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def probe_session_id(self) -> Optional[str]:
        """
        Issues the unauthenticated-session probe.

        Returns:
            The session id when the daemon answers 409 Conflict with the
            session header, otherwise None.
        """
        async with aiohttp.ClientSession() as probe_session:
            async with probe_session.get(self.url, auth=self.auth) as r:
                session_id = r.headers.get(self.SESSION_HEADER)
                log.debug(f"Session probe returned HTTP {r.status}")
                if r.status == 409 and session_id:
                    return session_id
                return None

    async def rpc_call(
        self,
        method: str,
        arguments: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[aiohttp.BasicAuth] = None,
    ) -> Dict[str, Any]:
        """
        Sends one RPC request and returns the decoded response envelope.

        `headers` and `auth` apply to this request only, on top of the
        session defaults.

        Raises:
            aiohttp.ClientError: On transport failures or non-2xx statuses.
            ValueError: If the body is not a JSON object.
        """
        session = await self._initialize_session()

        payload: Dict[str, Any] = {"method": method}
        if arguments is not None:
            payload["arguments"] = arguments

        async with session.post(
            self.url, json=payload, headers=headers, auth=auth or self.auth
        ) as r:
            r.raise_for_status()
            data = await r.json(content_type=None)

        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response to '{method}': {data!r}")
        return data

    async def get_session(self) -> Dict[str, Any]:
        """Calls ``session-get`` and returns its arguments object."""
        response = await self.rpc_call("session-get")
        arguments = response.get("arguments")
        if not isinstance(arguments, dict):
            raise ValueError("Response to 'session-get' has no arguments object.")
        return arguments

    async def add_torrent(
        self, arguments: Dict[str, Any], context: SessionContext
    ) -> Dict[str, Any]:
        """
        Calls ``torrent-add`` with the session id and credentials from `context`.

        Raises:
            RPCError: If the daemon reports anything other than success.
        """
        headers = None
        if context.session_id:
            headers = {self.SESSION_HEADER: context.session_id}
        response = await self.rpc_call(
            "torrent-add", arguments, headers=headers, auth=context.auth
        )
        result = response.get("result")
        if result != "success":
            raise RPCError("torrent-add", str(result))
        return response.get("arguments", {})
