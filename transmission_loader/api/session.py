"""
Performs the session-id handshake with the daemon and resolves its default
download directory.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

import aiohttp

from transmission_loader.exceptions import ConnectivityError
from transmission_loader.models.job import SessionContext
from transmission_loader.utils.structured_logger import SubmissionLogger

if TYPE_CHECKING:
    from .client import TransmissionRPCClient

log = logging.getLogger(__name__)


class SessionBootstrapper:
    """
    Manages the handshake that must complete before any torrent is submitted.
    """

    def __init__(
        self,
        client: "TransmissionRPCClient",
        events: Optional[SubmissionLogger] = None,
    ):
        """
        Initializes the bootstrapper.

        Args:
            client: The RPC client that later submissions will share.
            events: Structured event logger; a console-only one is used if omitted.
        """
        self._client = client
        self._events = events or SubmissionLogger()

    async def bootstrap(self) -> SessionContext:
        """
        Captures the session id, then asks the daemon for its download directory.

        Returns:
            The session context shared by every submission.

        Raises:
            ConnectivityError: If either step fails or the response is malformed.
        """
        url = self._client.url
        log.debug(f"Probing {url} for a session id...")

        try:
            session_id = await self._client.probe_session_id()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ConnectivityError(
                f"Could not reach the daemon at {url}: {str(e) or type(e).__name__}"
            ) from e

        if session_id:
            self._client.session_id = session_id
            self._events.session_token_captured(url, session_id)
        else:
            log.debug("Daemon did not request a session id; continuing without one.")

        try:
            arguments = await self._client.get_session()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ConnectivityError(
                f"Failed to fetch session settings from {url}: {str(e) or type(e).__name__}"
            ) from e

        download_dir = arguments.get("download-dir")
        if not isinstance(download_dir, str) or not download_dir:
            raise ConnectivityError(
                "Daemon response to 'session-get' did not include a 'download-dir'."
            )

        self._events.session_resolved(url, download_dir, session_id is not None)
        return SessionContext(
            session_id=session_id, auth=self._client.auth, download_dir=download_dir
        )
