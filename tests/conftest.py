"""Shared fixtures: an in-process fake Transmission daemon."""

import asyncio
import base64
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port

SESSION_HEADER = "X-Transmission-Session-Id"
RPC_PATH = "/transmission/rpc"


@dataclass
class FakeDaemon:
    """Minimal Transmission RPC endpoint recording every request it receives."""

    session_id: Optional[str] = "abc123"
    download_dir: Optional[str] = "/downloads"
    delay: float = 0.0
    failing_sources: Set[str] = field(default_factory=set)
    garbage_sources: Set[str] = field(default_factory=set)
    url: str = ""

    probes: List[Any] = field(default_factory=list)
    requests: List[Dict[str, Any]] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get(RPC_PATH, self.handle_probe)
        app.router.add_post(RPC_PATH, self.handle_rpc)
        return app

    @property
    def added(self) -> List[Dict[str, Any]]:
        return [r["body"] for r in self.requests if r["body"]["method"] == "torrent-add"]

    async def handle_probe(self, request: web.Request) -> web.Response:
        self.probes.append(request.headers.copy())
        if self.session_id:
            return web.Response(status=409, headers={SESSION_HEADER: self.session_id})
        return web.Response(status=200, text="<h1>Transmission</h1>")

    async def handle_rpc(self, request: web.Request) -> web.Response:
        if self.session_id and request.headers.get(SESSION_HEADER) != self.session_id:
            return web.Response(status=409, headers={SESSION_HEADER: self.session_id})

        body = await request.json()
        self.requests.append({"headers": request.headers.copy(), "body": body})

        if body["method"] == "session-get":
            arguments = {"version": "4.0.5"}
            if self.download_dir is not None:
                arguments["download-dir"] = self.download_dir
            return web.json_response({"arguments": arguments, "result": "success"})

        if body["method"] == "torrent-add":
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await asyncio.sleep(self.delay)
            finally:
                self.in_flight -= 1

            arguments = body["arguments"]
            source = arguments.get("filename") or base64.b64decode(
                arguments.get("metainfo", "")
            ).decode("utf-8", "replace")
            if source in self.garbage_sources:
                return web.Response(status=200, text="not json at all")
            if source in self.failing_sources:
                return web.json_response(
                    {"arguments": {}, "result": "invalid or corrupt torrent file"}
                )
            return web.json_response(
                {
                    "arguments": {"torrent-added": {"id": len(self.requests)}},
                    "result": "success",
                }
            )

        return web.json_response({"arguments": {}, "result": "method name not recognized"})


@pytest_asyncio.fixture
async def daemon():
    """A fake daemon served on a local port for the duration of one test."""
    fake = FakeDaemon()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.url = str(server.make_url(RPC_PATH))
    yield fake
    await server.close()


@pytest.fixture
def threaded_daemon():
    """
    A fake daemon running on its own event loop in a background thread, for
    code under test that calls asyncio.run() itself (the CLI).
    """
    fake = FakeDaemon()
    loop = asyncio.new_event_loop()
    runner = web.AppRunner(fake.make_app())
    loop.run_until_complete(runner.setup())
    port = unused_port()
    site = web.TCPSite(runner, "127.0.0.1", port)
    loop.run_until_complete(site.start())
    fake.url = f"http://127.0.0.1:{port}{RPC_PATH}"

    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield fake

    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.run_until_complete(runner.cleanup())
    loop.close()


@pytest.fixture
def unreachable_url() -> str:
    return f"http://127.0.0.1:{unused_port()}{RPC_PATH}"
