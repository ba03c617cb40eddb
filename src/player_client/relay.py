"""Loopback HTTP relay that streams a remote audio URL to a local player."""

import asyncio
import contextlib
import logging
from http import HTTPStatus

import httpx
from mytube_common import ClientIdentity, spoofed_headers

from player_client.config import RelayConfig
from player_client.exceptions import BindFailed, RelayUpstreamError
from player_client.models import ByteRange, ProxySession, RelayState

logger = logging.getLogger(__name__)

MAX_REQUEST_HEAD_BYTES = 16 * 1024
STREAM_PATH = "/stream"


def _parse_request_head(head: bytes) -> tuple[str, dict[str, str]]:
    lines = head.decode("latin-1").split("\r\n")
    parts = lines[0].split(" ")
    method = parts[0].upper() if parts and parts[0] else ""
    headers = {}
    for line in lines[1:]:
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return method, headers


async def _wait_for_eof(reader: asyncio.StreamReader) -> None:
    # The player sends nothing after the request head; EOF means it hung up.
    with contextlib.suppress(ConnectionError):
        while await reader.read(1024):
            pass


def _error_response(status_code: int, message: str) -> bytes:
    body = message.encode("utf-8")
    return (
        f"HTTP/1.1 {status_code} Error\r\n"
        "Content-Type: text/plain\r\n"
        f"Content-Length: {len(body)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("latin-1") + body


class LocalStreamingRelay:
    """
    Serves ``http://127.0.0.1:{port}/stream`` by forwarding to a remote URL.

    Requests carry the spoofed headers of the session's client identity and
    the player's ``Range``. Upstream chunks are written downstream verbatim;
    each write is drained before the next chunk is read, so a slow player
    slows down the upstream read instead of growing a buffer. When the
    player hangs up, the upstream request is cancelled straight away.

    The target is read once per connection when it is accepted, so
    ``set_target`` never affects a response that is already streaming.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config or RelayConfig()
        self._transport = transport
        self._server: asyncio.Server | None = None
        self._client: httpx.AsyncClient | None = None
        self._session: ProxySession | None = None
        self._connections: set[asyncio.Task] = set()
        self.state = RelayState.STOPPED

    @property
    def port(self) -> int | None:
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    @property
    def local_url(self) -> str | None:
        if self.state is not RelayState.LISTENING:
            return None
        return f"http://127.0.0.1:{self.port}{STREAM_PATH}"

    def set_target(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        identity: ClientIdentity = ClientIdentity.ANDROID,
        container: str = "mp4",
    ) -> None:
        """Points new connections at ``url``."""
        self._session = ProxySession(
            url=url, headers=headers or {}, identity=identity, container=container
        )
        logger.info("Relay target updated", extra={"identity": identity.value})

    async def start(self) -> None:
        """
        Starts listening on the configured loopback port.

        Raises:
            BindFailed: If the port cannot be bound.
        """
        if self.state is not RelayState.STOPPED:
            return

        self.state = RelayState.STARTING
        try:
            self._server = await asyncio.start_server(
                self._on_connection,
                host=self._config.host,
                port=self._config.port,
                reuse_address=True,
                limit=MAX_REQUEST_HEAD_BYTES,
            )
        except OSError as e:
            self.state = RelayState.STOPPED
            logger.error(
                "Relay bind failed",
                extra={"host": self._config.host, "port": self._config.port},
            )
            raise BindFailed(self._config.host, self._config.port, e) from e

        self._client = httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self._config.upstream_timeout_seconds, connect=15.0),
            follow_redirects=True,
        )
        self.state = RelayState.LISTENING
        logger.info("Relay listening", extra={"port": self.port})

    async def stop(self) -> None:
        """Closes the listener and cancels every open connection."""
        server, self._server = self._server, None
        if server is None:
            self.state = RelayState.STOPPED
            return

        server.close()
        for task in list(self._connections):
            task.cancel()
        if self._connections:
            await asyncio.gather(*self._connections, return_exceptions=True)
        await server.wait_closed()

        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self.state = RelayState.STOPPED
        logger.info("Relay stopped")

    async def _on_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        session = self._session
        task = asyncio.current_task()
        self._connections.add(task)
        try:
            await self._serve(session, reader, writer)
        except ConnectionError:
            logger.info("Player disconnected")
        except Exception:
            logger.exception("Relay connection failed")
        finally:
            self._connections.discard(task)
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    async def _serve(
        self,
        session: ProxySession | None,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        try:
            head = await asyncio.wait_for(
                reader.readuntil(b"\r\n\r\n"),
                timeout=self._config.request_head_timeout_seconds,
            )
        except (asyncio.IncompleteReadError, asyncio.LimitOverrunError):
            writer.write(_error_response(400, "Bad request"))
            await writer.drain()
            return
        except asyncio.TimeoutError:
            writer.write(_error_response(408, "Request timeout"))
            await writer.drain()
            return

        method, headers = _parse_request_head(head)
        if session is None:
            writer.write(_error_response(503, "No remote URL configured"))
            await writer.drain()
            return
        if method != "GET":
            writer.write(_error_response(405, "Method not allowed"))
            await writer.drain()
            return

        byte_range = ByteRange.parse(headers.get("range"))
        forward = asyncio.create_task(self._forward(session, byte_range, writer))
        disconnect = asyncio.create_task(_wait_for_eof(reader))
        try:
            await asyncio.wait(
                {forward, disconnect}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            forward.cancel()
            disconnect.cancel()
            await asyncio.gather(forward, disconnect, return_exceptions=True)

        if forward.cancelled():
            logger.info("Player disconnected, upstream request cancelled")
            return
        try:
            forward.result()
        except RelayUpstreamError as e:
            logger.warning(
                "Upstream error",
                extra={"status_code": e.status_code, "error": str(e.cause or e)},
            )
            writer.write(_error_response(e.status_code, str(e)))
            await writer.drain()

    async def _forward(
        self,
        session: ProxySession,
        byte_range: ByteRange | None,
        writer: asyncio.StreamWriter,
    ) -> None:
        request_headers = {
            **spoofed_headers(session.identity),
            **session.headers,
            "Accept-Encoding": "identity",
        }
        if byte_range is not None:
            request_headers["Range"] = byte_range.header_value
            logger.info("Forwarding range", extra={"range": byte_range.header_value})

        headers_sent = False
        try:
            async with self._client.stream(
                "GET", session.url, headers=request_headers
            ) as response:
                if response.status_code >= 400:
                    raise RelayUpstreamError(response.status_code)

                head = self._response_head(response, session, byte_range)
                async for chunk in response.aiter_raw():
                    if not chunk:
                        continue
                    if not headers_sent:
                        writer.write(head)
                        headers_sent = True
                    writer.write(chunk)
                    await writer.drain()

                if not headers_sent:
                    writer.write(head)
                    headers_sent = True
                    await writer.drain()
        except httpx.HTTPError as e:
            if headers_sent:
                logger.warning("Upstream stream interrupted", extra={"error": str(e)})
                return
            raise RelayUpstreamError(502, e) from e

    def _response_head(
        self,
        response: httpx.Response,
        session: ProxySession,
        byte_range: ByteRange | None,
    ) -> bytes:
        status_code = response.status_code
        upstream_type = response.headers.get("content-type", "")
        if upstream_type.startswith("audio/"):
            content_type = upstream_type
        else:
            content_type = f"audio/{session.container}"

        headers = [
            ("Content-Type", content_type),
            ("Accept-Ranges", "bytes"),
        ]

        content_range = response.headers.get("content-range")
        upstream_range = ByteRange.from_content_range(content_range)
        if upstream_range is not None:
            headers.append(("Content-Range", content_range))
            headers.append(("Content-Length", str(upstream_range.length)))
        elif "content-length" in response.headers:
            content_length = response.headers["content-length"]
            if status_code == 206 and byte_range is not None and content_length.isdigit():
                end = byte_range.start + int(content_length) - 1
                headers.append(
                    ("Content-Range", f"bytes {byte_range.start}-{end}/*")
                )
            headers.append(("Content-Length", content_length))
        elif byte_range is not None and byte_range.length is not None:
            headers.append(("Content-Length", str(byte_range.length)))
            if status_code == 206:
                headers.append(
                    ("Content-Range", f"bytes {byte_range.start}-{byte_range.end}/*")
                )
        headers.append(("Connection", "close"))

        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = "OK"
        lines = [f"HTTP/1.1 {status_code} {reason}"]
        lines.extend(f"{name}: {value}" for name, value in headers)
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")
