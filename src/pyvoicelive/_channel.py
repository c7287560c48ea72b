"""WebSocket channel to the realtime endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

import aiohttp

from pyvoicelive._redact import redact_for_log
from pyvoicelive.exceptions import ChannelClosedError, ChannelError, ConnectionTimeoutError

_logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Structural channel interface used by the session controller."""

    @property
    def closed(self) -> bool: ...

    async def send_json(self, message: Mapping[str, Any]) -> None: ...

    def events(self) -> AsyncIterator[dict[str, Any]]: ...

    async def close(self) -> None: ...


class ChannelFactory(Protocol):
    async def __call__(self, url: str, headers: Mapping[str, str], timeout: float) -> Channel: ...


class WebSocketChannel:
    """JSON-over-WebSocket channel backed by an aiohttp client session."""

    def __init__(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        self._ws = ws

    @classmethod
    async def open(
        cls,
        http_session: aiohttp.ClientSession,
        url: str,
        headers: Mapping[str, str],
        timeout: float,
    ) -> WebSocketChannel:
        """Open the WebSocket, bounded by *timeout* seconds."""
        _logger.debug("WS connect %s", url)
        try:
            ws = await asyncio.wait_for(http_session.ws_connect(url, headers=dict(headers)), timeout)
        except TimeoutError as exc:
            raise ConnectionTimeoutError(
                f"Channel to {url} not established within {timeout:.1f}s",
                timeout=timeout,
            ) from exc
        except aiohttp.WSServerHandshakeError as exc:
            raise ChannelError(f"Handshake with {url} rejected: HTTP {exc.status} {exc.message}") from exc
        except aiohttp.ClientError as exc:
            raise ChannelError(f"Connection to {url} failed: {exc}") from exc
        return cls(ws)

    @property
    def closed(self) -> bool:
        return self._ws.closed

    async def send_json(self, message: Mapping[str, Any]) -> None:
        if self._ws.closed:
            raise ChannelClosedError("Channel is closed")
        _logger.debug("WS send %s", redact_for_log(message))
        try:
            await self._ws.send_str(json.dumps(message, separators=(",", ":")))
        except (aiohttp.ClientError, ConnectionResetError) as exc:
            raise ChannelError(f"Send failed: {exc}") from exc

    async def events(self) -> AsyncIterator[dict[str, Any]]:
        """Yield inbound JSON objects until the channel closes.

        Raises :class:`ChannelError` on a transport error frame. Frames that
        are not JSON objects are logged and skipped.
        """
        async for msg in self._ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                try:
                    event = json.loads(msg.data)
                except json.JSONDecodeError:
                    _logger.debug("WS dropped non-JSON frame: %s", redact_for_log(msg.data))
                    continue
                if not isinstance(event, dict):
                    _logger.debug("WS dropped non-object frame: %s", redact_for_log(event))
                    continue
                _logger.debug("WS recv %s", redact_for_log(event))
                yield event
            elif msg.type == aiohttp.WSMsgType.ERROR:
                raise ChannelError(f"Channel error: {self._ws.exception()}", close_code=self._ws.close_code)
            elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED):
                break

    async def close(self) -> None:
        if not self._ws.closed:
            await self._ws.close()
