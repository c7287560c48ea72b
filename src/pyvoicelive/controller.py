"""Session controller for a realtime voice session.

Owns:
- the streaming channel lifecycle (connect / disconnect / remote close)
- routing inbound events to the tool dispatcher and telemetry aggregator
- the audit log and typed notifications for UI layers
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyvoicelive._channel import Channel, ChannelFactory, WebSocketChannel
from pyvoicelive.audit import AuditLog
from pyvoicelive.config import VoiceLiveConfig
from pyvoicelive.exceptions import (
    ArgumentParseError,
    ChannelClosedError,
    ChannelError,
    ConfigurationError,
    RemoteServiceError,
)
from pyvoicelive.models.events import (
    FunctionCallArgumentsDone,
    InboundEventType,
    OutboundEventType,
    ServerError,
    ToolCallRequest,
    ToolCallResult,
)
from pyvoicelive.models.telemetry import Metrics, UsageSample
from pyvoicelive.state.events import UpdateSource
from pyvoicelive.state.store import VehicleStateStore
from pyvoicelive.telemetry.aggregator import TelemetryAggregator
from pyvoicelive.tools.dispatcher import ToolDispatcher, error_payload, is_success

_logger = logging.getLogger(__name__)


class SessionState(enum.StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class NotificationKind(enum.StrEnum):
    OPEN = "open"
    ERROR = "error"
    EVENT = "event"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class SessionNotification:
    """Typed notification emitted by :class:`SessionController`."""

    kind: NotificationKind
    event: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None


NotificationListener = Callable[[SessionNotification], None]


class SessionController:
    """Finite-state controller for one realtime session at a time.

    Usage::

        async with SessionController() as controller:
            await controller.connect(VoiceLiveConfig.from_env())
            ...
            await controller.disconnect()

    The vehicle store, dispatcher and telemetry aggregator are passed in (or
    created) and outlive individual connections; reconnecting keeps the
    vehicle state and accumulated metrics.
    """

    def __init__(
        self,
        *,
        store: VehicleStateStore | None = None,
        dispatcher: ToolDispatcher | None = None,
        telemetry: TelemetryAggregator | None = None,
        audit: AuditLog | None = None,
        http_session: aiohttp.ClientSession | None = None,
        channel_factory: ChannelFactory | None = None,
        on_notification: NotificationListener | None = None,
    ) -> None:
        self._store = store if store is not None else VehicleStateStore()
        self._dispatcher = dispatcher if dispatcher is not None else ToolDispatcher()
        self._telemetry = telemetry if telemetry is not None else TelemetryAggregator()
        self._audit = audit if audit is not None else AuditLog()
        self._external_http = http_session is not None
        self._http = http_session
        self._channel_factory = channel_factory
        self._listeners: list[NotificationListener] = []
        if on_notification is not None:
            self._listeners.append(on_notification)

        self._state = SessionState.DISCONNECTED
        self._config: VoiceLiveConfig | None = None
        self._channel: Channel | None = None
        self._reader: asyncio.Task[None] | None = None
        self._handled_calls: set[str] = set()
        self._attempt = 0

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SessionController:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Disconnect and release the HTTP session if this controller created it."""
        await self.disconnect()
        if not self._external_http and self._http is not None:
            await self._http.close()
            self._http = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    @property
    def config(self) -> VoiceLiveConfig | None:
        """Configuration of the current (or last) connection."""
        return self._config

    @property
    def store(self) -> VehicleStateStore:
        return self._store

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    @property
    def telemetry(self) -> TelemetryAggregator:
        return self._telemetry

    @property
    def metrics(self) -> Metrics:
        return self._telemetry.snapshot()

    @property
    def audit(self) -> AuditLog:
        return self._audit

    def add_listener(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self, config: VoiceLiveConfig) -> None:
        """Open the channel, declare the tools and start reading events.

        Raises
        ------
        ConfigurationError
            Endpoint or API key missing; no connection is attempted.
        ChannelError
            The channel could not be opened (``ConnectionTimeoutError`` on
            handshake timeout) or the session update could not be sent.
            ``ChannelClosedError`` when :meth:`disconnect` was called before
            the handshake completed.
        """
        if self._state is not SessionState.DISCONNECTED:
            raise ChannelError(f"Cannot connect while {self._state.value}")

        try:
            config.validate_connection()
        except ConfigurationError as exc:
            self._audit.error(f"Configuration error: {exc}")
            self._notify(NotificationKind.ERROR, error=exc)
            raise

        session = config.session.with_tools(self._dispatcher.declarations)
        url = config.realtime_url()
        self._attempt += 1
        attempt = self._attempt
        self._state = SessionState.CONNECTING
        connected = False
        try:
            channel = await self._open_channel(url, config.headers(), config.connect_timeout)
            try:
                self._ensure_current_attempt(attempt)
                await channel.send_json(
                    {"type": OutboundEventType.SESSION_UPDATE.value, "session": session.to_wire()}
                )
                self._ensure_current_attempt(attempt)
            except ChannelError:
                await channel.close()
                raise
            connected = True
        except ChannelError as exc:
            self._audit.error(f"Connection failed: {exc}")
            self._notify(NotificationKind.ERROR, error=exc)
            raise
        finally:
            # A superseded attempt must not touch the state of the newer one.
            if not connected and attempt == self._attempt:
                self._state = SessionState.DISCONNECTED

        self._config = config
        self._channel = channel
        self._handled_calls.clear()
        self._state = SessionState.CONNECTED
        self._audit.info(f"Connected to Azure Voice Live ({config.model})")
        self._notify(NotificationKind.OPEN)
        self._reader = asyncio.get_running_loop().create_task(self._read_loop(channel))

    async def disconnect(self) -> None:
        """Close the session. Safe to call repeatedly; never raises channel errors."""
        reader = self._reader
        channel = self._channel
        was_connected = self._state is SessionState.CONNECTED
        # Invalidates a connect() still waiting on the handshake.
        self._attempt += 1
        self._reader = None
        self._channel = None
        self._state = SessionState.DISCONNECTED

        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader

        if channel is not None:
            try:
                await channel.close()
            except (ChannelError, aiohttp.ClientError, ConnectionError):
                _logger.debug("Channel close failed", exc_info=True)

        if was_connected:
            self._audit.info("Disconnected")
            self._notify(NotificationKind.CLOSE)

    async def wait_closed(self) -> None:
        """Wait until the current session ends (remote close, error or disconnect)."""
        reader = self._reader
        if reader is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.shield(reader)

    def _ensure_current_attempt(self, attempt: int) -> None:
        if attempt != self._attempt:
            raise ChannelClosedError("Connection attempt cancelled by disconnect")

    async def _open_channel(self, url: str, headers: Mapping[str, str], timeout: float) -> Channel:
        if self._channel_factory is not None:
            return await self._channel_factory(url, headers, timeout)
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return await WebSocketChannel.open(self._http, url, headers, timeout)

    async def _read_loop(self, channel: Channel) -> None:
        try:
            async for event in channel.events():
                await self.handle_inbound_event(event)
        except ChannelError as exc:
            self._audit.error(f"Error: {exc}")
            self._notify(NotificationKind.ERROR, error=exc)
        except Exception as exc:
            _logger.exception("Inbound event loop failed")
            self._audit.error(f"Error: {exc}")
            self._notify(NotificationKind.ERROR, error=exc)
        else:
            self._audit.info("Channel closed by remote")

        # Still the active channel: the remote side ended the session.
        if self._channel is channel:
            await self.disconnect()

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    async def handle_inbound_event(self, event: Mapping[str, Any]) -> None:
        """Route one inbound event. Unknown event types are ignored."""
        event_type = event.get("type")
        self._notify(NotificationKind.EVENT, event=dict(event))

        if event_type == InboundEventType.FUNCTION_CALL_ARGUMENTS_DONE:
            await self._handle_function_call(event)
        elif event_type == InboundEventType.RESPONSE_DONE:
            self._handle_response_done(event)
        elif event_type == InboundEventType.ERROR:
            self._handle_server_error(event)

    async def _handle_function_call(self, event: Mapping[str, Any]) -> None:
        call_id = event.get("call_id")
        name = event.get("name")
        name = name if isinstance(name, str) else ""
        if not isinstance(call_id, str) or not call_id:
            self._audit.error(f"Function call {name!r} without call_id ignored")
            return
        if call_id in self._handled_calls:
            self._audit.error(f"Duplicate function call {call_id} ignored")
            return
        self._handled_calls.add(call_id)

        self._audit.tool(f"Tool Call: {name}")
        try:
            call = FunctionCallArgumentsDone.model_validate(dict(event))
        except ValidationError as exc:
            error = ArgumentParseError(f"Malformed function call event: {exc.error_count()} error(s)", tool_name=name)
            self._audit.error(f"Tool {name} failed: {error}")
            result = ToolCallResult(call_id=call_id, success=False, payload=error_payload(error))
        else:
            result = self._dispatch(call)
        self._audit.tool(f"Tool Result: {json.dumps(result.payload, default=str)}")

        try:
            await self.send_tool_result(result)
        except ChannelError as exc:
            # No retry: the turn continues without the result.
            self._audit.error(f"Failed to send result for {name} ({call_id}): {exc}")

    def _dispatch(self, call: FunctionCallArgumentsDone) -> ToolCallResult:
        try:
            request = ToolCallRequest.from_event(call)
        except ArgumentParseError as exc:
            self._audit.error(f"Tool {call.name} failed: {exc}")
            return ToolCallResult(call_id=call.call_id, success=False, payload=error_payload(exc))

        next_state, payload = self._dispatcher.execute(request.name, request.arguments, self._store.snapshot)
        success = is_success(payload)
        if success:
            self._store.replace(next_state, source=UpdateSource.TOOL)
        else:
            self._audit.error(f"Tool {request.name} failed: {payload.get('message', '')}")
        return ToolCallResult(call_id=request.call_id, success=success, payload=payload)

    def _handle_response_done(self, event: Mapping[str, Any]) -> None:
        try:
            sample = UsageSample.from_response_done(event)
        except (ValidationError, TypeError, ValueError):
            _logger.warning("Unusable usage block in response.done", exc_info=True)
            return
        if sample is None:
            return
        self._telemetry.record(sample)

    def _handle_server_error(self, event: Mapping[str, Any]) -> None:
        try:
            error = ServerError.model_validate(dict(event))
        except ValidationError:
            error = ServerError()
        suffix = f" ({error.code})" if error.code else ""
        self._audit.error(f"Error: {error.message}{suffix}")
        self._notify(
            NotificationKind.ERROR,
            event=dict(event),
            error=RemoteServiceError(error.message, code=error.code),
        )

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send_tool_result(self, result: ToolCallResult) -> None:
        """Send a tool result and request the follow-up response.

        Raises :class:`ChannelClosedError` when not connected.
        """
        channel = self._channel
        if self._state is not SessionState.CONNECTED or channel is None or channel.closed:
            raise ChannelClosedError(f"Cannot send tool result for {result.call_id}: session not connected")
        for message in result.to_wire():
            await channel.send_json(message)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify(
        self,
        kind: NotificationKind,
        *,
        event: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        notification = SessionNotification(kind=kind, event=event or {}, error=error)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                _logger.debug("Notification listener failed", exc_info=True)
