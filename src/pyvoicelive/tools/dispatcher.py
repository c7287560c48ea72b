"""Tool dispatcher: function-call name + arguments → vehicle-state mutation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from pyvoicelive.exceptions import InvalidArgumentError, ToolError, UnknownToolError
from pyvoicelive.models.session_config import ToolDeclaration
from pyvoicelive.models.vehicle import VehicleState
from pyvoicelive.tools.params import CAR_TOOLS, ToolParams

_logger = logging.getLogger(__name__)


def _describe_validation(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def success_payload(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Stable success payload the remote model can narrate back."""
    if len(changes) == 1:
        ((field, value),) = changes.items()
        return {"status": "ok", "field": field, "value": value}
    return {"status": "ok", "changes": dict(changes)}


def error_payload(exc: ToolError) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "error", "error": exc.code, "message": str(exc)}
    if exc.tool_name:
        payload["tool"] = exc.tool_name
    return payload


def is_success(payload: Mapping[str, Any]) -> bool:
    return payload.get("status") == "ok"


class ToolDispatcher:
    """Maps tool calls onto :class:`VehicleState` transitions.

    The dispatcher is pure: it never stores state. Callers pass the current
    snapshot and commit the returned one.
    """

    def __init__(self, tools: Iterable[type[ToolParams]] = CAR_TOOLS) -> None:
        self._tools: dict[str, type[ToolParams]] = {}
        for tool in tools:
            if tool.tool_name in self._tools:
                raise ValueError(f"duplicate tool name {tool.tool_name!r}")
            self._tools[tool.tool_name] = tool

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    @property
    def declarations(self) -> tuple[ToolDeclaration, ...]:
        """Declarations to send with ``session.update``, in registration order."""
        return tuple(tool.declaration() for tool in self._tools.values())

    def run(self, name: str, args: Mapping[str, Any], state: VehicleState) -> tuple[VehicleState, dict[str, Any]]:
        """Execute a tool, raising :class:`ToolError` subclasses on failure."""
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool {name!r}; available: {', '.join(self._tools)}", tool_name=name)

        try:
            params = tool.model_validate(dict(args))
        except ValidationError as exc:
            raise InvalidArgumentError(_describe_validation(exc), tool_name=name) from exc

        if tool.read_only:
            return state, {"status": "ok", "vehicle": state.as_payload()}

        changes = params.changes(state)
        try:
            next_state = state.evolve(**changes)
        except ValidationError as exc:
            raise InvalidArgumentError(_describe_validation(exc), tool_name=name) from exc
        return next_state, success_payload(changes)

    def execute(
        self, name: str, args: Mapping[str, Any], state: VehicleState
    ) -> tuple[VehicleState, dict[str, Any]]:
        """Execute a tool; failures come back as an error payload with *state* unchanged."""
        try:
            return self.run(name, args, state)
        except ToolError as exc:
            _logger.info("Tool %s rejected: %s", name, exc)
            return state, error_payload(exc)
