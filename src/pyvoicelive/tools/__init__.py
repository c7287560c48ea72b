"""Car-assistant tools exposed to the remote model."""

from pyvoicelive.tools.dispatcher import ToolDispatcher, error_payload, is_success, success_payload
from pyvoicelive.tools.params import CAR_TOOLS, ToolParams

__all__ = [
    "CAR_TOOLS",
    "ToolDispatcher",
    "ToolParams",
    "error_payload",
    "is_success",
    "success_payload",
]
