"""
Tool call dispatch: lookup, validation, invocation and error formatting.
"""

import logging
from typing import Any

from .errors import MCPException, format_error_response, internal_error, tool_not_found
from .models import ToolCallResponse, json_response
from .registry import ToolRegistry

LOGGER = logging.getLogger(__name__)


def error_response(error: object) -> ToolCallResponse:
    """Render any raised value as an ``is_error`` response."""
    return json_response(format_error_response(error), is_error=True)


async def dispatch(
    registry: ToolRegistry,
    name: str,
    arguments: dict[str, Any] | None,
) -> ToolCallResponse:
    """
    Execute a tool call against the registry.

    Protocol failures (unknown tool, invalid arguments, auth, rate limiting)
    come back as error envelopes; this coroutine does not raise.

    Parameters
    ----------
    registry : ToolRegistry
        Registry populated at startup
    name : str
        Requested tool name
    arguments : dict or None
        Raw, unvalidated arguments

    Returns
    -------
    ToolCallResponse
        Handler output, or the formatted error envelope with ``is_error`` set
    """
    LOGGER.info("Tool call: %s", name)

    entry = registry.get(name)
    if entry is None:
        LOGGER.warning("Tool error: %s code=TOOL_NOT_FOUND", name)
        return error_response(tool_not_found(name))

    try:
        params = entry.definition.validate(arguments)
        response = await entry.handler(params)
    except MCPException as e:
        LOGGER.warning("Tool error: %s code=%s: %s", name, e.code, e.message)
        return error_response(e)
    except Exception as e:
        LOGGER.exception("Tool exception: %s", name)
        return error_response(internal_error(f'Tool "{name}" failed: {e}'))

    LOGGER.debug("Tool success: %s", name)
    return response
