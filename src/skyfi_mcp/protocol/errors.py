"""
MCP error model: typed protocol exceptions and error envelope formatting.
"""

from enum import Enum
from typing import Any

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class MCPErrorCode(str, Enum):
    """Machine-readable protocol error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    INVALID_PARAMS = "INVALID_PARAMS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    AUTH_INVALID = "AUTH_INVALID"
    RATE_LIMITED = "RATE_LIMITED"


class MCPException(Exception):
    """
    Protocol-level failure carrying a code, message and HTTP-like status.

    Parameters
    ----------
    code : MCPErrorCode or str
        Machine-readable error code
    message : str
        Human readable description
    status_code : int, optional
        HTTP-like status (default 400)
    data : dict or None, optional
        Structured payload attached to the error
    """

    def __init__(
        self,
        code: MCPErrorCode | str,
        message: str,
        status_code: int = 400,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value if isinstance(code, MCPErrorCode) else str(code)
        self.message = message
        self.status_code = status_code
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the wire error object.

        The ``data`` key is omitted entirely when no data was given.

        Returns
        -------
        dict[str, Any]
            ``{"code", "message"}`` plus ``"data"`` when present
        """
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload

    def __repr__(self) -> str:
        return f"MCPException({self.code!r}, {self.message!r}, {self.status_code})"


# =============================================================================
# Factories
# =============================================================================


def invalid_request(message: str = "Invalid request format") -> MCPException:
    return MCPException(MCPErrorCode.INVALID_REQUEST, message, 400)


def tool_not_found(tool_name: str) -> MCPException:
    return MCPException(
        MCPErrorCode.TOOL_NOT_FOUND,
        f'Tool "{tool_name}" not found',
        404,
        {"tool_name": tool_name},
    )


def invalid_params(message: str, violations: list[str] | None = None) -> MCPException:
    data = {"violations": violations} if violations else None
    return MCPException(MCPErrorCode.INVALID_PARAMS, message, 400, data)


def internal_error(message: str = "Internal server error") -> MCPException:
    return MCPException(MCPErrorCode.INTERNAL_ERROR, message, 500)


def auth_invalid(message: str = "Invalid or missing API key") -> MCPException:
    return MCPException(MCPErrorCode.AUTH_INVALID, message, 401)


def rate_limited(retry_after: int = 60) -> MCPException:
    return MCPException(
        MCPErrorCode.RATE_LIMITED,
        "Too many requests",
        429,
        {"retryAfter": retry_after},
    )


def format_error_response(error: object) -> dict[str, Any]:
    """
    Normalize any raised value into an error envelope.

    Non-exception values are reduced to a generic message so their content
    never reaches the caller. This function does not raise.

    Parameters
    ----------
    error : object
        Anything caught at the protocol boundary

    Returns
    -------
    dict[str, Any]
        ``{"error": {"code", "message", "data"?}, "status_code": int}``
    """
    if isinstance(error, MCPException):
        return {"error": error.to_dict(), "status_code": error.status_code}

    message = UNEXPECTED_ERROR_MESSAGE
    if isinstance(error, Exception):
        try:
            message = str(error) or UNEXPECTED_ERROR_MESSAGE
        except Exception:
            message = UNEXPECTED_ERROR_MESSAGE

    return {
        "error": {"code": MCPErrorCode.INTERNAL_ERROR.value, "message": message},
        "status_code": 500,
    }
