"""
Argument validation for tool calls.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import invalid_params

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_violations(error: ValidationError) -> list[str]:
    """
    Render pydantic errors as ``"<field path>: <message>"`` strings.

    Parameters
    ----------
    error : ValidationError
        Validation failure raised by pydantic

    Returns
    -------
    list[str]
        One entry per violated constraint
    """
    violations = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        violations.append(f"{location}: {item['msg']}")
    return violations


def validate_arguments(model: type[ModelT], arguments: dict[str, Any] | None) -> ModelT:
    """
    Validate untyped tool-call input against an argument model.

    Parameters
    ----------
    model : type[BaseModel]
        Declared argument shape
    arguments : dict or None
        Raw arguments from the client; ``None`` is treated as empty

    Returns
    -------
    BaseModel
        Typed, validated arguments

    Raises
    ------
    MCPException
        ``INVALID_PARAMS`` listing every violated constraint
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise invalid_params("Tool arguments must be an object")

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        violations = format_violations(e)
        raise invalid_params(f"Invalid arguments: {'; '.join(violations)}", violations) from e
