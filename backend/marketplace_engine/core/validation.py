"""
Input validation utilities.

Translates pydantic validation failures on engine inputs into the engine's
own ``ValidationError`` so callers only ever handle one error taxonomy.
"""
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from marketplace_engine.core.errors import ValidationError

ModelType = TypeVar("ModelType", bound=BaseModel)


def describe_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten pydantic errors into ``"field.path: message"`` strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        if error.get("type") == "missing":
            messages.append(f"{location} is required")
        elif location:
            messages.append(f"{location}: {error.get('msg')}")
        else:
            messages.append(str(error.get("msg")))
    return messages


def validate_input(
    model: Type[ModelType],
    data: ModelType | dict[str, Any],
    *,
    context: str | None = None,
) -> ModelType:
    """
    Coerce ``data`` into ``model``.

    Args:
        model: Pydantic model class describing the input
        data: Either an instance of ``model`` or a plain dict
        context: Optional prefix for the error message

    Returns:
        A validated ``model`` instance

    Raises:
        ValidationError: Listing every failing field
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(describe_errors(e), prefix=context) from e
