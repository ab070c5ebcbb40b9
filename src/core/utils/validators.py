"""Request validation utilities."""

import json
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_MALFORMED_BODY

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "should match pattern" in msg_lower:
            msg = "Contains unsupported characters"
        elif "valid string" in msg_lower or "valid integer" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    message: str = "Invalid request payload",
) -> ModelT:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        message: Error message used when validation fails

    Returns:
        The validated model instance

    Raises:
        ValidationError: With sanitized field errors in ``details``
    """
    try:
        return model.model_validate(data)

    except PydanticValidationError as exc:
        raise ValidationError(
            message=message,
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc


def load_json_body(body: bytes | str | None) -> dict[str, Any]:
    """Decode a JSON object request body; an empty body is an empty object.

    Raises:
        ValidationError: If the body is not valid JSON or not a JSON object
    """
    if not body:
        return {}

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(
            message="Invalid JSON body",
            error_code=ERROR_CODE_MALFORMED_BODY,
        ) from exc

    if not isinstance(payload, dict):
        raise ValidationError(
            message="JSON body must be an object",
            error_code=ERROR_CODE_MALFORMED_BODY,
        )

    return payload
