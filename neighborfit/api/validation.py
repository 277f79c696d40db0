"""Request body validation for Flask endpoints.

The @validate_request decorator looks at the endpoint's type hints. A
parameter annotated with a Pydantic model is filled from the JSON body (or
form data); every other parameter is passed through from the URL rule.

    @auth_bp.post("/register")
    @validate_request
    def register(data: RegisterRequest):
        ...
"""

import inspect
from functools import wraps
from typing import get_type_hints

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import ValidationError

# Field names whose values are never echoed back in error details
_REDACTED_FIELDS = {"password"}


def _redact(body: dict) -> dict:
    return {
        key: "***" if key in _REDACTED_FIELDS else value
        for key, value in body.items()
    }


def _format_errors(exc: PydanticValidationError) -> list[dict]:
    """Flatten Pydantic errors into field/message/expected_type dicts."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "expected_type": err["type"],
        }
        for err in exc.errors(include_url=False, include_context=False, include_input=False)
    ]


def _request_body() -> dict:
    body = request.get_json(silent=True)
    if body is None and request.form:
        body = request.form.to_dict()
    return body if isinstance(body, dict) else {}


def validate_request(f):
    """Validate the request body against the endpoint's Pydantic parameter.

    Raises:
        ValidationError: If the body does not satisfy the model. Details
            carry the model name, the (redacted) received body, and one
            entry per failing field.
    """
    hints = get_type_hints(f)
    model_params = {
        name: hint
        for name, hint in hints.items()
        if name != "return" and inspect.isclass(hint) and issubclass(hint, BaseModel)
    }

    @wraps(f)
    def wrapper(*args, **kwargs):
        for param, model in model_params.items():
            body = _request_body()
            try:
                kwargs[param] = model(**body)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid request data",
                    {
                        "model": model.__name__,
                        "received": _redact(body),
                        "errors": _format_errors(e),
                    }
                )
        return f(*args, **kwargs)

    return wrapper
