"""
Payload validation for service entry points.

Routers hand services already-validated schema instances. Services can
also be called with plain mappings (scripts, tests); those are validated
here and failures surface as the domain ValidationError instead of
pydantic's.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from app.services.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_errors(exc: pydantic.ValidationError) -> str:
    """Flatten pydantic errors into one message: "field: reason; ..."."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


def validate_payload(
    schema: type[SchemaT],
    data: SchemaT | Mapping[str, Any],
) -> SchemaT:
    """
    Return data as an instance of schema.

    Args:
        schema: Target Pydantic model class
        data: Either an instance of schema or a mapping of raw fields

    Raises:
        ValidationError: If the mapping does not satisfy the schema
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(format_errors(exc)) from exc
