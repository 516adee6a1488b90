"""Identifier parsing shared by the listing and request services."""

import uuid
from typing import Any

from sharebite.exceptions import ValidationError


def parse_identifier(value: Any, field: str = "id") -> uuid.UUID:
    """
    Parse an externally supplied identifier before it reaches a store query.

    Identifiers are opaque on the wire but must be canonical UUID strings.

    Raises:
        ValidationError: value is not a string holding a UUID (→ 400)
    """
    if not isinstance(value, str) or not value:
        raise ValidationError(message=f"Invalid {field}", field=field)
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(
            message=f"Invalid {field}",
            field=field,
            context={"value": value[:64]},
        )
