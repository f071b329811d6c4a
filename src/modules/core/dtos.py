"""Helpers shared by the pydantic input DTOs."""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

import pydantic

from modules.core.exceptions import ValidationError

D = TypeVar("D", bound=pydantic.BaseModel)


def build_dto(dto_class: Type[D], fields: Dict[str, Any]) -> D:
    """Instantiate *dto_class*, reporting the first failure as a ``ValidationError``."""
    try:
        return dto_class(**fields)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first["msg"]
        # pydantic prefixes messages raised from validators.
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        raise ValidationError(message, field=field) from exc
