"""Input validation helpers."""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from soul_log.core.errors import ValidationFailure

M = TypeVar("M", bound=BaseModel)


def jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors(include_url=False, include_input=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def parse_model(model: Type[M], data: Any) -> M:
    """Validate ``data`` into ``model`` or raise ValidationFailure with field details."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailure(details=jsonable_errors(exc)) from exc
