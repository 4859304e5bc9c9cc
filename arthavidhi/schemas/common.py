from decimal import Decimal
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, PlainSerializer
from pydantic import ValidationError as SchemaValidationError

from arthavidhi.core.errors import ValidationError

# Decimal internally, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """
    Response envelope: {"success": "...", "data": ...} or {"error": "..."}.
    """
    success: Optional[str] = None
    error: Optional[str] = None
    data: Optional[T] = None


def describe_errors(errors: list[dict], prefix: str = "Invalid fields!") -> str:
    """
    "Invalid fields! items.0.rate: Input should be greater than or equal to 0"
    Only the first problem is reported; "body"/"query" locations are dropped.
    """
    if not errors:
        return prefix

    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    where = ".".join(loc)
    msg = first.get("msg", "invalid value")
    return f"{prefix} {where}: {msg}" if where else f"{prefix} {msg}"


def parse_payload(model: type[BaseModel], payload: Any, prefix: str = "Invalid fields!"):
    """Validate a dict (or pass through an instance) raising the app ValidationError."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except SchemaValidationError as e:
        raise ValidationError(describe_errors(e.errors(), prefix)) from e
