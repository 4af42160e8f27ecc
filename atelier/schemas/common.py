"""Shared schema pieces: lenient numeric fields and form responses."""
from typing import Annotated, Any, Optional, Literal

from pydantic import BaseModel, BeforeValidator, Field

Severity = Literal["success", "error", "info"]


def parse_lenient_number(value: Any) -> Optional[float]:
    """
    Parse a numeric form value.

    Empty strings and None mean "unset", never zero. Anything else must parse
    as a float.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        raise ValueError("must be a number")


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


LenientFloat = Annotated[Optional[float], BeforeValidator(parse_lenient_number)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]


class NotificationPayload(BaseModel):
    """A toast the client should enqueue."""
    message: str
    severity: Severity = "success"


class FormResult(BaseModel):
    """Outcome of a successful form submission."""
    ok: bool = True
    redirect_to: Optional[str] = Field(None, description="Route to navigate to, if any")
    message: Optional[str] = Field(None, description="Inline success text shown on the form")
    notification: Optional[NotificationPayload] = None
    data: Optional[Any] = None
