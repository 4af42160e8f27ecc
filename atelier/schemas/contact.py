"""Contact form schemas."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from atelier.schemas.common import OptionalText


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: OptionalText = None
    message: str = Field(..., min_length=1)


class ContactMessageResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    created_at: Optional[str] = None
