"""Measurement schemas."""
from typing import Optional

from pydantic import BaseModel

from atelier.schemas.common import LenientFloat


class MeasurementsUpdate(BaseModel):
    """All five values are optional; empty strings clear a value."""
    bust: LenientFloat = None
    waist: LenientFloat = None
    hip: LenientFloat = None
    shoulder: LenientFloat = None
    sleeve_length: LenientFloat = None


class MeasurementsResponse(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    bust: Optional[float] = None
    waist: Optional[float] = None
    hip: Optional[float] = None
    shoulder: Optional[float] = None
    sleeve_length: Optional[float] = None
