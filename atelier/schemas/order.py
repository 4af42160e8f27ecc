"""Order schemas for API requests and responses."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from atelier.models.order import OrderStatus, UrgencyLevel
from atelier.schemas.common import LenientFloat, OptionalText


class OrderCreate(BaseModel):
    """Staff form for creating an order on behalf of a registered customer."""
    customer_email: EmailStr
    dress_type: str = Field(..., min_length=1)
    fabric_type: OptionalText = None
    price: LenientFloat = None
    delivery_date: Optional[date] = None
    urgency_level: UrgencyLevel = UrgencyLevel.NORMAL
    notes: OptionalText = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "customer_email": "customer@example.com",
                "dress_type": "Bridal Blouse",
                "fabric_type": "Silk",
                "price": "2500",
                "delivery_date": "2026-11-20",
                "urgency_level": "Normal",
                "notes": "Boat neck"
            }
        }
    }


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    dress_type: str
    fabric_type: Optional[str] = None
    price: Optional[float] = None
    status: str
    urgency_level: Optional[str] = None
    delivery_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    customer_name: Optional[str] = None
    progress: Optional[int] = None
