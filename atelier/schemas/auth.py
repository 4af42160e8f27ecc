"""Authentication schemas."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from atelier.schemas.common import NotificationPayload, OptionalText


class LoginRequest(BaseModel):
    """Request schema for login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "customer@example.com",
                "password": "securepassword123"
            }
        }
    }


class RegisterRequest(BaseModel):
    """Request schema for customer registration."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: OptionalText = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Asha Rao",
                "email": "asha@example.com",
                "password": "securepassword123",
                "phone": "+919876543210"
            }
        }
    }


class TokenResponse(BaseModel):
    """Token response returned after a password sign-in."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str
    role: str
    business_id: Optional[str] = None
    expires_in: int = 3600
    redirect_to: str
    notification: Optional[NotificationPayload] = None


class OAuthResponse(BaseModel):
    provider: str = "google"
    url: str


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    business_id: Optional[str] = None


class SessionResponse(BaseModel):
    """Current session state as seen by the identity provider."""
    loading: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[ProfileResponse] = None
