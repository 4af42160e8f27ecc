"""Inbound contact messages."""
import logging
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from atelier.models import ContactMessage
from atelier.schemas.contact import ContactRequest
from atelier.utils.supabase_helpers import safe_supabase_insert, safe_supabase_select

logger = logging.getLogger(__name__)


class ContactService:

    def __init__(self, supabase: Optional[AsyncClient]):
        self.supabase = supabase

    async def submit(self, request: ContactRequest) -> Dict[str, Any]:
        message = ContactMessage(
            name=request.name,
            email=request.email,
            phone=request.phone,
            message=request.message,
        )
        row = await safe_supabase_insert(self.supabase, ContactMessage.table_name, message.to_supabase_dict())
        logger.info(f"Contact message {row.get('id')} received from {request.email}")
        return row

    async def list_all(self) -> List[Dict[str, Any]]:
        return await safe_supabase_select(self.supabase, "contact_messages")
