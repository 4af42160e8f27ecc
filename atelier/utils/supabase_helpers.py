"""Safe Supabase query helpers."""
import logging
from typing import Any, Dict, List, Optional

from atelier.core.exceptions import BackendError, NotFoundError, backend_message

logger = logging.getLogger(__name__)


async def safe_supabase_select(
    supabase,
    table_name: str,
    select_fields: str = "*",
    filters: Optional[Dict[str, Any]] = None,
    newest_first: bool = True,
) -> List[Dict[str, Any]]:
    """
    Select rows for a read path.

    Read failures degrade to an empty list so the view still renders.
    """
    if supabase is None:
        return []
    try:
        query = supabase.table(table_name).select(select_fields)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        if newest_first:
            query = query.order("created_at", desc=True)
        response = await query.execute()
        return response.data or []
    except Exception as e:
        logger.warning(f"Read from {table_name} failed, showing empty list: {e}")
        return []


async def safe_supabase_insert(supabase, table_name: str, data: dict) -> Dict[str, Any]:
    """Insert one row; the backend's message is passed through on failure."""
    try:
        response = await supabase.table(table_name).insert(data).execute()
    except Exception as e:
        logger.error(f"Insert error in {table_name}: {e}")
        raise BackendError(backend_message(e))

    if not response.data:
        raise BackendError(f"Failed to create {table_name} row")
    return response.data[0]


async def safe_supabase_update(supabase, table_name: str, data: dict, filter_field: str, filter_value) -> Dict[str, Any]:
    """Update rows matching one column; a miss reads as not found."""
    try:
        response = await supabase.table(table_name).update(data).eq(filter_field, filter_value).execute()
    except Exception as e:
        logger.error(f"Update error in {table_name}: {e}")
        raise BackendError(backend_message(e))

    if not response.data:
        raise NotFoundError(f"No {table_name} row found to update")
    return response.data[0]


async def safe_supabase_delete(supabase, table_name: str, filter_field: str, filter_value) -> Dict[str, Any]:
    """Delete rows matching one column; a miss reads as not found."""
    try:
        response = await supabase.table(table_name).delete().eq(filter_field, filter_value).execute()
    except Exception as e:
        logger.error(f"Delete error in {table_name}: {e}")
        raise BackendError(backend_message(e))

    if not response.data:
        raise NotFoundError(f"No {table_name} row found to delete")
    return response.data[0]
