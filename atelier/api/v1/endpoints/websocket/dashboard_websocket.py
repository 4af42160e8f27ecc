"""Dashboard WebSocket endpoints for live order and appointment updates."""
import asyncio
import json
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from atelier.core import route_guard
from atelier.core.dependencies import build_session, release_session
from atelier.core.supabase_auth import extract_tokens
from atelier.models import UserRole
from atelier.services.dashboards import AdminDashboardView, CustomerDashboardView, DashboardView
from atelier.services.websocket.connection_manager import manager

logger = logging.getLogger(__name__)
router = APIRouter()

# Close code used when the guard refuses the connection
GUARD_CLOSE_CODE = 4003


@router.websocket("/ws/admin")
async def admin_dashboard_websocket(websocket: WebSocket):
    """
    Live staff dashboard.

    Pushes the order, appointment and message lists as they change, plus
    toasts for new orders and appointments. Requires a staff session, passed
    as the `token` query parameter or the session cookie.
    """
    await serve_dashboard(websocket, UserRole.ADMIN.value)


@router.websocket("/ws/dashboard")
async def customer_dashboard_websocket(websocket: WebSocket):
    """Live customer dashboard: the caller's own orders and appointments."""
    await serve_dashboard(websocket, UserRole.CUSTOMER.value)


async def serve_dashboard(websocket: WebSocket, required_role: str):
    access_token, refresh_token = extract_tokens(websocket.headers, websocket.cookies, websocket.query_params)
    session = await build_session(access_token, refresh_token)

    decision = route_guard.evaluate(session.user, session.profile, session.loading, required_role)
    if not decision.allowed:
        await release_session(session)
        logger.info(f"Dashboard socket refused ({decision.state.value}), redirect to {decision.redirect_to}")
        await websocket.close(code=GUARD_CLOSE_CODE, reason=f"redirect:{decision.redirect_to}")
        return

    session_id = f"{required_role}_{uuid.uuid4().hex}"
    await manager.connect(websocket, session_id)
    publish = manager.publisher(session_id)

    if required_role == UserRole.ADMIN.value:
        view: DashboardView = AdminDashboardView(session.client, publish=publish)
    else:
        view = CustomerDashboardView(session.client, session.profile, publish=publish)

    sender = asyncio.create_task(manager.run_sender(session_id))
    try:
        await view.mount()
        while True:
            data = await websocket.receive_text()
            await handle_client_message(view, data, publish)
    except WebSocketDisconnect:
        logger.info(f"Dashboard WebSocket {session_id} disconnected")
    except Exception as e:
        logger.error(f"Dashboard WebSocket error for {session_id}: {str(e)}", exc_info=True)
    finally:
        await view.unmount()
        # disconnect() queues the sentinel the sender exits on
        manager.disconnect(session_id)
        try:
            await sender
        except Exception as e:
            logger.error(f"Dashboard sender for {session_id} failed: {e}", exc_info=True)
        await release_session(session)


async def handle_client_message(view: DashboardView, data: str, publish) -> None:
    """Handle one message sent by the dashboard client."""
    try:
        message: Dict[str, Any] = json.loads(data)
    except json.JSONDecodeError:
        publish({"type": "error", "detail": "Messages must be JSON objects"})
        return
    if not isinstance(message, dict):
        publish({"type": "error", "detail": "Messages must be JSON objects"})
        return

    kind = message.get("type")
    if kind == "ping":
        publish({"type": "pong"})
    elif kind == "dismiss":
        view.dismiss(message.get("id"))
    elif kind == "refresh":
        await view.load()
    elif kind == "filter" and isinstance(view, AdminDashboardView):
        view.set_filter(message.get("status"))
    else:
        publish({"type": "error", "detail": f"Unknown message type: {kind}"})
