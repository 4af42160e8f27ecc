"""
Browser routes.

Each route answers with the JSON view model of its page. Protected routes
run the route guard on every request: a loading session answers 202, any
other refusal is a 307 redirect to where the guard sends the caller.
"""
from datetime import date
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from atelier.core import route_guard
from atelier.core.dependencies import get_session
from atelier.core.route_guard import GuardState
from atelier.core.session import SessionProvider
from atelier.models import SERVICE_NAMES, SERVICE_OPTIONS
from atelier.services.dashboards import AdminDashboardView, CustomerDashboardView

logger = logging.getLogger(__name__)
router = APIRouter()


def guard(path: str, session: SessionProvider) -> Optional[Response]:
    """The response that replaces the page, or None when it may render."""
    decision = route_guard.evaluate_path(path, session.user, session.profile, session.loading)
    if decision.state is GuardState.LOADING:
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content={"loading": True})
    if not decision.allowed:
        logger.debug(f"Guard sent {session.user_id or 'anonymous'} from {path} to {decision.redirect_to}")
        return RedirectResponse(decision.redirect_to, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return None


def nav(session: SessionProvider) -> Dict[str, Any]:
    profile = session.profile
    return {
        "signed_in": session.user is not None,
        "name": profile.name if profile else None,
        "role": profile.role if profile else None,
        "dashboard": route_guard.home_for_role(profile.role) if profile else None,
    }


@router.get("/")
async def home(session: SessionProvider = Depends(get_session)) -> Any:
    return {
        "page": "home",
        "nav": nav(session),
        "services": [option.to_dict() for option in SERVICE_OPTIONS],
    }


@router.get("/login")
async def login_page(session: SessionProvider = Depends(get_session)) -> Any:
    return {"page": "login", "nav": nav(session), "configured": session.configured}


@router.get("/register")
async def register_page(session: SessionProvider = Depends(get_session)) -> Any:
    return {"page": "register", "nav": nav(session), "configured": session.configured}


@router.get("/book")
async def book_page(
    service_type: Optional[str] = Query(None, description="Service preselected from the home page"),
    session: SessionProvider = Depends(get_session),
) -> Any:
    refused = guard("/book", session)
    if refused is not None:
        return refused

    return {
        "page": "book",
        "nav": nav(session),
        "services": [option.to_dict() for option in SERVICE_OPTIONS],
        "selected": service_type if service_type in SERVICE_NAMES else None,
        "min_date": date.today().isoformat(),
    }


@router.get("/dashboard")
async def customer_dashboard(session: SessionProvider = Depends(get_session)) -> Any:
    refused = guard("/dashboard", session)
    if refused is not None:
        return refused

    view = CustomerDashboardView(session.client, session.profile)
    try:
        await view.mount(live=False)
        return {"page": "dashboard", "nav": nav(session), **view.snapshot()}
    finally:
        await view.unmount()


@router.get("/admin")
async def admin_dashboard(
    status_filter: Optional[str] = Query(None, alias="status"),
    session: SessionProvider = Depends(get_session),
) -> Any:
    refused = guard("/admin", session)
    if refused is not None:
        return refused

    view = AdminDashboardView(session.client)
    if status_filter:
        view.set_filter(status_filter)
    try:
        await view.mount(live=False)
        return {"page": "admin", "nav": nav(session), **view.snapshot()}
    finally:
        await view.unmount()
