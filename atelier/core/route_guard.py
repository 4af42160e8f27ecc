"""Role-based route guard.

A pure function of the session snapshot `(user, profile, loading)`; it is
evaluated on every navigation and never cached. The guard only shapes the
user experience; every mutating endpoint re-checks ownership and role.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from atelier.models.user import STAFF_ROLES, UserRole

LOGIN_PATH = "/login"
ADMIN_PATH = "/admin"
CUSTOMER_PATH = "/dashboard"


class GuardState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    WRONG_ROLE = "authenticated-wrong-role"
    AUTHORIZED = "authenticated-authorized"


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.state is GuardState.AUTHORIZED


# Browser routes and the role each requires (None = public)
ROUTE_ROLES: Dict[str, Optional[str]] = {
    "/": None,
    "/login": None,
    "/register": None,
    "/book": UserRole.CUSTOMER.value,
    "/dashboard": UserRole.CUSTOMER.value,
    "/admin": UserRole.ADMIN.value,
}


def role_satisfies(role: Optional[str], required_role: str) -> bool:
    """`admin` is satisfied by any staff role; other roles must match exactly."""
    if required_role == UserRole.ADMIN.value:
        return role in STAFF_ROLES
    return role == required_role


def home_for_role(role: Optional[str]) -> str:
    return ADMIN_PATH if role in STAFF_ROLES else CUSTOMER_PATH


def evaluate(
    user: Optional[Any],
    profile: Optional[Any],
    loading: bool,
    required_role: Optional[str] = None,
) -> GuardDecision:
    if loading:
        return GuardDecision(GuardState.LOADING)

    if not user:
        return GuardDecision(GuardState.UNAUTHENTICATED, LOGIN_PATH)

    role = getattr(profile, "role", None)
    if required_role and not role_satisfies(role, required_role):
        return GuardDecision(GuardState.WRONG_ROLE, home_for_role(role))

    return GuardDecision(GuardState.AUTHORIZED)


def evaluate_path(path: str, user: Optional[Any], profile: Optional[Any], loading: bool) -> GuardDecision:
    """Guard decision for one of the browser routes; unknown paths are public."""
    return evaluate(user, profile, loading, ROUTE_ROLES.get(path))
