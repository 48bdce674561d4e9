# services/auth_service.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from supabase import Client

import data_integrator

logger = logging.getLogger(__name__)

ADMIN = "admin"
SELLER = "seller"

PAGES = ("Dashboard", "Sales", "New Sale", "Customers", "Inventory", "Reports")
SELLER_PAGES = ("Dashboard", "Sales", "New Sale", "Customers")

INVALID_CREDENTIAL_MESSAGE = "Invalid email or password. Please try again."
USER_NOT_FOUND_MESSAGE = "No user found with this email. Please check and try again."
GENERIC_AUTH_MESSAGE = "An error occurred. Please try again later."

_ERROR_MESSAGES = {
    "invalid_credentials": INVALID_CREDENTIAL_MESSAGE,
    "invalid-credential": INVALID_CREDENTIAL_MESSAGE,
    "user_not_found": USER_NOT_FOUND_MESSAGE,
    "user-not-found": USER_NOT_FOUND_MESSAGE,
}


@dataclass(frozen=True)
class SessionContext:
    """Who is signed in. Pages receive this instead of reading a global."""
    user_id: str
    email: str
    role: str
    access_token: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


def role_for_email(email: Optional[str], admin_email: Optional[str]) -> str:
    if email and admin_email and email.strip().lower() == admin_email.strip().lower():
        return ADMIN
    return SELLER


def auth_error_message(code: Optional[str]) -> str:
    if not code:
        return GENERIC_AUTH_MESSAGE
    # accept "auth/invalid-credential" style codes too
    return _ERROR_MESSAGES.get(code.split("/")[-1], GENERIC_AUTH_MESSAGE)


def visible_pages(role: Optional[str]) -> List[str]:
    if role == ADMIN:
        return list(PAGES)
    if role == SELLER:
        return list(SELLER_PAGES)
    return []


def sign_in(
        email: str,
        password: str,
        admin_email: Optional[str],
        client: Optional[Client] = None,
) -> Tuple[bool, str, Optional[SessionContext]]:
    """
    Returns (ok, message, context). The message is safe to show to the user.
    """
    if not email or not password:
        return False, INVALID_CREDENTIAL_MESSAGE, None

    try:
        client = client or data_integrator.get_client()
        resp = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        code = getattr(e, "code", None)
        logger.warning("Sign-in failed for %s (%s)", email, code or e)
        return False, auth_error_message(code), None

    user = getattr(resp, "user", None)
    if user is None:
        return False, GENERIC_AUTH_MESSAGE, None

    session = getattr(resp, "session", None)
    context = SessionContext(
        user_id=str(user.id),
        email=user.email,
        role=role_for_email(user.email, admin_email),
        access_token=getattr(session, "access_token", None),
    )
    logger.info("Signed in %s as %s", context.email, context.role)
    return True, "Signed in", context


def sign_out(client: Optional[Client] = None) -> Tuple[bool, str]:
    try:
        client = client or data_integrator.get_client()
        client.auth.sign_out()
    except Exception as e:
        logger.warning("Sign-out failed: %s", e)
        return False, "An error occurred while logging out. Please try again."

    logger.info("Signed out")
    return True, "You have been logged out of your account."


# ---------------------------------------------------------------------------
# Session lifecycle (works on st.session_state or any dict)
# ---------------------------------------------------------------------------

SESSION_KEY = "session_context"


def init_session(state) -> None:
    state.setdefault(SESSION_KEY, None)


def set_session(state, context: SessionContext) -> None:
    state[SESSION_KEY] = context


def current_session(state) -> Optional[SessionContext]:
    return state.get(SESSION_KEY)


def end_session(state) -> None:
    state[SESSION_KEY] = None
