from __future__ import annotations

"""Thin wrappers over Supabase auth.

Sessions live in the client (frontend); this service only relays credentials
and resolves bearer tokens to user ids.
"""

import logging
import re
from typing import Any, Dict, Optional

from .config import settings
from .errors import AppError, AuthError, ValidationError
from .supabase_client import get_supabase

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LEN = 6


def _dump(obj: Any) -> Any:
    if obj is None:
        return None
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return obj


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if not email or not password:
        raise ValidationError("email" if not email else "password", "Email and password are required")


def _require_email(email: Optional[str]) -> str:
    email = (email or "").strip()
    if not email:
        raise ValidationError("email", "Email is required")
    if not EMAIL_RE.match(email):
        raise ValidationError("email", "Invalid email format")
    return email


def sign_in(email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    _require_credentials(email, password)
    client = get_supabase()
    try:
        res = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        if "invalid login credentials" in str(e).lower():
            raise AuthError("Invalid email or password") from e
        logger.exception("sign in failed")
        raise AppError(str(e), public_message="An error occurred during login") from e
    return {"user": _dump(res.user), "session": _dump(res.session)}


def sign_up(email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    _require_credentials(email, password)
    email = _require_email(email)
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationError("password", f"Password must be at least {MIN_PASSWORD_LEN} characters long")
    client = get_supabase()
    try:
        res = client.auth.sign_up({"email": email, "password": password})
    except Exception as e:
        logger.exception("sign up failed")
        raise AppError(str(e), public_message="An error occurred during signup") from e
    return {"user": _dump(res.user)}


def sign_out(access_token: Optional[str] = None) -> None:
    """Revoke the session behind ``access_token`` (or the client's own)."""
    client = get_supabase()
    try:
        if access_token:
            client.auth.admin.sign_out(access_token)
        else:
            client.auth.sign_out()
    except Exception as e:
        logger.exception("sign out failed")
        raise AppError(str(e), public_message="An error occurred during logout") from e


def reset_password(email: Optional[str]) -> None:
    email = _require_email(email)
    client = get_supabase()
    options: Dict[str, Any] = {}
    if settings.password_reset_redirect:
        options["redirect_to"] = settings.password_reset_redirect
    try:
        client.auth.reset_password_for_email(email, options)
    except Exception as e:
        logger.exception("password reset failed")
        raise AppError(str(e), public_message="An error occurred during password reset") from e


def get_user_id(access_token: Optional[str]) -> str:
    if not access_token:
        raise AuthError("Authentication required to access saved articles")
    client = get_supabase()
    try:
        res = client.auth.get_user(access_token)
    except Exception as e:
        logger.info("token rejected: %s", e)
        raise AuthError("Invalid or expired session") from e
    user = getattr(res, "user", None)
    if user is None or not getattr(user, "id", None):
        raise AuthError("Invalid or expired session")
    return str(user.id)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None
