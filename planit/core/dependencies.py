"""
Core dependencies for route protection and service construction
"""

from fastapi import Depends, Request, Response, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from planit.config import settings
from planit.core.errors import AuthenticationError
from planit.database.supabase_client import get_auth_supabase, get_supabase
from planit.modules.auth.service import AuthService, request_is_secure, set_session_cookies
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session_service(supabase: Client = Depends(get_auth_supabase)) -> AuthService:
    """Per-request auth client for refreshing a session; refresh stores the session on the client."""
    return AuthService(supabase)


def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[str]:
    """Bearer token if sent, else the session cookie set by verify-otp."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_cookie_name)


def _refresh_from_cookie(
    request: Request, response: Response, session_service: AuthService
) -> Optional[dict]:
    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        return None
    try:
        user, tokens = session_service.refresh_session(refresh_token)
    except AuthenticationError as e:
        logger.info(f"Session refresh failed: {e.message}")
        return None
    set_session_cookies(response, tokens, secure=request_is_secure(request))
    logger.info(f"Refreshed session for {user['id']}")
    return user


def get_optional_user(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service),
    session_service: AuthService = Depends(get_session_service),
) -> Optional[dict]:
    """Current user {id, email}, or None when there is no valid session.

    An expired access cookie is renewed from the refresh cookie and both
    cookies are re-issued on the response.
    """
    if token:
        try:
            return auth_service.get_current_user(token)
        except AuthenticationError as e:
            logger.info(f"Ignoring invalid session: {e.message}")
    return _refresh_from_cookie(request, response, session_service)


def get_current_user(user: Optional[dict] = Depends(get_optional_user)) -> dict:
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user
