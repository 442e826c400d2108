import logging
from typing import Any, Dict, Optional

from fastapi import Request, Response
from supabase import Client

from planit.config import settings
from planit.core.errors import AuthenticationError, ErrorCode, PlanitError
from planit.modules.auth.schemas import SessionTokens

logger = logging.getLogger(__name__)

# verify_otp types, tried in order. The backend does not always tag a code
# from the passcode email as "email"; the same code may only verify as "magiclink".
OTP_TYPES = ("email", "magiclink")


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def request_code(self, email: str) -> None:
        """Ask Supabase to email a one-time passcode (and magic link), creating the account if needed."""
        try:
            self.supabase.auth.sign_in_with_otp({
                "email": email,
                "options": {
                    "should_create_user": True,
                    "email_redirect_to": f"{settings.app_url.rstrip('/')}/auth/callback",
                },
            })
        except Exception as e:
            logger.error(f"Failed to send passcode to {email}: {e}")
            raise PlanitError(f"sign_in_with_otp failed: {e}")
        logger.info(f"Passcode requested for {email}")

    def verify_code(self, email: str, code: str) -> tuple[Dict[str, Any], SessionTokens]:
        """Verify a passcode, falling back to the magic link type before giving up."""
        token = code.strip()
        last_error: Optional[Exception] = None
        auth_response = None
        for otp_type in OTP_TYPES:
            try:
                auth_response = self.supabase.auth.verify_otp({
                    "email": email,
                    "token": token,
                    "type": otp_type,
                })
                break
            except Exception as e:
                logger.info(f"Passcode for {email} did not verify as {otp_type}: {e}")
                last_error = e
                auth_response = None

        if auth_response is None:
            raise AuthenticationError(
                f"verify_otp failed for {email}: {last_error}", code=ErrorCode.INVALID_CODE
            )
        if not auth_response.session or not auth_response.user:
            raise AuthenticationError(f"No session created for {email}", code=ErrorCode.INVALID_CODE)

        session = auth_response.session
        user = auth_response.user
        tokens = SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=getattr(session, "expires_in", None),
        )
        return {"id": user.id, "email": user.email or email}, tokens

    def refresh_session(self, refresh_token: str) -> tuple[Dict[str, Any], SessionTokens]:
        """Exchange a refresh token for a new session once the access token has expired."""
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
        except Exception as e:
            raise AuthenticationError(f"refresh_session failed: {e}")
        if not auth_response or not auth_response.session or not auth_response.user:
            raise AuthenticationError("Refresh did not return a session")

        session = auth_response.session
        user = auth_response.user
        tokens = SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=getattr(session, "expires_in", None),
        )
        return {"id": user.id, "email": (user.email or "").lower()}, tokens

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve {id, email} from an access token."""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            raise AuthenticationError(f"get_user failed: {e}")
        if not user_response or not user_response.user:
            raise AuthenticationError("Invalid or expired token")
        user = user_response.user
        return {"id": user.id, "email": (user.email or "").lower()}


def request_is_secure(request: Request) -> bool:
    if request.url.scheme == "https":
        return True
    return request.headers.get("x-forwarded-proto", "").split(",")[0].strip() == "https"


def set_session_cookies(response: Response, tokens: SessionTokens, secure: bool) -> None:
    """Propagate a new session to the browser's cookie store."""
    for name, value in (
        (settings.access_cookie_name, tokens.access_token),
        (settings.refresh_cookie_name, tokens.refresh_token),
    ):
        response.set_cookie(
            key=name,
            value=value,
            path="/",
            samesite="lax",
            httponly=True,
            secure=secure,
        )


def clear_session_cookies(response: Response, secure: bool) -> None:
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(key=name, path="/", samesite="lax", httponly=True, secure=secure)
