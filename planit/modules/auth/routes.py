from fastapi import APIRouter, Depends, Request, Response
from planit.config import settings
from planit.core.dependencies import get_current_user
from planit.core.limiter import limiter
from planit.database.supabase_client import get_auth_supabase
from planit.modules.auth.schemas import (
    SendCodeRequest, VerifyCodeRequest, VerifyCodeResponse, CurrentUser
)
from planit.modules.auth.service import (
    AuthService, request_is_secure, set_session_cookies, clear_session_cookies
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_handshake_service(supabase: Client = Depends(get_auth_supabase)) -> AuthService:
    return AuthService(supabase)


def _safe_next(next_path: str) -> str:
    """Only same-site relative paths are allowed as post-login targets."""
    if not next_path.startswith("/") or next_path.startswith("//"):
        return "/trips"
    return next_path


@router.post("/send-otp")
@limiter.limit(settings.otp_rate_limit)
async def send_otp(
    request: Request,
    body: SendCodeRequest,
    service: AuthService = Depends(get_handshake_service)
):
    """Email a one-time passcode; the account is created on first use"""
    service.request_code(body.email)
    return {"success": True}


@router.post("/verify-otp", response_model=VerifyCodeResponse)
@limiter.limit(settings.otp_rate_limit)
async def verify_otp(
    request: Request,
    response: Response,
    body: VerifyCodeRequest,
    next: str = "/trips",
    service: AuthService = Depends(get_handshake_service)
):
    """Verify the passcode and set the session cookies"""
    user, tokens = service.verify_code(body.email, body.code)
    set_session_cookies(response, tokens, secure=request_is_secure(request))
    return VerifyCodeResponse(
        redirect_to=_safe_next(next),
        user_id=user["id"],
        email=user["email"],
    )


@router.post("/logout", status_code=200)
async def logout(request: Request, response: Response):
    """Clear the session cookies"""
    clear_session_cookies(response, secure=request_is_secure(request))
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUser)
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user
