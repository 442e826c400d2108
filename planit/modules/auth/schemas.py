from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional


class SendCodeRequest(BaseModel):
    email: EmailStr


class VerifyCodeRequest(BaseModel):
    email: EmailStr
    code: str

    @field_validator("code")
    @classmethod
    def strip_code(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Code is required")
        return value


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: Optional[int] = None


class VerifyCodeResponse(BaseModel):
    success: bool = True
    redirect_to: str
    user_id: str
    email: str


class CurrentUser(BaseModel):
    id: str
    email: str
