"""
Auth Module - Routes
=====================
/users: register, login, refresh-token (public); logout, profile, update-profile (login required).

Login and refresh set httpOnly `accessToken` / `refreshToken` cookies and also
return both tokens in the body for clients that use the Authorization header.
"""

from typing import Optional

from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session

from config.context import AppContext, get_context
from config.database import get_db
from common.responses import api_response
from common.security import get_cookie_kwargs
from modules.auth.deps import require_login, ACCESS_COOKIE, REFRESH_COOKIE
from modules.auth.service import auth_service
from modules.user.models import User
from modules.user.service import serialize_user

router = APIRouter(prefix="/users", tags=["users"])


# ==========================================
# Schemas
# ==========================================

class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class RegisterRequest(_Schema):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone_number: Optional[str] = Field(None, alias="phoneNumber", max_length=32)


class LoginRequest(_Schema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(_Schema):
    refresh_token: Optional[str] = Field(None, alias="refreshToken")


class UpdateProfileRequest(_Schema):
    name: Optional[str] = Field(None, max_length=120)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber", max_length=32)


def _session_response(ctx: AppContext, user: User, access: str, refresh: str, message: str) -> JSONResponse:
    response = api_response(
        {"user": serialize_user(user), "accessToken": access, "refreshToken": refresh},
        message,
    )
    response.set_cookie(ACCESS_COOKIE, access, **get_cookie_kwargs(ctx.settings, ctx.settings.access_token_expiry))
    response.set_cookie(REFRESH_COOKIE, refresh, **get_cookie_kwargs(ctx.settings, ctx.settings.refresh_token_expiry))
    return response


# ==========================================
# Public
# ==========================================

@router.post("/register")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user = auth_service.register(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        phone_number=payload.phone_number,
    )
    db.commit()
    return api_response(serialize_user(user), "User registered successfully", status_code=201)


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    user, access, refresh = auth_service.login(db, ctx.tokens, payload.email, payload.password)
    db.commit()
    return _session_response(ctx, user, access, refresh, "User logged in successfully")


@router.post("/refresh-token")
def refresh_token(
    request: Request,
    payload: Optional[RefreshRequest] = None,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    incoming = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    user, access, refresh = auth_service.refresh(db, ctx.tokens, incoming)
    db.commit()
    return _session_response(ctx, user, access, refresh, "Access token refreshed")


# ==========================================
# Login required
# ==========================================

@router.post("/logout")
def logout(db: Session = Depends(get_db), me: User = Depends(require_login)):
    auth_service.logout(db, me)
    db.commit()
    response = api_response({}, "User logged out")
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
    return response


@router.get("/profile")
def profile(me: User = Depends(require_login)):
    return api_response(serialize_user(me), "Current user fetched successfully")


@router.patch("/update-profile")
def update_profile(
    payload: UpdateProfileRequest,
    db: Session = Depends(get_db),
    me: User = Depends(require_login),
):
    user = auth_service.update_profile(
        db, me,
        name=payload.name,
        email=payload.email,
        phone_number=payload.phone_number,
        fields=payload.model_fields_set,
    )
    db.commit()
    return api_response(serialize_user(user), "Account details updated successfully")
