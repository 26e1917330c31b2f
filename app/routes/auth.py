import logging
from typing import Literal, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from ..auth import get_current_user, security
from ..config import SUPABASE_ANON_KEY, SUPABASE_URL
from ..database import get_db
from ..models import User
from ..rate_limiter import auth_rate_limit
from ..schemas import UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

PROVIDER_TIMEOUT_SECONDS = 10.0


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=255)
    role: Literal["user", "business"] = "user"


async def call_auth_provider(path: str, payload: dict, access_token: Optional[str] = None) -> httpx.Response:
    """POST to the hosted auth provider with the project's anon key, acting as the user when a token is given"""
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        logger.error("❌ Auth provider is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    headers = {"apikey": SUPABASE_ANON_KEY, "Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        async with httpx.AsyncClient(timeout=PROVIDER_TIMEOUT_SECONDS) as client:
            return await client.post(f"{SUPABASE_URL.rstrip('/')}{path}", json=payload, headers=headers)
    except httpx.RequestError as e:
        logger.error(f"❌ Auth provider request failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=502, detail="Authentication service unavailable") from e


def _provider_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Authentication failed"
    return body.get("error_description") or body.get("msg") or body.get("message") or "Authentication failed"


@router.post("/signin")
async def sign_in(data: SignInRequest, _: None = Depends(auth_rate_limit)):
    """Exchange email and password for a session (access + refresh tokens)"""
    response = await call_auth_provider(
        "/auth/v1/token?grant_type=password",
        {"email": data.email, "password": data.password},
    )
    if response.status_code >= 500:
        logger.error(f"❌ Auth provider error on sign-in: {response.status_code}")
        raise HTTPException(status_code=502, detail="Authentication service unavailable")
    if response.status_code != 200:
        logger.warning(f"⚠️ Failed sign-in for {data.email}: {response.status_code}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    logger.info(f"✅ User signed in: {data.email}")
    return response.json()


@router.post("/signup")
async def sign_up(data: SignUpRequest, _: None = Depends(auth_rate_limit)):
    """Register with the auth provider; the local user row is created on first authenticated request"""
    payload = {
        "email": data.email,
        "password": data.password,
        "data": {"name": data.full_name, "role": data.role},
    }
    response = await call_auth_provider("/auth/v1/signup", payload)
    if response.status_code >= 500:
        logger.error(f"❌ Auth provider error on sign-up: {response.status_code}")
        raise HTTPException(status_code=502, detail="Authentication service unavailable")
    if response.status_code not in (200, 201):
        detail = _provider_error(response)
        logger.warning(f"⚠️ Sign-up rejected for {data.email}: {detail}")
        raise HTTPException(status_code=400, detail=detail)

    logger.info(f"🆕 User signed up: {data.email} (role={data.role})")
    return response.json()


@router.post("/signout")
async def sign_out(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: User = Depends(get_current_user),
):
    """Revoke the caller's session with the auth provider"""
    response = await call_auth_provider("/auth/v1/logout", {}, access_token=credentials.credentials)
    if response.status_code >= 500:
        logger.error(f"❌ Auth provider error on sign-out: {response.status_code}")
        raise HTTPException(status_code=502, detail="Authentication service unavailable")
    if response.status_code not in (200, 204):
        # The provider no longer knows the session, so it is already ended
        logger.warning(f"⚠️ Sign-out for {current_user.email} returned {response.status_code}")

    logger.info(f"👋 User signed out: {current_user.email}")
    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's profile"""
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    logger.info(f"✅ Profile updated: {current_user.email}")
    return current_user
