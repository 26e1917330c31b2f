import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .database import get_db
from .models import ROLE_ADMIN, ROLE_BUSINESS, ROLE_USER, User

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"

# Roles a user may claim for themselves at sign-up
SELF_ASSIGNABLE_ROLES = (ROLE_USER, ROLE_BUSINESS)


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the auth provider.

    Tokens are HS256 JWTs signed with the project's JWT secret; the
    audience, expiry and subject claims are enforced.
    """
    token_parts = token.split(".")
    if len(token_parts) != 3:
        logger.warning(f"⚠️ Malformed token received: {len(token_parts)} parts")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.error(f"❌ Token verification failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not payload.get("sub"):
        logger.error(f"❌ Token missing subject claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


def resolve_user(db: Session, claims: dict) -> User:
    """Find the local user for verified claims, creating it on first sight"""
    user_id = claims["sub"]
    email = claims.get("email") or ""
    metadata = claims.get("user_metadata") or {}

    user = db.query(User).filter(User.id == user_id).first()
    if user:
        return user

    requested_role = metadata.get("role")
    role = requested_role if requested_role in SELF_ASSIGNABLE_ROLES else ROLE_USER

    logger.info(f"🆕 Creating new user: {email}")
    user = User(
        id=user_id,
        email=email,
        full_name=metadata.get("name") or metadata.get("full_name"),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"✅ New user created: {user.email}")
    except IntegrityError as e:
        db.rollback()
        logger.error(f"❌ Email {email} is already registered to another account")
        raise HTTPException(
            status_code=409,
            detail="This email is already registered. Please sign in with your existing account.",
        ) from e
    return user


def ensure_active(user: User) -> User:
    """Only active accounts may use the API"""
    if user.status == "suspended":
        logger.warning(f"⚠️ Suspended user {user.email} attempted access")
        raise HTTPException(status_code=403, detail="Your account has been suspended")
    if user.status != "active":
        logger.warning(f"⚠️ User {user.email} with status '{user.status}' attempted access")
        raise HTTPException(status_code=403, detail="Your account is inactive")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)
    user = resolve_user(db, claims)
    logger.debug(f"✅ User authenticated: {user.email}")
    return ensure_active(user)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user for public procedures that personalise their response"""
    if not credentials:
        return None
    claims = verify_access_token(credentials.credentials)
    return ensure_active(resolve_user(db, claims))


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Gate a procedure to administrators"""
    if user.role != ROLE_ADMIN:
        logger.warning(f"⚠️ User {user.email} attempted to access an admin procedure")
        raise HTTPException(status_code=403, detail="Only admins can access this resource")
    return user


async def require_business_owner(user: User = Depends(get_current_user)) -> User:
    """Gate a procedure to business owners (admins pass through)"""
    if user.role not in (ROLE_BUSINESS, ROLE_ADMIN):
        logger.warning(f"⚠️ User {user.email} attempted to access a business procedure")
        raise HTTPException(
            status_code=403, detail="Only business owners can access this resource"
        )
    return user
