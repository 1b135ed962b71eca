"""Authentication routes.

This module handles login with email and password, current-user lookup
from a JWT bearer token, and logout.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import AuthenticationError
from schemas.user import LoginRequest, LoginResponse, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])

# HTTP Bearer token security; missing headers are reported by verify_token
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Verify JWT token from Authorization header.

    Returns:
        Decoded token payload.

    Raises:
        AuthenticationError: If token is missing, invalid or expired.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError as e:
        raise AuthenticationError("Invalid authentication credentials") from e
    if payload.get("sub") is None:
        raise AuthenticationError("Invalid authentication credentials")
    return payload


def get_current_user(
    user_manager: UserManagerDep,
    token_payload: dict = Depends(verify_token),
) -> User:
    """Get current authenticated user.

    Raises:
        AuthenticationError: If the user no longer exists or is archived.
    """
    user = user_manager.get_user(token_payload["sub"])
    if user is None or user.is_archived:
        raise AuthenticationError("User not found")
    return user


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> LoginResponse:
    """Login with email and password.

    Returns:
        LoginResponse with user information and JWT token.

    Raises:
        AuthenticationError: If the credentials are wrong or the account is archived.
    """
    user = user_manager.authenticate(req.email or "", req.password or "")
    if user is None:
        logger.info("Failed login for %s", req.email)
        raise AuthenticationError("Invalid email or password")

    access_token = create_access_token(
        data={"sub": user.user_id},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return LoginResponse(user=user.to_public(), token=access_token)


@router.post("/logout", summary="Log out")
def logout() -> dict:
    """Logout endpoint.

    Tokens are stateless JWTs, so logging out is done client-side by
    dropping the token.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user", summary="Current user")
def current_user_info(current_user: User = Depends(get_current_user)) -> dict:
    return {"success": True, "user": current_user.to_public()}
