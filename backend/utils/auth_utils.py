from typing import Dict, Optional

from fastapi import Depends, HTTPException, status, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from sqlalchemy.orm import Session

from config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET
from database import get_db
from models.profiles import Profile, UserRole


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )
    return parts[1]


def decode_token(token: str) -> Dict[str, any]:
    """Validate a bearer token issued by the hosted auth provider and return its claims."""
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
        )
    return payload


def get_current_user(request: Request) -> Dict[str, any]:
    """
    FastAPI dependency that requires a valid bearer token.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            ...
    """
    token = _bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )
    return decode_token(token)


def get_optional_user(request: Request) -> Optional[Dict[str, any]]:
    """Like get_current_user, but anonymous requests resolve to None instead of 401."""
    token = _bearer_token(request)
    if token is None:
        return None
    return decode_token(token)


def get_user_identifier(user: Optional[dict]) -> Optional[str]:
    if not user:
        return None
    return user.get("sub")


def get_current_profile(user: dict = Depends(get_current_user), db: Session = Depends(get_db)) -> Profile:
    profile = db.query(Profile).filter(Profile.id == get_user_identifier(user)).first()
    if profile is None or not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No active profile for this account",
        )
    return profile


def require_roles(roles: list):
    """Dependency factory that only lets profiles with one of `roles` through."""
    allowed = {UserRole(r) for r in roles}

    def role_checker(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires one of the roles: {', '.join(sorted(r.value for r in allowed))}",
            )
        return profile

    return role_checker
