from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from storefront.auth.jwt_validator import jwt_validator
from storefront.core.errors import ForbiddenError, UnauthorizedError
from storefront.db.database import get_db
from storefront.models.user import User
import logging

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation; a bare token is accepted too
bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(authorization: Optional[str]) -> str:
    """Accept both `Bearer <token>` and a bare token in the header"""
    if not authorization or not authorization.strip():
        raise UnauthorizedError("Authorization header missing")
    scheme, _, credentials = authorization.strip().partition(" ")
    if credentials and scheme.lower() == "bearer":
        return credentials.strip()
    return authorization.strip()


async def require_sign_in(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Dependency to verify the bearer token and load the calling user"""
    if credentials:
        token = credentials.credentials
    else:
        token = _extract_token(request.headers.get("Authorization"))
    user_id = jwt_validator.extract_user_id(token)

    try:
        user = db.get(User, UUID(user_id))
    except ValueError:
        logger.warning("Token subject is not a valid user id")
        raise UnauthorizedError("Invalid authentication credentials")

    if user is None:
        logger.warning(f"Token refers to unknown user {user_id}")
        raise UnauthorizedError("User no longer exists")

    logger.debug(f"Authenticated user: {user.email} (user_id: {user.id}, role: {user.role})")
    return user


async def is_admin(current_user: User = Depends(require_sign_in)) -> User:
    """Dependency to require the admin role"""
    if not current_user.is_admin:
        logger.warning(f"Non-admin user {current_user.email} attempted admin access")
        raise ForbiddenError("UnAuthorized Access")
    return current_user
