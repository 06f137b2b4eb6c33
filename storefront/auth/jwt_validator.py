"""
JWT issuing and verification for bearer tokens (HMAC signed)
"""
import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict
from storefront.config import settings
from storefront.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class JWTValidator:
    def __init__(self, secret: str = None, algorithm: str = None, expires_days: int = None):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expires_in = timedelta(days=expires_days or settings.jwt_expires_days)

    def create_token(self, user_id: str) -> str:
        """Sign a token identifying the user"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict:
        """
        Verify a JWT token.
        Returns decoded token payload if valid.
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise UnauthorizedError("Invalid authentication credentials")

    def extract_user_id(self, token: str) -> str:
        """Extract user id (the subject claim) from a JWT token"""
        return self.verify_token(token)["sub"]


jwt_validator = JWTValidator()
