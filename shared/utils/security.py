"""
Security utilities for Codivio services

Provides password hashing and JWT issuance/verification shared by the user
service (issuer) and the gateway (verifier).
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_TYPE = "access_token"
REFRESH_TOKEN_TYPE = "refresh_token"


class SecurityConfigurationError(RuntimeError):
    """Raised when tokens are requested without a configured secret"""


class SecuritySettings(BaseSettings):
    """JWT and password hashing configuration"""

    jwt_secret_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration: int = 86400  # seconds
    jwt_refresh_expiration: int = 604800  # seconds
    jwt_issuer: str = "codivio-user-service"
    bcrypt_rounds: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityUtils:
    """Security utilities class"""

    def __init__(self, settings: Optional[SecuritySettings] = None):
        self.settings = settings or SecuritySettings()

    @property
    def expiration(self) -> int:
        """Access token lifetime in seconds"""
        return self.settings.jwt_expiration

    def _secret(self) -> str:
        secret = self.settings.jwt_secret_key
        if not secret:
            raise SecurityConfigurationError("JWT_SECRET_KEY is not configured")
        return secret

    def hash_password(self, password: str) -> str:
        """
        Hash password using bcrypt

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        salt = bcrypt.gensalt(rounds=self.settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """
        Verify password against hash

        Args:
            password: Plain text password
            hashed_password: Hashed password

        Returns:
            True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification failed", error=str(e))
            return False

    def generate_token(
        self,
        user_id: int,
        username: str,
        token_type: str = ACCESS_TOKEN_TYPE,
        expires_in: Optional[int] = None,
    ) -> str:
        """
        Generate a signed JWT for a user

        Args:
            user_id: User ID, stored in the ``userId`` claim
            username: Username, stored in ``username`` and ``sub``
            token_type: ``access_token`` or ``refresh_token``
            expires_in: Lifetime in seconds; defaults to the configured TTL for the type

        Returns:
            JWT token string

        Raises:
            SecurityConfigurationError: If no secret is configured
        """
        if expires_in is None:
            if token_type == REFRESH_TOKEN_TYPE:
                expires_in = self.settings.jwt_refresh_expiration
            else:
                expires_in = self.settings.jwt_expiration

        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "username": username,
            "type": token_type,
            "sub": username,
            "iss": self.settings.jwt_issuer,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        }

        return jwt.encode(payload, self._secret(), algorithm=self.settings.jwt_algorithm)

    def generate_refresh_token(self, user_id: int, username: str) -> str:
        """Generate refresh token"""
        return self.generate_token(user_id, username, token_type=REFRESH_TOKEN_TYPE)

    def get_claims(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Verify and decode JWT token

        Signature, issuer and expiry are checked by PyJWT. Every failure is
        logged and collapsed to None.

        Args:
            token: JWT token string

        Returns:
            Decoded claims or None if invalid
        """
        if not token or not token.strip():
            logger.warning("Token is empty")
            return None

        try:
            return jwt.decode(
                token,
                self._secret(),
                algorithms=[self.settings.jwt_algorithm],
                issuer=self.settings.jwt_issuer,
                options={"require": ["exp", "iat", "iss", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
        except jwt.InvalidIssuerError as e:
            logger.warning("Token issuer mismatch", error=str(e))
        except jwt.InvalidSignatureError as e:
            logger.warning("Token signature invalid", error=str(e))
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid token", error=str(e))
        except SecurityConfigurationError as e:
            logger.error("Cannot verify token", error=str(e))
        return None

    def validate_token(self, token: Optional[str]) -> bool:
        """Return True when the token has a valid signature, issuer and expiry"""
        return self.get_claims(token) is not None

    @staticmethod
    def is_access_claims(claims: Optional[Dict[str, Any]]) -> bool:
        """True when decoded claims belong to an access token"""
        return claims is not None and claims.get("type") == ACCESS_TOKEN_TYPE

    def is_access_token(self, token: Optional[str]) -> bool:
        """Return True for a valid token of type ``access_token``; refresh tokens are rejected"""
        return self.is_access_claims(self.get_claims(token))

    def get_user_id(self, token: Optional[str]) -> Optional[int]:
        """Extract the ``userId`` claim of an access token"""
        claims = self.get_claims(token)
        if not self.is_access_claims(claims):
            return None

        user_id = claims.get("userId")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            logger.warning("Unexpected userId claim type", claim_type=type(user_id).__name__)
            return None
        return user_id

    def get_username(self, token: Optional[str]) -> Optional[str]:
        """Extract the ``username`` claim of an access token"""
        claims = self.get_claims(token)
        if not self.is_access_claims(claims):
            return None

        username = claims.get("username")
        return username if isinstance(username, str) else None


# Global security utils instance
_security_utils: Optional[SecurityUtils] = None


def get_security_utils() -> SecurityUtils:
    """
    Get global security utils instance

    Returns:
        SecurityUtils instance
    """
    global _security_utils
    if _security_utils is None:
        _security_utils = SecurityUtils()
    return _security_utils


# Convenience functions
def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return get_security_utils().hash_password(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return get_security_utils().verify_password(password, hashed_password)


def generate_token(user_id: int, username: str, expires_in: Optional[int] = None) -> str:
    """Generate access token"""
    return get_security_utils().generate_token(user_id, username, expires_in=expires_in)


def validate_token(token: Optional[str]) -> bool:
    """Verify JWT token"""
    return get_security_utils().validate_token(token)
