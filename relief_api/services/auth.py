# SPDX-License-Identifier: Apache-2.0

"""
Authentication service for JWT caller identity.

The registry itself trusts whatever caller identity it is handed; this service
is what makes that identity trustworthy at the HTTP edge. Access tokens are
HS256-signed and carry the caller identity in the ``sub`` claim.
"""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when a token cannot be issued."""
    pass


class TokenValidationError(Exception):
    """Raised when token validation fails."""
    pass


class AuthService:
    """
    JWT service issuing and validating caller identity tokens.

    Args:
        secret_key: Shared HMAC secret for signing and verification
        algorithm: JWT signing algorithm
        access_token_expire_seconds: Lifetime of issued access tokens
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_seconds: int = 900
    ):
        if not secret_key:
            raise ValueError("JWT secret key cannot be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_seconds = access_token_expire_seconds

    def issue_token(self, identity: str, name: Optional[str] = None) -> Dict[str, Any]:
        """
        Issue an access token for a caller identity.

        Args:
            identity: Caller identity to place in the ``sub`` claim
            name: Optional display name

        Returns:
            Dictionary containing access_token and metadata
        """
        with tracer.start_as_current_span("auth.issue_token") as span:
            span.set_attributes({
                "auth.operation": "issue_token",
                "caller.id": identity
            })

            if not identity or not identity.strip():
                raise AuthenticationError("Cannot issue a token for an empty identity")

            now = datetime.now(timezone.utc)
            expires_at = now + timedelta(seconds=self.access_token_expire_seconds)
            payload = {
                "sub": identity,
                "iat": now,
                "exp": expires_at,
                "type": "access"
            }
            if name:
                payload["name"] = name

            try:
                token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
            except Exception as e:
                logger.error(f"Token generation failed: {str(e)}")
                raise AuthenticationError(f"Failed to generate token: {str(e)}")

            logger.info(
                "Access token issued",
                extra={
                    "caller_id": identity,
                    "expires_at": expires_at.isoformat()
                }
            )

            return {
                "access_token": token,
                "token_type": "Bearer",
                "expires_in": self.access_token_expire_seconds,
                "expires_at": expires_at.isoformat()
            }

    def validate_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Validate and decode a JWT token.

        Args:
            token: JWT token string to validate
            token_type: Expected token type

        Returns:
            Decoded token payload

        Raises:
            TokenValidationError: If token is invalid or expired
        """
        with tracer.start_as_current_span("auth.validate_token") as span:
            span.set_attributes({
                "auth.operation": "validate_token",
                "auth.token_type": token_type
            })

            try:
                payload = jwt.decode(
                    token,
                    self.secret_key,
                    algorithms=[self.algorithm],
                    options={"verify_exp": True, "require": ["sub", "exp"]}
                )
            except jwt.ExpiredSignatureError:
                span.set_attribute("auth.validation_result", "expired")
                logger.warning("Token validation failed: token expired")
                raise TokenValidationError("Token has expired")
            except jwt.InvalidTokenError as e:
                span.set_attribute("auth.validation_result", "invalid")
                logger.warning(f"Token validation failed: {str(e)}")
                raise TokenValidationError(f"Invalid token: {str(e)}")

            if payload.get("type") != token_type:
                span.set_attribute("auth.validation_result", "wrong_type")
                raise TokenValidationError(f"Invalid token type. Expected {token_type}")

            if not str(payload.get("sub", "")).strip():
                span.set_attribute("auth.validation_result", "empty_subject")
                raise TokenValidationError("Token subject cannot be empty")

            span.set_attributes({
                "auth.validation_result": "success",
                "caller.id": payload["sub"]
            })
            return payload
