# SPDX-License-Identifier: Apache-2.0

"""
Authentication middleware for JWT token validation and caller context extraction.

The registry trusts the caller identity it is handed. This module is where that
identity comes from: the ``sub`` claim of a validated bearer token.
"""

from functools import wraps
from flask import request, jsonify, g, current_app
from typing import Optional, Dict, Any, Callable
from opentelemetry import trace
import logging

from ..models.entities import CallerContext
from ..services.auth import AuthService, TokenValidationError
from ..services.hal import HalFormatter

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    JWT authentication middleware for Flask applications.

    Handles token extraction, validation and caller context building for
    protected endpoints.
    """

    def __init__(self, auth_service: AuthService, hal_formatter: HalFormatter):
        self.auth_service = auth_service
        self.hal_formatter = hal_formatter

    def extract_token_from_request(self) -> Optional[str]:
        """
        Extract JWT token from request headers.

        Returns:
            JWT token string or None if not found
        """
        auth_header = request.headers.get('Authorization', '').strip()

        if not auth_header:
            return None

        if auth_header.startswith('Bearer '):
            return auth_header[7:].strip() or None

        return auth_header

    def get_request_info(self) -> Dict[str, Any]:
        return {
            "ip_address": request.remote_addr,
            "user_agent": request.headers.get('User-Agent', ''),
            "request_id": request.headers.get('X-Request-ID')
        }

    def build_caller_context(self, token_payload: Dict[str, Any], request_info: Dict[str, Any]) -> CallerContext:
        """
        Build caller context from validated token payload and request information.

        Args:
            token_payload: Decoded JWT payload
            request_info: Request metadata (IP, user agent, request id)

        Returns:
            CallerContext for request processing
        """
        return CallerContext(
            caller_id=str(token_payload["sub"]).strip(),
            name=token_payload.get("name"),
            token_payload=token_payload,
            ip_address=request_info.get("ip_address"),
            user_agent=request_info.get("user_agent"),
            request_id=request_info.get("request_id")
        )

    def authenticate(self) -> Optional[CallerContext]:
        """
        Validate the request's bearer token.

        Returns:
            CallerContext, or None when the request carries no token

        Raises:
            TokenValidationError: If a token is present but invalid
        """
        token = self.extract_token_from_request()
        if not token:
            return None

        token_payload = self.auth_service.validate_token(token, "access")
        return self.build_caller_context(token_payload, self.get_request_info())

    def unauthenticated_response(self, detail: str):
        return jsonify(self.hal_formatter.format_authentication_error(detail, request.path)), 401


def _middleware() -> AuthMiddleware:
    return current_app.auth_middleware


def require_auth(f: Callable) -> Callable:
    """
    Decorator to require JWT authentication for Flask routes.

    The validated ``CallerContext`` is stored in ``g.caller`` and passed to the
    route as its first argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_middleware = _middleware()

        with tracer.start_as_current_span("auth.middleware.validate_request") as span:
            span.set_attribute("auth.operation", "validate_request")

            try:
                caller = auth_middleware.authenticate()
            except TokenValidationError as e:
                span.set_attribute("auth.result", "invalid_token")
                logger.warning(f"Authentication failed: {str(e)}")
                return auth_middleware.unauthenticated_response(str(e))

            if caller is None:
                span.set_attribute("auth.result", "missing_token")
                logger.warning("Authentication failed: missing token")
                return auth_middleware.unauthenticated_response("Missing authorization token")

            g.caller = caller
            span.set_attributes({
                "auth.result": "success",
                "caller.id": caller.caller_id
            })
            logger.debug(
                "Authentication successful",
                extra={
                    "caller_id": caller.caller_id,
                    "ip_address": caller.ip_address
                }
            )

        return f(caller, *args, **kwargs)

    return decorated_function


def optional_auth(f: Callable) -> Callable:
    """
    Decorator for public routes that render differently for known callers.

    Passes the ``CallerContext`` when a valid token is present, otherwise None.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        caller = None
        try:
            caller = _middleware().authenticate()
        except TokenValidationError as e:
            logger.debug(f"Ignoring invalid token on public route: {str(e)}")

        if caller is not None:
            g.caller = caller
        return f(caller, *args, **kwargs)

    return decorated_function
