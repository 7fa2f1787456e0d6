# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains middleware components for authentication, request body
validation and centralized error handling in the relief registry API.
"""

from .auth import AuthMiddleware, require_auth, optional_auth
from .validation import ValidationMiddleware, validate_json, validate_query
from .error_handler import ErrorHandlerMiddleware, register_registry_error_handlers

__all__ = [
    "AuthMiddleware",
    "require_auth",
    "optional_auth",
    "ValidationMiddleware",
    "validate_json",
    "validate_query",
    "ErrorHandlerMiddleware",
    "register_registry_error_handlers",
]
