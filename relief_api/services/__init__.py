# SPDX-License-Identifier: Apache-2.0

"""
Service layer for the relief registry API.
"""

from .auth import AuthService, AuthenticationError, TokenValidationError
from .audit import AuditService, AuditFilters, PaginationResult
from .amqp import AMQPEventPublisher, AMQPConfig, PublishResult, create_amqp_publisher
from .hal import HalFormatter, create_hal_formatter

__all__ = [
    "AuthService",
    "AuthenticationError",
    "TokenValidationError",
    "AuditService",
    "AuditFilters",
    "PaginationResult",
    "AMQPEventPublisher",
    "AMQPConfig",
    "PublishResult",
    "create_amqp_publisher",
    "HalFormatter",
    "create_hal_formatter",
]
