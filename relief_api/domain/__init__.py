# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the relief registry.

This package holds the registry state machine, its error kinds and the
coordinator policy. Nothing here depends on Flask or on any transport.
"""

from .registry import ReliefRegistry, RegistryChange
from .authorization import CoordinatorPolicy, AuthorizationResult
from . import errors

__all__ = [
    "ReliefRegistry",
    "RegistryChange",
    "CoordinatorPolicy",
    "AuthorizationResult",
    "errors",
]
