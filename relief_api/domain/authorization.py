# SPDX-License-Identifier: Apache-2.0

"""
Authorization domain logic for the coordinator role.

The registry has one privileged identity, fixed when the registry is created.
Assignment, fund allocation, disbursement, mission completion and disaster
closure are restricted to it; every other operation is open to any caller.
"""

from typing import List, Optional
from dataclasses import dataclass, field

from .errors import Unauthorized


@dataclass
class AuthorizationResult:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[str] = None
    missing_roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CoordinatorPolicy:
    """
    Decides whether a caller may perform coordinator-only operations.

    Holds a single coordinator identity. Frozen so the coordinator cannot be
    swapped after the registry is built.
    """
    coordinator: str

    def __post_init__(self):
        if not self.coordinator or not self.coordinator.strip():
            raise ValueError("Coordinator identity cannot be empty")

    def check(self, caller: str) -> AuthorizationResult:
        """
        Check whether a caller holds the coordinator role.

        Args:
            caller: Identity of the caller

        Returns:
            AuthorizationResult indicating if the role is held
        """
        if caller == self.coordinator:
            return AuthorizationResult(allowed=True)

        return AuthorizationResult(
            allowed=False,
            reason="Only the coordinator can perform this action",
            missing_roles=["coordinator"]
        )

    def require(self, caller: str) -> None:
        """Raise ``Unauthorized`` unless the caller is the coordinator."""
        result = self.check(caller)
        if not result.allowed:
            raise Unauthorized(result.reason)

    def is_coordinator(self, caller: Optional[str]) -> bool:
        return caller is not None and self.check(caller).allowed
