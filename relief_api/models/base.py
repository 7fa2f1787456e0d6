# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base record models with common configuration.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class RegistryRecord(BaseModel):
    """Base for every keyed record held by the relief registry."""

    model_config = ConfigDict(
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment so in-place mutations keep field constraints
        validate_assignment=True
    )

    def snapshot(self) -> "RegistryRecord":
        """Return a detached deep copy safe to hand out of the registry."""
        return self.model_copy(deep=True)


class RegistryRequest(BaseModel):
    """Base model for API request bodies."""

    model_config = ConfigDict(use_enum_values=True)
