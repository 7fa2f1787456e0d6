# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Response models for API endpoints with HAL support.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class HalLink(BaseModel):
    """HAL link representation."""

    href: str = Field(..., description="Link URL")
    method: Optional[str] = Field(None, description="HTTP method")
    type: Optional[str] = Field(None, description="Content type")
    title: Optional[str] = Field(None, description="Link title")


class ErrorResponse(BaseModel):
    """Problem document returned for every failed request."""

    type: str = Field(..., description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable reason")
    instance: str = Field(..., description="Request path that failed")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Field-level validation errors")


class RegistrySummaryResponse(BaseModel):
    """Registry-wide counters and custody figures."""

    coordinator: str = Field(..., description="Coordinator identity")
    next_disaster_id: int = Field(..., description="Id the next reported disaster receives")
    next_resource_id: int = Field(..., description="Id the next donated resource receives")
    balance: int = Field(..., description="Value currently held by the registry")
    active_disasters: int = Field(..., description="Number of active disasters")


class BalanceResponse(BaseModel):
    """Current custodial balance."""

    balance: int = Field(..., description="Value currently held by the registry")
