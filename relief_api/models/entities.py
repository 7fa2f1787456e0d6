# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core record models held by the relief registry.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, model_validator, ConfigDict
from .base import RegistryRecord, utc_now
from .enums import RegistryEventType, AuditAction, AuditEntity


class DisasterEvent(RegistryRecord):
    """A reported incident with an active/closed lifecycle and fund accounting."""

    id: int = Field(..., ge=1, description="Sequential disaster identifier")
    location: str = Field(..., min_length=1, description="Where the disaster happened")
    disaster_type: str = Field(..., min_length=1, description="Free-form disaster type")
    severity: int = Field(..., ge=1, le=10, description="Severity on a 1-10 scale")
    created_at: datetime = Field(default_factory=utc_now, description="Report timestamp")
    reporter: str = Field(..., description="Identity that reported the disaster")
    is_active: bool = Field(default=True, description="False once closed")
    funds_raised: int = Field(default=0, ge=0, description="Total donations received")
    funds_allocated: int = Field(default=0, ge=0, description="Total earmarked for spending")
    funds_disbursed: int = Field(default=0, ge=0, description="Total paid out of allocations")

    @model_validator(mode='after')
    def validate_fund_bounds(self):
        """Allocations never exceed donations, disbursements never exceed allocations."""
        if self.funds_allocated > self.funds_raised:
            raise ValueError('funds_allocated cannot exceed funds_raised')
        if self.funds_disbursed > self.funds_allocated:
            raise ValueError('funds_disbursed cannot exceed funds_allocated')
        return self

    @property
    def unallocated_funds(self) -> int:
        return self.funds_raised - self.funds_allocated


class ReliefResource(RegistryRecord):
    """A declared donation of goods tied to a disaster."""

    id: int = Field(..., ge=1, description="Sequential resource identifier")
    disaster_id: int = Field(..., ge=1, description="Disaster the donation is tied to")
    resource_type: str = Field(..., min_length=1, description="Free-form resource tag")
    quantity: int = Field(..., gt=0, description="Donated quantity")
    location: str = Field(..., min_length=1, description="Where the goods are")
    provider: str = Field(..., description="Identity that donated the goods")
    # Never toggled by any registry operation.
    is_available: bool = Field(default=True, description="Availability flag")
    created_at: datetime = Field(default_factory=utc_now, description="Donation timestamp")


class ReliefWorker(RegistryRecord):
    """A registered volunteer or professional."""

    worker_id: str = Field(..., min_length=1, description="Worker identity")
    name: str = Field(..., min_length=1, description="Display name")
    skills: str = Field(..., min_length=1, description="Free-form skill tag")
    location: str = Field(..., min_length=1, description="Home base")
    is_available: bool = Field(default=True, description="False while assigned")
    registered_at: datetime = Field(default_factory=utc_now, description="Registration timestamp")
    completed_missions: int = Field(default=0, ge=0, description="Completed mission counter")


class RegistryEvent(BaseModel):
    """Notification emitted by a successful registry operation."""

    sequence: int = Field(..., ge=1, description="Position in the event journal")
    event_type: RegistryEventType = Field(..., description="Kind of notification")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Event arguments")
    emitted_at: datetime = Field(default_factory=utc_now, description="Emission timestamp")

    model_config = ConfigDict(
        use_enum_values=True
    )


class AuditLog(BaseModel):
    """Audit trail entry for a mutating registry operation."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Unique identifier")
    timestamp: datetime = Field(default_factory=utc_now, description="Action timestamp")
    caller_id: str = Field(..., description="Identity that performed the action")
    entity: AuditEntity = Field(..., description="Record kind")
    entity_id: str = Field(..., description="Record identifier")
    action: AuditAction = Field(..., description="Operation performed")
    before: Optional[Dict[str, Any]] = Field(None, description="Record state before the action")
    after: Optional[Dict[str, Any]] = Field(None, description="Record state after the action")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    trace_id: Optional[str] = Field(None, description="OpenTelemetry trace ID")
    span_id: Optional[str] = Field(None, description="OpenTelemetry span ID")

    model_config = ConfigDict(
        use_enum_values=True
    )


class CallerContext(BaseModel):
    """Authenticated caller identity for request processing."""

    caller_id: str = Field(..., description="Authenticated identity (token subject)")
    name: Optional[str] = Field(None, description="Display name from the token")
    token_payload: Optional[Dict[str, Any]] = Field(None, description="Original JWT payload")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Client user agent")
    request_id: Optional[str] = Field(None, description="Request identifier")
