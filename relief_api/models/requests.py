# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.

These models check request shape and types only. Semantic rules (non-empty
text, severity range, positive amounts) belong to the registry so that they
fail with the registry's own error kinds.
"""

from typing import Optional
from pydantic import BaseModel, Field
from .base import RegistryRequest
from .enums import AuditAction, AuditEntity


class ReportDisasterRequest(RegistryRequest):
    """Request model for reporting a disaster."""

    location: str = Field(..., description="Where the disaster happened")
    disaster_type: str = Field(..., description="Free-form disaster type, e.g. flood")
    severity: int = Field(..., description="Severity on a 1-10 scale")


class AllocateResourceRequest(RegistryRequest):
    """Request model for donating relief goods to a disaster."""

    disaster_id: int = Field(..., description="Disaster the goods are for")
    resource_type: str = Field(..., description="Free-form resource tag")
    quantity: int = Field(..., description="Donated quantity")
    location: str = Field(..., description="Where the goods are")


class RegisterWorkerRequest(RegistryRequest):
    """Request model for registering the caller as a relief worker."""

    name: str = Field(..., description="Display name")
    skills: str = Field(..., description="Free-form skill tag")
    location: str = Field(..., description="Home base")


class AssignWorkerRequest(RegistryRequest):
    """Request model for assigning a worker to a disaster."""

    disaster_id: int = Field(..., description="Disaster to deploy the worker to")


class DonateFundsRequest(RegistryRequest):
    """Request model for donating money to a disaster."""

    amount: int = Field(..., description="Amount in the smallest currency unit")


class AllocateFundsRequest(RegistryRequest):
    """Request model for earmarking raised funds."""

    amount: int = Field(..., description="Amount in the smallest currency unit")
    purpose: str = Field(default="", description="What the funds are earmarked for")


class DisburseFundsRequest(RegistryRequest):
    """Request model for paying out allocated funds."""

    amount: int = Field(..., description="Amount in the smallest currency unit")
    recipient: str = Field(..., description="Identity receiving the payout")


class EventQuery(RegistryRequest):
    """Query parameters for reading the event journal."""

    since: int = Field(default=0, ge=0, description="Return events with a greater sequence number")


class AuditQuery(RegistryRequest):
    """Query parameters for browsing the audit trail."""

    caller_id: Optional[str] = Field(None, description="Filter by acting identity")
    entity: Optional[AuditEntity] = Field(None, description="Filter by record kind")
    entity_id: Optional[str] = Field(None, description="Filter by record identifier")
    action: Optional[AuditAction] = Field(None, description="Filter by operation")
    page: int = Field(default=1, ge=1, description="Page number")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")


class DisasterPath(BaseModel):
    """Path parameters addressing one disaster."""

    disaster_id: int = Field(..., description="Disaster id")


class ResourcePath(BaseModel):
    """Path parameters addressing one donated resource."""

    resource_id: int = Field(..., description="Resource id")


class WorkerPath(BaseModel):
    """Path parameters addressing one relief worker."""

    worker_id: str = Field(..., description="Worker identity")
