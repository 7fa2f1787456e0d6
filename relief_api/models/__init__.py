# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the relief registry.
"""

# Base models
from .base import RegistryRecord, RegistryRequest, utc_now

# Enumerations
from .enums import RegistryEventType, AuditAction, AuditEntity

# Core entities
from .entities import (
    DisasterEvent,
    ReliefResource,
    ReliefWorker,
    RegistryEvent,
    AuditLog,
    CallerContext
)

# Request models
from .requests import (
    ReportDisasterRequest,
    AllocateResourceRequest,
    RegisterWorkerRequest,
    AssignWorkerRequest,
    DonateFundsRequest,
    AllocateFundsRequest,
    DisburseFundsRequest,
    EventQuery,
    AuditQuery,
    DisasterPath,
    ResourcePath,
    WorkerPath
)

# Response models
from .responses import (
    HalLink,
    ErrorResponse,
    RegistrySummaryResponse,
    BalanceResponse
)

__all__ = [
    # Base models
    "RegistryRecord",
    "RegistryRequest",
    "utc_now",

    # Enumerations
    "RegistryEventType",
    "AuditAction",
    "AuditEntity",

    # Core entities
    "DisasterEvent",
    "ReliefResource",
    "ReliefWorker",
    "RegistryEvent",
    "AuditLog",
    "CallerContext",

    # Request models
    "ReportDisasterRequest",
    "AllocateResourceRequest",
    "RegisterWorkerRequest",
    "AssignWorkerRequest",
    "DonateFundsRequest",
    "AllocateFundsRequest",
    "DisburseFundsRequest",
    "EventQuery",
    "AuditQuery",
    "DisasterPath",
    "ResourcePath",
    "WorkerPath",

    # Response models
    "HalLink",
    "ErrorResponse",
    "RegistrySummaryResponse",
    "BalanceResponse"
]
