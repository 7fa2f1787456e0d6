# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the relief registry.
"""

from enum import Enum


class RegistryEventType(str, Enum):
    """Notifications emitted by registry operations."""
    DISASTER_REPORTED = "disaster_reported"
    RESOURCE_DONATED = "resource_donated"
    WORKER_ASSIGNED = "worker_assigned"
    FUNDS_RECEIVED = "funds_received"
    FUNDS_ALLOCATED = "funds_allocated"
    FUNDS_DISBURSED = "funds_disbursed"


class AuditAction(str, Enum):
    """Mutating registry operations recorded in the audit trail."""
    REPORT_DISASTER = "report_disaster"
    ALLOCATE_RESOURCE = "allocate_resource"
    REGISTER_WORKER = "register_worker"
    ASSIGN_WORKER = "assign_worker"
    DONATE_FUNDS = "donate_funds"
    ALLOCATE_FUNDS = "allocate_funds"
    DISBURSE_FUNDS = "disburse_funds"
    COMPLETE_MISSION = "complete_mission"
    CLOSE_DISASTER = "close_disaster"


class AuditEntity(str, Enum):
    """Record kinds an audit entry can refer to."""
    DISASTER = "disaster"
    RESOURCE = "resource"
    WORKER = "worker"
