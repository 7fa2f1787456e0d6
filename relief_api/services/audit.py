# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Audit service recording every committed registry change with trace correlation.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import List, Optional
from opentelemetry import trace

from ..domain.registry import RegistryChange
from ..models.entities import AuditLog

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class AuditFilters:
    """Filters for audit log queries."""
    caller_id: Optional[str] = None
    entity: Optional[str] = None
    entity_id: Optional[str] = None
    action: Optional[str] = None

    def matches(self, entry: AuditLog) -> bool:
        if self.caller_id and entry.caller_id != self.caller_id:
            return False
        if self.entity and entry.entity != self.entity:
            return False
        if self.entity_id and entry.entity_id != self.entity_id:
            return False
        if self.action and entry.action != self.action:
            return False
        return True


@dataclass
class PaginationResult:
    """One page of audit entries."""
    items: List[AuditLog]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))


class AuditService:
    """In-process audit trail fed by the registry's change listener."""

    def __init__(self, max_entries: int = 10000):
        self.max_entries = max_entries
        self._entries: List[AuditLog] = []
        self._lock = threading.Lock()
        logger.info("Audit service initialized")

    def record_change(self, change: RegistryChange) -> AuditLog:
        """
        Store an audit entry for a committed registry change.

        The entry is correlated with the active OpenTelemetry span, which during
        an HTTP request is the request's span.
        """
        span_context = trace.get_current_span().get_span_context()

        entry = AuditLog(
            caller_id=change.caller,
            entity=change.entity,
            entity_id=change.entity_id,
            action=change.action,
            before=change.before,
            after=change.after
        )
        if span_context.is_valid:
            entry.trace_id = format(span_context.trace_id, "032x")
            entry.span_id = format(span_context.span_id, "016x")

        with self._lock:
            self._entries.append(entry)
            # Oldest entries are dropped once the trail is full
            if len(self._entries) > self.max_entries:
                del self._entries[:len(self._entries) - self.max_entries]

        logger.info(
            "Audit trail entry created",
            extra={
                "audit_id": entry.id,
                "entity": entry.entity,
                "entity_id": entry.entity_id,
                "action": entry.action,
                "caller_id": entry.caller_id,
                "trace_id": entry.trace_id
            }
        )
        return entry

    def query(self, filters: AuditFilters, page: int = 1, page_size: int = 20) -> PaginationResult:
        """
        Query audit entries, newest first.

        Args:
            filters: Audit log filters
            page: Page number (1-based)
            page_size: Number of items per page
        """
        page = max(1, page)
        page_size = max(1, min(page_size, 100))

        with tracer.start_as_current_span("audit.query_logs") as span:
            with self._lock:
                matched = [e for e in reversed(self._entries) if filters.matches(e)]

            start = (page - 1) * page_size
            span.set_attributes({
                "audit.query.page": page,
                "audit.query.page_size": page_size,
                "audit.query.total": len(matched)
            })
            return PaginationResult(
                items=matched[start:start + page_size],
                total=len(matched),
                page=page,
                page_size=page_size
            )
