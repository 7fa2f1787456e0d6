# SPDX-License-Identifier: Apache-2.0

"""
Registry-wide endpoints: summary counters, custodial balance, the event
journal and the audit trail.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..domain.errors import Unauthorized
from ..models.entities import CallerContext
from ..models.requests import EventQuery, AuditQuery
from ..models.responses import RegistrySummaryResponse, BalanceResponse
from ..middleware.auth import require_auth
from ..middleware.validation import validate_query
from ..services.audit import AuditFilters

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

registry_tag = Tag(name="Registry", description="Balance, event journal and audit trail")
registry_bp = APIBlueprint(
    'registry',
    __name__,
    url_prefix='/api/registry',
    abp_tags=[registry_tag]
)


def _links(**paths):
    builder = current_app.hal_formatter.builder.link_builder
    return {rel: builder.build_link(path).model_dump(exclude_none=True) for rel, path in paths.items()}


@registry_bp.get('')
def get_registry_summary():
    summary = RegistrySummaryResponse(**current_app.registry.get_summary())
    response = summary.model_dump()
    response['_links'] = _links(
        self="/api/registry",
        balance="/api/registry/balance",
        events="/api/registry/events",
        disasters="/api/disasters/active",
        resources="/api/resources/available"
    )
    return jsonify(response)


@registry_bp.get('/balance')
def get_contract_balance():
    """Value held by the registry: donations received minus disbursements."""
    response = BalanceResponse(balance=current_app.registry.get_contract_balance()).model_dump()
    response['_links'] = _links(self="/api/registry/balance", registry="/api/registry")
    return jsonify(response)


@registry_bp.get('/events')
@validate_query(EventQuery)
def list_events(params: EventQuery):
    """
    Read the event journal.

    Consumers poll with ``since`` set to the last sequence number they saw.
    """
    events = current_app.registry.get_events(since=params.since)
    last_sequence = events[-1].sequence if events else params.since

    return jsonify({
        'events': [event.model_dump(mode="json") for event in events],
        'count': len(events),
        'last_sequence': last_sequence,
        '_links': _links(
            self=f"/api/registry/events?since={params.since}",
            next=f"/api/registry/events?since={last_sequence}"
        )
    })


@registry_bp.get('/audit')
@require_auth
@validate_query(AuditQuery)
def list_audit_entries(params: AuditQuery, caller: CallerContext):
    """Browse the audit trail, newest first. Coordinator only."""
    if not current_app.registry.is_coordinator(caller.caller_id):
        raise Unauthorized("Only the coordinator can read the audit trail")

    filters = AuditFilters(
        caller_id=params.caller_id,
        entity=params.entity,
        entity_id=params.entity_id,
        action=params.action
    )

    with tracer.start_as_current_span("audit.list_entries", attributes={"caller.id": caller.caller_id}):
        page = current_app.audit_service.query(filters, page=params.page, page_size=params.page_size)

    return jsonify(current_app.hal_formatter.format_collection(
        [entry.model_dump(mode="json") for entry in page.items],
        page.total,
        page.page,
        page.page_size,
        "/api/registry/audit",
        {
            'caller_id': params.caller_id,
            'entity': params.entity,
            'entity_id': params.entity_id,
            'action': params.action
        }
    ))
