# SPDX-License-Identifier: Apache-2.0

"""
Disaster endpoints.

Reporting, closure and fund accounting for disasters. Every handler delegates
to the registry; registry errors propagate to the centralized error handler.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..models.entities import CallerContext
from ..models.requests import (
    ReportDisasterRequest, DonateFundsRequest, AllocateFundsRequest, DisburseFundsRequest,
    DisasterPath
)
from ..middleware.auth import require_auth, optional_auth
from ..middleware.validation import validate_json

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

disasters_tag = Tag(name="Disasters", description="Disaster reporting, closure and fund accounting")
disasters_bp = APIBlueprint(
    'disasters',
    __name__,
    url_prefix='/api/disasters',
    abp_tags=[disasters_tag]
)


def _disaster_response(disaster_id: int, caller_id=None):
    registry = current_app.registry
    disaster = registry.get_disaster(disaster_id)
    return current_app.hal_formatter.format_disaster(
        disaster.model_dump(mode="json"),
        is_coordinator=registry.is_coordinator(caller_id)
    )


@disasters_bp.post('')
@require_auth
@validate_json(ReportDisasterRequest)
def report_disaster(payload: ReportDisasterRequest, caller: CallerContext):
    """Report a new disaster. Open to any authenticated caller."""
    with tracer.start_as_current_span(
        "domain.registry.report_disaster",
        attributes={"caller.id": caller.caller_id, "disaster.severity": payload.severity}
    ) as span:
        disaster_id = current_app.registry.report_disaster(
            caller.caller_id, payload.location, payload.disaster_type, payload.severity
        )
        span.set_attribute("disaster.id", disaster_id)

    logger.info(
        "Disaster reported",
        extra={
            "disaster_id": disaster_id,
            "caller_id": caller.caller_id,
            "disaster_type": payload.disaster_type,
            "severity": payload.severity
        }
    )

    response = jsonify(_disaster_response(disaster_id, caller.caller_id))
    response.status_code = 201
    response.headers['Location'] = f"/api/disasters/{disaster_id}"
    return response


@disasters_bp.get('/active')
def list_active_disasters():
    """Active disaster ids. Order is not stable across closures."""
    ids = current_app.registry.get_active_disasters()
    return jsonify(current_app.hal_formatter.format_id_list(
        "active_disasters", ids, "/api/disasters/active", "/api/disasters/{id}"
    ))


@disasters_bp.get('/<int:disaster_id>')
@optional_auth
def get_disaster(caller, path: DisasterPath):
    disaster_id = path.disaster_id
    caller_id = caller.caller_id if caller else None
    return jsonify(_disaster_response(disaster_id, caller_id))


@disasters_bp.get('/<int:disaster_id>/workers')
def list_disaster_workers(path: DisasterPath):
    """Workers ever assigned to the disaster, in assignment order."""
    disaster_id = path.disaster_id
    workers = current_app.registry.get_disaster_workers(disaster_id)
    return jsonify(current_app.hal_formatter.format_id_list(
        "workers", workers, f"/api/disasters/{disaster_id}/workers", "/api/workers/{id}"
    ))


@disasters_bp.post('/<int:disaster_id>/close')
@require_auth
def close_disaster(caller: CallerContext, path: DisasterPath):
    disaster_id = path.disaster_id
    with tracer.start_as_current_span(
        "domain.registry.close_disaster",
        attributes={"caller.id": caller.caller_id, "disaster.id": disaster_id}
    ):
        current_app.registry.close_disaster(caller.caller_id, disaster_id)

    logger.info(
        "Disaster closed",
        extra={"disaster_id": disaster_id, "caller_id": caller.caller_id}
    )
    return jsonify(_disaster_response(disaster_id, caller.caller_id))


@disasters_bp.post('/<int:disaster_id>/donations')
@require_auth
@validate_json(DonateFundsRequest)
def donate_funds(payload: DonateFundsRequest, caller: CallerContext, path: DisasterPath):
    """Donate money to an active disaster."""
    disaster_id = path.disaster_id
    with tracer.start_as_current_span(
        "domain.registry.donate_funds",
        attributes={"caller.id": caller.caller_id, "disaster.id": disaster_id, "funds.amount": payload.amount}
    ):
        current_app.registry.donate_funds(caller.caller_id, disaster_id, payload.amount)

    logger.info(
        "Funds donated",
        extra={"disaster_id": disaster_id, "caller_id": caller.caller_id, "amount": payload.amount}
    )
    return jsonify(_disaster_response(disaster_id, caller.caller_id))


@disasters_bp.post('/<int:disaster_id>/allocations')
@require_auth
@validate_json(AllocateFundsRequest)
def allocate_funds(payload: AllocateFundsRequest, caller: CallerContext, path: DisasterPath):
    """Earmark raised funds. Coordinator only."""
    disaster_id = path.disaster_id
    with tracer.start_as_current_span(
        "domain.registry.allocate_funds",
        attributes={"caller.id": caller.caller_id, "disaster.id": disaster_id, "funds.amount": payload.amount}
    ):
        current_app.registry.allocate_funds(caller.caller_id, disaster_id, payload.amount, payload.purpose)

    logger.info(
        "Funds allocated",
        extra={
            "disaster_id": disaster_id,
            "caller_id": caller.caller_id,
            "amount": payload.amount,
            "purpose": payload.purpose
        }
    )
    return jsonify(_disaster_response(disaster_id, caller.caller_id))


@disasters_bp.post('/<int:disaster_id>/disbursements')
@require_auth
@validate_json(DisburseFundsRequest)
def disburse_funds(payload: DisburseFundsRequest, caller: CallerContext, path: DisasterPath):
    """Pay out allocated funds to a recipient. Coordinator only."""
    disaster_id = path.disaster_id
    with tracer.start_as_current_span(
        "domain.registry.disburse_funds",
        attributes={"caller.id": caller.caller_id, "disaster.id": disaster_id, "funds.amount": payload.amount}
    ):
        current_app.registry.disburse_funds(caller.caller_id, disaster_id, payload.amount, payload.recipient)

    logger.info(
        "Funds disbursed",
        extra={
            "disaster_id": disaster_id,
            "caller_id": caller.caller_id,
            "amount": payload.amount,
            "recipient": payload.recipient
        }
    )
    return jsonify(_disaster_response(disaster_id, caller.caller_id))
