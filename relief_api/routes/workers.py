# SPDX-License-Identifier: Apache-2.0

"""
Relief worker endpoints.

Callers register themselves; assignment and mission completion are
coordinator actions on a worker identified by path.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..models.entities import CallerContext
from ..models.requests import RegisterWorkerRequest, AssignWorkerRequest, WorkerPath
from ..middleware.auth import require_auth, optional_auth
from ..middleware.validation import validate_json

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

workers_tag = Tag(name="Workers", description="Relief worker registration and deployment")
workers_bp = APIBlueprint(
    'workers',
    __name__,
    url_prefix='/api/workers',
    abp_tags=[workers_tag]
)


def _worker_response(worker_id: str, caller_id=None):
    registry = current_app.registry
    worker = registry.get_worker(worker_id)
    return current_app.hal_formatter.format_worker(
        worker.model_dump(mode="json"),
        is_coordinator=registry.is_coordinator(caller_id)
    )


@workers_bp.post('')
@require_auth
@validate_json(RegisterWorkerRequest)
def register_worker(payload: RegisterWorkerRequest, caller: CallerContext):
    """
    Register the caller as a relief worker.

    Registering again replaces the record and resets the mission count.
    """
    with tracer.start_as_current_span(
        "domain.registry.register_relief_worker",
        attributes={"caller.id": caller.caller_id}
    ):
        current_app.registry.register_relief_worker(
            caller.caller_id, payload.name, payload.skills, payload.location
        )

    logger.info(
        "Relief worker registered",
        extra={"worker_id": caller.caller_id, "skills": payload.skills, "location": payload.location}
    )
    return jsonify(_worker_response(caller.caller_id, caller.caller_id))


@workers_bp.get('/<worker_id>')
@optional_auth
def get_worker(caller, path: WorkerPath):
    worker_id = path.worker_id
    caller_id = caller.caller_id if caller else None
    return jsonify(_worker_response(worker_id, caller_id))


@workers_bp.post('/<worker_id>/assignments')
@require_auth
@validate_json(AssignWorkerRequest)
def assign_worker(payload: AssignWorkerRequest, caller: CallerContext, path: WorkerPath):
    """Deploy an available worker to an active disaster. Coordinator only."""
    worker_id = path.worker_id
    with tracer.start_as_current_span(
        "domain.registry.assign_worker_to_disaster",
        attributes={
            "caller.id": caller.caller_id,
            "worker.id": worker_id,
            "disaster.id": payload.disaster_id
        }
    ):
        current_app.registry.assign_worker_to_disaster(caller.caller_id, worker_id, payload.disaster_id)

    logger.info(
        "Worker assigned",
        extra={"worker_id": worker_id, "disaster_id": payload.disaster_id, "caller_id": caller.caller_id}
    )
    return jsonify(_worker_response(worker_id, caller.caller_id))


@workers_bp.post('/<worker_id>/complete')
@require_auth
def complete_mission(caller: CallerContext, path: WorkerPath):
    worker_id = path.worker_id
    with tracer.start_as_current_span(
        "domain.registry.complete_mission",
        attributes={"caller.id": caller.caller_id, "worker.id": worker_id}
    ):
        current_app.registry.complete_mission(caller.caller_id, worker_id)

    logger.info(
        "Mission completed",
        extra={"worker_id": worker_id, "caller_id": caller.caller_id}
    )
    return jsonify(_worker_response(worker_id, caller.caller_id))
