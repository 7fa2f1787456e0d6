# SPDX-License-Identifier: Apache-2.0

"""
Relief resource endpoints: declarative donations of goods.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
import logging

from ..models.entities import CallerContext
from ..models.requests import AllocateResourceRequest, ResourcePath
from ..middleware.auth import require_auth
from ..middleware.validation import validate_json

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

resources_tag = Tag(name="Resources", description="Declared donations of relief goods")
resources_bp = APIBlueprint(
    'resources',
    __name__,
    url_prefix='/api/resources',
    abp_tags=[resources_tag]
)


def _resource_response(resource_id: int):
    resource = current_app.registry.get_resource(resource_id)
    return current_app.hal_formatter.format_resource(resource.model_dump(mode="json"))


@resources_bp.post('')
@require_auth
@validate_json(AllocateResourceRequest)
def allocate_resource(payload: AllocateResourceRequest, caller: CallerContext):
    """Record a donation of goods to an active disaster."""
    with tracer.start_as_current_span(
        "domain.registry.allocate_resource",
        attributes={"caller.id": caller.caller_id, "disaster.id": payload.disaster_id}
    ) as span:
        resource_id = current_app.registry.allocate_resource(
            caller.caller_id, payload.disaster_id, payload.resource_type, payload.quantity, payload.location
        )
        span.set_attribute("resource.id", resource_id)

    logger.info(
        "Resource donated",
        extra={
            "resource_id": resource_id,
            "disaster_id": payload.disaster_id,
            "caller_id": caller.caller_id,
            "resource_type": payload.resource_type,
            "quantity": payload.quantity
        }
    )

    response = jsonify(_resource_response(resource_id))
    response.status_code = 201
    response.headers['Location'] = f"/api/resources/{resource_id}"
    return response


@resources_bp.get('/available')
def list_available_resources():
    # Every resource ever donated; nothing removes ids from this list
    ids = current_app.registry.get_available_resources()
    return jsonify(current_app.hal_formatter.format_id_list(
        "available_resources", ids, "/api/resources/available", "/api/resources/{id}"
    ))


@resources_bp.get('/<int:resource_id>')
def get_resource(path: ResourcePath):
    resource_id = path.resource_id
    return jsonify(_resource_response(resource_id))
