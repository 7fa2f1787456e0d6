# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
HAL (Hypertext Application Language) response formatting utilities.
Links on registry records advertise only the actions the caller can take in the
record's current state.
"""

from typing import Dict, List, Any, Optional
from urllib.parse import urljoin, urlencode
import math

from ..models.responses import HalLink

PROBLEM_BASE_URI = "https://api.relief-registry.org/problems/"


class HalLinkBuilder:
    """Builder for HAL links with proper URL construction."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/') + '/'

    def build_link(
        self,
        path: str,
        method: str = "GET",
        content_type: Optional[str] = None,
        title: Optional[str] = None
    ) -> HalLink:
        """Build a HAL link with proper URL construction."""
        href = urljoin(self.base_url, path.lstrip('/'))

        return HalLink(
            href=href,
            method=method,
            type=content_type,
            title=title
        )

    def build_self_link(self, resource_path: str) -> HalLink:
        return self.build_link(resource_path, title="Self")

    def build_action_link(
        self,
        resource_path: str,
        action: str,
        title: Optional[str] = None
    ) -> HalLink:
        """Build a POST action link below a resource."""
        return self.build_link(
            f"{resource_path}/{action}",
            method="POST",
            content_type="application/json",
            title=title or action.title()
        )


class PaginationLinkBuilder:
    """Builder for pagination links in HAL collections."""

    def __init__(self, base_url: str):
        self.link_builder = HalLinkBuilder(base_url)

    def build_pagination_links(
        self,
        base_path: str,
        current_page: int,
        total_pages: int,
        page_size: int,
        query_params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, HalLink]:
        """Build pagination links for a collection."""
        params = {k: v for k, v in (query_params or {}).items() if v is not None}

        def page_link(page: int, title: str) -> HalLink:
            query = urlencode({**params, 'page': page, 'page_size': page_size})
            return self.link_builder.build_link(f"{base_path}?{query}", title=title)

        links = {'self': page_link(current_page, "Current page")}
        if current_page > 1:
            links['first'] = page_link(1, "First page")
            links['prev'] = page_link(current_page - 1, "Previous page")
        if current_page < total_pages:
            links['next'] = page_link(current_page + 1, "Next page")
            links['last'] = page_link(total_pages, "Last page")
        return links


class AffordanceLinkBuilder:
    """Builder for conditional affordance links based on caller role and record state."""

    def __init__(self, base_url: str):
        self.link_builder = HalLinkBuilder(base_url)

    def build_disaster_affordances(
        self,
        disaster: Dict[str, Any],
        is_coordinator: bool
    ) -> Dict[str, HalLink]:
        base_path = f"/api/disasters/{disaster['id']}"
        links = {
            'self': self.link_builder.build_self_link(base_path),
            'workers': self.link_builder.build_link(f"{base_path}/workers", title="Assigned workers"),
            'active': self.link_builder.build_link("/api/disasters/active", title="Active disasters")
        }

        if disaster.get('is_active'):
            links['donate'] = self.link_builder.build_action_link(
                base_path, "donations", title="Donate funds"
            )
            links['donate-resource'] = self.link_builder.build_link(
                "/api/resources",
                method="POST",
                content_type="application/json",
                title="Donate relief goods"
            )

        if is_coordinator:
            if disaster.get('funds_allocated', 0) < disaster.get('funds_raised', 0):
                links['allocate'] = self.link_builder.build_action_link(
                    base_path, "allocations", title="Allocate funds"
                )
            if disaster.get('funds_disbursed', 0) < disaster.get('funds_allocated', 0):
                links['disburse'] = self.link_builder.build_action_link(
                    base_path, "disbursements", title="Disburse funds"
                )
            if disaster.get('is_active'):
                links['close'] = self.link_builder.build_action_link(
                    base_path, "close", title="Close disaster"
                )

        return links

    def build_worker_affordances(
        self,
        worker: Dict[str, Any],
        is_coordinator: bool
    ) -> Dict[str, HalLink]:
        base_path = f"/api/workers/{worker['worker_id']}"
        links = {'self': self.link_builder.build_self_link(base_path)}

        if is_coordinator:
            if worker.get('is_available'):
                links['assign'] = self.link_builder.build_action_link(
                    base_path, "assignments", title="Assign to disaster"
                )
            else:
                links['complete'] = self.link_builder.build_action_link(
                    base_path, "complete", title="Complete mission"
                )

        return links

    def build_resource_affordances(self, resource: Dict[str, Any]) -> Dict[str, HalLink]:
        return {
            'self': self.link_builder.build_self_link(f"/api/resources/{resource['id']}"),
            'disaster': self.link_builder.build_link(
                f"/api/disasters/{resource['disaster_id']}", title="Disaster"
            )
        }


def _dump_links(links: Dict[str, HalLink]) -> Dict[str, Any]:
    return {rel: link.model_dump(exclude_none=True) for rel, link in links.items()}


class HalResponseBuilder:
    """Main HAL response builder."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.link_builder = HalLinkBuilder(base_url)
        self.pagination_builder = PaginationLinkBuilder(base_url)
        self.affordance_builder = AffordanceLinkBuilder(base_url)

    def build_resource_response(self, data: Dict[str, Any], links: Dict[str, HalLink]) -> Dict[str, Any]:
        response = dict(data)
        response['_links'] = _dump_links(links)
        return response

    def build_collection_response(
        self,
        items: List[Any],
        total: int,
        page: int,
        page_size: int,
        collection_path: str,
        query_params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build a HAL collection response with pagination links."""
        total_pages = max(1, math.ceil(total / page_size)) if page_size > 0 else 1

        pagination_links = self.pagination_builder.build_pagination_links(
            collection_path,
            page,
            total_pages,
            page_size,
            query_params
        )

        return {
            'total': total,
            'page': page,
            'page_size': page_size,
            'total_pages': total_pages,
            '_links': _dump_links(pagination_links),
            '_embedded': {
                'items': items
            }
        }

    def build_error_response(
        self,
        error_type: str,
        title: str,
        status: int,
        detail: str,
        instance: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Build RFC 7807 compliant error response with HAL links."""
        error_response = {
            'type': f"{PROBLEM_BASE_URI}{error_type}",
            'title': title,
            'status': status,
            'detail': detail,
            'instance': instance
        }

        if validation_errors:
            error_response['errors'] = validation_errors

        links = {
            'help': self.link_builder.build_link(
                f"/docs/errors#{error_type}",
                title="Error documentation"
            )
        }
        if error_type == "validation-error":
            links['schema'] = self.link_builder.build_link("/openapi/openapi.json", title="API schema")

        error_response['_links'] = _dump_links(links)
        return error_response


class HalFormatter:
    """High-level HAL formatter with convenience methods."""

    def __init__(self, base_url: str):
        self.builder = HalResponseBuilder(base_url)

    def format_disaster(self, disaster: Dict[str, Any], is_coordinator: bool = False) -> Dict[str, Any]:
        links = self.builder.affordance_builder.build_disaster_affordances(disaster, is_coordinator)
        return self.builder.build_resource_response(disaster, links)

    def format_worker(self, worker: Dict[str, Any], is_coordinator: bool = False) -> Dict[str, Any]:
        links = self.builder.affordance_builder.build_worker_affordances(worker, is_coordinator)
        return self.builder.build_resource_response(worker, links)

    def format_resource(self, resource: Dict[str, Any]) -> Dict[str, Any]:
        links = self.builder.affordance_builder.build_resource_affordances(resource)
        return self.builder.build_resource_response(resource, links)

    def format_id_list(
        self,
        key: str,
        ids: List[Any],
        collection_path: str,
        item_path: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format a plain enumeration of ids, e.g. the active disaster list.

        Args:
            key: Name of the id list in the response body
            ids: Ids in registry order
            collection_path: Path of the enumeration itself
            item_path: Path template with an ``{id}`` placeholder for item links
        """
        link_builder = self.builder.link_builder
        links = {'self': link_builder.build_self_link(collection_path)}
        response = {key: list(ids), 'count': len(ids), '_links': _dump_links(links)}
        if item_path:
            response['_links']['items'] = [
                link_builder.build_link(item_path.format(id=item_id)).model_dump(exclude_none=True)
                for item_id in ids
            ]
        return response

    def format_collection(
        self,
        items: List[Dict[str, Any]],
        total: int,
        page: int,
        page_size: int,
        collection_path: str,
        filters: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return self.builder.build_collection_response(
            items, total, page, page_size, collection_path, filters
        )

    def format_error(self, error_type: str, title: str, status: int, detail: str, instance: str) -> Dict[str, Any]:
        return self.builder.build_error_response(error_type, title, status, detail, instance)

    def format_validation_error(
        self,
        detail: str,
        instance: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Format a validation error response."""
        return self.builder.build_error_response(
            "validation-error",
            "Validation Error",
            400,
            detail,
            instance,
            validation_errors
        )

    def format_authentication_error(self, detail: str, instance: str) -> Dict[str, Any]:
        return self.builder.build_error_response(
            "authentication-required",
            "Authentication Required",
            401,
            detail,
            instance
        )

    def format_not_found_error(self, detail: str, instance: str) -> Dict[str, Any]:
        return self.builder.build_error_response(
            "resource-not-found",
            "Resource Not Found",
            404,
            detail,
            instance
        )

    def format_server_error(self, detail: str, instance: str) -> Dict[str, Any]:
        return self.builder.build_error_response(
            "internal-server-error",
            "Internal Server Error",
            500,
            detail,
            instance
        )


def create_hal_formatter(base_url: str) -> HalFormatter:
    """Create a HAL formatter instance."""
    return HalFormatter(base_url)
