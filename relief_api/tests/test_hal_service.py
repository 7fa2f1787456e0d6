# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for HAL response formatting utilities.
"""

import pytest

from relief_api.services.hal import (
    HalLinkBuilder, PaginationLinkBuilder, AffordanceLinkBuilder, HalFormatter,
    create_hal_formatter
)
from relief_api.models.responses import HalLink

BASE = "https://api.example.com"


def disaster_data(**overrides):
    data = {
        "id": 3,
        "location": "Recife",
        "disaster_type": "flood",
        "severity": 6,
        "is_active": True,
        "funds_raised": 0,
        "funds_allocated": 0,
        "funds_disbursed": 0
    }
    data.update(overrides)
    return data


class TestHalLinkBuilder:
    """Test HAL link builder functionality."""

    def test_build_basic_link(self):
        link = HalLinkBuilder(BASE).build_link("/api/disasters/3")

        assert isinstance(link, HalLink)
        assert link.href == "https://api.example.com/api/disasters/3"
        assert link.method == "GET"
        assert link.type is None

    def test_trailing_slash_in_base(self):
        link = HalLinkBuilder(BASE + "/").build_link("/api/registry")

        assert link.href == "https://api.example.com/api/registry"

    def test_build_action_link(self):
        link = HalLinkBuilder(BASE).build_action_link("/api/disasters/3", "close", title="Close disaster")

        assert link.href == "https://api.example.com/api/disasters/3/close"
        assert link.method == "POST"
        assert link.type == "application/json"
        assert link.title == "Close disaster"


class TestPaginationLinkBuilder:
    """Test pagination link generation."""

    def test_middle_page(self):
        links = PaginationLinkBuilder(BASE).build_pagination_links(
            "/api/registry/audit", current_page=2, total_pages=3, page_size=10,
            query_params={"entity": "worker", "action": None}
        )

        assert set(links) == {"self", "first", "prev", "next", "last"}
        assert links["next"].href == "https://api.example.com/api/registry/audit?entity=worker&page=3&page_size=10"
        assert "action" not in links["self"].href

    def test_single_page(self):
        links = PaginationLinkBuilder(BASE).build_pagination_links(
            "/api/registry/audit", current_page=1, total_pages=1, page_size=20
        )

        assert set(links) == {"self"}


class TestAffordanceLinkBuilder:
    """Test state- and role-dependent links."""

    def setup_method(self):
        self.builder = AffordanceLinkBuilder(BASE)

    def test_active_disaster_for_public_caller(self):
        links = self.builder.build_disaster_affordances(disaster_data(), is_coordinator=False)

        assert "donate" in links
        assert "donate-resource" in links
        assert "close" not in links
        assert "allocate" not in links

    def test_active_disaster_for_coordinator(self):
        links = self.builder.build_disaster_affordances(
            disaster_data(funds_raised=100, funds_allocated=40), is_coordinator=True
        )

        assert links["close"].href.endswith("/api/disasters/3/close")
        assert links["allocate"].href.endswith("/api/disasters/3/allocations")
        assert links["disburse"].href.endswith("/api/disasters/3/disbursements")

    def test_fully_allocated_disaster_has_no_allocate_link(self):
        links = self.builder.build_disaster_affordances(
            disaster_data(funds_raised=100, funds_allocated=100, funds_disbursed=100), is_coordinator=True
        )

        assert "allocate" not in links
        assert "disburse" not in links

    def test_closed_disaster(self):
        links = self.builder.build_disaster_affordances(
            disaster_data(is_active=False, funds_raised=50), is_coordinator=True
        )

        assert "donate" not in links
        assert "close" not in links
        # Raised funds can still be earmarked after closure
        assert "allocate" in links

    def test_worker_links(self):
        available = self.builder.build_worker_affordances(
            {"worker_id": "alice", "is_available": True}, is_coordinator=True
        )
        assigned = self.builder.build_worker_affordances(
            {"worker_id": "alice", "is_available": False}, is_coordinator=True
        )
        public = self.builder.build_worker_affordances(
            {"worker_id": "alice", "is_available": True}, is_coordinator=False
        )

        assert "assign" in available and "complete" not in available
        assert "complete" in assigned and "assign" not in assigned
        assert set(public) == {"self"}


class TestHalFormatter:
    """Test high-level formatting."""

    def setup_method(self):
        self.formatter = create_hal_formatter(BASE)

    def test_factory(self):
        assert isinstance(self.formatter, HalFormatter)

    def test_format_disaster_keeps_fields(self):
        response = self.formatter.format_disaster(disaster_data())

        assert response["id"] == 3
        assert response["_links"]["self"]["href"] == "https://api.example.com/api/disasters/3"
        assert "type" not in response["_links"]["self"]

    def test_format_id_list(self):
        response = self.formatter.format_id_list(
            "active_disasters", [1, 4], "/api/disasters/active", "/api/disasters/{id}"
        )

        assert response["active_disasters"] == [1, 4]
        assert response["count"] == 2
        assert [link["href"] for link in response["_links"]["items"]] == [
            "https://api.example.com/api/disasters/1",
            "https://api.example.com/api/disasters/4"
        ]

    def test_format_collection(self):
        response = self.formatter.format_collection([{"id": "a"}], 41, 1, 20, "/api/registry/audit")

        assert response["total_pages"] == 3
        assert response["_embedded"]["items"] == [{"id": "a"}]
        assert "next" in response["_links"]

    def test_validation_error(self):
        response = self.formatter.format_validation_error(
            "Request validation failed", "/api/disasters", [{"field": "severity"}]
        )

        assert response["type"] == "https://api.relief-registry.org/problems/validation-error"
        assert response["status"] == 400
        assert response["errors"] == [{"field": "severity"}]
        assert "schema" in response["_links"]

    @pytest.mark.parametrize("method,status", [
        ("format_authentication_error", 401),
        ("format_not_found_error", 404),
        ("format_server_error", 500),
    ])
    def test_problem_documents(self, method, status):
        response = getattr(self.formatter, method)("detail", "/api/x")

        assert response["status"] == status
        assert response["instance"] == "/api/x"
        assert response["detail"] == "detail"
