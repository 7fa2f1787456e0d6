# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for Pydantic models.
"""

import pytest
from datetime import datetime
from pydantic import ValidationError

from relief_api.models.entities import (
    DisasterEvent, ReliefResource, ReliefWorker, RegistryEvent, AuditLog
)
from relief_api.models.enums import RegistryEventType, AuditAction, AuditEntity
from relief_api.models.requests import (
    ReportDisasterRequest, AllocateFundsRequest, DonateFundsRequest, AuditQuery, EventQuery
)


class TestDisasterEventModel:
    """Test DisasterEvent model validation."""

    def test_valid_disaster(self):
        disaster = DisasterEvent(
            id=1,
            location="Porto Alegre",
            disaster_type="flood",
            severity=8,
            reporter="alice"
        )

        assert disaster.is_active is True
        assert disaster.funds_raised == 0
        assert isinstance(disaster.created_at, datetime)
        assert disaster.created_at.tzinfo is not None

    @pytest.mark.parametrize("severity", [0, 11])
    def test_severity_range(self, severity):
        with pytest.raises(ValidationError):
            DisasterEvent(id=1, location="x", disaster_type="y", severity=severity, reporter="a")

    def test_zero_id_rejected(self):
        with pytest.raises(ValidationError):
            DisasterEvent(id=0, location="x", disaster_type="y", severity=3, reporter="a")

    def test_allocated_cannot_exceed_raised(self):
        with pytest.raises(ValidationError) as exc_info:
            DisasterEvent(
                id=1, location="x", disaster_type="y", severity=3, reporter="a",
                funds_raised=10, funds_allocated=11
            )

        assert "funds_allocated cannot exceed funds_raised" in str(exc_info.value)

    def test_assignment_is_validated(self):
        disaster = DisasterEvent(id=1, location="x", disaster_type="y", severity=3, reporter="a")

        with pytest.raises(ValidationError):
            disaster.funds_allocated = 5

    def test_unallocated_funds(self):
        disaster = DisasterEvent(
            id=1, location="x", disaster_type="y", severity=3, reporter="a",
            funds_raised=100, funds_allocated=30
        )

        assert disaster.unallocated_funds == 70


class TestResourceAndWorkerModels:
    """Test ReliefResource and ReliefWorker defaults."""

    def test_resource_defaults_available(self):
        resource = ReliefResource(
            id=1, disaster_id=1, resource_type="water", quantity=5, location="Depot", provider="bob"
        )

        assert resource.is_available is True

    def test_resource_quantity_positive(self):
        with pytest.raises(ValidationError):
            ReliefResource(
                id=1, disaster_id=1, resource_type="water", quantity=0, location="Depot", provider="bob"
            )

    def test_worker_defaults(self):
        worker = ReliefWorker(worker_id="alice", name="Alice", skills="medic", location="Canoas")

        assert worker.is_available is True
        assert worker.completed_missions == 0

    def test_snapshot_is_detached(self):
        worker = ReliefWorker(worker_id="alice", name="Alice", skills="medic", location="Canoas")

        copy = worker.snapshot()
        copy.completed_missions = 3

        assert worker.completed_missions == 0


class TestEventAndAuditModels:
    """Test journal and audit models."""

    def test_event_type_stored_as_value(self):
        event = RegistryEvent(sequence=1, event_type=RegistryEventType.FUNDS_RECEIVED, payload={"amount": 5})

        assert event.event_type == "funds_received"
        assert event.model_dump(mode="json")["event_type"] == "funds_received"

    def test_audit_log_ids_unique(self):
        first = AuditLog(
            caller_id="a", entity=AuditEntity.DISASTER, entity_id="1", action=AuditAction.REPORT_DISASTER
        )
        second = AuditLog(
            caller_id="a", entity=AuditEntity.DISASTER, entity_id="1", action=AuditAction.REPORT_DISASTER
        )

        assert first.id != second.id
        assert first.entity == "disaster"


class TestRequestModels:
    """Test request body shape validation."""

    def test_text_is_kept_as_given(self):
        request = ReportDisasterRequest(location="  Recife ", disaster_type="flood ", severity=4)

        assert request.location == "  Recife "
        assert request.disaster_type == "flood "

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            ReportDisasterRequest(location="Recife", severity=4)

    def test_amount_must_be_integer(self):
        with pytest.raises(ValidationError):
            DonateFundsRequest(amount="lots")

    def test_purpose_optional(self):
        assert AllocateFundsRequest(amount=5).purpose == ""

    def test_audit_query_defaults_and_bounds(self):
        query = AuditQuery()
        assert query.page == 1
        assert query.page_size == 20

        with pytest.raises(ValidationError):
            AuditQuery(page_size=101)

    def test_audit_query_enum_filter(self):
        assert AuditQuery(entity="worker").entity == "worker"

        with pytest.raises(ValidationError):
            AuditQuery(entity="planet")

    def test_event_query_since_non_negative(self):
        with pytest.raises(ValidationError):
            EventQuery(since=-1)
