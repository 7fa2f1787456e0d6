"""
Relief workflow acceptance tests.

End-to-end workflows over the HTTP API plus the business rules the registry
must hold across whole sequences of operations.
"""

import pytest

from relief_api.app import create_app
from relief_api.domain.registry import ReliefRegistry
from relief_api.domain.errors import InsufficientFunds, NotAvailable, AlreadyClosed

COORDINATOR = "ops-coordinator"
WORKER = "worker-w"


@pytest.fixture
def api():
    app = create_app({
        'TESTING': True,
        'ENVIRONMENT': 'test',
        'COORDINATOR_ID': COORDINATOR,
        'JWT_SECRET_KEY': 'acceptance-secret',
        'AMQP_ENABLED': False,
        'OTEL_ENABLED': False,
    })
    client = app.test_client()

    def headers(identity):
        token = app.auth_service.issue_token(identity)["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return app, client, headers


class TestFundAccountingWorkflow:
    """Report, fund, allocate and close a disaster."""

    def test_townsville_flood(self, api):
        app, client, headers = api
        reporter = headers("citizen")
        coordinator = headers(COORDINATOR)

        response = client.post('/api/disasters', json={
            "location": "Townsville", "disaster_type": "flood", "severity": 7
        }, headers=reporter)
        assert response.get_json()["id"] == 1
        assert client.get('/api/disasters/active').get_json()["active_disasters"] == [1]

        response = client.post('/api/disasters/1/donations', json={"amount": 100}, headers=reporter)
        assert response.get_json()["funds_raised"] == 100

        response = client.post(
            '/api/disasters/1/allocations', json={"amount": 60, "purpose": "shelter kits"}, headers=coordinator
        )
        assert response.get_json()["funds_allocated"] == 60

        response = client.post(
            '/api/disasters/1/allocations', json={"amount": 50, "purpose": "food"}, headers=coordinator
        )
        assert response.status_code == 409
        disaster = client.get('/api/disasters/1').get_json()
        assert (disaster["funds_raised"], disaster["funds_allocated"]) == (100, 60)

        response = client.post(
            '/api/disasters/1/allocations', json={"amount": 40, "purpose": "food"}, headers=coordinator
        )
        assert response.get_json()["funds_allocated"] == 100

        assert client.post('/api/disasters/1/close', headers=coordinator).status_code == 200
        assert client.get('/api/disasters/active').get_json()["active_disasters"] == []

        event_types = [e["event_type"] for e in client.get('/api/registry/events').get_json()["events"]]
        assert event_types == ["disaster_reported", "funds_received", "funds_allocated", "funds_allocated"]


class TestWorkerDeploymentWorkflow:
    """Register, deploy, release and redeploy a worker."""

    def test_worker_redeployment(self, api):
        app, client, headers = api
        worker = headers(WORKER)
        coordinator = headers(COORDINATOR)
        client.post('/api/disasters', json={
            "location": "Townsville", "disaster_type": "flood", "severity": 7
        }, headers=worker)

        response = client.post('/api/workers', json={
            "name": "W", "skills": "medical", "location": "Townsville"
        }, headers=worker)
        assert response.get_json()["is_available"] is True

        response = client.post(f'/api/workers/{WORKER}/assignments', json={"disaster_id": 1}, headers=coordinator)
        assert response.get_json()["is_available"] is False
        assert client.get('/api/disasters/1/workers').get_json()["workers"] == [WORKER]

        response = client.post(f'/api/workers/{WORKER}/complete', headers=coordinator)
        data = response.get_json()
        assert data["is_available"] is True
        assert data["completed_missions"] == 1

        response = client.post(f'/api/workers/{WORKER}/assignments', json={"disaster_id": 1}, headers=coordinator)
        assert response.status_code == 200
        assert client.get('/api/disasters/1/workers').get_json()["workers"] == [WORKER, WORKER]


class TestRegistryBusinessRules:
    """Rules that hold across sequences of registry operations."""

    def setup_method(self):
        self.registry = ReliefRegistry(COORDINATOR)

    def report(self, count):
        return [self.registry.report_disaster("citizen", "Townsville", "flood", 5) for _ in range(count)]

    def test_ids_increase_and_appear_active(self):
        ids = self.report(5)

        assert ids == [1, 2, 3, 4, 5]
        assert sorted(self.registry.get_active_disasters()) == ids

    def test_allocation_never_exceeds_donations(self):
        self.report(1)
        operations = [
            ("donate", 30), ("allocate", 20), ("allocate", 20), ("donate", 15),
            ("allocate", 25), ("allocate", 1), ("donate", 1), ("allocate", 1)
        ]

        for kind, amount in operations:
            before = self.registry.get_disaster(1)
            try:
                if kind == "donate":
                    self.registry.donate_funds("donor", 1, amount)
                else:
                    self.registry.allocate_funds(COORDINATOR, 1, amount, "supplies")
            except InsufficientFunds:
                after = self.registry.get_disaster(1)
                assert (after.funds_raised, after.funds_allocated) == (before.funds_raised, before.funds_allocated)

            disaster = self.registry.get_disaster(1)
            assert disaster.funds_allocated <= disaster.funds_raised

        final = self.registry.get_disaster(1)
        assert (final.funds_raised, final.funds_allocated) == (46, 46)

    def test_double_assignment_requires_completion(self):
        self.report(2)
        self.registry.register_relief_worker(WORKER, "W", "medical", "Townsville")
        self.registry.assign_worker_to_disaster(COORDINATOR, WORKER, 1)

        with pytest.raises(NotAvailable):
            self.registry.assign_worker_to_disaster(COORDINATOR, WORKER, 2)

    def test_closing_first_of_several_uses_swap_and_pop(self):
        self.report(4)

        self.registry.close_disaster(COORDINATOR, 1)

        assert self.registry.get_active_disasters() == [4, 2, 3]
        with pytest.raises(AlreadyClosed):
            self.registry.close_disaster(COORDINATOR, 1)
        assert 1 not in self.registry.get_active_disasters()

    def test_reregistration_resets_assigned_worker(self):
        self.report(1)
        self.registry.register_relief_worker(WORKER, "W", "medical", "Townsville")
        self.registry.assign_worker_to_disaster(COORDINATOR, WORKER, 1)

        self.registry.register_relief_worker(WORKER, "W", "medical", "Townsville")

        worker = self.registry.get_worker(WORKER)
        assert worker.is_available is True
        assert worker.completed_missions == 0

    def test_resource_availability_is_never_consumed(self):
        """Known gap: nothing marks a donated resource unavailable or prunes the list."""
        self.report(1)
        resource_id = self.registry.allocate_resource("donor", 1, "water", 10, "Depot")
        self.registry.register_relief_worker(WORKER, "W", "medical", "Townsville")
        self.registry.assign_worker_to_disaster(COORDINATOR, WORKER, 1)
        self.registry.close_disaster(COORDINATOR, 1)

        assert self.registry.get_available_resources() == [resource_id]
        assert self.registry.get_resource(resource_id).is_available is True
