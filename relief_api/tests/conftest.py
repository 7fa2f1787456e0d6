# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import datetime, timedelta, timezone

from relief_api.app import create_app
from relief_api.domain.registry import ReliefRegistry

# Set test environment
os.environ['ENVIRONMENT'] = 'test'

COORDINATOR = "coordinator-1"
TEST_SECRET = "test-secret-key"


class FixedClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def coordinator():
    return COORDINATOR


@pytest.fixture
def registry(clock):
    """Fresh registry owned by the test coordinator."""
    return ReliefRegistry(COORDINATOR, clock=clock)


@pytest.fixture
def app(clock):
    """Application with tracing and AMQP publishing disabled."""
    return create_app({
        'TESTING': True,
        'ENVIRONMENT': 'test',
        'COORDINATOR_ID': COORDINATOR,
        'JWT_SECRET_KEY': TEST_SECRET,
        'BASE_URL': 'http://localhost:5000',
        'AMQP_ENABLED': False,
        'OTEL_ENABLED': False,
        'DOCS_ENABLED': True,
    }, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Factory returning bearer headers for an identity."""
    def make_headers(identity: str):
        token = app.auth_service.issue_token(identity)["access_token"]
        return {"Authorization": f"Bearer {token}"}
    return make_headers


@pytest.fixture
def coordinator_headers(auth_headers):
    return auth_headers(COORDINATOR)


@pytest.fixture
def sample_disaster_data():
    """Sample disaster report."""
    return {
        "location": "Porto Alegre",
        "disaster_type": "flood",
        "severity": 8
    }


@pytest.fixture
def sample_worker_data():
    """Sample worker registration."""
    return {
        "name": "Alice",
        "skills": "medic",
        "location": "Canoas"
    }
