# SPDX-License-Identifier: Apache-2.0

"""
Relief registry domain logic.

The registry is the single owner of all relief state: disasters, donated
resources, registered workers, the disaster to worker relation, per-disaster
fund accounting and the custodial balance. Operations are applied one at a time
under one lock, and listeners are notified before the lock is released. Each
operation checks every precondition before its first write, so a failed call
leaves no trace and emits nothing.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Any

from ..models.base import utc_now
from ..models.entities import DisasterEvent, ReliefResource, ReliefWorker, RegistryEvent
from ..models.enums import RegistryEventType, AuditAction, AuditEntity
from .authorization import CoordinatorPolicy
from .errors import (
    ValidationError, InvalidAmount, InvalidDisaster, NotRegistered, NotAvailable,
    AlreadyAvailable, AlreadyClosed, InsufficientFunds, RecordNotFound
)

logger = logging.getLogger(__name__)

MIN_SEVERITY = 1
MAX_SEVERITY = 10


@dataclass
class RegistryChange:
    """A committed state change, handed to change listeners such as the audit trail."""
    caller: str
    entity: AuditEntity
    entity_id: str
    action: AuditAction
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None


@dataclass
class RegistryState:
    """Every collection the registry owns."""
    disasters: Dict[int, DisasterEvent] = field(default_factory=dict)
    resources: Dict[int, ReliefResource] = field(default_factory=dict)
    workers: Dict[str, ReliefWorker] = field(default_factory=dict)
    disaster_workers: Dict[int, List[str]] = field(default_factory=dict)
    active_disasters: List[int] = field(default_factory=list)
    # Append-only: ids stay even though nothing ever marks a resource unavailable.
    available_resources: List[int] = field(default_factory=list)
    next_disaster_id: int = 1
    next_resource_id: int = 1
    balance: int = 0
    events: List[RegistryEvent] = field(default_factory=list)


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty", field=field_name)
    return value


def _require_positive(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer", field=field_name)
    return value


def _require_amount(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidAmount()
    return value


def _dump(record) -> Dict[str, Any]:
    return record.model_dump(mode="json")


class ReliefRegistry:
    """
    The relief registry aggregate.

    Args:
        coordinator: Identity allowed to run coordinator-only operations
        clock: Source of record timestamps (defaults to the UTC wall clock)
    """

    def __init__(self, coordinator: str, clock: Callable[[], datetime] = utc_now):
        self._policy = CoordinatorPolicy(coordinator)
        self._clock = clock
        self._lock = threading.RLock()
        self._state = RegistryState()
        self._event_listeners: List[Callable[[RegistryEvent], None]] = []
        self._change_listeners: List[Callable[[RegistryChange], None]] = []

    # ---------------- Listeners ----------------
    def add_event_listener(self, listener: Callable[[RegistryEvent], None]) -> None:
        """Call ``listener`` with every event after it is journaled."""
        self._event_listeners.append(listener)

    def add_change_listener(self, listener: Callable[[RegistryChange], None]) -> None:
        """Call ``listener`` with every committed state change."""
        self._change_listeners.append(listener)

    def _journal(self, event_type: RegistryEventType, payload: Dict[str, Any]) -> RegistryEvent:
        event = RegistryEvent(
            sequence=len(self._state.events) + 1,
            event_type=event_type,
            payload=payload,
            emitted_at=self._clock()
        )
        self._state.events.append(event)
        return event

    def _dispatch(self, event: Optional[RegistryEvent], change: RegistryChange) -> None:
        # Runs with the lock held so listeners see operations in commit order.
        # State is already written; a failing listener is logged and never
        # undoes the operation.
        for listener in self._change_listeners:
            try:
                listener(change)
            except Exception:
                logger.exception(
                    "Registry change listener failed",
                    extra={"action": change.action, "entity_id": change.entity_id}
                )
        if event is None:
            return
        for listener in self._event_listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Registry event listener failed",
                    extra={"event_type": event.event_type, "sequence": event.sequence}
                )

    # ---------------- Lookups (lock held) ----------------
    def _in_range(self, disaster_id: Any) -> bool:
        return (
            isinstance(disaster_id, int)
            and not isinstance(disaster_id, bool)
            and 1 <= disaster_id < self._state.next_disaster_id
        )

    def _disaster_in_range(self, disaster_id: Any) -> DisasterEvent:
        if not self._in_range(disaster_id):
            raise InvalidDisaster(f"Disaster {disaster_id} does not exist")
        return self._state.disasters[disaster_id]

    def _active_disaster(self, disaster_id: Any) -> DisasterEvent:
        disaster = self._disaster_in_range(disaster_id)
        if not disaster.is_active:
            raise InvalidDisaster(f"Disaster {disaster_id} is not active")
        return disaster

    def _registered_worker(self, worker_id: Any) -> ReliefWorker:
        worker = self._state.workers.get(worker_id)
        if worker is None:
            raise NotRegistered(f"Worker {worker_id} is not registered")
        return worker

    # ---------------- Disasters ----------------
    def report_disaster(self, caller: str, location: str, disaster_type: str, severity: int) -> int:
        """Report a new disaster and return its id. Open to any caller."""
        with self._lock:
            location = _require_text(location, "location")
            disaster_type = _require_text(disaster_type, "disaster_type")
            if (isinstance(severity, bool) or not isinstance(severity, int)
                    or not MIN_SEVERITY <= severity <= MAX_SEVERITY):
                raise ValidationError(
                    f"severity must be between {MIN_SEVERITY} and {MAX_SEVERITY}",
                    field="severity"
                )

            disaster_id = self._state.next_disaster_id
            disaster = DisasterEvent(
                id=disaster_id,
                location=location,
                disaster_type=disaster_type,
                severity=severity,
                created_at=self._clock(),
                reporter=caller
            )
            self._state.disasters[disaster_id] = disaster
            self._state.active_disasters.append(disaster_id)
            self._state.next_disaster_id += 1

            event = self._journal(RegistryEventType.DISASTER_REPORTED, {
                "disaster_id": disaster_id,
                "location": location,
                "disaster_type": disaster_type,
                "severity": severity
            })
            change = RegistryChange(
                caller, AuditEntity.DISASTER, str(disaster_id),
                AuditAction.REPORT_DISASTER, after=_dump(disaster)
            )
            self._dispatch(event, change)
        return disaster_id

    def close_disaster(self, caller: str, disaster_id: int) -> None:
        """
        Deactivate a disaster. Coordinator only.

        The id leaves the active list by swap-and-pop: the last active id takes
        its slot, so the order of the remaining ids is not preserved.
        """
        with self._lock:
            self._policy.require(caller)
            disaster = self._disaster_in_range(disaster_id)
            if not disaster.is_active:
                raise AlreadyClosed(f"Disaster {disaster_id} is already closed")

            before = _dump(disaster)
            disaster.is_active = False
            active = self._state.active_disasters
            index = active.index(disaster_id)
            active[index] = active[-1]
            active.pop()

            change = RegistryChange(
                caller, AuditEntity.DISASTER, str(disaster_id),
                AuditAction.CLOSE_DISASTER, before=before, after=_dump(disaster)
            )
            self._dispatch(None, change)

    # ---------------- Resources ----------------
    def allocate_resource(
        self,
        caller: str,
        disaster_id: int,
        resource_type: str,
        quantity: int,
        location: str
    ) -> int:
        """
        Record a donation of goods to an active disaster and return its id.

        Declarative only: nothing is reserved or deducted anywhere.
        """
        with self._lock:
            self._active_disaster(disaster_id)
            quantity = _require_positive(quantity, "quantity")
            resource_type = _require_text(resource_type, "resource_type")
            location = _require_text(location, "location")

            resource_id = self._state.next_resource_id
            resource = ReliefResource(
                id=resource_id,
                disaster_id=disaster_id,
                resource_type=resource_type,
                quantity=quantity,
                location=location,
                provider=caller,
                created_at=self._clock()
            )
            self._state.resources[resource_id] = resource
            self._state.available_resources.append(resource_id)
            self._state.next_resource_id += 1

            event = self._journal(RegistryEventType.RESOURCE_DONATED, {
                "resource_id": resource_id,
                "disaster_id": disaster_id,
                "resource_type": resource_type,
                "quantity": quantity
            })
            change = RegistryChange(
                caller, AuditEntity.RESOURCE, str(resource_id),
                AuditAction.ALLOCATE_RESOURCE, after=_dump(resource)
            )
            self._dispatch(event, change)
        return resource_id

    # ---------------- Workers ----------------
    def register_relief_worker(self, caller: str, name: str, skills: str, location: str) -> None:
        """
        Register the caller as a relief worker.

        Re-registering replaces the previous record: the worker becomes
        available again and the completed mission count starts over at zero.
        Existing entries in disaster worker lists are left alone.
        """
        with self._lock:
            name = _require_text(name, "name")
            skills = _require_text(skills, "skills")
            location = _require_text(location, "location")
            _require_text(caller, "worker_id")

            previous = self._state.workers.get(caller)
            worker = ReliefWorker(
                worker_id=caller,
                name=name,
                skills=skills,
                location=location,
                registered_at=self._clock()
            )
            self._state.workers[caller] = worker

            change = RegistryChange(
                caller, AuditEntity.WORKER, caller, AuditAction.REGISTER_WORKER,
                before=_dump(previous) if previous else None, after=_dump(worker)
            )
            self._dispatch(None, change)

    def assign_worker_to_disaster(self, caller: str, worker_id: str, disaster_id: int) -> None:
        """Deploy an available worker to an active disaster. Coordinator only."""
        with self._lock:
            self._policy.require(caller)
            worker = self._registered_worker(worker_id)
            if not worker.is_available:
                raise NotAvailable(f"Worker {worker_id} is already assigned")
            self._active_disaster(disaster_id)

            before = _dump(worker)
            self._state.disaster_workers.setdefault(disaster_id, []).append(worker_id)
            worker.is_available = False

            event = self._journal(RegistryEventType.WORKER_ASSIGNED, {
                "worker_id": worker_id,
                "disaster_id": disaster_id
            })
            change = RegistryChange(
                caller, AuditEntity.WORKER, worker_id, AuditAction.ASSIGN_WORKER,
                before=before, after=_dump(worker)
            )
            self._dispatch(event, change)

    def complete_mission(self, caller: str, worker_id: str) -> None:
        """
        Release an assigned worker and count the mission. Coordinator only.

        The worker stays in the disaster's worker list as a historical record.
        """
        with self._lock:
            self._policy.require(caller)
            worker = self._registered_worker(worker_id)
            if worker.is_available:
                raise AlreadyAvailable(f"Worker {worker_id} is not on a mission")

            before = _dump(worker)
            worker.is_available = True
            worker.completed_missions += 1

            change = RegistryChange(
                caller, AuditEntity.WORKER, worker_id, AuditAction.COMPLETE_MISSION,
                before=before, after=_dump(worker)
            )
            self._dispatch(None, change)

    # ---------------- Funds ----------------
    def donate_funds(self, caller: str, disaster_id: int, amount: int) -> None:
        """Attach money to an active disaster. The registry keeps custody of it."""
        with self._lock:
            amount = _require_amount(amount)
            disaster = self._active_disaster(disaster_id)

            before = _dump(disaster)
            disaster.funds_raised += amount
            self._state.balance += amount

            event = self._journal(RegistryEventType.FUNDS_RECEIVED, {
                "disaster_id": disaster_id,
                "amount": amount,
                "donor": caller
            })
            change = RegistryChange(
                caller, AuditEntity.DISASTER, str(disaster_id), AuditAction.DONATE_FUNDS,
                before=before, after=_dump(disaster)
            )
            self._dispatch(event, change)

    def allocate_funds(self, caller: str, disaster_id: int, amount: int, purpose: str = "") -> None:
        """
        Earmark raised funds for a purpose. Coordinator only.

        Bookkeeping only: no value leaves the registry.
        """
        with self._lock:
            self._policy.require(caller)
            amount = _require_amount(amount)
            disaster = self._disaster_in_range(disaster_id)
            if disaster.funds_allocated + amount > disaster.funds_raised:
                raise InsufficientFunds(
                    f"Cannot allocate {amount}: only {disaster.unallocated_funds} "
                    f"of disaster {disaster_id} is unallocated"
                )

            before = _dump(disaster)
            disaster.funds_allocated += amount

            event = self._journal(RegistryEventType.FUNDS_ALLOCATED, {
                "disaster_id": disaster_id,
                "amount": amount,
                "purpose": purpose or ""
            })
            change = RegistryChange(
                caller, AuditEntity.DISASTER, str(disaster_id), AuditAction.ALLOCATE_FUNDS,
                before=before, after=_dump(disaster)
            )
            self._dispatch(event, change)

    def disburse_funds(self, caller: str, disaster_id: int, amount: int, recipient: str) -> None:
        """
        Pay out allocated funds to a recipient. Coordinator only.

        Bounded by what has been allocated and not yet disbursed. Lowers the
        custodial balance; moving the value to the recipient happens outside.
        """
        with self._lock:
            self._policy.require(caller)
            amount = _require_amount(amount)
            recipient = _require_text(recipient, "recipient")
            disaster = self._disaster_in_range(disaster_id)
            remaining = disaster.funds_allocated - disaster.funds_disbursed
            if amount > remaining:
                raise InsufficientFunds(
                    f"Cannot disburse {amount}: only {remaining} of disaster "
                    f"{disaster_id} is allocated and not yet disbursed"
                )

            before = _dump(disaster)
            disaster.funds_disbursed += amount
            self._state.balance -= amount

            event = self._journal(RegistryEventType.FUNDS_DISBURSED, {
                "disaster_id": disaster_id,
                "amount": amount,
                "recipient": recipient
            })
            change = RegistryChange(
                caller, AuditEntity.DISASTER, str(disaster_id), AuditAction.DISBURSE_FUNDS,
                before=before, after=_dump(disaster)
            )
            self._dispatch(event, change)

    # ---------------- Queries ----------------
    @property
    def coordinator(self) -> str:
        return self._policy.coordinator

    @property
    def next_disaster_id(self) -> int:
        with self._lock:
            return self._state.next_disaster_id

    @property
    def next_resource_id(self) -> int:
        with self._lock:
            return self._state.next_resource_id

    def is_coordinator(self, caller: Optional[str]) -> bool:
        return self._policy.is_coordinator(caller)

    def get_active_disasters(self) -> List[int]:
        with self._lock:
            return list(self._state.active_disasters)

    def get_disaster_workers(self, disaster_id: int) -> List[str]:
        """Worker identities ever assigned to a disaster, in assignment order."""
        with self._lock:
            return list(self._state.disaster_workers.get(disaster_id, []))

    def get_available_resources(self) -> List[int]:
        with self._lock:
            return list(self._state.available_resources)

    def get_contract_balance(self) -> int:
        """Value held by the registry: donations minus disbursements."""
        with self._lock:
            return self._state.balance

    def get_summary(self) -> Dict[str, Any]:
        """Registry-wide counters read in one consistent snapshot."""
        with self._lock:
            return {
                "coordinator": self.coordinator,
                "next_disaster_id": self._state.next_disaster_id,
                "next_resource_id": self._state.next_resource_id,
                "balance": self._state.balance,
                "active_disasters": len(self._state.active_disasters)
            }

    def get_disaster(self, disaster_id: int) -> DisasterEvent:
        with self._lock:
            disaster = self._state.disasters.get(disaster_id)
            if disaster is None:
                raise RecordNotFound(f"Disaster {disaster_id} not found")
            return disaster.snapshot()

    def get_resource(self, resource_id: int) -> ReliefResource:
        with self._lock:
            resource = self._state.resources.get(resource_id)
            if resource is None:
                raise RecordNotFound(f"Resource {resource_id} not found")
            return resource.snapshot()

    def get_worker(self, worker_id: str) -> ReliefWorker:
        with self._lock:
            worker = self._state.workers.get(worker_id)
            if worker is None:
                raise RecordNotFound(f"Worker {worker_id} not found")
            return worker.snapshot()

    def get_events(self, since: int = 0) -> List[RegistryEvent]:
        """Journaled events with a sequence number greater than ``since``."""
        with self._lock:
            return [e.model_copy(deep=True) for e in self._state.events if e.sequence > since]
