"""Part-request service layer (the lifecycle engine).

All commands are staff-only, run in one transaction and record exactly one
audit event.  ``create_part_request`` and ``set_status`` also publish a
domain event addressed to the customer; the notification handler decides
whether it becomes an outbox entry.

Status changes are deliberately unconstrained: any of the five statuses can
be set from any status, so an operator can correct a mistake.  Each change
appends a timeline entry.  There is no row lock, so two concurrent changes
both keep their timeline entry and the later write wins on ``status``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import CustomerCapability
from modules.accounts.policies import ensure_customer_access, require_actor, require_staff
from modules.audit.constants import EntityType, EventType
from modules.customers.exceptions import CustomerNotFound
from modules.part_requests.constants import PartRequestStatus
from modules.part_requests.events import PartRequestCreated, PartRequestStatusChanged
from modules.part_requests.exceptions import (
    InvalidPartRequestStatus,
    PartRequestNotFound,
    VehicleCustomerMismatch,
)
from modules.part_requests.models import PartRequest, PartRequestQuerySet
from modules.parts.exceptions import PartNotFound
from modules.vehicles.exceptions import VehicleNotFound

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.audit.services import AuditService
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.part_requests.dtos import (
        CreatePartRequestDTO,
        RequestedItemDTO,
        UpdatePartRequestDTO,
    )
    from modules.part_requests.repositories.interfaces import IPartRequestRepository
    from modules.parts.repositories.interfaces import IPartRepository
    from modules.vehicles.repositories.interfaces import IVehicleRepository

logger = structlog.get_logger(__name__)


class PartRequestService:
    def __init__(
        self,
        repository: IPartRequestRepository,
        customer_repository: ICustomerRepository,
        vehicle_repository: IVehicleRepository,
        part_repository: IPartRepository,
        audit_service: AuditService,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._repo = repository
        self._customer_repo = customer_repository
        self._vehicle_repo = vehicle_repository
        self._part_repo = part_repository
        self._audit = audit_service
        self._clock = clock

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_part_request(self, actor: AppUser | None, dto: CreatePartRequestDTO) -> PartRequest:
        """Create a request in ``DA_ORDINARE`` with a one-entry timeline.

        Raises:
            CustomerNotFound / VehicleNotFound / PartNotFound: a reference is missing.
            VehicleCustomerMismatch: the vehicle belongs to another customer.
        """
        actor = require_staff(actor)
        log = logger.bind(customer_id=str(dto.customer_id), vehicle_id=str(dto.vehicle_id))

        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if customer is None:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        vehicle = self._vehicle_repo.get_by_id(str(dto.vehicle_id))
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {dto.vehicle_id} not found.")
        if vehicle.customer_id != customer.id:
            log.warning("part_request.vehicle_customer_mismatch")
            raise VehicleCustomerMismatch(
                "The vehicle does not belong to the selected customer.", attr="vehicle_id"
            )
        items = self._snapshot_items(dto.items)

        part_request = self._repo.save(
            PartRequest(
                customer=customer,
                vehicle=vehicle,
                status=PartRequestStatus.DA_ORDINARE,
                supplier=dto.supplier,
                notes=dto.notes,
            )
        )
        self._repo.replace_items(part_request, items)
        self._repo.append_status_change(
            part_request, PartRequestStatus.DA_ORDINARE, self._clock(), actor
        )

        self._audit.record(
            EventType.PART_REQUEST_CREATED,
            EntityType.PART_REQUEST,
            part_request.id,
            {"customer_id": customer.id, "vehicle_id": vehicle.id, "item_count": len(items)},
            actor,
        )
        part_request.add_domain_event(
            PartRequestCreated(
                aggregate_id=part_request.id,
                customer_id=customer.id,
                notification_data={
                    "status": part_request.status,
                    "request_id": part_request.id,
                    "customer_name": customer.display_name,
                    "vehicle_plate": vehicle.plate,
                },
            )
        )
        self._repo.save(part_request)

        log.info("part_request.created", part_request_id=str(part_request.id), item_count=len(items))
        return self._repo.get_by_id(str(part_request.id)) or part_request

    @transaction.atomic
    def set_status(self, actor: AppUser | None, id: str, new_status: str) -> PartRequest:
        """Move the request to *new_status* (any of the five) and append to the timeline.

        Raises:
            InvalidPartRequestStatus: *new_status* is not a known status.
            PartRequestNotFound: the request does not exist.
        """
        actor = require_staff(actor)
        if new_status not in PartRequestStatus.values:
            raise InvalidPartRequestStatus(f"Unknown status: {new_status}.", attr="status")
        part_request = self._get(id)

        old_status = part_request.status
        self._repo.append_status_change(part_request, new_status, self._clock(), actor)
        part_request.status = new_status
        self._audit.record(
            EventType.PART_REQUEST_STATUS_CHANGED,
            EntityType.PART_REQUEST,
            part_request.id,
            {"old_status": old_status, "new_status": new_status},
            actor,
        )
        part_request.add_domain_event(
            PartRequestStatusChanged(
                aggregate_id=part_request.id,
                customer_id=part_request.customer_id,
                old_status=old_status,
                new_status=new_status,
                notification_data={
                    "old_status": old_status,
                    "new_status": new_status,
                    "request_id": part_request.id,
                    "customer_name": part_request.customer.display_name,
                    "vehicle_plate": part_request.vehicle.plate,
                },
            )
        )
        self._repo.save(part_request)

        logger.info(
            "part_request.status_changed",
            part_request_id=str(part_request.id),
            old_status=old_status,
            new_status=new_status,
            terminal=part_request.is_terminal,
        )
        return self._repo.get_by_id(str(part_request.id)) or part_request

    @transaction.atomic
    def update_part_request(
        self, actor: AppUser | None, id: str, dto: UpdatePartRequestDTO
    ) -> PartRequest:
        """Patch supplied fields; supplied items replace the whole list.

        Status and timeline are never touched here.
        """
        actor = require_staff(actor)
        part_request = self._get(id)
        changes: Dict[str, Any] = dto.changes()
        patch: Dict[str, Any] = dict(changes)

        if dto.items is not None:
            kept = {
                str(item.part_id): (item.unit_price_snapshot, item.unit_cost_snapshot)
                for item in part_request.items.all()
                if item.part_id is not None
            }
            items = self._snapshot_items(dto.items, kept)
            self._repo.replace_items(part_request, items)
            patch["items"] = items

        for field, value in changes.items():
            setattr(part_request, field, value)
        if changes:
            self._repo.save(part_request)

        self._audit.record(
            EventType.PART_REQUEST_UPDATED, EntityType.PART_REQUEST, part_request.id, patch, actor
        )
        logger.info(
            "part_request.updated",
            part_request_id=str(part_request.id),
            fields=sorted(patch),
        )
        return self._repo.get_by_id(str(part_request.id)) or part_request

    @transaction.atomic
    def remove_part_request(self, actor: AppUser | None, id: str) -> None:
        """Hard delete (administrative override, no referential check)."""
        actor = require_staff(actor)
        part_request = self._get(id)
        final_status = part_request.status

        self._repo.delete(id)
        self._audit.record(
            EventType.PART_REQUEST_DELETED,
            EntityType.PART_REQUEST,
            part_request.id,
            {"status": final_status},
            actor,
        )
        logger.info("part_request.removed", part_request_id=str(id), status=final_status)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_part_request(self, actor: AppUser | None, id: str) -> PartRequest:
        """Clients may read requests of their own customer when parts are shared."""
        actor = require_actor(actor)
        part_request = self._get(id)
        ensure_customer_access(actor, part_request.customer, CustomerCapability.PARTS)
        return part_request

    def list_part_requests(
        self,
        actor: AppUser | None,
        status: Optional[str] = None,
        customer_id: Optional[UUID | str] = None,
        search: Optional[str] = None,
    ) -> PartRequestQuerySet:
        """Staff see every request; a client only its own customer's.

        The customer filter is ignored for clients.  A client without a
        linked customer gets an empty list; one whose customer does not
        share parts is rejected.
        """
        actor = require_actor(actor)
        filters: Dict[str, Any] = {}

        if actor.is_client:
            customer = None
            if actor.customer_id is not None:
                customer = self._customer_repo.get_by_id(str(actor.customer_id))
            if customer is None:
                return self._repo.list({"pk__in": []})
            ensure_customer_access(actor, customer, CustomerCapability.PARTS)
            filters["customer_id"] = customer.id
        elif customer_id:
            filters["customer_id"] = customer_id

        if status:
            if status not in PartRequestStatus.values:
                raise InvalidPartRequestStatus(f"Unknown status: {status}.", attr="status")
            filters["status"] = status

        return self._repo.list(filters, search=search or None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, id: str) -> PartRequest:
        part_request = self._repo.get_by_id(id)
        if part_request is None:
            raise PartRequestNotFound(f"Part request {id} not found.")
        return part_request

    def _snapshot_items(
        self,
        items: List[RequestedItemDTO],
        kept: Optional[Dict[str, Tuple[Any, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        """Resolve catalog parts and freeze their price and cost.

        Values supplied by the caller win.  Otherwise a part already on the
        request keeps its stored snapshot (*kept*, keyed by part id) and only
        parts new to the request read the current catalog values.
        """
        kept = kept or {}
        parts = self._part_repo.get_many(item.part_id for item in items if item.part_id)
        rows: List[Dict[str, Any]] = []
        for item in items:
            price, cost = item.unit_price_snapshot, item.unit_cost_snapshot
            if item.part_id is not None:
                part = parts.get(str(item.part_id))
                if part is None:
                    raise PartNotFound(f"Part {item.part_id} not found.", attr="items")
                kept_price, kept_cost = kept.get(
                    str(item.part_id), (part.unit_price, part.unit_cost)
                )
                if price is None:
                    price = kept_price
                if cost is None:
                    cost = kept_cost
            rows.append(
                {
                    "part_id": item.part_id,
                    "free_text_name": item.free_text_name or "",
                    "quantity": item.quantity,
                    "unit_price_snapshot": price,
                    "unit_cost_snapshot": cost,
                }
            )
        return rows
