"""Unit tests for PartRequestService (the lifecycle engine).

Covers:
- create_part_request: initial status and timeline, snapshots, reference
  checks, vehicle/customer mismatch, staff-only.
- set_status: timeline growth, unconstrained targets, unknown status.
- update_part_request: patch semantics, item replacement, status untouched.
- remove_part_request: hard delete with audit of the final status.
- get/list: client scoping and the can_view_parts gate.
- Conditional notification enqueue on create and set_status.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from modules.accounts.constants import Role
from modules.accounts.dtos import SetRoleDTO
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.services import UserService
from modules.audit.constants import EntityType, EventType
from modules.audit.models import Event
from modules.core.exceptions import Unauthorized
from modules.customers.exceptions import CustomerNotFound
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.notifications.constants import Channel, NotificationStatus, TemplateKey
from modules.notifications.models import NotificationOutbox
from modules.part_requests.constants import PartRequestStatus
from modules.part_requests.dtos import CreatePartRequestDTO, UpdatePartRequestDTO
from modules.part_requests.exceptions import (
    InvalidPartRequestStatus,
    PartRequestNotFound,
    VehicleCustomerMismatch,
)
from modules.part_requests.models import PartRequest
from modules.part_requests.repositories.django_repository import PartRequestDjangoRepository
from modules.part_requests.services import PartRequestService
from modules.parts.exceptions import PartNotFound
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.vehicles.exceptions import VehicleNotFound
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service(part_request_service):
    return part_request_service


def _create_dto(customer, vehicle, part=None, **overrides) -> CreatePartRequestDTO:
    items = [{"part_id": part.id, "quantity": 2}] if part else [
        {"free_text_name": "Specchietto retrovisore", "quantity": 1}
    ]
    data = {"customer_id": customer.id, "vehicle_id": vehicle.id, "items": items}
    data.update(overrides)
    return CreatePartRequestDTO(**data)


@pytest.fixture()
def part_request(service, staff_user, customer, vehicle, part):
    return service.create_part_request(staff_user, _create_dto(customer, vehicle, part))


# ===========================================================================
# Lifecycle
# ===========================================================================


class TestLifecycle:
    def test_create_then_order_then_cancel(self, service, staff_user, customer, vehicle, part):
        pr = service.create_part_request(staff_user, _create_dto(customer, vehicle, part))
        assert pr.status == PartRequestStatus.DA_ORDINARE
        assert [entry.status for entry in pr.timeline.all()] == [PartRequestStatus.DA_ORDINARE]

        pr = service.set_status(staff_user, str(pr.id), PartRequestStatus.ORDINATO)
        timeline = list(pr.timeline.all())
        assert len(timeline) == 2
        assert timeline[-1].status == PartRequestStatus.ORDINATO

        pr = service.set_status(staff_user, str(pr.id), PartRequestStatus.ANNULLATO)
        assert pr.status == PartRequestStatus.ANNULLATO
        assert pr.timeline.count() == 3
        assert service.get_part_request(staff_user, str(pr.id)).id == pr.id

    def test_timeline_length_is_one_plus_status_changes(self, service, staff_user, part_request):
        targets = [
            PartRequestStatus.ORDINATO,
            PartRequestStatus.ARRIVATO,
            PartRequestStatus.CONSEGNATO,
            PartRequestStatus.ARRIVATO,
        ]
        for target in targets:
            service.set_status(staff_user, str(part_request.id), target)

        pr = service.get_part_request(staff_user, str(part_request.id))
        timeline = list(pr.timeline.all())
        assert len(timeline) == 1 + len(targets)
        assert [entry.sequence for entry in timeline] == [1, 2, 3, 4, 5]
        assert [entry.status for entry in timeline[1:]] == targets

    def test_earlier_timeline_entries_are_untouched(self, service, staff_user, admin_user, part_request):
        first = part_request.timeline.get()
        service.set_status(admin_user, str(part_request.id), PartRequestStatus.ORDINATO)

        first.refresh_from_db()
        assert first.status == PartRequestStatus.DA_ORDINARE
        assert first.by_user_id == staff_user.id

    def test_terminal_status_can_be_corrected(self, service, staff_user, part_request):
        service.set_status(staff_user, str(part_request.id), PartRequestStatus.CONSEGNATO)
        pr = service.set_status(staff_user, str(part_request.id), PartRequestStatus.DA_ORDINARE)

        assert pr.status == PartRequestStatus.DA_ORDINARE
        assert pr.is_terminal is False

    def test_timeline_records_the_clock(self, staff_user, customer, vehicle, part, audit_service):
        fixed = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
        service = PartRequestService(
            repository=PartRequestDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            vehicle_repository=VehicleDjangoRepository(),
            part_repository=PartDjangoRepository(),
            audit_service=audit_service,
            clock=lambda: fixed,
        )
        pr = service.create_part_request(staff_user, _create_dto(customer, vehicle, part))

        assert pr.timeline.get().at == fixed


# ===========================================================================
# create_part_request
# ===========================================================================


class TestCreatePartRequest:
    def test_snapshots_catalog_price_and_cost(self, part_request, part):
        item = part_request.items.get()
        assert item.part_id == part.id
        assert item.quantity == 2
        assert item.unit_price_snapshot == Decimal("15.00")
        assert item.unit_cost_snapshot == Decimal("8.50")

    def test_snapshot_survives_catalog_price_change(self, service, staff_user, part_request, part):
        part.unit_price = Decimal("99.00")
        part.save()

        pr = service.get_part_request(staff_user, str(part_request.id))
        assert pr.items.get().unit_price_snapshot == Decimal("15.00")

    def test_supplied_snapshot_wins_over_catalog(self, service, staff_user, customer, vehicle, part):
        dto = _create_dto(
            customer,
            vehicle,
            items=[{"part_id": part.id, "quantity": 1, "unit_price_snapshot": "12.00"}],
        )
        pr = service.create_part_request(staff_user, dto)

        item = pr.items.get()
        assert item.unit_price_snapshot == Decimal("12.00")
        assert item.unit_cost_snapshot == Decimal("8.50")

    def test_free_text_item_has_no_snapshot(self, service, staff_user, customer, vehicle):
        pr = service.create_part_request(staff_user, _create_dto(customer, vehicle))

        item = pr.items.get()
        assert item.part_id is None
        assert item.free_text_name == "Specchietto retrovisore"
        assert item.unit_price_snapshot is None

    def test_items_keep_their_order(self, service, staff_user, customer, vehicle, part):
        dto = _create_dto(
            customer,
            vehicle,
            items=[
                {"free_text_name": "Tergicristallo", "quantity": 2},
                {"part_id": part.id, "quantity": 1},
            ],
        )
        pr = service.create_part_request(staff_user, dto)

        assert [(item.position, item.free_text_name) for item in pr.items.all()] == [
            (1, "Tergicristallo"),
            (2, ""),
        ]

    def test_writes_one_audit_event(self, part_request, staff_user):
        events = Event.objects.filter(
            entity_type=EntityType.PART_REQUEST, entity_id=str(part_request.id)
        )
        assert events.count() == 1
        event = events.get()
        assert event.type == EventType.PART_REQUEST_CREATED
        assert event.actor == staff_user
        assert event.payload["item_count"] == 1

    def test_vehicle_of_another_customer_is_rejected(
        self, service, staff_user, customer, other_vehicle, part
    ):
        with pytest.raises(VehicleCustomerMismatch) as exc_info:
            service.create_part_request(staff_user, _create_dto(customer, other_vehicle, part))

        assert exc_info.value.attr == "vehicle_id"
        assert PartRequest.objects.count() == 0
        assert Event.objects.count() == 0

    def test_unknown_customer(self, service, staff_user, vehicle, part):
        dto = CreatePartRequestDTO(
            customer_id=uuid4(),
            vehicle_id=vehicle.id,
            items=[{"part_id": part.id, "quantity": 1}],
        )
        with pytest.raises(CustomerNotFound):
            service.create_part_request(staff_user, dto)

    def test_unknown_vehicle(self, service, staff_user, customer, part):
        dto = CreatePartRequestDTO(
            customer_id=customer.id,
            vehicle_id=uuid4(),
            items=[{"part_id": part.id, "quantity": 1}],
        )
        with pytest.raises(VehicleNotFound):
            service.create_part_request(staff_user, dto)

    def test_unknown_catalog_part_writes_nothing(self, service, staff_user, customer, vehicle):
        dto = _create_dto(customer, vehicle, items=[{"part_id": uuid4(), "quantity": 1}])
        with pytest.raises(PartNotFound):
            service.create_part_request(staff_user, dto)

        assert PartRequest.objects.count() == 0

    def test_client_cannot_create(self, service, client_user, customer, vehicle, part):
        with pytest.raises(Unauthorized):
            service.create_part_request(client_user, _create_dto(customer, vehicle, part))

    def test_anonymous_cannot_create(self, service, customer, vehicle, part):
        with pytest.raises(Unauthorized):
            service.create_part_request(None, _create_dto(customer, vehicle, part))


# ===========================================================================
# set_status
# ===========================================================================


class TestSetStatus:
    def test_audit_event_carries_old_and_new_status(self, service, admin_user, part_request):
        service.set_status(admin_user, str(part_request.id), PartRequestStatus.ORDINATO)

        event = Event.objects.get(type=EventType.PART_REQUEST_STATUS_CHANGED)
        assert event.payload == {
            "old_status": PartRequestStatus.DA_ORDINARE,
            "new_status": PartRequestStatus.ORDINATO,
        }
        assert event.actor == admin_user

    def test_unknown_status_is_rejected(self, service, staff_user, part_request):
        with pytest.raises(InvalidPartRequestStatus):
            service.set_status(staff_user, str(part_request.id), "SPEDITO")

        assert part_request.timeline.count() == 1

    def test_missing_request(self, service, staff_user):
        with pytest.raises(PartRequestNotFound):
            service.set_status(staff_user, str(uuid4()), PartRequestStatus.ORDINATO)

    def test_client_cannot_change_status(self, service, client_user, part_request):
        with pytest.raises(Unauthorized):
            service.set_status(client_user, str(part_request.id), PartRequestStatus.ORDINATO)

        part_request.refresh_from_db()
        assert part_request.status == PartRequestStatus.DA_ORDINARE


# ===========================================================================
# update_part_request
# ===========================================================================


class TestUpdatePartRequest:
    def test_patches_only_supplied_fields(self, service, staff_user, customer, vehicle, part):
        pr = service.create_part_request(
            staff_user, _create_dto(customer, vehicle, part, supplier="Bosch", notes="Urgente")
        )
        pr = service.update_part_request(staff_user, str(pr.id), UpdatePartRequestDTO(notes=""))

        assert pr.notes == ""
        assert pr.supplier == "Bosch"

    def test_items_replace_the_whole_list(self, service, staff_user, part_request):
        dto = UpdatePartRequestDTO(items=[{"free_text_name": "Cinghia", "quantity": 3}])
        pr = service.update_part_request(staff_user, str(part_request.id), dto)

        items = list(pr.items.all())
        assert len(items) == 1
        assert items[0].free_text_name == "Cinghia"
        assert items[0].quantity == 3

    def test_status_and_timeline_untouched(self, service, staff_user, part_request):
        service.set_status(staff_user, str(part_request.id), PartRequestStatus.ORDINATO)
        pr = service.update_part_request(
            staff_user, str(part_request.id), UpdatePartRequestDTO(supplier="Mann")
        )

        assert pr.status == PartRequestStatus.ORDINATO
        assert pr.timeline.count() == 2

    def test_audit_payload_is_the_patch(self, service, staff_user, part_request):
        service.update_part_request(
            staff_user, str(part_request.id), UpdatePartRequestDTO(supplier="Mann")
        )

        event = Event.objects.get(type=EventType.PART_REQUEST_UPDATED)
        assert event.payload == {"supplier": "Mann"}

    def test_unknown_part_in_new_items_keeps_old_items(self, service, staff_user, part_request):
        dto = UpdatePartRequestDTO(items=[{"part_id": uuid4(), "quantity": 1}])
        with pytest.raises(PartNotFound):
            service.update_part_request(staff_user, str(part_request.id), dto)

        assert part_request.items.count() == 1

    def test_kept_part_keeps_its_price_snapshot(self, service, staff_user, part_request, part):
        part.unit_price = Decimal("115.00")
        part.unit_cost = Decimal("70.00")
        part.save()

        dto = UpdatePartRequestDTO(items=[{"part_id": part.id, "quantity": 3}])
        pr = service.update_part_request(staff_user, str(part_request.id), dto)

        [item] = pr.items.all()
        assert item.quantity == 3
        assert item.unit_price_snapshot == Decimal("15.00")
        assert item.unit_cost_snapshot == Decimal("8.50")

    def test_part_new_to_the_request_reads_the_catalog(
        self, service, staff_user, customer, vehicle, part
    ):
        pr = service.create_part_request(staff_user, _create_dto(customer, vehicle))
        part.unit_price = Decimal("115.00")
        part.save()

        dto = UpdatePartRequestDTO(items=[{"part_id": part.id, "quantity": 1}])
        pr = service.update_part_request(staff_user, str(pr.id), dto)

        [item] = pr.items.all()
        assert item.unit_price_snapshot == Decimal("115.00")


# ===========================================================================
# remove_part_request
# ===========================================================================


class TestRemovePartRequest:
    def test_deletes_request_items_and_timeline(self, service, staff_user, part_request):
        service.set_status(staff_user, str(part_request.id), PartRequestStatus.ARRIVATO)
        service.remove_part_request(staff_user, str(part_request.id))

        assert not PartRequest.objects.filter(id=part_request.id).exists()
        event = Event.objects.get(type=EventType.PART_REQUEST_DELETED)
        assert event.payload == {"status": PartRequestStatus.ARRIVATO}

    def test_missing_request(self, service, staff_user):
        with pytest.raises(PartRequestNotFound):
            service.remove_part_request(staff_user, str(uuid4()))


# ===========================================================================
# Reads and client scoping
# ===========================================================================


class TestReads:
    def test_client_lists_only_own_requests(
        self, service, staff_user, client_user, part_request, other_customer, other_vehicle
    ):
        service.create_part_request(staff_user, _create_dto(other_customer, other_vehicle))

        listed = service.list_part_requests(client_user, customer_id=other_customer.id)

        assert [pr.id for pr in listed] == [part_request.id]

    def test_client_rejected_when_parts_not_shared(self, service, client_user, customer, part_request):
        customer.can_view_parts = False
        customer.save()

        with pytest.raises(Unauthorized):
            service.list_part_requests(client_user)

    def test_client_without_customer_gets_empty_list(self, service, part_request):
        from modules.accounts.models import AppUser

        orphan = AppUser.objects.create(email="orfano@bensine.it", role=Role.CLIENTE)

        assert list(service.list_part_requests(orphan)) == []

    def test_client_cannot_read_foreign_request(
        self, service, staff_user, client_user, other_customer, other_vehicle
    ):
        foreign = service.create_part_request(
            staff_user, _create_dto(other_customer, other_vehicle)
        )
        with pytest.raises(Unauthorized):
            service.get_part_request(client_user, str(foreign.id))

    def test_staff_filters(self, service, staff_user, part_request, other_customer, other_vehicle):
        other = service.create_part_request(staff_user, _create_dto(other_customer, other_vehicle))
        service.set_status(staff_user, str(other.id), PartRequestStatus.ORDINATO)

        by_status = service.list_part_requests(staff_user, status=PartRequestStatus.ORDINATO)
        by_customer = service.list_part_requests(staff_user, customer_id=part_request.customer_id)
        by_plate = service.list_part_requests(staff_user, search="ef456")
        by_name = service.list_part_requests(staff_user, search="FERRARI")

        assert [pr.id for pr in by_status] == [other.id]
        assert [pr.id for pr in by_customer] == [part_request.id]
        assert [pr.id for pr in by_plate] == [other.id]
        assert [pr.id for pr in by_name] == [part_request.id]

    def test_list_newest_first(self, service, staff_user, part_request, customer, vehicle):
        newer = service.create_part_request(staff_user, _create_dto(customer, vehicle))

        assert [pr.id for pr in service.list_part_requests(staff_user)] == [
            newer.id,
            part_request.id,
        ]

    def test_list_rejects_unknown_status_filter(self, service, staff_user):
        with pytest.raises(InvalidPartRequestStatus):
            service.list_part_requests(staff_user, status="PERSO")

    def test_anonymous_cannot_list(self, service):
        with pytest.raises(Unauthorized):
            service.list_part_requests(None)


# ===========================================================================
# Conditional notifications
# ===========================================================================


class TestNotifications:
    def test_no_notification_without_shared_user(self, service, staff_user, customer, vehicle, part):
        pr = service.create_part_request(staff_user, _create_dto(customer, vehicle, part))
        service.set_status(staff_user, str(pr.id), PartRequestStatus.ORDINATO)

        assert NotificationOutbox.objects.count() == 0

    def test_no_notification_without_capability(
        self, service, staff_user, client_user, customer, vehicle, part
    ):
        customer.can_view_vehicles = False
        customer.can_view_parts = False
        customer.save()

        service.create_part_request(staff_user, _create_dto(customer, vehicle, part))

        assert NotificationOutbox.objects.count() == 0

    def test_create_enqueues_pending_email(self, service, staff_user, client_user, part_request, customer):
        entry = NotificationOutbox.objects.get()
        assert entry.status == NotificationStatus.PENDING
        assert entry.retry_count == 0
        assert entry.channel == Channel.EMAIL
        assert entry.recipient == customer.email
        assert entry.template_key == TemplateKey.PART_REQUEST_CREATED
        assert entry.data["request_id"] == str(part_request.id)
        assert entry.data["vehicle_plate"] == "AB123CD"

    def test_status_change_uses_status_template(self, service, staff_user, client_user, part_request):
        service.set_status(staff_user, str(part_request.id), PartRequestStatus.ARRIVATO)

        entry = NotificationOutbox.objects.get(template_key=TemplateKey.PART_REQUEST_STATUS)
        assert entry.data["old_status"] == PartRequestStatus.DA_ORDINARE
        assert entry.data["new_status"] == PartRequestStatus.ARRIVATO
        assert NotificationOutbox.objects.count() == 2

    def test_documents_only_capability_is_enough(
        self, service, staff_user, client_user, customer, vehicle, part
    ):
        customer.can_view_vehicles = False
        customer.can_view_parts = False
        customer.can_view_documents = True
        customer.save()

        service.create_part_request(staff_user, _create_dto(customer, vehicle, part))

        assert NotificationOutbox.objects.count() == 1

    def test_shared_staff_user_does_not_count(
        self, service, staff_user, customer, vehicle, part
    ):
        customer.shared_with.add(staff_user)

        service.create_part_request(staff_user, _create_dto(customer, vehicle, part))

        assert NotificationOutbox.objects.count() == 0

    def test_demoted_client_stops_notifications(
        self, service, admin_user, staff_user, client_user, customer, vehicle, part
    ):
        users = UserService(UserDjangoRepository(), CustomerDjangoRepository())
        users.set_role(admin_user, str(client_user.id), SetRoleDTO(role=Role.BENZINE))

        service.create_part_request(staff_user, _create_dto(customer, vehicle, part))

        assert not customer.shared_with.exists()
        assert NotificationOutbox.objects.count() == 0
