"""Unit tests for PartRequestPresenter.

Covers:
- Enrichment: part names, sentinels for missing/custom parts, customer and
  vehicle labels, timeline user names.
- Role shaping: clients never see supplier, notes, costs or workflow hints.
"""

from __future__ import annotations

import pytest

from modules.accounts.constants import UNKNOWN_USER_LABEL
from modules.part_requests.constants import (
    CUSTOM_PART_LABEL,
    PART_NOT_FOUND_LABEL,
    PartRequestStatus,
)
from modules.part_requests.dtos import CreatePartRequestDTO
from modules.part_requests.models import PartRequestItem, PartRequestStatusChange
from modules.part_requests.presenters import PartRequestPresenter, resolve_part_name
from modules.part_requests.repositories.django_repository import PartRequestDjangoRepository
from modules.parts.repositories.django_repository import PartDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def presenter():
    return PartRequestPresenter(PartDjangoRepository())


@pytest.fixture()
def part_request(part_request_service, staff_user, customer, vehicle, part):
    return part_request_service.create_part_request(
        staff_user,
        CreatePartRequestDTO(
            customer_id=customer.id,
            vehicle_id=vehicle.id,
            items=[
                {"part_id": part.id, "quantity": 2},
                {"free_text_name": "Tappo serbatoio", "quantity": 1},
            ],
            supplier="Bosch",
            notes="Margine ridotto",
        ),
    )


class TestResolvePartName:
    def test_catalog_name(self, part):
        item = PartRequestItem(part_id=part.id, quantity=1)
        assert resolve_part_name(item, {str(part.id): "Filtro olio"}) == "Filtro olio"

    def test_missing_catalog_part(self, part):
        item = PartRequestItem(part_id=part.id, quantity=1)
        assert resolve_part_name(item, {}) == PART_NOT_FOUND_LABEL

    def test_free_text(self):
        item = PartRequestItem(free_text_name="Tappo serbatoio", quantity=1)
        assert resolve_part_name(item, {}) == "Tappo serbatoio"

    def test_custom_part_fallback(self):
        item = PartRequestItem(free_text_name="", quantity=1)
        assert resolve_part_name(item, {}) == CUSTOM_PART_LABEL


class TestStaffShape:
    def test_enriched_document(self, presenter, part_request, staff_user):
        data = presenter.present(part_request, staff_user)

        assert data["customer_name"] == "Giuseppe Ferrari"
        assert data["customer_email"] == "giuseppe.ferrari@email.it"
        assert data["vehicle_plate"] == "AB123CD"
        assert data["vehicle_make_model"] == "Fiat Panda"
        assert data["status"] == PartRequestStatus.DA_ORDINARE
        assert data["status_label"] == "Da ordinare"
        assert data["suggested_next_statuses"] == ["ORDINATO", "ANNULLATO"]
        assert data["supplier"] == "Bosch"
        assert [item["part_name"] for item in data["items"]] == ["Filtro olio", "Tappo serbatoio"]
        assert data["items"][0]["unit_cost_snapshot"] == "8.50"
        assert data["timeline"][0]["user_name"] == "Luca Bianchi"

    def test_list_shape_has_no_contact_details(self, presenter, part_request, staff_user):
        [data] = presenter.present_many([part_request], staff_user)
        assert data["customer_email"] is None
        assert data["customer_phone"] is None

    def test_deleted_catalog_part_uses_sentinel(self, presenter, part_request, part, staff_user):
        part.delete()
        data = presenter.present(part_request, staff_user)
        assert data["items"][0]["part_name"] == PART_NOT_FOUND_LABEL

    def test_removed_user_uses_sentinel(self, presenter, part_request, staff_user):
        PartRequestStatusChange.objects.filter(part_request=part_request).update(by_user=None)
        reloaded = PartRequestDjangoRepository().get_by_id(str(part_request.id))

        [entry] = presenter.present(reloaded, staff_user)["timeline"]
        assert entry["by_user_id"] is None
        assert entry["user_name"] == UNKNOWN_USER_LABEL

    def test_terminal_request_offers_no_next_status(
        self, presenter, part_request, part_request_service, staff_user
    ):
        pr = part_request_service.set_status(
            staff_user, str(part_request.id), PartRequestStatus.CONSEGNATO
        )
        assert presenter.present(pr, staff_user)["suggested_next_statuses"] == []


class TestClientShape:
    def test_internal_fields_hidden(self, presenter, part_request, client_user):
        data = presenter.present(part_request, client_user)

        assert "supplier" not in data
        assert "notes" not in data
        assert "suggested_next_statuses" not in data
        assert all("unit_cost_snapshot" not in item for item in data["items"])
        assert data["items"][0]["unit_price_snapshot"] == "15.00"
        assert data["status_label"] == "Da ordinare"
        assert len(data["timeline"]) == 1

    def test_many_hides_fields_too(self, presenter, part_request, client_user):
        [data] = presenter.present_many([part_request], client_user)
        assert "supplier" not in data
