"""Unit tests for VehicleService.

Covers plate normalisation and uniqueness, tires, client visibility rules,
registration document replacement and the part-request removal guard.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from modules.audit.constants import EventType
from modules.audit.models import Event
from modules.core.exceptions import Unauthorized
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.part_requests.dtos import CreatePartRequestDTO
from modules.vehicles.dtos import CreateVehicleDTO, UpdateVehicleDTO
from modules.vehicles.exceptions import DuplicatePlate, VehicleHasPartRequests
from modules.vehicles.models import Vehicle
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository
from modules.vehicles.services import VehicleService

pytestmark = pytest.mark.unit


@pytest.fixture()
def storage():
    storage = MagicMock()
    storage.save.side_effect = ["uploads/libretto-1.pdf", "uploads/libretto-2.pdf"]
    return storage


@pytest.fixture()
def service(audit_service, storage):
    return VehicleService(
        repository=VehicleDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        audit_service=audit_service,
        storage=storage,
    )


class TestCreateVehicle:
    def test_plate_normalised_and_tires_stored(self, service, staff_user, customer):
        vehicle = service.create_vehicle(
            staff_user,
            CreateVehicleDTO(
                customer_id=customer.id,
                plate=" gh 789 ij ",
                make="Fiat",
                model="500",
                tires={"summer": {"front": {"width": 175, "aspect_ratio": 65, "rim_diameter": 14}}},
            ),
        )

        assert vehicle.plate == "GH789IJ"
        assert vehicle.tires == {
            "summer": {"front": {"width": 175, "aspect_ratio": 65, "rim_diameter": 14}}
        }
        assert Event.objects.filter(type=EventType.VEHICLE_CREATED).count() == 1

    def test_duplicate_plate(self, service, staff_user, customer, vehicle):
        with pytest.raises(DuplicatePlate):
            service.create_vehicle(
                staff_user, CreateVehicleDTO(customer_id=customer.id, plate="ab 123 cd")
            )

    def test_without_tires_defaults_to_empty(self, service, staff_user, customer):
        vehicle = service.create_vehicle(
            staff_user, CreateVehicleDTO(customer_id=customer.id, plate="ZZ000ZZ")
        )
        assert vehicle.tires == {}


class TestUpdateVehicle:
    def test_plate_collision(self, service, staff_user, vehicle, other_vehicle):
        with pytest.raises(DuplicatePlate):
            service.update_vehicle(staff_user, str(vehicle.id), UpdateVehicleDTO(plate="EF456GH"))

    def test_same_plate_is_fine(self, service, staff_user, vehicle):
        updated = service.update_vehicle(
            staff_user, str(vehicle.id), UpdateVehicleDTO(plate="AB123CD", km=50000)
        )
        assert updated.km == 50000


class TestVisibility:
    def test_client_lists_own_vehicles(self, service, client_user, vehicle, other_vehicle):
        assert [v.id for v in service.list_vehicles(client_user)] == [vehicle.id]

    def test_client_needs_vehicles_capability(self, service, client_user, customer, vehicle):
        customer.can_view_vehicles = False
        customer.save()
        with pytest.raises(Unauthorized):
            service.get_vehicle(client_user, str(vehicle.id))

    def test_registration_doc_needs_documents_capability(self, service, client_user, vehicle):
        with pytest.raises(Unauthorized):
            service.get_registration_doc_url(client_user, str(vehicle.id))


class TestRegistrationDoc:
    def test_replacing_deletes_previous_file_after_commit(
        self, service, staff_user, vehicle, storage, django_capture_on_commit_callbacks
    ):
        first = SimpleUploadedFile("libretto.pdf", b"%PDF", content_type="application/pdf")
        second = SimpleUploadedFile("libretto2.pdf", b"%PDF", content_type="application/pdf")
        service.upload_registration_doc(staff_user, str(vehicle.id), first)

        with django_capture_on_commit_callbacks(execute=True):
            updated = service.upload_registration_doc(staff_user, str(vehicle.id), second)

        assert updated.registration_doc_file_id == "uploads/libretto-2.pdf"
        assert updated.registration_doc_file_name == "libretto2.pdf"
        storage.delete.assert_called_once_with("uploads/libretto-1.pdf")


class TestDeleteVehicle:
    def test_deletes_unreferenced_vehicle(self, service, staff_user, vehicle):
        service.delete_vehicle(staff_user, str(vehicle.id))
        assert not Vehicle.objects.filter(id=vehicle.id).exists()

    def test_refused_with_part_requests(
        self, service, part_request_service, staff_user, customer, vehicle
    ):
        part_request_service.create_part_request(
            staff_user,
            CreatePartRequestDTO(
                customer_id=customer.id,
                vehicle_id=vehicle.id,
                items=[{"free_text_name": "Faro", "quantity": 1}],
            ),
        )
        with pytest.raises(VehicleHasPartRequests):
            service.delete_vehicle(staff_user, str(vehicle.id))
