"""Unit tests for CustomerService.

Covers:
- create_customer / update_customer: staff only, audit event per change.
- list_customers / get_customer: client scoping.
- set_sharing: admin only, CLIENTE users only.
- delete_customer: refused while vehicles or part requests exist.
- documents: add, remove (blob deleted after commit), gated URL.
"""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from modules.audit.constants import EventType
from modules.audit.models import Event
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.core.exceptions import Unauthorized
from modules.customers.constants import CustomerType
from modules.customers.dtos import CreateCustomerDTO, CustomerSharingDTO, UpdateCustomerDTO
from modules.customers.exceptions import (
    CustomerDocumentNotFound,
    CustomerHasDependents,
    CustomerNotFound,
    InvalidSharing,
)
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def storage():
    storage = MagicMock()
    storage.save.return_value = "uploads/doc.pdf"
    storage.url.return_value = "https://files.example/uploads/doc.pdf"
    return storage


@pytest.fixture()
def service(audit_service, storage):
    return CustomerService(
        repository=CustomerDjangoRepository(),
        user_repository=UserDjangoRepository(),
        audit_service=audit_service,
        storage=storage,
    )


def _pdf(name: str = "carta_identita.pdf") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, b"%PDF-1.4", content_type="application/pdf")


# ===========================================================================
# create / update
# ===========================================================================


class TestCreateCustomer:
    def test_company_display_name_derived(self, service, staff_user):
        customer = service.create_customer(
            staff_user,
            CreateCustomerDTO(type=CustomerType.AZIENDA, company_name="Officina Verdi SRL"),
        )

        assert customer.display_name == "Officina Verdi SRL"
        assert customer.email == ""
        event = Event.objects.get(type=EventType.CUSTOMER_CREATED)
        assert event.entity_id == str(customer.id)

    def test_client_cannot_create(self, service, client_user):
        with pytest.raises(Unauthorized):
            service.create_customer(client_user, CreateCustomerDTO(display_name="Abusivo"))
        assert Customer.objects.filter(display_name="Abusivo").count() == 0


class TestUpdateCustomer:
    def test_patches_supplied_fields(self, service, staff_user, customer):
        updated = service.update_customer(
            staff_user, str(customer.id), UpdateCustomerDTO(phone="+39 02 000000")
        )

        assert updated.phone == "+39 02 000000"
        assert updated.display_name == "Giuseppe Ferrari"
        event = Event.objects.get(type=EventType.CUSTOMER_UPDATED)
        assert event.payload == {"phone": "+39 02 000000"}

    def test_not_found(self, service, staff_user):
        with pytest.raises(CustomerNotFound):
            service.update_customer(staff_user, str(uuid4()), UpdateCustomerDTO(phone="1"))


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_staff_sees_everyone(self, service, staff_user, customer, other_customer):
        assert service.list_customers(staff_user).count() == 2

    def test_client_sees_only_own_customer(self, service, client_user, customer, other_customer):
        assert [c.id for c in service.list_customers(client_user)] == [customer.id]

    def test_client_cannot_read_foreign_customer(self, service, client_user, other_customer):
        with pytest.raises(Unauthorized):
            service.get_customer(client_user, str(other_customer.id))

    def test_list_carries_vehicle_count(self, service, staff_user, customer, vehicle):
        [row] = service.list_customers(staff_user, {"id": customer.id})
        assert row.vehicle_count == 1


# ===========================================================================
# Sharing
# ===========================================================================


class TestSetSharing:
    def test_configures_users_and_flags(self, service, admin_user, client_user, customer):
        updated = service.set_sharing(
            admin_user,
            str(customer.id),
            CustomerSharingDTO(user_ids=[client_user.id], can_view_documents=True),
        )

        assert list(updated.shared_with.all()) == [client_user]
        assert updated.can_view_documents is True
        assert updated.can_view_parts is False

    def test_only_client_users(self, service, admin_user, staff_user, customer):
        with pytest.raises(InvalidSharing):
            service.set_sharing(
                admin_user, str(customer.id), CustomerSharingDTO(user_ids=[staff_user.id])
            )

    def test_unknown_user(self, service, admin_user, customer):
        with pytest.raises(InvalidSharing):
            service.set_sharing(admin_user, str(customer.id), CustomerSharingDTO(user_ids=[uuid4()]))

    def test_staff_cannot_configure_sharing(self, service, staff_user, customer):
        with pytest.raises(Unauthorized):
            service.set_sharing(staff_user, str(customer.id), CustomerSharingDTO())


# ===========================================================================
# delete_customer
# ===========================================================================


class TestDeleteCustomer:
    def test_deletes_customer_without_dependents(self, service, staff_user, other_customer):
        service.delete_customer(staff_user, str(other_customer.id))
        assert not Customer.objects.filter(id=other_customer.id).exists()

    def test_refused_with_vehicles(self, service, staff_user, customer, vehicle):
        with pytest.raises(CustomerHasDependents):
            service.delete_customer(staff_user, str(customer.id))

    def test_documents_are_removed_after_commit(
        self, service, staff_user, other_customer, storage, django_capture_on_commit_callbacks
    ):
        service.add_document(staff_user, str(other_customer.id), _pdf())

        with django_capture_on_commit_callbacks(execute=True):
            service.delete_customer(staff_user, str(other_customer.id))

        storage.delete.assert_called_once_with("uploads/doc.pdf")


# ===========================================================================
# Documents
# ===========================================================================


class TestDocuments:
    def test_add_document(self, service, staff_user, customer, storage):
        document = service.add_document(staff_user, str(customer.id), _pdf())

        assert document.file_id == "uploads/doc.pdf"
        assert document.file_type == "application/pdf"
        assert document.uploaded_by == staff_user
        assert Event.objects.filter(type=EventType.CUSTOMER_DOCUMENT_ADDED).count() == 1

    def test_remove_document_of_other_customer_is_not_found(
        self, service, staff_user, customer, other_customer
    ):
        document = service.add_document(staff_user, str(customer.id), _pdf())
        with pytest.raises(CustomerDocumentNotFound):
            service.remove_document(staff_user, str(other_customer.id), str(document.id))

    def test_client_needs_documents_capability(self, service, staff_user, client_user, customer):
        document = service.add_document(staff_user, str(customer.id), _pdf())

        with pytest.raises(Unauthorized):
            service.get_document_url(client_user, str(document.id))

        customer.can_view_documents = True
        customer.save()
        assert service.get_document_url(client_user, str(document.id)).startswith("https://")
