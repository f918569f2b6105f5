from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from modules.accounts.constants import Role
from modules.accounts.models import AppUser, Session
from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.customers.constants import CustomerType
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.part_requests.repositories.django_repository import PartRequestDjangoRepository
from modules.part_requests.services import PartRequestService
from modules.parts.models import Part
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.suppliers.models import Supplier
from modules.vehicles.models import Vehicle
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def make_user(email: str, role: str = Role.BENZINE, password: str = "secret123", **extra) -> AppUser:
    user = AppUser(email=email, role=role, **extra)
    user.set_password(password)
    user.save()
    return user


@pytest.fixture()
def admin_user():
    return make_user("admin@bensine.it", Role.ADMIN, name="Mario Rossi")


@pytest.fixture()
def staff_user():
    return make_user("luca@bensine.it", Role.BENZINE, name="Luca Bianchi")


@pytest.fixture()
def client_user(customer):
    """A client linked to ``customer`` and listed in its ``shared_with``."""
    user = make_user("cliente@bensine.it", Role.CLIENTE, name="Giuseppe Ferrari", customer=customer)
    customer.shared_with.add(user)
    return user


@pytest.fixture()
def auth_client():
    """Factory: ``auth_client(user)`` returns an APIClient carrying a live bearer token."""

    def _make(user: AppUser) -> APIClient:
        session = Session.objects.create(
            user=user,
            token=Session.generate_token(),
            expires_at=timezone.now() + timedelta(days=1),
        )
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {session.token}")
        return client

    return _make


# ---------------------------------------------------------------------------
# Domain data
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return Customer.objects.create(
        type=CustomerType.PRIVATO,
        display_name="Giuseppe Ferrari",
        first_name="Giuseppe",
        last_name="Ferrari",
        email="giuseppe.ferrari@email.it",
        phone="+39 333 1234567",
        can_view_vehicles=True,
        can_view_parts=True,
    )


@pytest.fixture()
def other_customer():
    return Customer.objects.create(
        type=CustomerType.AZIENDA,
        display_name="Trasporti Veloci SRL",
        company_name="Trasporti Veloci SRL",
        email="info@trasportiveloci.it",
    )


@pytest.fixture()
def vehicle(customer):
    return Vehicle.objects.create(
        customer=customer, plate="AB123CD", make="Fiat", model="Panda", year=2019
    )


@pytest.fixture()
def other_vehicle(other_customer):
    return Vehicle.objects.create(
        customer=other_customer, plate="EF456GH", make="Iveco", model="Daily"
    )


@pytest.fixture()
def supplier():
    return Supplier.objects.create(company_name="Bosch", contact_name="Franco Gallo")


@pytest.fixture()
def part(supplier):
    return Part.objects.create(
        name="Filtro olio",
        sku="FO-001",
        supplier=supplier,
        unit_cost=Decimal("8.50"),
        unit_price=Decimal("15.00"),
        stock_qty=25,
        min_stock_qty=10,
    )


@pytest.fixture()
def audit_service():
    return AuditService(repository=EventDjangoRepository())


@pytest.fixture()
def part_request_service(audit_service):
    """PartRequestService wired to the Django repositories and the live event bus."""
    return PartRequestService(
        repository=PartRequestDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        vehicle_repository=VehicleDjangoRepository(),
        part_repository=PartDjangoRepository(),
        audit_service=audit_service,
    )
