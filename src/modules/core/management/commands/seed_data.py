from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.constants import Role
from modules.accounts.models import AppUser
from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.customers.constants import CustomerType
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.fuel_types.models import FuelType
from modules.part_requests.constants import PartRequestStatus
from modules.part_requests.dtos import CreatePartRequestDTO
from modules.part_requests.models import PartRequest
from modules.part_requests.repositories.django_repository import PartRequestDjangoRepository
from modules.part_requests.services import PartRequestService
from modules.parts.models import Part
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.suppliers.models import Supplier
from modules.vehicles.models import Vehicle
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository

USERS = [
    ("admin@bensine.it", "Mario Rossi (Admin)", Role.ADMIN, "admin123"),
    ("luca@bensine.it", "Luca Bianchi", Role.BENZINE, "bensine123"),
    ("giulia@bensine.it", "Giulia Verdi", Role.BENZINE, "bensine123"),
]

FUEL_TYPES = ["Benzina", "Diesel", "GPL", "Metano", "Ibrido", "Elettrico"]

SUPPLIERS = [
    ("Bosch", "Franco Gallo", "+39 02 1112233"),
    ("Mann", "", "+39 02 2223344"),
    ("Brembo", "Sara Conti", "+39 035 605111"),
    ("Castrol", "", ""),
    ("NGK", "", ""),
    ("Gates", "", ""),
    ("SKF", "", ""),
    ("Monroe", "", ""),
]

# name, sku, oem, supplier, cost, price, stock, min stock, location, notes
PARTS = [
    ("Filtro olio", "FO-001", "1234567890", "Bosch", "8.50", "15.00", 25, 10, "Scaffale A1", ""),
    ("Filtro aria", "FA-002", "0987654321", "Mann", "12.00", "22.00", 18, 8, "Scaffale A2", ""),
    ("Pastiglie freno anteriori", "PF-003", "", "Brembo", "35.00", "65.00", 8, 5, "Scaffale B1", ""),
    ("Dischi freno anteriori", "DF-004", "", "Brembo", "55.00", "95.00", 4, 4, "Scaffale B2", "Scorta minima raggiunta"),
    ("Olio motore 5W30 (1L)", "OM-005", "", "Castrol", "8.00", "14.00", 50, 20, "Scaffale C1", ""),
    ("Candele accensione", "CA-006", "NGK-BKR6E", "NGK", "4.50", "9.00", 32, 16, "Scaffale A3", ""),
    ("Cinghia distribuzione", "CD-007", "", "Gates", "45.00", "85.00", 3, 2, "Scaffale D1", ""),
    ("Pompa acqua", "PA-008", "", "SKF", "65.00", "120.00", 2, 2, "Scaffale D2", ""),
    ("Ammortizzatore anteriore", "AM-009", "", "Monroe", "75.00", "140.00", 6, 4, "Scaffale E1", ""),
]


def _tire(width: int, ratio: int, rim: int, **extra) -> dict:
    return {"width": width, "aspect_ratio": ratio, "rim_diameter": rim, **extra}


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    @transaction.atomic
    def handle(self, *args, **options):
        if AppUser.objects.exists():
            self.stdout.write(self.style.WARNING("Database already seeded, nothing to do."))
            return

        self.stdout.write("Seeding development data...")
        users = self._seed_users()
        customers = self._seed_customers(users)
        FuelType.objects.bulk_create(
            FuelType(name=name, order=index) for index, name in enumerate(FUEL_TYPES)
        )
        vehicles = self._seed_vehicles(customers)
        parts = self._seed_parts()
        requests_created = self._seed_part_requests(users["admin@bensine.it"], customers, vehicles, parts)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"customers={len(customers)}, "
                f"vehicles={len(vehicles)}, "
                f"parts={len(parts)}, "
                f"part_requests={requests_created}"
            )
        )

    def _seed_users(self) -> dict[str, AppUser]:
        users: dict[str, AppUser] = {}
        for email, name, role, password in USERS:
            user = AppUser(email=email, name=name, role=role)
            user.set_password(password)
            user.save()
            users[email] = user
        return users

    def _seed_customers(self, users: dict[str, AppUser]) -> list[Customer]:
        self.stdout.write("Creating customers...")
        ferrari = Customer.objects.create(
            type=CustomerType.PRIVATO,
            display_name="Giuseppe Ferrari",
            first_name="Giuseppe",
            last_name="Ferrari",
            phone="+39 333 1234567",
            email="giuseppe.ferrari@email.it",
            address="Via Roma 123, Milano",
            notes="Cliente storico, preferisce essere contattato via telefono",
            can_view_vehicles=True,
            can_view_parts=True,
        )
        trasporti = Customer.objects.create(
            type=CustomerType.AZIENDA,
            display_name="Trasporti Veloci SRL",
            company_name="Trasporti Veloci SRL",
            vat_number="IT12345678901",
            contact_person="Marco Neri",
            phone="+39 02 9876543",
            email="info@trasportiveloci.it",
            address="Via Industriale 45, Monza",
            notes="Flotta di 5 veicoli, contratto manutenzione annuale",
            can_view_vehicles=True,
            can_view_parts=True,
            can_view_documents=True,
        )
        colombo = Customer.objects.create(
            type=CustomerType.PRIVATO,
            display_name="Anna Colombo",
            first_name="Anna",
            last_name="Colombo",
            phone="+39 347 9876543",
            email="anna.colombo@gmail.com",
        )

        client = AppUser(
            email="cliente@bensine.it",
            name="Giuseppe Ferrari (Cliente)",
            role=Role.CLIENTE,
            customer=ferrari,
        )
        client.set_password("cliente123")
        client.save()
        users[client.email] = client
        ferrari.shared_with.set([client])

        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return [ferrari, trasporti, colombo]

    def _seed_vehicles(self, customers: list[Customer]) -> list[Vehicle]:
        ferrari, trasporti, colombo = customers
        michelin = _tire(175, 65, 14, brand="Michelin")
        pirelli = _tire(175, 65, 14, brand="Pirelli")
        daily = _tire(225, 70, 16, load_index="112", speed_rating="R")
        golf = _tire(205, 55, 16, brand="Continental")
        return [
            Vehicle.objects.create(
                customer=ferrari, plate="AB123CD", make="Fiat", model="Panda", year=2019,
                fuel_type="Benzina", km=45000,
                tires={
                    "summer": {"front": michelin, "rear": michelin},
                    "winter": {"front": pirelli, "rear": pirelli},
                },
            ),
            Vehicle.objects.create(
                customer=trasporti, plate="EF456GH", make="Iveco", model="Daily", year=2021,
                fuel_type="Diesel", km=120000,
                tires={"summer": {"front": daily, "rear": daily}},
            ),
            Vehicle.objects.create(
                customer=trasporti, plate="IJ789KL", make="Fiat", model="Ducato", year=2020,
                fuel_type="Diesel", km=95000,
            ),
            Vehicle.objects.create(
                customer=colombo, plate="MN012OP", make="Volkswagen", model="Golf", year=2022,
                fuel_type="Ibrido", km=15000,
                tires={"summer": {"front": golf, "rear": golf}},
            ),
        ]

    def _seed_parts(self) -> list[Part]:
        self.stdout.write("Creating parts...")
        suppliers = {
            name: Supplier.objects.create(company_name=name, contact_name=contact, phone=phone)
            for name, contact, phone in SUPPLIERS
        }
        parts = [
            Part.objects.create(
                name=name,
                sku=sku,
                oem_code=oem,
                supplier=suppliers[supplier],
                unit_cost=Decimal(cost),
                unit_price=Decimal(price),
                stock_qty=stock,
                min_stock_qty=min_stock,
                location=location,
                notes=notes,
            )
            for name, sku, oem, supplier, cost, price, stock, min_stock, location, notes in PARTS
        ]
        self.stdout.write(self.style.SUCCESS("Creating parts... Done!"))
        return parts

    def _seed_part_requests(
        self,
        admin: AppUser,
        customers: list[Customer],
        vehicles: list[Vehicle],
        parts: list[Part],
    ) -> int:
        """Go through the service so timelines and audit events are consistent."""
        self.stdout.write("Creating part requests...")
        service = PartRequestService(
            repository=PartRequestDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            vehicle_repository=VehicleDjangoRepository(),
            part_repository=PartDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
        )
        ferrari, trasporti, _ = customers
        panda, daily, ducato, _ = vehicles

        tagliando = service.create_part_request(
            admin,
            CreatePartRequestDTO(
                customer_id=ferrari.id,
                vehicle_id=panda.id,
                items=[
                    {"part_id": parts[0].id, "quantity": 1},
                    {"part_id": parts[1].id, "quantity": 1},
                    {"part_id": parts[4].id, "quantity": 4},
                ],
                notes="Tagliando 45.000 km",
            ),
        )
        service.set_status(admin, str(tagliando.id), PartRequestStatus.ORDINATO)

        freni = service.create_part_request(
            admin,
            CreatePartRequestDTO(
                customer_id=trasporti.id,
                vehicle_id=daily.id,
                items=[
                    {"part_id": parts[2].id, "quantity": 1},
                    {"part_id": parts[3].id, "quantity": 2},
                ],
                supplier="Brembo",
            ),
        )
        for status in (PartRequestStatus.ORDINATO, PartRequestStatus.ARRIVATO):
            service.set_status(admin, str(freni.id), status)

        service.create_part_request(
            admin,
            CreatePartRequestDTO(
                customer_id=trasporti.id,
                vehicle_id=ducato.id,
                items=[{"free_text_name": "Specchietto retrovisore sinistro", "quantity": 1}],
                notes="Verificare disponibilità presso il concessionario",
            ),
        )
        self.stdout.write(self.style.SUCCESS("Creating part requests... Done!"))
        return PartRequest.objects.count()
