"""Account roles and customer-sharing capabilities."""

from enum import StrEnum

from django.db import models


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Amministratore"
    BENZINE = "BENZINE", "Staff officina"
    CLIENTE = "CLIENTE", "Cliente"


STAFF_ROLES: frozenset[str] = frozenset({Role.ADMIN, Role.BENZINE})


class CustomerCapability(StrEnum):
    """Sharing flags a customer grants to its linked client users."""

    VEHICLES = "can_view_vehicles"
    PARTS = "can_view_parts"
    DOCUMENTS = "can_view_documents"


UNKNOWN_USER_LABEL = "Utente sconosciuto"
