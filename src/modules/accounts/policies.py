"""Authorization policy shared by every service.

Each check either returns the (narrowed) actor or raises ``Unauthorized``
before any data is read or written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from modules.accounts.constants import CustomerCapability
from modules.core.exceptions import Unauthorized

if TYPE_CHECKING:
    from modules.accounts.models import AppUser

logger = structlog.get_logger(__name__)


def require_actor(actor: AppUser | None) -> AppUser:
    if actor is None:
        raise Unauthorized("Authentication required.")
    return actor


def require_staff(actor: AppUser | None) -> AppUser:
    """Admins and shop staff; clients are always rejected."""
    actor = require_actor(actor)
    if not actor.is_staff_member:
        logger.warning("policy.staff_required", user_id=str(actor.id), role=actor.role)
        raise Unauthorized("Only shop staff can perform this operation.")
    return actor


def require_admin(actor: AppUser | None) -> AppUser:
    actor = require_actor(actor)
    if not actor.is_admin:
        logger.warning("policy.admin_required", user_id=str(actor.id), role=actor.role)
        raise Unauthorized("Only administrators can perform this operation.")
    return actor


def ensure_customer_access(
    actor: AppUser | None,
    customer: Any,
    capability: CustomerCapability | None = None,
) -> AppUser:
    """Staff may read any customer; a client only its own.

    When *capability* is given, a client additionally needs the matching
    sharing flag on the customer (vehicles, parts or documents).
    """
    actor = require_actor(actor)
    if actor.is_staff_member:
        return actor

    if actor.customer_id is None or actor.customer_id != customer.id:
        logger.warning(
            "policy.foreign_customer",
            user_id=str(actor.id),
            customer_id=str(customer.id),
        )
        raise Unauthorized("You can only access your own customer data.")

    if capability is not None and not getattr(customer, capability.value):
        logger.warning(
            "policy.capability_missing",
            user_id=str(actor.id),
            capability=capability.value,
        )
        raise Unauthorized("This information has not been shared with you.")
    return actor
