"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Rules enforced here:
- Mutations are reserved to shop staff; sharing is ADMIN only.
- A client reads only the customer it is linked to.
- Shared users must all have the CLIENTE role.
- A customer with vehicles or part requests cannot be removed.
- Every mutation records one audit event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.accounts.constants import CustomerCapability, Role
from modules.accounts.policies import (
    ensure_customer_access,
    require_actor,
    require_admin,
    require_staff,
)
from modules.audit.constants import EntityType, EventType
from modules.customers.exceptions import (
    CustomerDocumentNotFound,
    CustomerHasDependents,
    CustomerNotFound,
    InvalidSharing,
)
from modules.customers.models import Customer, CustomerDocument

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from modules.accounts.models import AppUser
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.audit.services import AuditService
    from modules.core.storage import BlobStorage
    from modules.customers.dtos import (
        CreateCustomerDTO,
        CustomerSharingDTO,
        UpdateCustomerDTO,
    )
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        user_repository: IUserRepository,
        audit_service: AuditService,
        storage: BlobStorage,
    ) -> None:
        self._repo = repository
        self._user_repo = user_repository
        self._audit = audit_service
        self._storage = storage

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, actor: AppUser | None, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """Staff see every customer; a client only its own (or none)."""
        actor = require_actor(actor)
        scoped = dict(filters or {})
        if actor.is_client:
            if actor.customer_id is None:
                return self._repo.list({"pk__in": []})
            scoped["id"] = actor.customer_id
        return self._repo.list(scoped)

    def get_customer(self, actor: AppUser | None, id: str) -> Customer:
        """Raises ``CustomerNotFound`` or ``Unauthorized``."""
        actor = require_actor(actor)
        customer = self._get(id)
        ensure_customer_access(actor, customer)
        return customer

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, actor: AppUser | None, dto: CreateCustomerDTO) -> Customer:
        actor = require_staff(actor)
        customer = Customer(**dto.model_dump(exclude={"email"}), email=dto.email or "")
        customer = self._repo.save(customer)
        self._audit.record(
            EventType.CUSTOMER_CREATED,
            EntityType.CUSTOMER,
            customer.id,
            {"display_name": customer.display_name, "type": customer.type},
            actor,
        )
        logger.info("customer.created", customer_id=str(customer.id))
        return self._get(str(customer.id))

    @transaction.atomic
    def update_customer(
        self, actor: AppUser | None, id: str, dto: UpdateCustomerDTO
    ) -> Customer:
        """Patch only the supplied fields.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        actor = require_staff(actor)
        customer = self._get(id)
        changes = dto.changes()

        for field, value in changes.items():
            setattr(customer, field, value)

        self._repo.save(customer)
        self._audit.record(
            EventType.CUSTOMER_UPDATED, EntityType.CUSTOMER, customer.id, changes, actor
        )
        logger.info("customer.updated", customer_id=str(id), fields=sorted(changes))
        return self._get(id)

    @transaction.atomic
    def set_sharing(
        self, actor: AppUser | None, id: str, dto: CustomerSharingDTO
    ) -> Customer:
        """Configure which client users see this customer, and what.

        Raises:
            CustomerNotFound, InvalidSharing
        """
        actor = require_admin(actor)
        customer = self._get(id)

        requested = {str(user_id) for user_id in dto.user_ids}
        users = self._user_repo.get_many(sorted(requested))
        if len(users) != len(requested):
            raise InvalidSharing("One or more users do not exist.", attr="user_ids")
        if any(user.role != Role.CLIENTE for user in users):
            raise InvalidSharing("Only client users can be shared with.", attr="user_ids")

        customer.can_view_vehicles = dto.can_view_vehicles
        customer.can_view_parts = dto.can_view_parts
        customer.can_view_documents = dto.can_view_documents
        self._repo.save(customer)
        self._repo.set_shared_users(customer, users)

        self._audit.record(
            EventType.CUSTOMER_SHARING_UPDATED,
            EntityType.CUSTOMER,
            customer.id,
            dto.model_dump(),
            actor,
        )
        logger.info("customer.sharing_updated", customer_id=str(id), shared_users=len(users))
        return self._get(id)

    @transaction.atomic
    def delete_customer(self, actor: AppUser | None, id: str) -> None:
        """Remove a customer that owns no vehicles and no part requests.

        Raises:
            CustomerNotFound, CustomerHasDependents
        """
        actor = require_staff(actor)
        customer = self._get(id)

        if self._repo.has_vehicles(id):
            raise CustomerHasDependents("Customer still has vehicles; remove them first.")
        if self._repo.has_part_requests(id):
            raise CustomerHasDependents("Customer still has part requests; remove them first.")

        file_ids = [document.file_id for document in customer.documents.all()]
        self._repo.delete(id)
        for file_id in file_ids:
            transaction.on_commit(lambda file_id=file_id: self._storage.delete(file_id))

        self._audit.record(
            EventType.CUSTOMER_DELETED,
            EntityType.CUSTOMER,
            customer.id,
            {"display_name": customer.display_name},
            actor,
        )
        logger.info("customer.deleted", customer_id=str(id))

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_document(
        self, actor: AppUser | None, id: str, file: UploadedFile
    ) -> CustomerDocument:
        actor = require_staff(actor)
        customer = self._get(id)
        file_id = self._storage.save(file)
        document = self._repo.add_document(
            {
                "customer": customer,
                "file_id": file_id,
                "file_name": file.name,
                "file_type": getattr(file, "content_type", "") or "",
                "uploaded_by": actor,
            }
        )
        self._audit.record(
            EventType.CUSTOMER_DOCUMENT_ADDED,
            EntityType.CUSTOMER,
            customer.id,
            {"document_id": document.id, "file_name": document.file_name},
            actor,
        )
        return document

    @transaction.atomic
    def remove_document(self, actor: AppUser | None, id: str, document_id: str) -> None:
        actor = require_staff(actor)
        document = self._repo.get_document(document_id)
        if document is None or str(document.customer_id) != str(id):
            raise CustomerDocumentNotFound(f"Document {document_id} not found.")

        self._repo.delete_document(document_id)
        transaction.on_commit(lambda: self._storage.delete(document.file_id))
        self._audit.record(
            EventType.CUSTOMER_DOCUMENT_REMOVED,
            EntityType.CUSTOMER,
            document.customer_id,
            {"document_id": document.id, "file_name": document.file_name},
            actor,
        )

    def get_document_url(self, actor: AppUser | None, document_id: str) -> str | None:
        """Clients need the customer's ``can_view_documents`` flag."""
        actor = require_actor(actor)
        document = self._repo.get_document(document_id)
        if document is None:
            raise CustomerDocumentNotFound(f"Document {document_id} not found.")
        ensure_customer_access(actor, document.customer, CustomerCapability.DOCUMENTS)
        return self._storage.url(document.file_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, id: str) -> Customer:
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer
