"""Audit event vocabulary."""

from django.db import models


class EntityType(models.TextChoices):
    CUSTOMER = "customer", "Cliente"
    VEHICLE = "vehicle", "Veicolo"
    PART = "part", "Ricambio"
    PART_REQUEST = "partRequest", "Richiesta ricambi"
    FUEL_TYPE = "fuelType", "Alimentazione"
    SUPPLIER = "supplier", "Fornitore"


class EventType:
    CUSTOMER_CREATED = "CUSTOMER_CREATED"
    CUSTOMER_UPDATED = "CUSTOMER_UPDATED"
    CUSTOMER_SHARING_UPDATED = "CUSTOMER_SHARING_UPDATED"
    CUSTOMER_DELETED = "CUSTOMER_DELETED"
    CUSTOMER_DOCUMENT_ADDED = "CUSTOMER_DOCUMENT_ADDED"
    CUSTOMER_DOCUMENT_REMOVED = "CUSTOMER_DOCUMENT_REMOVED"

    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"
    VEHICLE_DELETED = "VEHICLE_DELETED"
    VEHICLE_REGISTRATION_DOC_UPLOADED = "VEHICLE_REGISTRATION_DOC_UPLOADED"

    PART_CREATED = "PART_CREATED"
    PART_UPDATED = "PART_UPDATED"
    PART_STOCK_ADJUSTED = "PART_STOCK_ADJUSTED"
    PART_DELETED = "PART_DELETED"

    PART_REQUEST_CREATED = "PART_REQUEST_CREATED"
    PART_REQUEST_STATUS_CHANGED = "PART_REQUEST_STATUS_CHANGED"
    PART_REQUEST_UPDATED = "PART_REQUEST_UPDATED"
    PART_REQUEST_DELETED = "PART_REQUEST_DELETED"

    SUPPLIER_CREATED = "SUPPLIER_CREATED"
    SUPPLIER_UPDATED = "SUPPLIER_UPDATED"
    SUPPLIER_DEACTIVATED = "SUPPLIER_DEACTIVATED"
    SUPPLIER_DELETED = "SUPPLIER_DELETED"

    FUEL_TYPE_CREATED = "FUEL_TYPE_CREATED"
    FUEL_TYPE_UPDATED = "FUEL_TYPE_UPDATED"
    FUEL_TYPE_DEACTIVATED = "FUEL_TYPE_DEACTIVATED"
    FUEL_TYPE_DELETED = "FUEL_TYPE_DELETED"
