"""Notification outbox vocabulary."""

from django.db import models


class Channel(models.TextChoices):
    EMAIL = "EMAIL", "Email"
    SMS = "SMS", "SMS"
    WHATSAPP = "WHATSAPP", "WhatsApp"
    PUSH = "PUSH", "Push"


class NotificationStatus(models.TextChoices):
    PENDING = "PENDING", "In attesa"
    SENT = "SENT", "Inviata"
    FAILED = "FAILED", "Fallita"


class TemplateKey:
    PART_REQUEST_CREATED = "PART_REQUEST_CREATED"
    PART_REQUEST_STATUS = "PART_REQUEST_STATUS"
