"""Notification outbox.

Entries are written in the **same database transaction** as the business
change that produced them; an external dispatcher later reads ``PENDING``
rows oldest first and reports back through ``mark_sent`` / ``mark_failed``.

State machine:
1. ``enqueue`` → ``PENDING`` with ``retry_count = 0``.
2. Delivered → ``mark_as_sent()`` (``SENT``).
3. Delivery error → ``mark_as_failed(error)``: ``retry_count += 1``; the
   entry stays ``PENDING`` until ``max_retries`` is reached, then ``FAILED``.
4. ``FAILED`` → ``PENDING`` only through ``reset_for_retry()``.
"""

from __future__ import annotations

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.notifications.constants import Channel, NotificationStatus


class NotificationOutbox(BaseModel):
    channel = models.CharField(max_length=10, choices=Channel.choices, default=Channel.EMAIL)
    recipient = models.CharField(max_length=255, blank=True, default="")
    template_key = models.CharField(max_length=100)
    data = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    status = models.CharField(
        max_length=10,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING,
    )
    retry_count = models.PositiveIntegerField(default=0)
    last_error = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    sent_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "notification_outbox"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="outbox_status_created_idx"),
            models.Index(fields=["template_key"], name="outbox_template_key_idx"),
        ]

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def mark_as_sent(self) -> None:
        self.status = NotificationStatus.SENT
        self.sent_at = timezone.now()
        self.save(update_fields=["status", "sent_at", "updated_at"])

    def mark_as_failed(self, error: str, max_retries: int | None = None) -> None:
        """Record a delivery failure; give up once *max_retries* is reached."""
        if max_retries is None:
            max_retries = settings.NOTIFICATION_MAX_RETRIES
        self.retry_count += 1
        self.last_error = error
        self.status = (
            NotificationStatus.FAILED
            if self.retry_count >= max_retries
            else NotificationStatus.PENDING
        )
        self.save(update_fields=["status", "retry_count", "last_error", "updated_at"])

    def reset_for_retry(self) -> None:
        self.status = NotificationStatus.PENDING
        self.retry_count = 0
        self.last_error = None
        self.save(update_fields=["status", "retry_count", "last_error", "updated_at"])

    @property
    def is_failed(self) -> bool:
        return self.status == NotificationStatus.FAILED

    def __str__(self) -> str:
        return f"{self.template_key} [{self.status}] -> {self.recipient or '-'}"
