"""Integration tests for the Celery configuration and background tasks."""

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.accounts.models import Session

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously inside the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "bensine"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "bensine"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_session_purge_is_scheduled(self, settings):
        tasks = {entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()}
        assert "accounts.purge_expired_sessions" in tasks


class TestPurgeExpiredSessions:
    def test_removes_only_expired_sessions(self, staff_user):
        from modules.accounts.tasks import purge_expired_sessions

        now = timezone.now()
        Session.objects.create(user=staff_user, token="vecchio", expires_at=now - timedelta(hours=1))
        Session.objects.create(user=staff_user, token="valido", expires_at=now + timedelta(hours=1))

        result = purge_expired_sessions.delay()

        assert result.successful()
        assert result.result == {"deleted": 1}
        assert list(Session.objects.values_list("token", flat=True)) == ["valido"]
