from django.apps import AppConfig


class PartRequestsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.part_requests"
    label = "part_requests"

    def ready(self) -> None:
        from modules.notifications.handlers import customer_notification_handler
        from modules.part_requests.events import PartRequestCreated, PartRequestStatusChanged
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(PartRequestCreated, customer_notification_handler)
        event_bus.subscribe(PartRequestStatusChanged, customer_notification_handler)
