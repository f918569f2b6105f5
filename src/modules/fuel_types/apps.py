from django.apps import AppConfig


class FuelTypesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.fuel_types"
    label = "fuel_types"
