from django.db import models

from modules.core.models import BaseModel


class FuelType(BaseModel):
    """Configurable fuel type offered when registering a vehicle.

    Vehicles store the fuel type *name*, so a type in use is deactivated
    rather than deleted.
    """

    name = models.CharField(max_length=60, unique=True)
    order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "fuel_types"
        ordering = ["order", "name"]

    def __str__(self) -> str:
        return self.name
