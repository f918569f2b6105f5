from django.db import models


class CustomerType(models.TextChoices):
    PRIVATO = "PRIVATO", "Privato"
    AZIENDA = "AZIENDA", "Azienda"

