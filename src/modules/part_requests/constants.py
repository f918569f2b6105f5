"""Part-request domain constants.

Status is an audit-tracked field with an unconstrained target: any status
may be set from any other (administrative corrections are allowed).
``SUGGESTED_TRANSITIONS`` describes the normal workflow and is only
offered to callers as a hint.
"""

from django.db import models


class PartRequestStatus(models.TextChoices):
    DA_ORDINARE = "DA_ORDINARE", "Da ordinare"
    ORDINATO = "ORDINATO", "Ordinato"
    ARRIVATO = "ARRIVATO", "Arrivato"
    CONSEGNATO = "CONSEGNATO", "Consegnato"
    ANNULLATO = "ANNULLATO", "Annullato"


SUGGESTED_TRANSITIONS: dict[str, list[str]] = {
    PartRequestStatus.DA_ORDINARE: [PartRequestStatus.ORDINATO, PartRequestStatus.ANNULLATO],
    PartRequestStatus.ORDINATO: [PartRequestStatus.ARRIVATO, PartRequestStatus.ANNULLATO],
    PartRequestStatus.ARRIVATO: [PartRequestStatus.CONSEGNATO, PartRequestStatus.ANNULLATO],
    PartRequestStatus.CONSEGNATO: [],
    PartRequestStatus.ANNULLATO: [],
}

TERMINAL_STATES: set[str] = {PartRequestStatus.CONSEGNATO, PartRequestStatus.ANNULLATO}

PART_NOT_FOUND_LABEL = "Ricambio non trovato"
CUSTOM_PART_LABEL = "Ricambio personalizzato"


def suggested_next_statuses(status: str) -> list[str]:
    """Forward/cancel targets a UI should normally offer from *status*."""
    return [str(s) for s in SUGGESTED_TRANSITIONS.get(status, [])]
