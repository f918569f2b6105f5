from enum import StrEnum


class RemovalOutcome(StrEnum):
    """Result of removing a catalog entry that may still be referenced."""

    DELETED = "deleted"
    DEACTIVATED = "deactivated"
