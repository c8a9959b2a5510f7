"""Core type definitions and enums."""

from __future__ import annotations

from enum import Enum


class PayerId(str, Enum):
    """Payers a claim can be routed to."""

    MEDICARE = "medicare"
    UNITED_HEALTH_GROUP = "united_health_group"
    ANTHEM = "anthem"

    @property
    def display_name(self) -> str:
        """Name used on remittances and in composite patient ids."""
        return _PAYER_DISPLAY_NAMES[self]


_PAYER_DISPLAY_NAMES = {
    PayerId.MEDICARE: "Medicare",
    PayerId.UNITED_HEALTH_GROUP: "UnitedHealthGroup",
    PayerId.ANTHEM: "Anthem",
}


class Gender(str, Enum):
    """Patient sex as encoded on the wire."""

    MALE = "m"
    FEMALE = "f"
