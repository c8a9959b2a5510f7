"""Storage layer for derived AR records."""

from clearinghouse.storage.ar_store import ARStore
from clearinghouse.storage.converters import remittance_to_ar

__all__ = ["ARStore", "remittance_to_ar"]
