"""Budget-limited external address verification."""

from .budget import BudgetStatus, GeocodingBudget
from .geocodio import (
    GeocodedAddress,
    GeocodioClient,
    GeocodioResult,
    accuracy_confidence,
    normalize_address_with_geocodio,
)

__all__ = [
    "BudgetStatus",
    "GeocodingBudget",
    "GeocodedAddress",
    "GeocodioClient",
    "GeocodioResult",
    "accuracy_confidence",
    "normalize_address_with_geocodio",
]
