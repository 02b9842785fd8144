"""Geocodio escalation for addresses the local normalizer cannot settle.

Each lookup costs quota, so the escalation is budget-gated: it returns
None without touching the network once today's budget is spent, makes at
most one request per call and never retries. Every failure (missing key,
HTTP error, malformed payload, empty result) becomes None; nothing is
raised into the caller.

API Documentation: https://www.geocod.io/docs/
"""

from typing import Any

import httpx
from pydantic import BaseModel

from ..config import get_settings
from ..logging import get_context_logger, log_geocode_event
from .budget import GeocodingBudget

logger = get_context_logger(__name__)

# Confidence assigned to each Geocodio accuracy tier.
ACCURACY_CONFIDENCE = {
    "rooftop": 95,
    "range_interpolation": 80,
    "nearest_street": 60,
}
DEFAULT_ACCURACY_CONFIDENCE = 40


# =========================
# Data Models
# =========================


class GeocodioResult(BaseModel):
    """First-ranked forward geocoding result."""

    input: str
    formatted_address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    accuracy: float = 0.0
    accuracy_type: str = ""
    county: str = ""
    state: str = ""
    zip: str = ""

    @classmethod
    def from_api(cls, input_address: str, payload: dict[str, Any]) -> "GeocodioResult":
        """Build from one entry of the API ``results`` array."""
        location = payload.get("location") or {}
        components = payload.get("address_components") or {}
        return cls(
            input=input_address,
            formatted_address=payload.get("formatted_address") or "",
            lat=location.get("lat") or 0.0,
            lng=location.get("lng") or 0.0,
            accuracy=payload.get("accuracy") or 0.0,
            accuracy_type=payload.get("accuracy_type") or "",
            county=components.get("county") or "",
            state=components.get("state") or "",
            zip=components.get("zip") or "",
        )


class GeocodedAddress(BaseModel):
    """Externally verified address with a tier-derived confidence."""

    formatted: str
    lat: float
    lng: float
    confidence: int


def accuracy_confidence(accuracy_type: str) -> int:
    """Map a Geocodio accuracy tier to a 0-100 confidence."""
    return ACCURACY_CONFIDENCE.get(accuracy_type, DEFAULT_ACCURACY_CONFIDENCE)


# =========================
# API Client
# =========================


class GeocodioClient:
    """Thin async client for the Geocodio forward geocoding endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Geocodio API key (default from settings)
            base_url: API base URL including version (default from settings)
            timeout: Request timeout in seconds (default from settings)
            http_client: Preconfigured client, e.g. with a mock transport
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.geocodio_api_key
        self.base_url = base_url or settings.geocodio_base_url
        self.timeout = timeout or settings.geocodio_timeout_seconds
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close the underlying HTTP connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "GeocodioClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def geocode(self, address: str) -> GeocodioResult | None:
        """Forward-geocode one address.

        Returns:
            The first-ranked result, or None when the API found nothing

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            httpx.HTTPError: On transport failures
        """
        response = await self.http_client.get(
            "/geocode",
            params={"q": address, "api_key": self.api_key},
        )
        response.raise_for_status()

        results = response.json().get("results") or []
        if not results:
            return None
        return GeocodioResult.from_api(address, results[0])


async def normalize_address_with_geocodio(
    raw_address: str,
    *,
    budget: GeocodingBudget,
    client: GeocodioClient | None = None,
) -> GeocodedAddress | None:
    """Escalate an ambiguous address to Geocodio.

    Args:
        raw_address: Address the local normalizer could not settle
        budget: Daily quota shared by every call in the process; create
            one ``GeocodingBudget`` and pass it to each call
        client: Client to use; one is created (and closed) per call if
            not given

    Returns:
        Formatted address, coordinates and tier confidence (rooftop 95,
        range interpolation 80, nearest street 60, otherwise 40), or None
    """
    owned_client: GeocodioClient | None = None
    try:
        if budget.remaining <= 0:
            log_geocode_event(raw_address, "budget_exhausted")
            return None

        if client is None:
            client = owned_client = GeocodioClient()
        if not client.api_key:
            log_geocode_event(raw_address, "no_api_key")
            return None

        try:
            result = await client.geocode(raw_address)
        except httpx.HTTPStatusError as e:
            log_geocode_event(raw_address, "http_error")
            logger.debug(f"Geocodio returned {e.response.status_code}")
            return None
        budget.consume()

        if result is None or not result.lat:
            log_geocode_event(raw_address, "no_result")
            return None

        confidence = accuracy_confidence(result.accuracy_type)
        log_geocode_event(raw_address, "resolved", confidence)
        return GeocodedAddress(
            formatted=result.formatted_address,
            lat=result.lat,
            lng=result.lng,
            confidence=confidence,
        )
    except Exception as e:
        log_geocode_event(raw_address, "error")
        logger.error(f"Geocodio normalize error: {e}")
        return None
    finally:
        if owned_client is not None:
            await owned_client.aclose()
