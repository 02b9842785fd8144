"""Shared pytest fixtures for resolution engine tests."""

import pytest

from vettdre.config import get_settings
from vettdre.resolution import DeedParty, OwnershipSources, RegistrationRecord


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from ambient GEOCODIO_* / LOG_* variables."""
    for var in (
        "GEOCODIO_API_KEY",
        "GEOCODIO_BASE_URL",
        "GEOCODIO_DAILY_LIMIT",
        "GEOCODIO_TIMEOUT_SECONDS",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =========================
# Ownership Fixtures
# =========================


@pytest.fixture
def shell_llc_sources() -> OwnershipSources:
    """A single-asset LLC with a named individual owner and a managing agent."""
    return OwnershipSources(
        registration=RegistrationRecord(
            owner="123 Nassau St Holdings LLC",
            agent="Acme Management",
            agent_phone="212-555-0100",
            agent_address="1 Main St, New York, NY",
            individual_owners=["John Smith"],
            corp_owners=["123 NASSAU ST HOLDINGS LLC"],
        ),
        assessment_owner="123 NASSAU STREET LLC",
        tax_owner="SMITH, JOHN",
    )


@pytest.fixture
def individual_owner_sources() -> OwnershipSources:
    """An individual grantee whose family LLC appears on the assessment roll."""
    return OwnershipSources(
        deed_parties=[
            DeedParty(name="Robert Chen", role="GRANTEE", doc_date="2021-06-01"),
            DeedParty(name="Previous Owner LLC", role="GRANTOR", doc_date="2021-06-01"),
        ],
        assessment_owner="CHEN FAMILY REALTY LLC",
    )
