"""Unit tests for address normalization and similarity.

Run with: pytest tests/unit/test_addresses.py -v
"""

import pytest
from pydantic import ValidationError

from vettdre.resolution.addresses import (
    NormalizedAddress,
    address_similarity,
    normalize_address,
)


class TestNormalizeAddress:
    """Tests for normalize_address."""

    def test_full_brooklyn_address(self):
        """Test every part of a complete address is extracted."""
        addr = normalize_address("123 N Main St Apt 4B, Brooklyn, NY 11201")

        assert addr.number == "123"
        assert addr.street == "NORTH MAIN STREET"
        assert addr.unit == "4B"
        assert addr.city == "BROOKLYN"
        assert addr.borough == "BROOKLYN"
        assert addr.state == "NY"
        assert addr.zip == "11201"
        assert addr.raw == "123 N Main St Apt 4B, Brooklyn, NY 11201"

    def test_queens_compound_number_and_zip_plus_four(self):
        """Test hyphenated lot numbers and ZIP+4 codes."""
        addr = normalize_address("32-15 Steinway St, Queens, NY 11103-1234")

        assert addr.number == "32-15"
        assert addr.street == "STEINWAY STREET"
        assert addr.zip == "11103"
        assert addr.borough == "QUEENS"
        assert addr.unit == ""

    def test_unit_keyword_needs_word_boundary(self):
        """Test street names beginning with FL or STE are not units."""
        addr = normalize_address("350 Flatbush Ave")

        assert addr.unit == ""
        assert addr.number == "350"
        assert addr.street == "FLATBUSH AVENUE"

    def test_hash_unit(self):
        """Test the # unit marker."""
        addr = normalize_address("10 Main St #5")

        assert addr.unit == "5"
        assert addr.street == "MAIN STREET"

    def test_hash_unit_without_space(self):
        """Test a # marker attached to the street type still splits off the unit."""
        addr = normalize_address("10 Main St#5")

        assert addr.unit == "5"
        assert addr.number == "10"
        assert addr.street == "MAIN STREET"

    def test_new_jersey_state_name(self):
        """Test full state names map to postal codes."""
        addr = normalize_address("1 River Rd, Edgewater, New Jersey 07020")

        assert addr.state == "NJ"
        assert addr.zip == "07020"
        assert addr.number == "1"
        assert addr.borough == ""
        assert addr.street.startswith("RIVER ROAD")

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty(self, raw):
        """Test absent input yields an empty address."""
        addr = normalize_address(raw)

        assert addr == NormalizedAddress()
        assert addr.is_empty

    def test_one_line_round_trips(self):
        """Test that re-normalizing the canonical rendering is stable."""
        first = normalize_address("123 N Main St Apt 4B, Brooklyn, NY 11201")
        second = normalize_address(first.one_line)

        assert second.model_dump(exclude={"raw"}) == first.model_dump(exclude={"raw"})

    def test_frozen(self):
        """Test normalized addresses are immutable."""
        addr = normalize_address("10 Main St")
        with pytest.raises(ValidationError):
            addr.street = "ELM STREET"


class TestAddressSimilarity:
    """Tests for address_similarity."""

    def test_different_house_numbers(self):
        """Test that differing house numbers are conclusive."""
        assert address_similarity("123 Main St", "456 Main St") == 0

    def test_abbreviation_equivalence(self):
        """Test ST and STREET compare equal, capped at 100."""
        assert address_similarity("123 Main St", "123 Main Street") == 100

    def test_house_number_bonus(self):
        """Test the bonus for matching numbers on close streets."""
        # MAIN STREET vs MAINE STREET: 1 edit over 12 chars = 92, +5
        assert address_similarity("123 Main St", "123 Maine St") == 97

    def test_no_bonus_without_numbers(self):
        """Test streets alone earn no bonus."""
        assert address_similarity("Main St", "Maine St") == 92

    def test_no_bonus_when_one_number_missing(self):
        """Test a missing house number is not a disagreement."""
        assert address_similarity("123 Main St", "Main St") == 100

    def test_raw_fallback_without_streets(self):
        """Test raw strings are compared when no street was parsed."""
        assert address_similarity("Apt 4", "Apt 5") == 80

    def test_bounds(self):
        """Test results stay in 0-100."""
        for a, b in [("", ""), (None, "10 Main St"), ("1 A St", "2 B Ave")]:
            assert 0 <= address_similarity(a, b) <= 100
