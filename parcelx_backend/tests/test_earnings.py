"""
Unit tests for the rider earning rule and status normalization.
"""

import pytest

from parcelx_backend.app.domain.earnings import calculate_rider_earning
from parcelx_backend.app.models.enums import UserRole
from parcelx_backend.app.models.parcel_enums import ParcelStatus
from parcelx_backend.app.models.rider_enums import RiderStatus


@pytest.mark.parametrize("rider_district, receiver_district, expected", [
    ("Dhaka", "Dhaka", 30),
    ("dhaka ", "DHAKA", 30),
    ("Dhaka", "Khulna", 80),
    (None, "Khulna", 80),
])
def test_earning_rate_depends_on_district(rider_district, receiver_district, expected):
    assert calculate_rider_earning(100, rider_district, receiver_district) == expected


def test_earning_rounds_and_treats_missing_cost_as_zero():
    assert calculate_rider_earning(33.33, "A", "A") == 10.0
    assert calculate_rider_earning(None, "A", "B") == 0


@pytest.mark.parametrize("raw, expected", [
    ("pending", ParcelStatus.PENDING),
    ("IN_TRANSIT", ParcelStatus.IN_TRANSIT),
    ("in transit", ParcelStatus.IN_TRANSIT),
    ("Delivered", ParcelStatus.DELIVERED),
])
def test_parcel_status_normalization(raw, expected):
    assert ParcelStatus(raw) is expected


def test_rider_status_aliases_and_linked_role():
    assert RiderStatus("Approved") is RiderStatus.ACTIVE
    assert RiderStatus("ACTIVE").linked_user_role is UserRole.RIDER
    assert RiderStatus("rejected").linked_user_role is UserRole.USER

    with pytest.raises(ValueError):
        RiderStatus("retired")
