"""
Rider earning rule.

A rider keeps 30% of the delivery cost for deliveries inside their own
district and 80% for deliveries into another district.
"""

from typing import Optional

SAME_DISTRICT_RATE = 0.3
OTHER_DISTRICT_RATE = 0.8


def is_same_district(rider_district: Optional[str], receiver_district: Optional[str]) -> bool:
    """Case-insensitive district comparison; missing districts compare as empty."""
    return (rider_district or "").strip().lower() == (receiver_district or "").strip().lower()


def calculate_rider_earning(
    delivery_cost: Optional[float],
    rider_district: Optional[str],
    receiver_district: Optional[str]
) -> float:
    """
    Compute the rider's earning for a delivered parcel.

    Args:
        delivery_cost: Parcel delivery cost (None counts as 0)
        rider_district: District of the assigned rider
        receiver_district: District of the receiver

    Returns:
        Earning rounded to 2 decimals
    """
    rate = SAME_DISTRICT_RATE if is_same_district(rider_district, receiver_district) else OTHER_DISTRICT_RATE
    return round((delivery_cost or 0) * rate, 2)
