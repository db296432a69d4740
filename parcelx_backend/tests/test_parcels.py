"""
Integration tests for the parcel lifecycle.

Submission defaults, rider assignment, status transitions and earnings.
"""

import uuid

import pytest

from parcelx_backend.app.models.parcel import Parcel
from parcelx_backend.app.models.parcel_enums import ParcelStatus, PaymentStatus
from parcelx_backend.app.models.rider import Rider
from parcelx_backend.app.models.rider_enums import RiderStatus


@pytest.fixture
async def rider(db_session):
    rider = Rider(name="Rafi", email="rafi@test.com", district="Dhaka", status=RiderStatus.ACTIVE)
    db_session.add(rider)
    await db_session.commit()
    return rider


async def submit(client, headers, **fields):
    payload = {
        "trackingId": "TRK-1001",
        "title": "Documents",
        "deliveryCost": 100,
        "senderDistrict": "Dhaka",
        "receiverDistrict": "Dhaka",
    }
    payload.update(fields)
    response = await client.post("/parcels", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_parcel_applies_defaults(client, auth_headers):
    body = await submit(client, auth_headers)

    assert body["success"] is True
    assert body["acknowledged"] is True
    parcel = body["data"]
    assert parcel["_id"] == body["insertedId"]
    assert parcel["status"] == "Pending"
    assert parcel["paymentStatus"] == "Unpaid"
    assert parcel["createdByEmail"] == "alice@test.com"
    assert parcel["createdAtReadable"]
    # Undeclared fields are kept
    assert parcel["title"] == "Documents"


@pytest.mark.asyncio
async def test_create_parcel_keeps_supplied_values(client, auth_headers):
    body = await submit(client, auth_headers, status="in-transit", paymentStatus="paid",
                        createdByEmail="office@test.com")

    parcel = body["data"]
    assert parcel["status"] == "In-Transit"
    assert parcel["paymentStatus"] == "Paid"
    assert parcel["createdByEmail"] == "office@test.com"


@pytest.mark.asyncio
async def test_create_parcel_requires_token(client):
    response = await client.post("/parcels", json={"trackingId": "TRK-1"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_parcel_rejects_unknown_status(client, auth_headers):
    response = await client.post("/parcels", json={"status": "Lost"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_parcels_filters_by_creator(client, auth_headers):
    await submit(client, auth_headers, trackingId="TRK-A")
    await submit(client, auth_headers, trackingId="TRK-B", createdByEmail="other@test.com")

    mine = await client.get("/parcels", params={"email": "alice@test.com"}, headers=auth_headers)
    everyone = await client.get("/parcels", headers=auth_headers)

    assert [p["trackingId"] for p in mine.json()["data"]] == ["TRK-A"]
    assert [p["trackingId"] for p in everyone.json()["data"]] == ["TRK-B", "TRK-A"]


@pytest.mark.asyncio
async def test_get_parcel(client, auth_headers):
    body = await submit(client, auth_headers)

    found = await client.get(f"/parcels/{body['insertedId']}")
    hyphenated = await client.get(f"/parcels/{uuid.UUID(body['insertedId'])}")
    unknown = await client.get(f"/parcels/{uuid.uuid4().hex}")
    malformed = await client.get("/parcels/xyz")

    assert found.status_code == 200
    assert found.json()["data"]["trackingId"] == "TRK-1001"
    assert hyphenated.status_code == 200
    assert unknown.status_code == 404
    assert malformed.status_code == 404


@pytest.mark.asyncio
async def test_assign_rider_marks_in_transit(client, db_session, auth_headers, rider):
    rider_id = rider.id
    parcel_id = (await submit(client, auth_headers))["insertedId"]

    response = await client.patch(f"/parcels/{parcel_id}/assign", json={
        "riderId": rider_id,
        "riderName": "Rafi",
        "riderEmail": "rafi@test.com",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["parcelModified"] == 1
    assert body["riderModified"] == 1

    db_session.expire_all()
    parcel = await db_session.get(Parcel, parcel_id)
    assert parcel.status == ParcelStatus.IN_TRANSIT
    assert parcel.assigned_rider_email == "rafi@test.com"
    # District comes from the rider record when the request omits it
    assert parcel.rider_district == "Dhaka"
    assert parcel.assigned_at is not None

    updated_rider = await db_session.get(Rider, rider_id)
    assert updated_rider.work_status == "Delivery"
    assert updated_rider.last_assigned_parcel == parcel_id


@pytest.mark.asyncio
async def test_assign_rider_to_missing_parcel_still_updates_rider(client, db_session, rider):
    missing = uuid.uuid4().hex
    rider_id = rider.id

    response = await client.patch(f"/parcels/{missing}/assign", json={"riderId": rider_id, "riderName": "Rafi"})

    assert response.status_code == 200
    assert response.json()["parcelModified"] == 0
    assert response.json()["riderModified"] == 1

    db_session.expire_all()
    updated_rider = await db_session.get(Rider, rider_id)
    assert updated_rider.last_assigned_parcel == missing


@pytest.mark.asyncio
async def test_assign_rider_requires_id_and_name(client, auth_headers, rider):
    parcel_id = (await submit(client, auth_headers))["insertedId"]

    no_name = await client.patch(f"/parcels/{parcel_id}/assign", json={"riderId": rider.id})
    bad_rider = await client.patch(f"/parcels/{parcel_id}/assign", json={"riderId": "r-1", "riderName": "Rafi"})

    assert no_name.status_code == 400
    assert bad_rider.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("receiver_district, expected", [("Dhaka", 30), ("Khulna", 80)])
async def test_delivered_stores_rider_earning(client, db_session, auth_headers, rider, receiver_district, expected):
    parcel_id = (await submit(client, auth_headers, receiverDistrict=receiver_district))["insertedId"]
    await client.patch(f"/parcels/{parcel_id}/assign", json={"riderId": rider.id, "riderName": "Rafi"})

    response = await client.patch(f"/parcels/{parcel_id}/status", json={"status": "delivered"})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Delivered"
    assert response.json()["data"]["riderEarning"] == expected

    db_session.expire_all()
    parcel = await db_session.get(Parcel, parcel_id)
    assert parcel.rider_earning == expected
    assert parcel.payment_status == PaymentStatus.UNPAID


@pytest.mark.asyncio
async def test_non_delivered_status_has_no_earning(client, auth_headers):
    parcel_id = (await submit(client, auth_headers))["insertedId"]

    response = await client.patch(f"/parcels/{parcel_id}/status", json={"status": "In-Transit"})

    assert response.status_code == 200
    assert response.json()["data"]["riderEarning"] is None


@pytest.mark.asyncio
async def test_status_update_errors(client, auth_headers):
    parcel_id = (await submit(client, auth_headers))["insertedId"]

    unknown_status = await client.patch(f"/parcels/{parcel_id}/status", json={"status": "Lost"})
    missing_status = await client.patch(f"/parcels/{parcel_id}/status", json={})
    bad_id = await client.patch("/parcels/abc/status", json={"status": "Delivered"})
    unknown_parcel = await client.patch(f"/parcels/{uuid.uuid4().hex}/status", json={"status": "Delivered"})

    assert unknown_status.status_code == 400
    assert missing_status.status_code == 400
    assert bad_id.status_code == 400
    assert unknown_parcel.status_code == 404
