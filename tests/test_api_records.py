"""
API tests for staff, services, activities, targets and leave.
"""

import pytest


async def create_staff(client, name="Alex", **fields):
    response = await client.post("/api/v1/staff", json={"name": name, **fields})
    assert response.status_code == 201
    return response.json()


async def service_ids(client):
    response = await client.get("/api/v1/services")
    return {item["service_name"]: item["id"] for item in response.json()["items"]}


@pytest.mark.asyncio
async def test_staff_crud(test_client):
    created = await create_staff(test_client, "Alex", home_region="scotland")
    assert created["home_region"] == "scotland"
    assert created["role"] == "staff"

    response = await test_client.put(f"/api/v1/staff/{created['id']}", json={"is_hidden": True})
    assert response.status_code == 200
    assert response.json()["is_hidden"] is True

    visible = await test_client.get("/api/v1/staff")
    everyone = await test_client.get("/api/v1/staff", params={"include_hidden": True})
    assert visible.json()["total"] == 0
    assert everyone.json()["total"] == 1

    response = await test_client.delete(f"/api/v1/staff/{created['id']}")
    assert response.status_code == 204

    response = await test_client.get(f"/api/v1/staff/{created['id']}")
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Staff member not found"


@pytest.mark.asyncio
async def test_seeded_services_and_duplicate_name(test_client):
    services = await service_ids(test_client)
    assert set(services) == {"Accounts", "VAT", "Self Assessments"}

    response = await test_client.post("/api/v1/services", json={"service_name": "Payroll"})
    assert response.status_code == 201

    response = await test_client.post("/api/v1/services", json={"service_name": "vat"})
    assert response.status_code == 400
    assert "already exists" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_activity_upsert_replaces_the_day(test_client):
    staff = await create_staff(test_client)
    vat = (await service_ids(test_client))["VAT"]
    entry = {"staff_id": staff["id"], "service_id": vat, "date": "2025-06-10", "delivered_count": 3}

    first = await test_client.put("/api/v1/activities", json=entry)
    second = await test_client.put("/api/v1/activities", json={**entry, "delivered_count": 5})

    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["month"] == 6

    listing = await test_client.get(
        "/api/v1/activities",
        params={"staff_id": staff["id"], "start_date": "2025-06-01", "end_date": "2025-06-30"},
    )
    assert listing.json()["total"] == 1
    assert listing.json()["total_delivered"] == 5


@pytest.mark.asyncio
async def test_activity_rejects_unknown_staff_and_negative_counts(test_client):
    vat = (await service_ids(test_client))["VAT"]

    response = await test_client.put(
        "/api/v1/activities",
        json={"staff_id": 999, "service_id": vat, "date": "2025-06-10", "delivered_count": 1},
    )
    assert response.status_code == 404

    response = await test_client.put(
        "/api/v1/activities",
        json={"staff_id": 1, "service_id": vat, "date": "2025-06-10", "delivered_count": -1},
    )
    assert response.status_code == 422
    assert response.json()["error"]["message"] == "Validation error"


@pytest.mark.asyncio
async def test_monthly_targets_replace_and_total(test_client):
    staff = await create_staff(test_client)
    services = await service_ids(test_client)
    payload = {
        "staff_id": staff["id"],
        "month": 1,
        "financial_year_start": 2025,
        "targets": [
            {"service_id": services["Accounts"], "target_value": 10},
            {"service_id": services["VAT"], "target_value": 4},
        ],
    }

    response = await test_client.put("/api/v1/targets/monthly", json=payload)
    assert response.status_code == 200
    assert response.json()["year"] == 2026
    assert response.json()["total_target"] == 14

    payload["targets"] = [{"service_id": services["VAT"], "target_value": 6}]
    await test_client.put("/api/v1/targets/monthly", json=payload)

    response = await test_client.get(
        "/api/v1/targets/monthly", params={"month": 1, "financial_year_start": 2025}
    )
    data = response.json()
    assert data["total_target"] == 6
    assert data["per_service"] == {str(services["VAT"]): 6}


@pytest.mark.asyncio
async def test_duplicate_service_in_targets_is_rejected(test_client):
    staff = await create_staff(test_client)
    vat = (await service_ids(test_client))["VAT"]

    response = await test_client.put(
        "/api/v1/targets/monthly",
        json={
            "staff_id": staff["id"],
            "month": 5,
            "financial_year_start": 2025,
            "targets": [{"service_id": vat, "target_value": 1}, {"service_id": vat, "target_value": 2}],
        },
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_leave_crud_and_range_validation(test_client):
    staff = await create_staff(test_client)

    response = await test_client.post(
        "/api/v1/leave",
        json={"staff_id": staff["id"], "start_date": "2025-06-20", "end_date": "2025-06-18"},
    )
    assert response.status_code == 422

    response = await test_client.post(
        "/api/v1/leave",
        json={"staff_id": staff["id"], "start_date": "2025-06-18", "end_date": "2025-06-20"},
    )
    assert response.status_code == 201
    leave = response.json()
    assert leave["type"] == "annual"

    response = await test_client.put(f"/api/v1/leave/{leave['id']}", json={"end_date": "2025-06-23"})
    assert response.status_code == 200
    assert response.json()["end_date"] == "2025-06-23"

    listing = await test_client.get("/api/v1/leave", params={"staff_id": staff["id"]})
    assert listing.json()["total"] == 1

    response = await test_client.delete(f"/api/v1/leave/{leave['id']}")
    assert response.status_code == 204
    response = await test_client.get(f"/api/v1/leave/{leave['id']}")
    assert response.status_code == 404
