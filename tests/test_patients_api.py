import pytest
from httpx import AsyncClient

PATIENT_PAYLOAD = {
    "mrn": "MRN-10021",
    "first_name": "Neima",
    "last_name": "Brandon",
    "dob": "1991-04-12",
}


@pytest.mark.asyncio
async def test_create_and_search_patient(client: AsyncClient):
    response = await client.post("/api/v1/patients", json=PATIENT_PAYLOAD)
    assert response.status_code == 201
    assert response.json()["mrn"] == "MRN-10021"

    response = await client.get("/api/v1/patients/search", params={"mrn": " MRN-10021 "})
    assert response.status_code == 200
    data = response.json()
    assert data["found"] is True
    assert data["patient"]["first_name"] == "Neima"
    assert data["patient"]["dob"] == "1991-04-12"


@pytest.mark.asyncio
async def test_search_unknown_mrn(client: AsyncClient):
    response = await client.get("/api/v1/patients/search", params={"mrn": "MRN-00000"})
    assert response.status_code == 200
    assert response.json() == {"found": False, "patient": None}


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"mrn": "   "}])
async def test_search_requires_mrn(client: AsyncClient, params):
    response = await client.get("/api/v1/patients/search", params=params)
    assert response.status_code == 400
    assert response.json()["detail"] == "MRN is required"


@pytest.mark.asyncio
async def test_duplicate_patient_conflict(client: AsyncClient):
    await client.post("/api/v1/patients", json=PATIENT_PAYLOAD)
    response = await client.post("/api/v1/patients", json={**PATIENT_PAYLOAD, "first_name": "Other"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_list_patients_sorted_by_name(client: AsyncClient):
    await client.post("/api/v1/patients", json=PATIENT_PAYLOAD)
    await client.post(
        "/api/v1/patients",
        json={"mrn": "MRN-10025", "first_name": "Karen", "last_name": "Hall", "dob": "1945-02-14"},
    )

    response = await client.get("/api/v1/patients")
    assert [p["last_name"] for p in response.json()] == ["Brandon", "Hall"]


@pytest.mark.asyncio
async def test_create_patient_rejects_bad_dob(client: AsyncClient):
    response = await client.post("/api/v1/patients", json={**PATIENT_PAYLOAD, "dob": "not-a-date"})
    assert response.status_code == 422
