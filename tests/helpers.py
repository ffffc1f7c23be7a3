"""Shared request helpers for the API tests."""
from datetime import datetime, timedelta

PASSWORD = "TestPassword123"

# Too large for a 64-bit INTEGER column
OUT_OF_RANGE_ID = 2 ** 70


def future(hours: int = 24) -> str:
    return (datetime.utcnow() + timedelta(hours=hours)).isoformat()


def past(hours: int = 24) -> str:
    return (datetime.utcnow() - timedelta(hours=hours)).isoformat()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name: str, email: str, role: str = "patient", password: str = PASSWORD) -> dict:
    """Register a user and return its JSON plus ready-made auth headers."""
    response = client.post(
        "/api/v1/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    data = response.json()
    data["headers"] = auth_headers(data["token"])
    return data


def book(client, patient: dict, doctor: dict, hours: int = 24, notes: str = "") -> dict:
    response = client.post(
        "/api/v1/appointments",
        json={"doctorId": doctor["id"], "appointmentDate": future(hours), "notes": notes},
        headers=patient["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


def prescribe(client, doctor: dict, appointment: dict, medications=None, instructions: str = "") -> dict:
    if medications is None:
        medications = [{"name": "Amoxicillin", "dosage": "500mg", "frequency": "Three times a day"}]
    response = client.post(
        "/api/v1/prescriptions",
        json={
            "appointmentId": appointment["id"],
            "medications": medications,
            "instructions": instructions,
        },
        headers=doctor["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()
