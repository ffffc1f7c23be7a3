"""End-to-end flows across accounts, appointments and prescriptions."""
import inspect

from fastapi.routing import APIRoute

from app.main import app

from .helpers import future, register


def app_callables(dependant):
    """Yield every dependency callable defined in this project, depth first."""
    for dependency in dependant.dependencies:
        if getattr(dependency.call, "__module__", "").startswith("app."):
            yield dependency.call
        yield from app_callables(dependency)


class TestHandlers:

    def test_api_handlers_and_dependencies_are_sync(self):
        # Blocking database and bcrypt work must run in the threadpool
        routes = [route for route in app.routes if isinstance(route, APIRoute) and route.tags]
        assert routes

        for route in routes:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path
            for call in app_callables(route.dependant):
                assert not inspect.iscoroutinefunction(call), f"{route.path}: {call.__name__}"


class TestClinicFlow:

    def test_booking_completion_and_cancel(self, client):
        doctor = register(client, "Dr. Dana", "dana@clinic.example", "doctor")
        patient = register(client, "Pat", "pat@example.com", "patient")

        booked = client.post(
            "/api/v1/appointments",
            json={"doctorId": doctor["id"], "appointmentDate": future(24)},
            headers=patient["headers"],
        )
        assert booked.status_code == 201
        appointment_id = booked.json()["id"]

        listing = client.get("/api/v1/appointments", headers=doctor["headers"]).json()
        assert len(listing) == 1
        assert listing[0]["patientId"] == patient["id"]

        completed = client.put(
            f"/api/v1/appointments/{appointment_id}/status",
            json={"status": "completed"},
            headers=doctor["headers"],
        )
        assert completed.status_code == 200

        # Cancelling does not depend on the prior status
        cancelled = client.delete(
            f"/api/v1/appointments/{appointment_id}", headers=patient["headers"]
        )
        assert cancelled.status_code == 200

    def test_prescription_lifecycle(self, client):
        doctor = register(client, "Dr. Dana", "dana@clinic.example", "doctor")
        patient = register(client, "Pat", "pat@example.com", "patient")
        appointment = client.post(
            "/api/v1/appointments",
            json={"doctorId": doctor["id"], "appointmentDate": future(24)},
            headers=patient["headers"],
        ).json()

        created = client.post(
            "/api/v1/prescriptions",
            json={
                "appointmentId": appointment["id"],
                "medications": [
                    {"name": "Ibuprofen", "dosage": "200mg", "frequency": "Every 6 hours"},
                    {"name": "Omeprazole", "dosage": "20mg", "frequency": "Once a day"},
                ],
                "instructions": "Take with food",
            },
            headers=doctor["headers"],
        )
        assert created.status_code == 201
        prescription_id = created.json()["id"]

        url = f"/api/v1/prescriptions/user/{patient['id']}"
        found = client.get(url, headers=patient["headers"]).json()
        assert len(found) == 1
        assert found[0]["appointment"]["patient"]["email"] == patient["email"]
        assert len(found[0]["medications"]) == 2

        deleted = client.delete(
            f"/api/v1/prescriptions/{prescription_id}", headers=doctor["headers"]
        )
        assert deleted.status_code == 200

        assert client.get(url, headers=patient["headers"]).json() == []
