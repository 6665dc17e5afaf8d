"""
Tests de los endpoints de reservas de prueba.
"""

from datetime import date

from gymtrials.core.timezone_utils import utcnow
from gymtrials.models.trial import TrialHistoryEntry

API = "/api/v1/trial-bookings"


def booking_payload(gym, preferred_date="2030-03-04", **kwargs):
    payload = {
        "name": "Ana García",
        "email": "ana@test.com",
        "phone": "5551234567",
        "gym_id": gym.id,
        "session_type": "trial",
        "preferred_date": preferred_date,
        "preferred_time": "morning",
    }
    payload.update(kwargs)
    return payload


def user_headers(user):
    return {"X-User-ID": str(user.id)}


class TestBookTrialEndpoint:

    def test_book_with_identity(self, client, db, gym, user):
        response = client.post(f"{API}/book-trial", json=booking_payload(gym), headers=user_headers(user))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["booking"]["status"] == "pending"
        assert data["booking"]["user_id"] == user.id
        assert db.query(TrialHistoryEntry).filter_by(user_id=user.id).count() == 1

    def test_anonymous_booking(self, client, db, gym):
        response = client.post(f"{API}/book-trial", json=booking_payload(gym, session_type="consultation"))

        assert response.status_code == 200
        assert response.json()["booking"]["user_id"] is None

    def test_limit_exceeded_returns_restrictions(self, client, gym, make_user):
        user = make_user(total=3, used=3, reset=utcnow())

        response = client.post(f"{API}/book-trial", json=booking_payload(gym), headers=user_headers(user))

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["restrictions"]["remaining_trials"] == 0
        assert "next_reset_date" in data["restrictions"]

    def test_spacing_between_trials(self, client, gym, user):
        client.post(f"{API}/book-trial", json=booking_payload(gym, "2030-03-04"), headers=user_headers(user))

        response = client.post(f"{API}/book-trial", json=booking_payload(gym, "2030-03-20"), headers=user_headers(user))

        assert response.status_code == 400
        assert response.json()["restrictions"]["next_eligible_date"] == "2030-04-03"

    def test_missing_fields(self, client, gym):
        payload = booking_payload(gym)
        del payload["phone"]

        response = client.post(f"{API}/book-trial", json=payload)

        assert response.status_code == 422
        assert response.json()["success"] is False
        assert response.json()["errors"]

    def test_unknown_gym(self, client, gym):
        payload = booking_payload(gym, gym_id=999)

        response = client.post(f"{API}/book-trial", json=payload)

        assert response.status_code == 404


class TestTrialEndpoints:

    def test_trial_status_requires_identity(self, client):
        response = client.get(f"{API}/trial-status")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_trial_status(self, client, user):
        response = client.get(f"{API}/trial-status", headers=user_headers(user))

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["total_trials"] == 3
        assert data["used_trials"] + data["remaining_trials"] == 3

    def test_check_availability_bad_date(self, client, gym, user):
        response = client.get(
            f"{API}/check-availability", params={"gym_id": gym.id, "date": "04/03/2030"}, headers=user_headers(user)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "InvalidArgument"

    def test_check_availability_trailing_garbage(self, client, gym, user):
        response = client.get(
            f"{API}/check-availability", params={"gym_id": gym.id, "date": "2030-03-04xyz"}, headers=user_headers(user)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "InvalidArgument"

    def test_check_availability(self, client, gym, user):
        response = client.get(
            f"{API}/check-availability", params={"gym_id": gym.id, "date": "2030-03-04"}, headers=user_headers(user)
        )

        assert response.status_code == 200
        assert response.json()["can_book"] is True

    def test_cancel_by_other_user(self, client, gym, user, make_user):
        booked = client.post(f"{API}/book-trial", json=booking_payload(gym), headers=user_headers(user)).json()
        intruder = make_user(email="otro@test.com")

        response = client.put(f"{API}/cancel/{booked['booking']['id']}", headers=user_headers(intruder))

        assert response.status_code == 403

    def test_cancel_refunds_trial(self, client, db, gym, user):
        booked = client.post(f"{API}/book-trial", json=booking_payload(gym), headers=user_headers(user)).json()

        response = client.put(f"{API}/cancel/{booked['booking']['id']}", headers=user_headers(user))
        db.refresh(user)

        assert response.status_code == 200
        assert response.json()["booking"]["status"] == "cancelled"
        assert user.remaining_trials == user.total_trials

    def test_admin_status_and_listing(self, client, gym, user):
        booked = client.post(f"{API}/book-trial", json=booking_payload(gym), headers=user_headers(user)).json()

        response = client.put(
            f"{API}/booking/{booked['booking']['id']}/status", json={"status": "no-show"}
        )
        listing = client.get(f"{API}/bookings", params={"gym_id": gym.id, "status": "no-show"}).json()

        assert response.status_code == 200
        assert listing["total"] == 1
        assert listing["current_page"] == 1

    def test_admin_invalid_status(self, client, gym, make_booking):
        booking = make_booking(gym, preferred_date=date(2030, 3, 4))

        response = client.put(f"{API}/booking/{booking.id}/status", json={"status": "lost"})

        assert response.status_code == 400
        assert response.json()["code"] == "InvalidStatus"
