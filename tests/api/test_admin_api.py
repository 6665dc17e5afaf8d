"""
Tests de los endpoints de administración: miembros, notificaciones y
validaciones de efectivo.
"""


def gym_headers(gym):
    return {"X-Gym-ID": str(gym.id)}


class TestMembersEndpoint:

    def test_duplicate_member_conflict(self, client, gym, member):
        payload = {"name": "Luis", "email": "luis@test.com"}

        response = client.post("/api/v1/members", json=payload, headers=gym_headers(gym))
        forced = client.post("/api/v1/members", json={**payload, "force": True}, headers=gym_headers(gym))

        assert response.status_code == 409
        assert response.json()["details"]["member_ids"] == [member.id]
        assert forced.status_code == 201

    def test_inverted_membership_window(self, client, gym):
        response = client.post("/api/v1/members", json={
            "name": "Eva", "join_date": "2024-06-10", "membership_valid_until": "2024-06-01",
        }, headers=gym_headers(gym))

        assert response.status_code == 422


class TestCashValidationFlow:

    def test_create_confirm_and_inbox(self, client, gym):
        created = client.post("/api/v1/cash-validations", json={
            "member_name": "Carlos Díaz", "plan_name": "Mensual", "duration_months": 1, "amount": "500",
        }, headers=gym_headers(gym))
        code = created.json()["validation_code"]

        pending = client.get("/api/v1/cash-validations/pending", headers=gym_headers(gym)).json()
        confirmed = client.put(f"/api/v1/cash-validations/{code}/confirm")
        again = client.put(f"/api/v1/cash-validations/{code}/reject")
        inbox = client.get("/api/v1/notifications", headers=gym_headers(gym)).json()

        assert created.status_code == 201
        assert [v["validation_code"] for v in pending["validations"]] == [code]
        assert confirmed.status_code == 200
        assert confirmed.json()["validation"]["status"] == "confirmed"
        assert confirmed.json()["validation"]["member_id"] is not None
        assert again.status_code == 400
        assert inbox["notifications"][0]["priority"] == "high"

    def test_unknown_code(self, client):
        response = client.get("/api/v1/cash-validations/XXXXXX")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_mark_notification_read(self, client, gym):
        client.post("/api/v1/cash-validations", json={
            "member_name": "Carlos Díaz", "plan_name": "Mensual", "amount": "500",
        }, headers=gym_headers(gym))
        notification_id = client.get("/api/v1/notifications", headers=gym_headers(gym)).json()["notifications"][0]["id"]

        response = client.put(f"/api/v1/notifications/{notification_id}/read", headers=gym_headers(gym))
        unread = client.get("/api/v1/notifications", params={"unread_only": True}, headers=gym_headers(gym)).json()

        assert response.json()["notification"]["is_read"] is True
        assert unread["notifications"] == []
