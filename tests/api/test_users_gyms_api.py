class TestUsersAndGyms:

    def test_create_user_with_default_quota(self, client):
        response = client.post("/api/v1/users", json={"email": "nuevo@test.com", "first_name": "Nuevo"})

        user = response.json()["user"]
        assert response.status_code == 201
        assert user["email"] == "nuevo@test.com"

        status = client.get(f"/api/v1/users/{user['id']}/trial-status").json()["data"]
        assert status["total_trials"] == 3
        assert status["used_trials"] == 0
        assert status["remaining_trials"] == 3

    def test_duplicate_email(self, client, user):
        response = client.post("/api/v1/users", json={"email": user.email})

        assert response.status_code == 409
        assert response.json()["code"] == "DuplicateEmail"

    def test_create_and_get_gym(self, client):
        created = client.post("/api/v1/gyms", json={
            "name": "Gym Sur", "timezone": "Europe/Madrid", "trial_retry_spacing_days": 14,
        })
        gym_id = created.json()["gym"]["id"]

        response = client.get(f"/api/v1/gyms/{gym_id}")

        assert created.status_code == 201
        assert response.json()["gym"]["trial_retry_spacing_days"] == 14

    def test_unknown_gym(self, client):
        assert client.get("/api/v1/gyms/999").status_code == 404
