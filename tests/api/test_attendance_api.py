API = "/api/v1/attendance"


def gym_headers(gym):
    return {"X-Gym-ID": str(gym.id)}


class TestAttendanceEndpoints:

    def test_missing_tenant_header(self, client):
        response = client.get(f"{API}/date/2024-06-10")

        assert response.status_code == 400
        assert response.json()["code"] == "MissingTenant"

    def test_mark_and_read_day(self, client, gym, member, trainer):
        client.post(API, json={
            "person_id": member.id, "person_type": "member", "date": "2024-06-10", "status": "present",
            "check_in_time": "07:45:00",
        }, headers=gym_headers(gym))
        client.post(f"{API}/bulk", json={"attendance_records": [
            {"person_id": trainer.id, "person_type": "trainer", "date": "2024-06-10", "status": "absent"},
        ]}, headers=gym_headers(gym))

        response = client.get(f"{API}/date/2024-06-10", headers=gym_headers(gym))

        attendance = response.json()["attendance"]
        assert response.status_code == 200
        assert attendance[f"member_{member.id}"]["status"] == "present"
        assert attendance[f"trainer_{trainer.id}"]["status"] == "absent"

    def test_mark_unknown_person(self, client, gym):
        response = client.post(API, json={
            "person_id": 404, "person_type": "member", "date": "2024-06-10", "status": "present",
        }, headers=gym_headers(gym))

        assert response.status_code == 404

    def test_calendar(self, client, gym, member):
        response = client.get(
            f"{API}/calendar/member/{member.id}", params={"year": 2024, "month": 6}, headers=gym_headers(gym)
        )

        calendar = response.json()["calendar"]
        assert response.status_code == 200
        assert len(calendar["days"]) == 42
        assert calendar["days"][0]["date"] == "2024-05-26"
        assert calendar["stats"]["total_working_days"] == 14

    def test_summary_inverted_range(self, client, gym):
        response = client.get(f"{API}/summary/2024-06-10/2024-06-01", headers=gym_headers(gym))

        assert response.status_code == 400

    def test_monthly_stats_without_redis(self, client, gym, member):
        client.post(API, json={
            "person_id": member.id, "person_type": "member", "date": "2024-06-10", "status": "present",
        }, headers=gym_headers(gym))

        response = client.get(f"{API}/stats/6/2024", headers=gym_headers(gym))

        assert response.status_code == 200
        assert response.json()["stats"]["member_stats"]["present"] == 1
