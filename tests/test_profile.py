import pytest

from app.api.rest_routes import profile as profile_routes
from app.models.profile import Profile


@pytest.fixture
def profiles(monkeypatch):
    """Profile rows keyed by user id, standing in for the profiles collection."""
    rows = {
        "user-1": Profile(id="user-1", full_name="Ravi Kumar", phone_number="+91 98765 43210")
    }

    async def get_profile_from_user_id(user_id):
        return rows.get(user_id)

    async def update_profile(user_id, update):
        if user_id not in rows:
            return None
        rows[user_id] = Profile(id=user_id, **update.model_dump())
        return rows[user_id]

    monkeypatch.setattr(profile_routes, "get_profile_from_user_id", get_profile_from_user_id)
    monkeypatch.setattr(profile_routes, "update_profile", update_profile)
    return rows


class TestGetProfile:
    def test_own_profile(self, client, profiles):
        response = client.get("/profile/")

        assert response.status_code == 200
        body = response.json()
        assert body["_id"] == "user-1"
        assert body["full_name"] == "Ravi Kumar"
        assert body["farm_size_acres"] is None

    def test_missing_profile(self, client, profiles):
        profiles.clear()

        response = client.get("/profile/")

        assert response.status_code == 404
        assert response.json() == {"detail": "Profile not found."}


class TestUpdateProfile:
    def test_updates_fields(self, client, profiles):
        response = client.put(
            "/profile/",
            json={
                "full_name": "Ravi K",
                "phone_number": "+91 98765 43210",
                "farm_location": "Dharwad, Karnataka",
                "farm_size_acres": 5.5,
                "primary_crops": "Cotton, Soybean",
            },
        )

        assert response.status_code == 200
        assert response.json()["farm_location"] == "Dharwad, Karnataka"
        assert profiles["user-1"].farm_size_acres == 5.5

    def test_does_not_create_rows(self, client, profiles):
        profiles.clear()

        response = client.put("/profile/", json={"full_name": "Ravi K"})

        assert response.status_code == 404
        assert profiles == {}

    def test_full_name_is_required(self, client, profiles):
        response = client.put("/profile/", json={"full_name": ""})

        assert response.status_code == 422

    def test_negative_farm_size(self, client, profiles):
        response = client.put("/profile/", json={"full_name": "Ravi", "farm_size_acres": -1})

        assert response.status_code == 422


class TestProfilePdf:
    def test_download(self, client, profiles):
        response = client.get("/profile/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="profile_report.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    def test_missing_profile(self, client, profiles):
        profiles.clear()

        response = client.get("/profile/pdf")

        assert response.status_code == 404
