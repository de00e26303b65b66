import json

from fastapi.testclient import TestClient

from app.main import app
from app.models.crop_recommendation import CropRecommendationForm
from app.services.crop_recommendation_service import (
    build_crop_recommendation_prompt,
    language_instruction,
)


class TestCropRecommendationPrompt:
    def test_includes_farm_details(self, crop_form):
        prompt = build_crop_recommendation_prompt(CropRecommendationForm.model_validate(crop_form))

        assert "- Soil Type: Black soil" in prompt
        assert "- Soil pH: 6.8" in prompt
        assert "- Farm Area: 5 acres" in prompt
        assert "- Budget: ₹50000" in prompt
        assert "- Previous Crops: Cotton" in prompt

    def test_optional_lines_are_omitted(self, crop_form):
        del crop_form["soilPH"]
        crop_form["previousCrops"] = ""

        prompt = build_crop_recommendation_prompt(CropRecommendationForm.model_validate(crop_form))

        assert "Soil pH" not in prompt
        assert "Previous Crops" not in prompt

    def test_language_instruction(self):
        assert language_instruction(None) == ""
        assert language_instruction("en") == ""
        assert "Kannada" in language_instruction("kn")
        assert "Keep every JSON key in English." in language_instruction("hi")


class TestCropRecommendationRoute:
    def test_returns_recommendation(self, client, gateway, crop_form, recommendation_result):
        gateway.reply(f"```json\n{json.dumps(recommendation_result)}\n```")

        response = client.post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 200
        recommendation = response.json()["recommendation"]
        assert recommendation["summary"] == recommendation_result["summary"]
        assert recommendation["recommendations"][0]["cropName"] == "Soybean"
        assert recommendation["recommendations"][0]["riskLevel"] == "Low"

        messages = gateway.last_messages
        assert messages[0]["role"] == "system"
        assert "Location: Dharwad, Karnataka" in messages[1]["content"]

    def test_unparseable_reply(self, client, gateway, crop_form):
        gateway.reply("I would suggest planting soybean.")

        response = client.post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse AI recommendations"}

    def test_reply_with_wrong_shape(self, client, gateway, crop_form):
        gateway.reply(json.dumps({"crops": ["soybean"]}))

        response = client.post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Received an invalid response from the AI service."
        }

    def test_gateway_failure(self, client, gateway, crop_form):
        gateway.reply("", status_code=402)

        response = client.post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 500
        assert response.json() == {"error": "AI gateway error: 402"}

    def test_missing_required_field(self, client, gateway, crop_form):
        del crop_form["soilType"]

        response = client.post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 422
        assert gateway.requests == []

    def test_requires_token(self, gateway, crop_form):
        response = TestClient(app).post("/api/crop-recommendation", json=crop_form)

        assert response.status_code == 401
