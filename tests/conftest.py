import copy
import json
from collections import defaultdict
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core import mongodb
from app.core.config import settings
from app.core.security import verify_jwt
from app.main import app
from app.services import llm_gateway

TEST_USER = {"sub": "user-1", "language": "en"}


class FakeGateway:
    """Stands in for the LLM gateway and records every request it receives."""

    def __init__(self):
        self.content = "{}"
        self.status_code = 200
        self.payload = None
        self.requests = []
        self.headers = []

    def reply(self, content: str, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream failure")
        if self.payload is not None:
            return httpx.Response(200, json=self.payload)
        return httpx.Response(
            200, json={"choices": [{"message": {"content": self.content}}]}
        )

    @property
    def last_messages(self):
        return self.requests[-1]["messages"]


@pytest.fixture
def gateway(monkeypatch):
    fake = FakeGateway()
    monkeypatch.setattr(settings, "LLM_GATEWAY_API_KEY", "test-gateway-key")
    monkeypatch.setattr(
        llm_gateway,
        "_build_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(fake.handler)),
    )
    return fake


def _matches(doc: dict, query: dict) -> bool:
    for key, condition in query.items():
        if isinstance(condition, dict) and "$in" in condition:
            if doc.get(key) not in condition["$in"]:
                return False
        elif doc.get(key) != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs = sorted(self._docs, key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def limit(self, count):
        self._docs = self._docs[:count]
        return self

    async def _iterate(self):
        for doc in self._docs:
            yield doc

    def __aiter__(self):
        return self._iterate()


class FakeCollection:
    """In-memory stand-in for the motor collection calls the app makes."""

    def __init__(self):
        self.docs = {}

    def _find(self, query):
        return [copy.deepcopy(doc) for doc in self.docs.values() if _matches(doc, query)]

    async def find_one(self, query):
        found = self._find(query)
        return found[0] if found else None

    def find(self, query):
        return FakeCursor(self._find(query))

    async def replace_one(self, query, replacement, upsert=False):
        found = self._find(query)
        if found:
            del self.docs[found[0]["_id"]]
        elif not upsert:
            return SimpleNamespace(matched_count=0)
        self.docs[replacement["_id"]] = copy.deepcopy(replacement)
        return SimpleNamespace(matched_count=len(found))

    async def find_one_and_update(self, query, update, upsert=False, return_document=None):
        found = self._find(query)
        if not found:
            return None
        doc = self.docs[found[0]["_id"]]
        doc.update(copy.deepcopy(update["$set"]))
        return copy.deepcopy(doc)

    async def delete_one(self, query):
        found = self._find(query)[:1]
        for doc in found:
            del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=len(found))

    async def delete_many(self, query):
        found = self._find(query)
        for doc in found:
            del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=len(found))


@pytest.fixture
def fake_db(monkeypatch):
    """Routes every collection getter to in-memory collections."""
    db = defaultdict(FakeCollection)
    monkeypatch.setattr(mongodb, "get_database", lambda: db)
    return db


@pytest.fixture
def client():
    app.dependency_overrides[verify_jwt] = lambda: TEST_USER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def crop_form():
    return {
        "soilType": "Black soil",
        "soilPH": "6.8",
        "area": 5,
        "waterAccess": "Borewell",
        "previousCrops": "Cotton",
        "season": "Kharif",
        "budget": 50000,
        "marketPreference": "Local mandi",
        "location": "Dharwad, Karnataka",
    }


@pytest.fixture
def yield_form():
    return {
        "seedType": "Paddy",
        "plotSize": "2.5",
        "season": "Kharif",
        "location": "Mandya, Karnataka",
        "soilType": "Alluvial soil",
    }


@pytest.fixture
def recommendation_result():
    return {
        "recommendations": [
            {
                "cropName": "Soybean",
                "confidence": 88,
                "reasoning": "Black soil holds moisture well for soybean.",
                "expectedYield": "8-10 quintals per acre",
                "marketDemand": "Strong demand at local mandis",
                "riskLevel": "Low",
            },
            {
                "cropName": "Tur Dal",
                "confidence": 76,
                "reasoning": "Pigeon pea tolerates dry spells.",
                "expectedYield": "5-6 quintals per acre",
                "marketDemand": "Stable prices",
                "riskLevel": "Medium",
            },
        ],
        "summary": "Soybean is the best fit for the coming Kharif season.",
    }


@pytest.fixture
def yield_result():
    return {
        "predictedYield": "18-22 quintals per acre",
        "estimatedRevenue": "₹1,80,000 - ₹2,20,000",
        "profitEstimate": "₹80,000 - ₹1,20,000",
        "costBreakdown": {
            "seeds": "₹15,000",
            "fertilizer": "₹25,000",
            "irrigation": "₹20,000",
            "labor": "₹40,000",
            "total": "₹1,00,000",
        },
        "confidence": 78,
        "reasoning": "Good monsoon rainfall and fertile alluvial soil support a strong harvest.",
        "marketPrice": "₹2,183 per quintal (MSP)",
    }
