import asyncio
from types import SimpleNamespace

import pytest

from app.core.config import settings
from app.core.errors import AIServiceError
from app.core.genai_client import get_transcription_client
from app.models.chat_session import ChatSession, Language, Message, Role
from app.services import assistant_service
from app.services.assistant_service import speech_locale, transcribe_audio


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def google_models(monkeypatch):
    models = FakeModels(text=" What fertilizer suits paddy? ")
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    monkeypatch.setattr(assistant_service, "get_transcription_client", lambda: client)
    return models


@pytest.fixture
def chat_store(monkeypatch):
    """In-memory replacement for the chat session collections."""
    store = SimpleNamespace(
        chat=ChatSession(id="chat-1", user_id="user-1", language=Language.HINDI),
        history=[
            Message(chat_id="chat-1", role=Role.USER, content="When should I sow wheat?"),
            Message(chat_id="chat-1", role=Role.ASSISTANT, content="Early November."),
        ],
        saved=[],
    )

    async def get_owned_chat_session(chat_id, user_id):
        return store.chat

    async def get_messages_from_chat_session_id(chat_id, limit=None):
        return list(store.history)

    async def save_message(message):
        store.saved.append(message)
        return message

    monkeypatch.setattr(assistant_service, "get_owned_chat_session", get_owned_chat_session)
    monkeypatch.setattr(
        assistant_service,
        "get_messages_from_chat_session_id",
        get_messages_from_chat_session_id,
    )
    monkeypatch.setattr(assistant_service, "save_message", save_message)
    return store


class TestSpeechLocale:
    def test_known_languages(self):
        assert speech_locale(Language.KANNADA) == "kn-IN"
        assert speech_locale(Language.HINDI) == "hi-IN"

    def test_english_default(self):
        assert speech_locale(Language.ENGLISH) == "en-US"


class TestTranscription:
    def test_strips_transcript(self, google_models):
        text = asyncio.run(transcribe_audio(b"\x1a\x45\xdf\xa3", "audio/webm", Language.KANNADA))

        assert text == "What fertilizer suits paddy?"
        assert "Kannada" in google_models.calls[0]["contents"][1]

    def test_empty_upload(self, google_models):
        with pytest.raises(AIServiceError) as exc_info:
            asyncio.run(transcribe_audio(b"", "audio/webm"))

        assert exc_info.value.status_code == 400
        assert google_models.calls == []

    def test_provider_failure(self, google_models):
        google_models.error = RuntimeError("quota exceeded")

        with pytest.raises(AIServiceError) as exc_info:
            asyncio.run(transcribe_audio(b"audio", "audio/webm"))

        assert exc_info.value.message == "Voice processing failed."

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
        get_transcription_client.cache_clear()

        with pytest.raises(AIServiceError) as exc_info:
            asyncio.run(transcribe_audio(b"audio", "audio/webm"))

        assert exc_info.value.message == "GEMINI_API_KEY is not configured"
        get_transcription_client.cache_clear()

    def test_blank_transcript(self, google_models):
        google_models.text = "   "

        with pytest.raises(AIServiceError) as exc_info:
            asyncio.run(transcribe_audio(b"audio", None))

        assert exc_info.value.message == "Voice processing failed."


class TestVoiceAssistantRoute:
    def test_returns_transcription(self, client, google_models):
        response = client.post(
            "/api/voice-assistant",
            files={"audio": ("question.webm", b"\x1a\x45\xdf\xa3", "audio/webm")},
            data={"lang": "hi"},
        )

        assert response.status_code == 200
        assert response.json() == {"transcription": "What fertilizer suits paddy?"}

    def test_empty_audio(self, client, google_models):
        response = client.post(
            "/api/voice-assistant",
            files={"audio": ("question.webm", b"", "audio/webm")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Empty audio upload"}

    def test_unsupported_language(self, client, google_models):
        response = client.post(
            "/api/voice-assistant",
            files={"audio": ("question.webm", b"audio", "audio/webm")},
            data={"lang": "fr"},
        )

        assert response.status_code == 422


class TestAIAssistantRoute:
    def test_reply_with_speech_locale(self, client, gateway):
        gateway.reply("  Use 120 kg of urea per hectare.  ")

        response = client.post(
            "/api/ai-assistant", json={"message": "How much urea?", "lang": "hi"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "reply": "Use 120 kg of urea per hectare.",
            "speech_lang": "hi-IN",
            "chat_id": None,
        }
        system = gateway.last_messages[0]
        assert system["role"] == "system"
        assert system["content"].endswith("User specified language: Hindi")
        assert gateway.last_messages[-1] == {"role": "user", "content": "How much urea?"}

    def test_blank_message(self, client, gateway):
        response = client.post("/api/ai-assistant", json={"message": "   "})

        assert response.status_code == 422
        assert gateway.requests == []

    def test_continues_chat_session(self, client, gateway, chat_store):
        gateway.reply("Sow by mid November.")

        response = client.post(
            "/api/ai-assistant",
            json={"message": "Is it too late now?", "lang": "en", "chat_id": "chat-1"},
        )

        assert response.status_code == 200
        assert response.json()["chat_id"] == "chat-1"
        assert [m["role"] for m in gateway.last_messages] == [
            "system",
            "user",
            "assistant",
            "user",
        ]
        assert [(m.role, m.content) for m in chat_store.saved] == [
            (Role.USER, "Is it too late now?"),
            (Role.ASSISTANT, "Sow by mid November."),
        ]

    def test_gateway_failure(self, client, gateway):
        gateway.reply("", status_code=503)

        response = client.post("/api/ai-assistant", json={"message": "Hello"})

        assert response.status_code == 500
        assert response.json() == {"error": "AI gateway error: 503"}
