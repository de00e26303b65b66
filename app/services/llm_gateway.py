import json
import logging
import re
from typing import Any, Optional, Sequence

import httpx
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from app.core.config import settings
from app.core.errors import AIServiceError

logger = logging.getLogger(__name__)

_GATEWAY_ROLES = {"system": "system", "human": "user", "ai": "assistant"}

_FENCE_OPEN = re.compile(r"```json\n?")
_FENCE_CLOSE = re.compile(r"```\n?")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def build_prompt_messages(
    system_prompt: str,
    prompt: str,
    history: Optional[Sequence[BaseMessage]] = None,
) -> list[BaseMessage]:
    template = ChatPromptTemplate.from_messages(
        [
            ("system", "{system_prompt}"),
            MessagesPlaceholder("history", optional=True),
            ("human", "{prompt}"),
        ]
    )
    return template.format_messages(
        system_prompt=system_prompt,
        prompt=prompt,
        history=list(history or []),
    )


def to_gateway_messages(messages: Sequence[BaseMessage]) -> list[dict[str, str]]:
    return [
        {"role": _GATEWAY_ROLES.get(message.type, "user"), "content": message.content}
        for message in messages
    ]


def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS)


def _extract_content(data: Any) -> Optional[str]:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) and content.strip() else None


async def chat_completion(
    messages: Sequence[BaseMessage], model: Optional[str] = None
) -> str:
    """
    Sends one chat-completion request to the LLM gateway and returns the
    text of the first choice.
    """
    if not settings.LLM_GATEWAY_API_KEY:
        raise AIServiceError("LLM_GATEWAY_API_KEY is not configured")

    payload = {
        "model": model or settings.LLM_MODEL,
        "messages": to_gateway_messages(messages),
    }
    headers = {
        "Authorization": f"Bearer {settings.LLM_GATEWAY_API_KEY}",
        "Content-Type": "application/json",
    }

    try:
        async with _build_client() as client:
            response = await client.post(
                settings.LLM_GATEWAY_URL, json=payload, headers=headers
            )
    except httpx.HTTPError as e:
        logger.exception("AI gateway request failed")
        raise AIServiceError(f"AI gateway request failed: {e.__class__.__name__}") from e

    if not response.is_success:
        logger.error("AI gateway error: %s %s", response.status_code, response.text)
        raise AIServiceError(f"AI gateway error: {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise AIServiceError("No content in AI response") from e

    content = _extract_content(data)
    if content is None:
        raise AIServiceError("No content in AI response")

    logger.info("AI response received")
    return content


def strip_markdown_fences(text: str) -> str:
    return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text)).strip()


def parse_fenced_json(text: str) -> Any:
    """Parses a reply that is JSON, possibly wrapped in ```json fences."""
    return json.loads(strip_markdown_fences(text))


def parse_embedded_json(text: str) -> Any:
    """Parses the outermost ``{...}`` object found anywhere in the reply."""
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ValueError("No JSON object found in AI response")
    return json.loads(match.group(0))
