"""Chat Client - hosted chat completions with a rule-based fallback.

Without an API key, or when the hosted call fails for any reason, the
reply comes from core.chat_rules instead. No retries.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Literal

from openai import OpenAI
from pydantic import BaseModel

from ..core.chat_rules import fallback_reply


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a supportive mental health assistant. Provide empathetic, helpful, and "
    "evidence-based general advice. Always remind users that you are not a replacement "
    "for professional help. Keep responses concise and supportive. Reference HSE "
    "(Health Service Executive) resources when appropriate."
)


class ChatMessage(BaseModel):
    """One turn of the conversation."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class ChatConfig:
    """Configuration for the hosted chat model.

    Attributes:
        model: Chat completion model name
        max_tokens: Reply length cap
        temperature: Sampling temperature
        base_url: Override for OpenAI-compatible endpoints (None for default)
    """

    model: str = "gpt-3.5-turbo"
    max_tokens: int = 300
    temperature: float = 0.7
    base_url: str | None = None

    @classmethod
    def from_env(cls) -> "ChatConfig":
        return cls(
            model=os.environ.get("MOODGARDEN_CHAT_MODEL", "gpt-3.5-turbo"),
            base_url=os.environ.get("OPENAI_BASE_URL"),
        )


class ChatAssistant:
    """Support chat that prefers the hosted model and falls back to rules."""

    def __init__(
        self,
        api_key_source: Callable[[], str | None],
        config: ChatConfig | None = None,
        client_factory: Callable[..., OpenAI] = OpenAI,
    ) -> None:
        """Initialize chat assistant.

        Args:
            api_key_source: Returns the current API key, or None
            config: Model configuration
            client_factory: Builds the OpenAI client for a given key
        """
        self._api_key_source = api_key_source
        self.config = config or ChatConfig()
        self._client_factory = client_factory

    def _build_messages(self, history: list[ChatMessage], user_text: str) -> list[dict]:
        return (
            [{"role": "system", "content": SYSTEM_PROMPT}]
            + [{"role": m.role, "content": m.content} for m in history]
            + [{"role": "user", "content": user_text}]
        )

    def reply(self, history: list[ChatMessage], user_text: str) -> str:
        """Answer a user message.

        Args:
            history: Earlier turns, oldest first
            user_text: The new message

        Returns:
            The hosted model's reply, or the rule-based reply on any failure
        """
        api_key = self._api_key_source() or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            return fallback_reply(user_text)

        try:
            kwargs = {"api_key": api_key}
            if self.config.base_url:
                kwargs["base_url"] = self.config.base_url
            client = self._client_factory(**kwargs)
            response = client.chat.completions.create(
                model=self.config.model,
                messages=self._build_messages(history, user_text),
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
            content = response.choices[0].message.content if response.choices else None
            if not content:
                raise ValueError("empty completion")
            return content
        except Exception as e:
            logger.error("Chat completion failed, using fallback: %s", str(e))
            return fallback_reply(user_text)
