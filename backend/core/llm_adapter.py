"""Gemini chat model adapter.

One shared, stateless connector per process. Each model call is a single
attempt with a timeout: provider failures surface as UpstreamError and are
never retried here.
"""

import structlog
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from backend.core.config import RelayConfig
from backend.core.errors import ConfigError, UpstreamError

logger = structlog.get_logger(__name__)

MISSING_KEY_MESSAGE = "GEMINI_API_KEY missing in .env"


class LLMAdapter:
    """Wraps the Gemini chat models used by the generation and chat endpoints."""

    def __init__(self, config: RelayConfig):
        self.config = config
        self._models: dict[str, BaseChatModel] = {}

        if not config.has_credential:
            logger.error("llm.no_credential", hint="Set GEMINI_API_KEY in .env")
            return

        for name in {config.generation_model, config.chat_model}:
            self._models[name] = self._build_model(name)

    def _build_model(self, model_name: str) -> BaseChatModel:
        kwargs = {}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature
        return ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=self.config.gemini_api_key,
            timeout=self.config.timeout,
            max_retries=1,  # a single attempt
            **kwargs,
        )

    def is_healthy(self) -> bool:
        """Check if the credential is configured. Makes no network call."""
        return self.config.has_credential

    def get_chat_model(self, model_name: str) -> BaseChatModel:
        """Return the connector for a configured model.

        Raises:
            ConfigError: If no credential is configured.
            KeyError: If model_name is neither the generation nor the chat model.
        """
        if not self._models:
            raise ConfigError(MISSING_KEY_MESSAGE)
        return self._models[model_name]

    def invoke(self, messages: list[BaseMessage], model_name: str) -> AIMessage:
        """Send a conversation to the model and return its reply.

        Args:
            messages: LangChain messages; a leading SystemMessage becomes
                the Gemini system instruction.
            model_name: One of the configured model names.

        Returns:
            The model's AIMessage (text content or tool_calls).

        Raises:
            ConfigError: If no credential is configured.
            UpstreamError: If the provider call fails for any reason.
        """
        model = self.get_chat_model(model_name)
        logger.debug("llm.invoke", model=model_name, turns=len(messages))

        try:
            return model.invoke(messages)
        except Exception as e:
            logger.error("llm.failed", model=model_name, error=str(e))
            raise UpstreamError("Gemini API error", details=str(e)) from e


def message_text(message: AIMessage) -> str:
    """Flatten an AIMessage's content (str or list of parts) into plain text."""
    content = message.content
    if isinstance(content, str):
        return content

    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
