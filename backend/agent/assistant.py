"""Single-turn assistant chat passthrough."""

import structlog
from langchain_core.messages import HumanMessage, SystemMessage

from backend.agent.prompts import CHAT_PERSONA
from backend.core.config import RelayConfig
from backend.core.errors import InvalidInput
from backend.core.llm_adapter import LLMAdapter, message_text

logger = structlog.get_logger(__name__)


def chat_reply(llm: LLMAdapter, config: RelayConfig, message: str | None) -> str:
    """Ask the chat model one question under the assistant persona.

    Raises:
        InvalidInput: Message missing or blank.
        ConfigError / UpstreamError: Propagated from the adapter.
    """
    if not isinstance(message, str) or not message.strip():
        raise InvalidInput("Message required")

    reply = llm.invoke(
        [SystemMessage(content=CHAT_PERSONA), HumanMessage(content=message)],
        config.chat_model,
    )
    text = message_text(reply)
    logger.info("chat.ok", reply_len=len(text))
    return text
