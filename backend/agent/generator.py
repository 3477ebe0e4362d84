"""Website generation loop.

Seeds a conversation with the user's prompt and calls the generation model
until it answers with text. Function-call replies are acknowledged with a
synthetic "executed" tool response and the conversation continues, up to
a fixed number of round trips. The final text is fence-stripped, parsed
as JSON, and normalized into a SiteBundle.
"""

import json
import re

import structlog
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from pydantic import ValidationError

from backend.agent.prompts import GENERATION_INSTRUCTION, TOOL_EXECUTED_RESULT
from backend.api.schemas import BUNDLE_KEYS, SiteBundle
from backend.core.config import RelayConfig
from backend.core.errors import InvalidInput, MalformedUpstreamOutput, UpstreamProtocolExceeded
from backend.core.llm_adapter import LLMAdapter, message_text

logger = structlog.get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ``` / ```json fence and a trailing ``` fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned)
        cleaned = _FENCE_CLOSE.sub("", cleaned).strip()
    return cleaned


def parse_bundle(raw: str, strict: bool = False) -> SiteBundle:
    """Parse model text into a SiteBundle.

    Args:
        raw: The model's final text, untouched.
        strict: Reject top-level keys other than html/css/js.

    Returns:
        SiteBundle with missing or null fragments set to "".

    Raises:
        MalformedUpstreamOutput: If the text is not a JSON object of string
            fragments. The untouched raw text is attached.
    """
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as e:
        raise MalformedUpstreamOutput("AI response is not valid JSON", raw=raw) from e

    if not isinstance(data, dict):
        raise MalformedUpstreamOutput("AI response is not a JSON object", raw=raw)

    extra = sorted(set(data) - set(BUNDLE_KEYS))
    if extra:
        if strict:
            raise MalformedUpstreamOutput(f"AI response has unexpected keys: {', '.join(extra)}", raw=raw)
        logger.debug("generate.extra_keys_dropped", keys=extra)

    try:
        return SiteBundle.model_validate({key: data.get(key) for key in BUNDLE_KEYS})
    except ValidationError as e:
        raise MalformedUpstreamOutput("AI response fields must be strings", raw=raw) from e


def _acknowledge_tool_calls(conversation: list[BaseMessage], reply: AIMessage) -> None:
    """Append the model's call turn and one synthetic 'executed' response per call."""
    conversation.append(reply)
    for call in reply.tool_calls:
        conversation.append(ToolMessage(
            content=json.dumps(TOOL_EXECUTED_RESULT),
            name=call["name"],
            tool_call_id=call.get("id") or call["name"],
        ))


class SiteGenerator:
    """Runs the bounded generate -> (tool call)* -> text loop."""

    def __init__(self, llm: LLMAdapter, config: RelayConfig):
        self.llm = llm
        self.config = config

    def generate(self, prompt: str | None) -> SiteBundle:
        """Generate a site bundle for a prompt.

        Raises:
            InvalidInput: Prompt missing or blank. Raised before any model call.
            ConfigError: No credential configured.
            UpstreamError: The model call failed.
            UpstreamProtocolExceeded: Too many consecutive function-call replies.
            MalformedUpstreamOutput: Final text is not a valid bundle.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInput("Prompt is required")

        conversation: list[BaseMessage] = [
            SystemMessage(content=GENERATION_INSTRUCTION),
            HumanMessage(content=prompt),
        ]
        limit = self.config.max_tool_round_trips

        for round_trip in range(limit + 1):
            reply = self.llm.invoke(conversation, self.config.generation_model)

            if not reply.tool_calls:
                raw = message_text(reply)
                bundle = parse_bundle(raw, strict=self.config.strict_bundle_keys)
                logger.info("generate.ok", round_trips=round_trip, raw_len=len(raw),
                            html_len=len(bundle.html), css_len=len(bundle.css), js_len=len(bundle.js))
                return bundle

            logger.info("generate.tool_call", round_trip=round_trip + 1,
                        tools=[c["name"] for c in reply.tool_calls])
            if round_trip == limit:
                break
            _acknowledge_tool_calls(conversation, reply)

        logger.error("generate.protocol_exceeded", limit=limit)
        raise UpstreamProtocolExceeded(
            f"Model kept requesting function calls after {limit} round trips", round_trips=limit,
        )
