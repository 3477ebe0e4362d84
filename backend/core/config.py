"""Runtime configuration for the relay service.

Read once from the environment at startup and passed explicitly to the
app factory, the LLM adapter, and the site generator.
"""

import os
from dataclasses import dataclass, field

_TRUTHY = {"1", "true", "yes", "on"}


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide relay settings."""
    gemini_api_key: str = ""
    generation_model: str = "gemini-2.5-flash"
    chat_model: str = "gemini-2.5-flash"
    max_tool_round_trips: int = 5
    timeout: float = 60.0
    temperature: float | None = None
    strict_bundle_keys: bool = False
    allow_origins: list[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        if self.max_tool_round_trips < 0:
            raise ValueError(f"max_tool_round_trips must be >= 0, got {self.max_tool_round_trips}")

    @property
    def has_credential(self) -> bool:
        """True if a non-blank Gemini API key is configured."""
        return bool(self.gemini_api_key.strip())

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Build a config from environment variables (call load_dotenv() first)."""
        origins = [o.strip() for o in os.environ.get("ALLOW_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            gemini_api_key=os.environ.get("GEMINI_API_KEY", "").strip(),
            generation_model=os.environ.get("GENERATION_MODEL", "gemini-2.5-flash"),
            chat_model=os.environ.get("CHAT_MODEL", "gemini-2.5-flash"),
            max_tool_round_trips=int(os.environ.get("MAX_TOOL_ROUND_TRIPS", "5")),
            timeout=float(os.environ.get("LLM_TIMEOUT", "60")),
            temperature=_env_float("LLM_TEMPERATURE"),
            strict_bundle_keys=os.environ.get("STRICT_BUNDLE_KEYS", "0").lower() in _TRUTHY,
            allow_origins=origins or ["*"],
        )
