"""Client for the external text-completion oracle (OpenAI-compatible chat API)."""
import logging
from typing import Protocol

from openai import APIError, AsyncOpenAI

from hitchpath.core.config import Settings, get_settings
from hitchpath.core.errors import GenerationError

logger = logging.getLogger(__name__)


class Oracle(Protocol):
    async def complete(self, prompt: str, *, json_mode: bool = False) -> str:
        """Send ``prompt`` as a single user message and return the reply text."""
        ...


class OpenAIOracle:
    """One chat completion per call; no history, no retries."""

    def __init__(self, api_key: str, base_url: str, model: str, timeout: float = 60.0):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client: AsyncOpenAI | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIOracle":
        return cls(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            timeout=settings.llm_timeout_seconds,
        )

    @property
    def client(self) -> AsyncOpenAI:
        # Built lazily so endpoints that never generate work without an API key.
        if self._client is None:
            if not self.api_key:
                raise GenerationError("LLM_API_KEY is not configured")
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str, *, json_mode: bool = False) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
        except APIError as exc:
            logger.warning("Oracle request to %s failed: %s", self.base_url, exc)
            raise GenerationError("oracle request failed") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


_oracle: OpenAIOracle | None = None


def get_oracle() -> Oracle:
    """FastAPI dependency; tests override it with a stub."""
    global _oracle
    if _oracle is None:
        _oracle = OpenAIOracle.from_settings(get_settings())
    return _oracle
