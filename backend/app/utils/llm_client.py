"""Gemini generateContent client used by every writing endpoint."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import time

import httpx
from pydantic import ValidationError

from app.core.config import Settings
from app.models.schemas import ChatMessage, GeminiResponse, GeminiUsage
from app.utils.logger import log_llm_call, logger


class CompletionError(Exception):
    """Raised when the provider call cannot produce a completion."""


class MalformedUpstreamResponse(CompletionError):
    """The provider answered 2xx but without a usable first candidate."""


@dataclass
class GatewayConfig:
    base_url: str
    api_key: Optional[str]
    model: str
    timeout: Optional[float] = None


def build_contents(messages: Sequence[ChatMessage]) -> List[Dict]:
    """Map chat messages onto Gemini ``contents``.

    Gemini has no system role, so system messages are sent as user turns.
    """
    return [
        {
            "role": "user" if msg.role == "system" else msg.role,
            "parts": [{"text": msg.content}],
        }
        for msg in messages
    ]


def build_payload(
    messages: Sequence[ChatMessage], temperature: float, max_tokens: int
) -> Dict:
    return {
        "contents": build_contents(messages),
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        },
    }


def parse_response(data: Dict) -> GeminiResponse:
    try:
        return GeminiResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedUpstreamResponse(f"Unexpected response shape: {e}") from e


def extract_text(parsed: GeminiResponse) -> str:
    """Return the text of the first part of the first candidate."""
    if not parsed.candidates:
        raise MalformedUpstreamResponse("Response contains no candidates")
    content = parsed.candidates[0].content
    if content is None or not content.parts or content.parts[0].text is None:
        raise MalformedUpstreamResponse("First candidate has no text part")
    return content.parts[0].text


class GeminiClient:
    def __init__(self, config: GatewayConfig, transport: httpx.AsyncBaseTransport = None):
        self.config = config
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=config.timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "GeminiClient":
        config = GatewayConfig(
            base_url=settings.GEMINI_BASE_URL,
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            timeout=settings.GEMINI_TIMEOUT,
        )
        return cls(config, **kwargs)

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/{self.config.model}:generateContent"

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Send one generateContent request and return the first candidate's text.

        Network failures and non-2xx statuses propagate as ``httpx`` errors;
        a 2xx body without text raises ``MalformedUpstreamResponse``.
        """
        if not messages:
            raise ValueError("At least one message is required")

        model = self.config.model
        start_time = time.time()
        try:
            resp = await self._client.post(
                self.endpoint,
                headers={"x-goog-api-key": self.config.api_key or ""},
                json=build_payload(messages, temperature, max_tokens),
            )
            resp.raise_for_status()
            try:
                parsed = parse_response(resp.json())
            except ValueError as e:
                raise MalformedUpstreamResponse(f"Response is not JSON: {e}") from e
            result = extract_text(parsed)
        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000
            logger.warning(f"Gemini call failed: {e}")
            log_llm_call(
                provider="Gemini",
                model=model,
                prompt_tokens=0,
                completion_tokens=0,
                success=False,
                error=str(e),
                latency_ms=latency_ms
            )
            raise

        latency_ms = (time.time() - start_time) * 1000
        usage = parsed.usageMetadata or GeminiUsage()
        log_llm_call(
            provider="Gemini",
            model=model,
            prompt_tokens=usage.promptTokenCount or 0,
            completion_tokens=usage.candidatesTokenCount or 0,
            success=True,
            latency_ms=latency_ms
        )
        return result

    async def aclose(self):
        await self._client.aclose()
