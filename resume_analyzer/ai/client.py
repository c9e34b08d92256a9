from __future__ import annotations

import base64
import logging
import time
from typing import Any, Sequence

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from resume_analyzer.core.config import Settings
from resume_analyzer.core.errors import DependencyUnavailable

from .types import ChatMessage

logger = logging.getLogger(__name__)


class ModelUnavailableError(DependencyUnavailable):
    code = "model_unavailable"


def _message_payload(message: ChatMessage) -> dict[str, Any]:
    if message.image is None:
        return {"role": message.role, "content": message.content}
    encoded = base64.b64encode(message.image.data).decode("utf-8")
    return {
        "role": message.role,
        "content": [
            {"type": "text", "text": message.content},
            {"type": "image_url", "image_url": {"url": f"data:{message.image.mime_type};base64,{encoded}"}},
        ],
    }


class OpenAICompatibleModel:
    """Chat completions against any OpenAI-compatible endpoint (OpenAI, Ollama, vLLM)."""

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        max_retries: int = 1,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=api_key or "not-needed",
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        started = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[_message_payload(message) for message in messages],
                temperature=self._temperature,
            )
        except APITimeoutError as exc:
            logger.warning("llm_timeout model=%s: %s", self._model, exc)
            raise ModelUnavailableError("Language model request timed out.") from exc
        except APIConnectionError as exc:
            logger.warning("llm_connection_failed model=%s: %s", self._model, exc)
            raise ModelUnavailableError(
                f"Language model server is not reachable. Check that it is running and '{self._model}' is available."
            ) from exc
        except APIStatusError as exc:
            logger.warning("llm_status_error model=%s status=%s: %s", self._model, exc.status_code, exc)
            raise ModelUnavailableError(
                f"Language model analysis failed with HTTP {exc.status_code}."
            ) from exc

        content = response.choices[0].message.content if response.choices else ""
        logger.info(
            "llm_completed model=%s latency_ms=%s chars=%s",
            self._model,
            int((time.perf_counter() - started) * 1000),
            len(content or ""),
        )
        return (content or "").strip()

    async def ping(self) -> list[str]:
        try:
            models = await self._client.models.list()
        except (APIConnectionError, APITimeoutError, APIStatusError) as exc:
            raise ModelUnavailableError("Language model server is not reachable.") from exc
        return [item.id for item in models.data]


def from_settings(settings: Settings) -> OpenAICompatibleModel:
    return OpenAICompatibleModel(
        settings.llm_model,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        timeout_s=settings.llm_timeout_s,
        max_retries=settings.llm_max_retries,
        temperature=settings.llm_temperature,
    )
