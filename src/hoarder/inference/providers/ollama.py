"""Ollama local-runner inference client.

Ollama streams its chat output.  The stream is consumed to completion and
folded into a single response; see ``accumulate_stream`` for how an
interrupted stream is salvaged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from ollama import AsyncClient

from hoarder.config import Settings, settings as global_settings
from hoarder.inference.base import (
    DEFAULT_INFERENCE_OPTIONS,
    EmptyResponseError,
    InferenceClient,
    InferenceOptions,
    InferenceResponse,
)

logger = logging.getLogger(__name__)


def _count(value: Any) -> int | float:
    """Return *value* if it is a usable token count, else 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if math.isnan(value):
        return 0
    return value


def _field(part: Any, name: str) -> Any:
    # Stream chunks are pydantic models in ollama>=0.4 and plain dicts before.
    if isinstance(part, dict):
        return part.get(name)
    return getattr(part, name, None)


@dataclass
class StreamOutcome:
    """Result of folding a chat stream.

    ``error`` is set when the stream broke off after delivering ``text``;
    the token total is then meaningless.
    """

    text: str = ""
    total_tokens: int | float = 0
    error: BaseException | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


async def accumulate_stream(stream: AsyncIterator[Any]) -> StreamOutcome:
    """Concatenate chunk text and sum eval / prompt-eval counts.

    Ollama can raise after it has already streamed a usable response
    (ollama/ollama-js#72).  Once text has arrived, a failure is recorded on
    the outcome instead of being raised.  A failure before any text is
    raised as-is since there is nothing to keep.
    """
    outcome = StreamOutcome()
    try:
        async for part in stream:
            message = _field(part, "message")
            content = _field(message, "content") if message is not None else None
            if content:
                outcome.text += content
            outcome.total_tokens += _count(_field(part, "eval_count"))
            outcome.total_tokens += _count(_field(part, "prompt_eval_count"))
    except Exception as exc:
        if not outcome.text:
            raise
        outcome.error = exc
    return outcome


class OllamaInferenceClient(InferenceClient):
    """Runs prompts against a locally reachable Ollama server."""

    backend = "ollama"

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or global_settings
        self.client = AsyncClient(host=self.settings.ollama_base_url)

    async def run_model(
        self,
        model: str,
        prompt: str,
        image: str | None = None,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        """Stream a single-turn chat and fold it into one response."""
        message: dict[str, Any] = {"role": "user", "content": prompt}
        if image:
            message["images"] = [image]

        logger.info(
            "Ollama request: model=%s, json=%s, image=%s",
            model,
            options.json,
            image is not None,
        )

        try:
            stream = await self.client.chat(
                model=model,
                messages=[message],
                format="json" if options.json else None,
                stream=True,
                keep_alive=self.settings.ollama_keep_alive,
                options={"num_ctx": self.settings.inference_context_length},
            )
            outcome = await accumulate_stream(stream)
        except Exception:
            logger.exception("Ollama call failed for model=%s", model)
            raise

        if not outcome.complete:
            logger.warning(
                "Got an exception from ollama, will still attempt to "
                "deserialize the response we got so far: %s",
                outcome.error,
            )
            return InferenceResponse(
                response=outcome.text, total_tokens=math.nan, partial=True
            )

        if not outcome.text:
            raise EmptyResponseError(f"Got no message content from ollama model {model}")

        return InferenceResponse(response=outcome.text, total_tokens=outcome.total_tokens)

    async def infer_from_text(
        self,
        prompt: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        return await self.run_model(
            self.settings.inference_text_model, prompt, None, options
        )

    async def infer_from_image(
        self,
        prompt: str,
        content_type: str,
        image: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        # Ollama sniffs the image format itself; content_type is unused.
        return await self.run_model(
            self.settings.inference_image_model, prompt, image, options
        )
