"""OpenAI-compatible inference client, routed through litellm."""

from __future__ import annotations

import logging
from typing import Any

from hoarder.config import Settings, settings as global_settings
from hoarder.inference.base import (
    DEFAULT_INFERENCE_OPTIONS,
    EmptyResponseError,
    InferenceClient,
    InferenceOptions,
    InferenceResponse,
)

logger = logging.getLogger(__name__)

# Output cap for image prompts; text prompts use the model default.
IMAGE_MAX_TOKENS = 2000


class OpenAIInferenceClient(InferenceClient):
    """Talks to OpenAI, or any server exposing the OpenAI chat API.

    ``openai_base_url`` points litellm at a compatible server (vLLM,
    LM Studio, a proxy...); left empty it targets api.openai.com.
    """

    backend = "openai"

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or global_settings

    def _resolve_model_name(self, model: str) -> str:
        """Force litellm onto its OpenAI code path for any model name."""
        if model.startswith("openai/"):
            return model
        return f"openai/{model}"

    async def _chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: InferenceOptions,
        **kwargs: Any,
    ) -> InferenceResponse:
        import litellm

        litellm.drop_params = True

        model_name = self._resolve_model_name(model)
        call_kwargs: dict[str, Any] = {
            "model": model_name,
            "messages": messages,
            "api_key": self.settings.openai_api_key,
        }
        if self.settings.openai_base_url:
            call_kwargs["api_base"] = self.settings.openai_base_url
        if options.json:
            call_kwargs["response_format"] = {"type": "json_object"}
        call_kwargs.update(kwargs)

        logger.info("OpenAI request: model=%s, json=%s", model_name, options.json)

        try:
            completion = await litellm.acompletion(**call_kwargs)
        except Exception:
            logger.exception("OpenAI call failed for model=%s", model_name)
            raise

        choices = getattr(completion, "choices", None)
        content = choices[0].message.content if choices else None
        if not content:
            raise EmptyResponseError("Got no message content from OpenAI")

        usage = getattr(completion, "usage", None)
        total_tokens = getattr(usage, "total_tokens", None) if usage else None
        return InferenceResponse(response=content, total_tokens=total_tokens)

    async def infer_from_text(
        self,
        prompt: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        return await self._chat(
            self.settings.inference_text_model,
            [{"role": "user", "content": prompt}],
            options,
        )

    async def infer_from_image(
        self,
        prompt: str,
        content_type: str,
        image: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{content_type};base64,{image}",
                            "detail": "low",
                        },
                    },
                ],
            }
        ]
        return await self._chat(
            self.settings.inference_image_model,
            messages,
            options,
            max_tokens=IMAGE_MAX_TOKENS,
        )
