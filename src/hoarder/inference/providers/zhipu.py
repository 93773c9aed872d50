"""Zhipu BigModel inference client over its HTTP chat-completions API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from hoarder.config import Settings, settings as global_settings
from hoarder.inference.base import (
    DEFAULT_INFERENCE_OPTIONS,
    EmptyResponseError,
    InferenceClient,
    InferenceOptions,
    InferenceResponse,
    InvalidJSONResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_ZHIPU_BASE_URL = "https://open.bigmodel.cn/api/paas/v4"

# Appended to JSON-mode prompts: "Return the result as JSON and make sure it
# is a valid JSON string. For example: {"key": "value"}"
JSON_PROMPT_SUFFIX = '\n请以JSON格式返回结果，确保返回的是有效的JSON字符串。例如：{"key": "value"}'

# Greedy: from the first "{" to the last "}".
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def format_prompt_for_json(prompt: str) -> str:
    """Append an explicit JSON-output instruction to *prompt*."""
    return f"{prompt}{JSON_PROMPT_SUFFIX}"


def ensure_valid_json(content: str) -> str:
    """Return *content*, or the JSON object embedded in it.

    Zhipu models sometimes wrap a valid object in explanatory prose.  The
    whole text is tried first, then the outermost ``{...}`` span.

    Raises:
        InvalidJSONResponseError: if neither parses.
    """
    try:
        json.loads(content)
        return content
    except json.JSONDecodeError:
        pass

    match = _JSON_OBJECT_RE.search(content)
    if match is None:
        raise InvalidJSONResponseError("Response is not in JSON format")

    candidate = match.group(0)
    try:
        json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise InvalidJSONResponseError("Unable to extract valid JSON from response") from exc
    return candidate


class ZhipuInferenceClient(InferenceClient):
    """Non-streaming client for the Zhipu BigModel (GLM) API."""

    backend = "zhipu"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or global_settings
        self.base_url = (self.settings.zhipu_base_url or DEFAULT_ZHIPU_BASE_URL).rstrip("/")
        self.api_key = self.settings.zhipu_api_key
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        self._transport = transport

    async def _post_chat(
        self, model: str, content: str | list[dict[str, Any]], options: InferenceOptions
    ) -> InferenceResponse:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "stream": False,
        }
        if options.json:
            payload["response_format"] = {"type": "json_object"}

        url = f"{self.base_url}/chat/completions"
        logger.info("Zhipu request: model=%s, json=%s", model, options.json)

        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.settings.zhipu_timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise EmptyResponseError(
                "The model ignored our prompt and didn't respond with the expected format"
            )

        if options.json:
            text = ensure_valid_json(text)

        usage = data.get("usage") or {}
        return InferenceResponse(response=text, total_tokens=usage.get("total_tokens"))

    async def infer_from_text(
        self,
        prompt: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        final_prompt = format_prompt_for_json(prompt) if options.json else prompt
        try:
            return await self._post_chat(
                self.settings.inference_text_model, final_prompt, options
            )
        except Exception:
            logger.exception("Error in ZhipuInferenceClient.infer_from_text")
            raise

    async def infer_from_image(
        self,
        prompt: str,
        content_type: str,
        image: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        final_prompt = format_prompt_for_json(prompt) if options.json else prompt
        content = [
            {"type": "text", "text": final_prompt},
            {"type": "image_url", "image_url": {"url": image}},
        ]
        try:
            return await self._post_chat(
                self.settings.inference_image_model, content, options
            )
        except Exception:
            logger.exception("Error in ZhipuInferenceClient.infer_from_image")
            raise
