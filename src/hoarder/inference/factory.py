"""Inference client factory - selects the single active backend."""

from __future__ import annotations

import logging

from hoarder.config import Settings, settings as global_settings
from hoarder.inference.base import InferenceClient
from hoarder.inference.providers import (
    OllamaInferenceClient,
    OpenAIInferenceClient,
    ZhipuInferenceClient,
)

logger = logging.getLogger(__name__)

# Process-wide client, built on first use
_client_instance: InferenceClient | None = None
_client_built = False


class InferenceClientFactory:
    """Builds the inference client for the current configuration."""

    @staticmethod
    def build(settings: Settings | None = None) -> InferenceClient | None:
        """Return a client for the first configured backend, or ``None``.

        Priority: OpenAI API key, then Ollama base URL, then Zhipu API key.
        ``None`` means inference is unavailable and callers must degrade.
        """
        cfg = settings or global_settings

        if cfg.openai_api_key:
            client: InferenceClient = OpenAIInferenceClient(cfg)
        elif cfg.ollama_base_url:
            client = OllamaInferenceClient(cfg)
        elif cfg.zhipu_api_key:
            client = ZhipuInferenceClient(cfg)
        else:
            logger.warning("No inference backend configured; inference is disabled")
            return None

        logger.info("Using %s inference backend", client.backend)
        return client


def get_inference_client() -> InferenceClient | None:
    """Get or build the process-wide inference client."""
    global _client_instance, _client_built
    if not _client_built:
        _client_instance = InferenceClientFactory.build()
        _client_built = True
    return _client_instance


def reset_inference_client() -> None:
    """Drop the cached client so the next call rebuilds it."""
    global _client_instance, _client_built
    _client_instance = None
    _client_built = False
