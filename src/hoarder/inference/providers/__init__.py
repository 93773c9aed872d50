"""Inference backend implementations.

- OpenAIInferenceClient — OpenAI or any OpenAI-compatible server (litellm)
- OllamaInferenceClient — local models via Ollama (streamed)
- ZhipuInferenceClient  — Zhipu BigModel over plain HTTP
"""

from hoarder.inference.providers.ollama import OllamaInferenceClient
from hoarder.inference.providers.openai import OpenAIInferenceClient
from hoarder.inference.providers.zhipu import ZhipuInferenceClient

__all__ = ["OllamaInferenceClient", "OpenAIInferenceClient", "ZhipuInferenceClient"]
