"""Pluggable inference layer over OpenAI, Ollama and Zhipu."""

from hoarder.inference.base import (
    EmptyResponseError,
    InferenceClient,
    InferenceError,
    InferenceOptions,
    InferenceResponse,
    InvalidJSONResponseError,
)
from hoarder.inference.factory import (
    InferenceClientFactory,
    get_inference_client,
    reset_inference_client,
)

__all__ = [
    "EmptyResponseError",
    "InferenceClient",
    "InferenceClientFactory",
    "InferenceError",
    "InferenceOptions",
    "InferenceResponse",
    "InvalidJSONResponseError",
    "get_inference_client",
    "reset_inference_client",
]
