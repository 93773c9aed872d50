"""Base inference interface shared by every model backend."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class InferenceOptions:
    """Per-call options understood by every backend."""

    json: bool = True


DEFAULT_INFERENCE_OPTIONS = InferenceOptions()


class InferenceResponse(BaseModel):
    """Normalized result of a single inference call.

    ``total_tokens`` is ``None`` when the backend does not report usage and
    ``nan`` when a streamed response was cut short (the count is unreliable).
    """

    response: str
    total_tokens: int | float | None = None
    partial: bool = False


class InferenceError(RuntimeError):
    """Base class for inference failures raised by this package."""


class EmptyResponseError(InferenceError):
    """The backend answered but supplied no usable text."""


class InvalidJSONResponseError(InferenceError):
    """JSON output was requested but could not be recovered from the reply."""


class InferenceClient(ABC):
    """Abstract base class for inference backends.

    The OpenAI-compatible, Ollama and Zhipu clients implement this interface
    so callers never need to know which backend is configured.
    """

    #: Short backend name used in logs and the health endpoint.
    backend: str = "base"

    @abstractmethod
    async def infer_from_text(
        self,
        prompt: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        """Run a single-turn text prompt.

        Args:
            prompt: The user prompt.
            options: Inference options; ``options.json`` asks the backend
                for a JSON object.

        Returns:
            InferenceResponse with the model's raw text output.
        """
        ...

    @abstractmethod
    async def infer_from_image(
        self,
        prompt: str,
        content_type: str,
        image: str,
        options: InferenceOptions = DEFAULT_INFERENCE_OPTIONS,
    ) -> InferenceResponse:
        """Run a single-turn prompt about an image.

        Args:
            prompt: The user prompt.
            content_type: MIME type of the image (e.g. ``image/png``).
            image: Base64-encoded image bytes.
            options: Inference options.

        Returns:
            InferenceResponse with the model's raw text output.
        """
        ...
