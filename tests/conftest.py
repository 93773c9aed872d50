"""Shared test fixtures for the Hoarder test suite."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from hoarder.config import Settings
from hoarder.metrics import CrawlerMetrics


def make_settings(**overrides) -> Settings:
    """Build Settings isolated from the process environment and .env."""
    values = {
        "openai_api_key": "",
        "openai_base_url": "",
        "ollama_base_url": "",
        "zhipu_api_key": "",
        "inference_text_model": "text-model",
        "inference_image_model": "image-model",
        "inference_context_length": 4096,
        "ollama_keep_alive": "10m",
        "admin_emails": "",
        "auth_proxy_secret": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    """Return a callable building isolated Settings instances."""
    return make_settings


@pytest.fixture
def openai_settings():
    return make_settings(openai_api_key="sk-test", openai_base_url="https://llm.example.com/v1")


@pytest.fixture
def ollama_settings():
    return make_settings(ollama_base_url="http://localhost:11434")


@pytest.fixture
def zhipu_settings():
    return make_settings(
        zhipu_api_key="zhipu-key",
        zhipu_base_url="https://zhipu.example.com/api/paas/v4",
    )


@pytest.fixture
def crawler_metrics():
    """A fresh metrics registry per test."""
    return CrawlerMetrics()


def chat_completion(content: str | None, total_tokens: int | None = 42):
    """Build an object shaped like a litellm ModelResponse."""
    usage = SimpleNamespace(total_tokens=total_tokens) if total_tokens is not None else None
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


def ollama_chunk(content: str, eval_count=None, prompt_eval_count=None):
    """Build an object shaped like an ollama ChatResponse stream chunk."""
    return SimpleNamespace(
        message=SimpleNamespace(role="assistant", content=content),
        eval_count=eval_count,
        prompt_eval_count=prompt_eval_count,
    )


@pytest.fixture
def make_completion():
    return chat_completion


@pytest.fixture
def make_chunk():
    return ollama_chunk
