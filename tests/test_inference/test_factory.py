"""Tests for inference backend selection."""

from __future__ import annotations

from unittest.mock import patch

from hoarder.inference import InferenceClientFactory, get_inference_client, reset_inference_client
from hoarder.inference.providers import (
    OllamaInferenceClient,
    OpenAIInferenceClient,
    ZhipuInferenceClient,
)


class TestInferenceClientFactory:
    """Tests for the priority order of InferenceClientFactory.build."""

    def test_nothing_configured_returns_none(self, settings_factory):
        assert InferenceClientFactory.build(settings_factory()) is None

    def test_openai_only(self, settings_factory):
        client = InferenceClientFactory.build(settings_factory(openai_api_key="sk-test"))
        assert isinstance(client, OpenAIInferenceClient)
        assert client.backend == "openai"

    def test_ollama_only(self, settings_factory):
        client = InferenceClientFactory.build(
            settings_factory(ollama_base_url="http://localhost:11434")
        )
        assert isinstance(client, OllamaInferenceClient)

    def test_zhipu_only(self, settings_factory):
        client = InferenceClientFactory.build(settings_factory(zhipu_api_key="zk"))
        assert isinstance(client, ZhipuInferenceClient)

    def test_openai_wins_over_everything(self, settings_factory):
        cfg = settings_factory(
            openai_api_key="sk-test",
            ollama_base_url="http://localhost:11434",
            zhipu_api_key="zk",
        )
        assert isinstance(InferenceClientFactory.build(cfg), OpenAIInferenceClient)

    def test_ollama_wins_over_zhipu(self, settings_factory):
        cfg = settings_factory(ollama_base_url="http://localhost:11434", zhipu_api_key="zk")
        assert isinstance(InferenceClientFactory.build(cfg), OllamaInferenceClient)

    def test_openai_base_url_alone_is_not_enough(self, settings_factory):
        cfg = settings_factory(openai_base_url="https://llm.example.com/v1")
        assert InferenceClientFactory.build(cfg) is None


class TestGetInferenceClient:
    """Tests for the process-wide client cache."""

    def test_builds_once(self, settings_factory):
        cfg = settings_factory(zhipu_api_key="zk")
        reset_inference_client()
        try:
            with patch("hoarder.inference.factory.global_settings", cfg):
                first = get_inference_client()
                second = get_inference_client()
            assert isinstance(first, ZhipuInferenceClient)
            assert first is second
        finally:
            reset_inference_client()

    def test_caches_absence(self, settings_factory):
        reset_inference_client()
        try:
            with patch(
                "hoarder.inference.factory.InferenceClientFactory.build", return_value=None
            ) as build:
                assert get_inference_client() is None
                assert get_inference_client() is None
            build.assert_called_once()
        finally:
            reset_inference_client()
