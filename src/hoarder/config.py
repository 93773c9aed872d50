"""Hoarder application configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global application settings loaded from environment / .env file."""

    # General
    hoarder_env: str = "development"
    hoarder_debug: bool = True

    # Inference — OpenAI-compatible cloud provider
    openai_api_key: str = ""
    openai_base_url: str = ""  # empty = api.openai.com

    # Inference — local model runner (Ollama)
    ollama_base_url: str = ""  # e.g. http://localhost:11434
    ollama_keep_alive: str = "5m"

    # Inference — Zhipu BigModel
    zhipu_api_key: str = ""
    zhipu_base_url: str = "https://open.bigmodel.cn/api/paas/v4"
    zhipu_timeout_seconds: float = 60.0

    # Models shared by every backend
    inference_text_model: str = "gpt-4o-mini"
    inference_image_model: str = "gpt-4o-mini"
    inference_context_length: int = 2048

    # Admin access to /api/metrics
    admin_emails: str = ""  # comma-separated
    auth_identity_header: str = "X-Auth-Request-Email"
    # When set, the proxy must also send it in X-Auth-Proxy-Secret
    auth_proxy_secret: str = ""

    @property
    def admin_email_list(self) -> list[str]:
        """Return the configured admin emails, stripped and lower-cased."""
        return [
            email.strip().lower()
            for email in self.admin_emails.split(",")
            if email.strip()
        ]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
