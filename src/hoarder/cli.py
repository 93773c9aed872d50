"""Hoarder CLI — run prompts against the configured backend and dump metrics.

Usage::

    # Ask the configured backend for a JSON answer
    python -m hoarder.cli infer-text "Suggest three tags for: rust async runtimes"

    # Describe an image, free-form text
    python -m hoarder.cli infer-image screenshot.png --no-json

    # Print the crawler metrics in Prometheus format
    python -m hoarder.cli metrics
"""

from __future__ import annotations

import asyncio
import base64
import mimetypes
import sys
from pathlib import Path

import click

from hoarder.inference import InferenceClientFactory, InferenceOptions, InferenceResponse

DEFAULT_IMAGE_PROMPT = "Describe this image."


@click.group()
def cli():
    """Hoarder — inference and crawler metrics."""
    pass


def _print_response(result: InferenceResponse) -> None:
    click.echo(result.response)
    if result.partial:
        click.secho("  (stream interrupted; response may be incomplete)", fg="yellow", err=True)
    click.secho(f"  Tokens: {result.total_tokens}", fg="cyan", err=True)


async def _infer(prompt: str, image_path: str | None, content_type: str | None, json_mode: bool) -> None:
    client = InferenceClientFactory.build()
    if client is None:
        click.secho(
            "Error: no inference backend configured.  Set OPENAI_API_KEY, "
            "OLLAMA_BASE_URL or ZHIPU_API_KEY.",
            fg="red",
            err=True,
        )
        sys.exit(1)

    options = InferenceOptions(json=json_mode)
    try:
        if image_path is None:
            result = await client.infer_from_text(prompt, options)
        else:
            image = base64.b64encode(Path(image_path).read_bytes()).decode("ascii")
            result = await client.infer_from_image(prompt, content_type or "image/jpeg", image, options)
    except Exception as exc:
        click.secho(f"Error: {client.backend} inference failed: {exc}", fg="red", err=True)
        sys.exit(1)

    _print_response(result)


# ── infer-text ────────────────────────────────────────────────────────


@cli.command("infer-text")
@click.argument("prompt")
@click.option("--json/--no-json", "json_mode", default=True, help="Ask for a JSON object (default: on).")
def infer_text(prompt: str, json_mode: bool):
    """Send PROMPT to the configured inference backend."""
    asyncio.run(_infer(prompt, None, None, json_mode))


# ── infer-image ───────────────────────────────────────────────────────


@cli.command("infer-image")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--prompt", default=DEFAULT_IMAGE_PROMPT, show_default=True, help="Prompt to send with the image.")
@click.option(
    "--content-type",
    default=None,
    help="Image MIME type (default: guessed from the file name).",
)
@click.option("--json/--no-json", "json_mode", default=True, help="Ask for a JSON object (default: on).")
def infer_image(path: str, prompt: str, content_type: str | None, json_mode: bool):
    """Send the image at PATH with a prompt to the configured backend."""
    if content_type is None:
        content_type, _ = mimetypes.guess_type(path)
    asyncio.run(_infer(prompt, path, content_type, json_mode))


# ── metrics ───────────────────────────────────────────────────────────


@cli.command()
def metrics():
    """Print the crawler metrics in the Prometheus text format."""
    from hoarder.metrics import get_metrics

    click.echo(get_metrics(), nl=False)


if __name__ == "__main__":
    cli()
