"""``genwire generate``: run one content-generation call."""

from __future__ import annotations

import asyncio
import sys

import click
import httpx

from genwire.cli_commands._output import console, print_response, print_usage
from genwire.client import Client
from genwire.config import Backend, ClientConfig
from genwire.errors import GenAIError
from genwire.types import (
    Content,
    GenerateContentConfig,
    PrebuiltVoiceConfig,
    SpeechConfig,
    VoiceConfig,
)


def build_config(
    *,
    temperature: float | None,
    system: str | None,
    voice: str | None,
) -> GenerateContentConfig | None:
    """Build the generation config from CLI options, or None when none are set."""
    if temperature is None and system is None and voice is None:
        return None
    config = GenerateContentConfig(temperature=temperature)
    if system is not None:
        config.system_instruction = Content.from_text(system)
    if voice is not None:
        config.response_modalities = ["AUDIO"]
        config.speech_config = SpeechConfig(
            voice_config=VoiceConfig(prebuilt_voice_config=PrebuiltVoiceConfig(voice_name=voice))
        )
    return config


async def _run(
    client_config: ClientConfig,
    model: str,
    prompt: str,
    config: GenerateContentConfig | None,
    *,
    stream: bool,
    as_json: bool,
    usage: bool,
) -> None:
    async with Client(client_config) as client:
        if stream:
            async with await client.models.generate_content_stream(model, prompt, config) as chunks:
                async for chunk in chunks:
                    print_response(chunk, as_json=as_json)
            if not as_json:
                console.print()
            return

        response = await client.models.generate_content(model, prompt, config)
        print_response(response, as_json=as_json)
        if not as_json:
            console.print()
        if usage:
            print_usage(response)


@click.command()
@click.argument("model")
@click.argument("prompt")
@click.option("--stream", is_flag=True, help="Stream the response as it is generated.")
@click.option("--vertex", is_flag=True, help="Use Vertex AI instead of the Gemini API.")
@click.option("--project", default=None, help="Google Cloud project (Vertex AI).")
@click.option("--location", default=None, help="Google Cloud location (Vertex AI).")
@click.option("--access-token", default=None, help="OAuth access token (Vertex AI).")
@click.option("--api-key", default=None, help="Gemini API key (defaults to $GOOGLE_API_KEY).")
@click.option("--temperature", "-t", type=float, default=None, help="Sampling temperature.")
@click.option("--system", "-s", default=None, help="System instruction.")
@click.option("--voice", default=None, help="Prebuilt voice name; requests audio output.")
@click.option("--json", "as_json", is_flag=True, help="Print the full response as JSON.")
@click.option("--usage", is_flag=True, help="Print token usage after the response.")
@click.option("--telemetry", is_flag=True, help="Export tracing spans to the console.")
def generate(
    model: str,
    prompt: str,
    stream: bool,
    vertex: bool,
    project: str | None,
    location: str | None,
    access_token: str | None,
    api_key: str | None,
    temperature: float | None,
    system: str | None,
    voice: str | None,
    as_json: bool,
    usage: bool,
    telemetry: bool,
) -> None:
    """Generate content with MODEL from PROMPT."""
    if telemetry:
        from genwire.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    client_config = ClientConfig(
        api_key=api_key,
        backend=Backend.VERTEX_AI if vertex else Backend.UNSPECIFIED,
        project=project,
        location=location,
        access_token=access_token,
    )
    config = build_config(temperature=temperature, system=system, voice=voice)

    try:
        asyncio.run(
            _run(client_config, model, prompt, config, stream=stream, as_json=as_json, usage=usage)
        )
    except (GenAIError, httpx.HTTPError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
