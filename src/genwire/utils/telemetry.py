"""Tracing for genwire: span attribute keys and OpenTelemetry helpers.

genwire depends only on the OpenTelemetry API, so its spans are no-ops until
an SDK provider is installed, e.g. by :func:`configure_telemetry`. Spans are
opened for ``models.generate_content``, ``models.generate_content_stream``
and ``live.connect``, tagged with :data:`ATTR_MODEL` and :data:`ATTR_BACKEND`;
unary calls also carry token counts from :func:`record_usage`.
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# Span attribute keys
ATTR_MODEL = "genwire.model"
ATTR_BACKEND = "genwire.backend"
ATTR_STREAM = "genwire.stream"
ATTR_TOKENS_PROMPT = "genwire.tokens.prompt"
ATTR_TOKENS_CANDIDATES = "genwire.tokens.candidates"
ATTR_TOKENS_TOTAL = "genwire.tokens.total"
ATTR_FINISH_REASON = "genwire.finish_reason"

_INSTRUMENTATION_NAME = "genwire"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = _INSTRUMENTATION_NAME,
    otlp_endpoint: str | None = None,
) -> Any:
    """Install an SDK tracer provider for genwire spans (requires ``genwire[otel]``).

    Spans are printed to stdout as they end, unless *otlp_endpoint* is set,
    in which case they are batched to that OTLP/gRPC collector instead. The
    installed provider is returned so the caller can ``shutdown()`` it to
    flush pending spans.

    Raises
    ------
    ImportError
        If the SDK, or the OTLP exporter when *otlp_endpoint* is set, is
        not installed.
    """
    try:
        from opentelemetry.sdk.resources import SERVICE_NAME, Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        raise ImportError(_install_hint("opentelemetry-sdk")) from exc

    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            raise ImportError(_install_hint("opentelemetry-exporter-otlp")) from exc
        processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint))
    else:
        processor = SimpleSpanProcessor(ConsoleSpanExporter())

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    return provider


def _install_hint(package: str) -> str:
    return f"{package} is required to export genwire spans, install with: pip install genwire[otel]"


def record_usage(span: trace.Span, usage: Any, finish_reason: str | None) -> None:
    """Copy token counts and the finish reason of a response onto *span*."""
    if usage is not None:
        for attr, value in (
            (ATTR_TOKENS_PROMPT, usage.prompt_token_count),
            (ATTR_TOKENS_CANDIDATES, usage.candidates_token_count),
            (ATTR_TOKENS_TOTAL, usage.total_token_count),
        ):
            if value is not None:
                span.set_attribute(attr, int(value))
    if finish_reason is not None:
        span.set_attribute(ATTR_FINISH_REASON, finish_reason)
