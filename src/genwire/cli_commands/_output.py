"""Shared CLI output formatters."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from genwire.types import GenerateContentResponse  # noqa: TC001

console = Console()


def print_response(response: GenerateContentResponse, *, as_json: bool = False) -> None:
    """Print a response as plain text, or as its full JSON document."""
    if as_json:
        console.print_json(response.model_dump_json(by_alias=True, exclude_none=True))
        return
    console.print(response_text(response), end="", markup=False, highlight=False)


def response_text(response: GenerateContentResponse) -> str:
    """Text of the first candidate, or a placeholder naming the non-text part."""
    try:
        return response.text()
    except ValueError as exc:
        return f"[{exc}]"


def print_usage(response: GenerateContentResponse) -> None:
    """Print token usage as a table, if the response carries any."""
    usage = response.usage_metadata
    if usage is None:
        return
    table = Table(title="Usage")
    table.add_column("Prompt", justify="right")
    table.add_column("Candidates", justify="right")
    table.add_column("Total", justify="right")
    table.add_row(
        str(usage.prompt_token_count or 0),
        str(usage.candidates_token_count or 0),
        str(usage.total_token_count or 0),
    )
    console.print(table)
