"""genwire CLI entrypoint."""

from __future__ import annotations

import click

from genwire import __version__


@click.group()
@click.version_option(version=__version__, prog_name="genwire")
def main() -> None:
    """genwire: call the Gemini API or Vertex AI from the command line."""


# Register subcommands
from genwire.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
