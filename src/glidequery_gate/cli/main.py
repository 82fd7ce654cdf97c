"""glidequery CLI - lint, check, generate and run GlideQuery scripts."""

import logging

import typer

from glidequery_gate.cli.scripts import script_app
from glidequery_gate.config import settings

app = typer.Typer(
    name="glidequery",
    help="Safety gate and runner for GlideQuery scripts",
    no_args_is_help=True,
)

# Add command groups
app.add_typer(script_app, name="script")


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
