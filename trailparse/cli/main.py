"""Main CLI application for trailparse."""

import logging

import typer

from trailparse.cli.commands import parse
from trailparse.config import get_settings

# Create main app
app = typer.Typer(
    name="trailparse",
    help="Parse survival-game commands from natural language",
    add_completion=False,
)

app.command(name="parse")(parse.parse_text)
app.command(name="repl")(parse.repl)


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log parser decisions"),
) -> None:
    """trailparse - natural-language command parser.

    Use 'trailparse parse "pick up stick" --nearby stick' for a single
    line, or 'trailparse repl' to answer clarifications interactively.
    """
    if debug or get_settings().debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


if __name__ == "__main__":
    app()
