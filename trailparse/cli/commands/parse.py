"""Parse and interactive clarification commands."""

from pathlib import Path
from typing import Optional

import typer

from trailparse.cli.display import (
    console,
    display_clarification,
    display_error,
    display_info,
    display_intent,
    display_intent_json,
    display_success,
    prompt_input,
)
from trailparse.parser.exceptions import ContextFileError
from trailparse.parser.intent_parser import IntentParser
from trailparse.parser.intent_types import (
    ParseContext,
    PendingIntent,
    intent_to_command_string,
)
from trailparse.parser.pending import PendingIntentResolver, PendingOutcome, PendingState
from trailparse.services.context_loader import load_context_from_file

EXIT_WORDS = frozenset({"quit", "exit"})


def _build_context(
    context_file: Path | None,
    nearby: list[str] | None,
    inventory: list[str] | None,
    directions: list[str] | None,
    last: str | None,
) -> ParseContext:
    """Combine a context file with command-line values.

    Raises:
        typer.Exit: If the context file is invalid.
    """
    base = ParseContext()
    if context_file is not None:
        try:
            base = load_context_from_file(context_file)
        except ContextFileError as e:
            display_error(str(e))
            raise typer.Exit(1)

    return ParseContext(
        inventory=base.inventory + tuple(inventory or ()),
        nearby=base.nearby + tuple(nearby or ()),
        known_directions=base.known_directions + tuple(directions or ()),
        last_entity=last if last is not None else base.last_entity,
    )


def parse_text(
    text: str = typer.Argument(..., help="Player input to parse"),
    nearby: Optional[list[str]] = typer.Option(None, "--nearby", "-n", help="Entity in reach"),
    inventory: Optional[list[str]] = typer.Option(None, "--inventory", "-i", help="Carried item"),
    last: Optional[str] = typer.Option(None, "--last", "-l", help="Last referenced entity"),
    direction: Optional[list[str]] = typer.Option(None, "--direction", "-d", help="Known direction"),
    context_file: Optional[Path] = typer.Option(None, "--context", "-c", help="JSON/YAML context file"),
    as_json: bool = typer.Option(False, "--json", help="Print the intent as JSON"),
) -> None:
    """Parse one line of player input."""
    context = _build_context(context_file, nearby, inventory, direction, last)
    intent = IntentParser().parse(context, text)
    if as_json:
        display_intent_json(intent)
    else:
        display_intent(intent)


def _show_outcome(outcome: PendingOutcome) -> None:
    if outcome.state == PendingState.RESOLVED and outcome.intent is not None:
        display_success(intent_to_command_string(outcome.intent))
        return
    if outcome.state == PendingState.CANCELLED:
        display_info(outcome.message)
        return
    options = outcome.pending.options if outcome.pending is not None else ()
    if outcome.message or options:
        display_clarification(outcome.message, options)


def repl(
    nearby: Optional[list[str]] = typer.Option(None, "--nearby", "-n", help="Entity in reach"),
    inventory: Optional[list[str]] = typer.Option(None, "--inventory", "-i", help="Carried item"),
    last: Optional[str] = typer.Option(None, "--last", "-l", help="Last referenced entity"),
    direction: Optional[list[str]] = typer.Option(None, "--direction", "-d", help="Known direction"),
    context_file: Optional[Path] = typer.Option(None, "--context", "-c", help="JSON/YAML context file"),
) -> None:
    """Parse input interactively, answering clarifications as they come.

    Type 'quit' or 'exit' to leave.
    """
    context = _build_context(context_file, nearby, inventory, direction, last)
    parser = IntentParser()
    resolver = PendingIntentResolver(parser)
    pending: PendingIntent | None = None

    console.print("[bold cyan]trailparse[/bold cyan] - type a command, 'quit' to leave")
    try:
        while True:
            line = prompt_input().strip()
            if line.lower() in EXIT_WORDS:
                break
            if pending is not None:
                outcome = resolver.answer(pending, context, line)
            else:
                outcome = resolver.begin(parser.parse(context, line))
            pending = outcome.pending
            _show_outcome(outcome)
    except (KeyboardInterrupt, EOFError):
        console.print()
    display_info("Bye.")
