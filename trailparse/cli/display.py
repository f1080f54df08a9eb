"""Rich display helpers for CLI output."""

import json
from dataclasses import asdict

from rich.console import Console
from rich.table import Table

from trailparse.parser.intent_types import Intent, intent_to_command_string


# Shared console instance
console = Console()


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def prompt_input(prompt: str = "> ") -> str:
    """Get input from user with styled prompt.

    Args:
        prompt: Prompt string.

    Returns:
        User input.
    """
    return console.input(f"[bold cyan]{prompt}[/bold cyan]")


def display_options(options: tuple[Intent, ...]) -> None:
    """Display clarification options as a numbered list."""
    for idx, option in enumerate(options, start=1):
        console.print(f"  [cyan]{idx}.[/cyan] {intent_to_command_string(option)}")


def display_clarification(prompt: str, options: tuple[Intent, ...] = ()) -> None:
    """Display a clarification prompt and its options.

    Args:
        prompt: Question to show.
        options: Ranked candidate intents.
    """
    console.print(f"[bold yellow]?[/bold yellow] {prompt}")
    display_options(options)


def display_intent(intent: Intent) -> None:
    """Display a parsed intent as a table.

    Args:
        intent: Parsed intent.
    """
    table = Table(title="Intent", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Input", intent.raw)
    table.add_row("Normalized", intent.normalized)
    table.add_row("Kind", intent.kind.value)
    table.add_row("Verb", intent.verb or "-")
    table.add_row("Args", ", ".join(intent.args) or "-")
    if intent.quantity is not None:
        table.add_row("Quantity", f"{intent.quantity.raw} ({intent.quantity.unit})")
    if intent.movement is not None:
        table.add_row("Movement", intent.movement.raw)
    confidence_style = "green" if intent.clarify is None else "yellow"
    table.add_row(
        "Confidence",
        f"[{confidence_style}]{intent.confidence:.2f}[/{confidence_style}]",
    )
    if command := intent_to_command_string(intent):
        table.add_row("Command", command)

    console.print(table)
    if intent.clarify is not None:
        display_clarification(intent.clarify.prompt, intent.clarify.options)


def display_intent_json(intent: Intent) -> None:
    """Display a parsed intent as JSON."""
    console.print_json(json.dumps(asdict(intent)))
