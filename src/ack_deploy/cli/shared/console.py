"""Shared console utilities for CLI commands.

This module provides console output, prompts and the standard error
handling wrapper used by every command.
"""

from collections.abc import Callable
from functools import wraps

import typer
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the CLI console."""
        self.console = console or Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def line(self, msg: str) -> None:
        """Print raw process output without interpreting markup."""
        self.console.print(escape(msg), highlight=False)

    def error_line(self, msg: str) -> None:
        """Print a raw stderr line from a process."""
        self.console.print(f"[red]{escape(msg)}[/red]", highlight=False)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def ask(self, question: str, default: str | None = None) -> str:
        """Prompt for a line of input.

        Empty input returns ``default``. Without an interactive stdin the
        default (or an empty string) is returned instead of aborting.
        """
        try:
            if default is None:
                return Prompt.ask(f"[cyan]{question}", console=self.console)
            return Prompt.ask(
                f"[cyan]{question}", default=default, console=self.console
            )
        except EOFError:
            return default if default is not None else ""

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        try:
            return Confirm.ask(question, default=default, console=self.console)
        except EOFError:
            return default

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.console.print(f"\n[bold red]❌ {message}[/bold red]\n")
        if details:
            self.console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)

    def print_header(self, title: str, style: str = "blue") -> None:
        """Print a styled header panel.

        Args:
            title: Header title text
            style: Border style color
        """
        self.console.print(
            Panel.fit(
                f"[bold {style}]{title}[/bold {style}]",
                border_style=style,
            )
        )

    def print_steps(self, title: str, steps: list[str]) -> None:
        """Print a titled bullet list (install hints, next steps)."""
        self.console.print(f"\n[bold]{title}[/bold]")
        for step in steps:
            self.console.print(f"  {step}")


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Catches common exceptions and formats them consistently.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """
    from ack_deploy.deployment.image_builder import DeploymentError

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except DeploymentError as e:
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
