import pytest
import typer
from rich.console import Console

from ack_deploy.cli.shared.console import CLIConsole, with_error_handling
from ack_deploy.deployment import DeploymentError


def test_with_error_handling_handles_deployment_error():
    @with_error_handling
    def _command() -> None:
        raise DeploymentError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_passes_through_success():
    calls = []

    @with_error_handling
    def _command(name: str) -> None:
        calls.append(name)

    _command("ok")

    assert calls == ["ok"]


def test_handle_error_prints_details():
    console = Console(record=True, width=120)
    cli_console = CLIConsole(console)

    with pytest.raises(typer.Exit):
        cli_console.handle_error("Deploy failed", details="Run ack-deploy init")

    output = console.export_text()
    assert "Deploy failed" in output
    assert "Run ack-deploy init" in output


def test_line_does_not_interpret_markup():
    console = Console(record=True, width=120)

    CLIConsole(console).line("[bold]literal[/bold]")

    assert "[bold]literal[/bold]" in console.export_text()


def test_ask_returns_default_without_input(monkeypatch):
    def no_input(*args, **kwargs):
        raise EOFError

    console = Console(record=True, width=120)
    monkeypatch.setattr(console, "input", no_input)
    cli_console = CLIConsole(console)

    assert cli_console.ask("Domain (optional)", default="") == ""
    assert cli_console.ask("Namespace", default="default") == "default"
    assert cli_console.ask("Enter your ACK Cluster ID") == ""
