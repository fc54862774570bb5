"""Command-line interface for proteccapi."""

import typer

from proteccapi.cli_commands.hook import hook
from proteccapi.cli_commands.scan import scan
from proteccapi.cli_commands.secure_check import secure_check
from proteccapi.output.rich import console

app = typer.Typer(
    name="proteccapi",
    help="Scan for exposed API keys and manage .env files.",
    no_args_is_help=True,
)

app.command()(scan)
app.command(name="secure-check")(secure_check)
app.command()(hook)

# Standalone entry point that runs the scan directly, e.g. `secure-scan --all`
scan_app = typer.Typer(name="secure-scan", help="Scan for exposed API keys.")
scan_app.command()(scan)


@app.command()
def version() -> None:
    """Show proteccapi version."""
    from proteccapi import __version__

    console.print(f"proteccapi [bold green]{__version__}[/bold green]")


if __name__ == "__main__":
    app()
