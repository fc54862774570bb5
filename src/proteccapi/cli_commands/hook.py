"""Hook command - manage the pre-commit integration."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.panel import Panel
from rich.text import Text

from proteccapi.integrations.precommit import (
    get_hook_config,
    install_hooks,
    is_hook_installed,
    uninstall_hooks,
)
from proteccapi.output.rich import console, print_error, print_success, print_warning
from proteccapi.utils.git import is_git_repo


def hook(
    install: Annotated[
        bool, typer.Option("--install", "-i", help="Install pre-commit hook")
    ] = False,
    uninstall: Annotated[
        bool, typer.Option("--uninstall", "-u", help="Remove pre-commit hook")
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to .pre-commit-config.yaml"),
    ] = None,
) -> None:
    """Manage pre-commit hook integration."""
    if install and uninstall:
        print_error("Use either --install or --uninstall, not both.")
        raise typer.Exit(code=1)

    if not is_git_repo(Path.cwd()):
        print_warning("Not inside a git repository; the hook will not run until it is.")

    try:
        if install:
            if install_hooks(config_path):
                print_success("Added proteccapi-scan to .pre-commit-config.yaml")
            else:
                console.print("[dim]proteccapi-scan hook already installed.[/dim]")
            return

        if uninstall:
            if uninstall_hooks(config_path):
                print_success("Removed proteccapi-scan from .pre-commit-config.yaml")
            else:
                console.print("[dim]proteccapi-scan hook was not installed.[/dim]")
            return

        installed = is_hook_installed(config_path)
    except (yaml.YAMLError, ValueError) as e:
        print_error(f"Invalid pre-commit config: {e}")
        raise typer.Exit(code=1) from None

    status = "[green]installed[/green]" if installed else "[yellow]not installed[/yellow]"
    console.print(f"proteccapi-scan hook: {status}")
    if not installed:
        console.print(Panel(Text(get_hook_config()), title="proteccapi hook"))
        console.print("Use --install to add it automatically.")
