"""Secure-check command - dependency audit and supply-chain heuristics."""

from __future__ import annotations

import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from proteccapi.api import secure_check as run_secure_check
from proteccapi.audit.npm import AuditToolError
from proteccapi.config import ConfigNotFoundError, EnvironmentOverrides, load_config
from proteccapi.output.rich import (
    console,
    print_audit,
    print_error,
    print_inspection,
    print_summary,
    setup_logging,
)


def secure_check(
    fail_on_vulnerabilities: Annotated[
        bool | None,
        typer.Option(
            "--fail-on-vulnerabilities/--no-fail-on-vulnerabilities",
            help="Exit 1 when the audit reports any known vulnerability",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Enable debug logging"),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to proteccapi.toml config file (auto-detected if not specified)",
        ),
    ] = None,
) -> None:
    """Run npm audit and advanced package security checks.

    \b
    Checks performed:
      - Known vulnerabilities (npm audit)
      - Typosquatting (names close to popular packages)
      - Install/start lifecycle scripts
      - Suspicious keywords and process.env reads in entry files

    \b
    Exit codes:
      0 - No suspicious packages
      1 - Suspicious packages found, or the audit could not run
    """
    try:
        file_config = load_config(config_file)
    except ConfigNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    except tomllib.TOMLDecodeError as e:
        print_error(f"TOML syntax error in config: {e}")
        raise typer.Exit(code=1) from None

    setup_logging(debug or EnvironmentOverrides().debug or file_config.debug)

    check_config = file_config.secure_check
    if fail_on_vulnerabilities is not None:
        check_config = replace(check_config, fail_on_vulnerabilities=fail_on_vulnerabilities)

    console.print("\n[bold cyan]== Secure Check ==[/bold cyan]\n")

    try:
        with console.status("Running npm audit..."):
            result = run_secure_check(Path.cwd(), check_config)
    except AuditToolError as e:
        print_error(f"npm audit did not run: {e}")
        raise typer.Exit(code=1) from None

    print_audit(result.audit)

    console.print("\n[bold cyan]== Advanced Package Security Checks ==[/bold cyan]")
    if not (Path.cwd() / check_config.modules_dir).is_dir():
        console.print(
            f"[yellow]No {check_config.modules_dir} folder detected. "
            "Skipping package-related checks.[/yellow]"
        )
    else:
        print_inspection(result.inspection)

    print_summary(result.vulnerability_count, result.score)

    if result.exit_code != 0:
        console.print("\n[red]Some issues were detected; review them before proceeding.[/red]")
    raise typer.Exit(code=result.exit_code)
