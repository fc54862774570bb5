"""Scan command - block commits that contain hard-coded API keys.

By default only staged files are scanned (pre-commit mode). With --all the
whole working tree is walked. With --env, each finding can be migrated into the
configuration store; the command still exits 1 so the commit stays blocked
until the literal is removed from the code.

Configuration can be set in proteccapi.toml:
    [scan]
    strict = true
    env_path = ".env"
    max_file_size = 10485760
    exclude_extensions = [".jpg", ".png", ".pdf", ".zip", ".lock"]
"""

from __future__ import annotations

import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from proteccapi.api import ScanStatus
from proteccapi.api import scan as run_scan
from proteccapi.config import ConfigNotFoundError, EnvironmentOverrides, load_config
from proteccapi.output.rich import (
    console,
    print_error,
    print_findings,
    print_remediation,
    print_success,
    setup_logging,
)
from proteccapi.remediation import ConsoleSession
from proteccapi.scanner.files import ScanMode


def scan(
    scan_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Scan all files (not just staged ones)",
        ),
    ] = False,
    env: Annotated[
        bool,
        typer.Option(
            "--env",
            "-e",
            help="Create/update the .env file with found keys",
        ),
    ] = False,
    env_path: Annotated[
        str | None,
        typer.Option(
            "--env-path",
            help="Custom path for the .env file (default: .env)",
        ),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--fast",
            help="Strict mode validates key shapes and filters low-entropy matches",
        ),
    ] = None,
    show_secrets: Annotated[
        bool,
        typer.Option(
            "--show-secrets",
            help="Print detected values unredacted",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-d",
            help="Enable debug logging",
        ),
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
    """Scan for exposed API keys and manage .env files.

    \b
    Exit codes:
      0 - No API keys found
      1 - API keys found (even if moved to .env), or an error occurred

    \b
    Examples:
      proteccapi scan                 # Staged files only (pre-commit)
      proteccapi scan --all           # Whole working tree
      proteccapi scan --all --env     # Offer to move keys into .env
      proteccapi scan --fast          # Skip validators and entropy filter
    """
    try:
        file_config = load_config(config_file)
    except ConfigNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    except tomllib.TOMLDecodeError as e:
        print_error(f"TOML syntax error in config: {e}")
        raise typer.Exit(code=1) from None

    overrides = EnvironmentOverrides()
    setup_logging(debug or overrides.debug or file_config.debug)

    scan_config = file_config.scan
    if strict is not None:
        scan_config = replace(scan_config, strict=strict)
    if env_path:
        scan_config = replace(scan_config, env_path=env_path)

    mode = ScanMode.FULL if (scan_all or overrides.scan_all) else ScanMode.STAGED
    root = Path.cwd()

    if env:
        # Prompts cannot run under a live status spinner
        console.print("[dim]Scanning files for API keys...[/dim]")
        session = ConsoleSession(console)
        try:
            outcome = run_scan(root, scan_config, mode=mode, fix=True, session=session)
        except OSError as e:
            print_error(f"Error writing to {scan_config.env_path}: {e}")
            raise typer.Exit(code=1) from None
    else:
        with console.status("Scanning files for API keys..."):
            outcome = run_scan(root, scan_config, mode=mode)

    if outcome.status is ScanStatus.ERROR:
        print_error(outcome.error or "Scan failed")
        raise typer.Exit(code=1)

    report = outcome.report
    if outcome.status is ScanStatus.CLEAN:
        if report is not None and report.files_scanned == 0:
            console.print("[yellow]No valid files to scan.[/yellow]")
            console.print("[dim]Make sure you have staged files or valid criteria.[/dim]")
        else:
            print_success("No API keys found - safe to commit!")
        raise typer.Exit(code=0)

    findings = report.findings if report else []
    console.print(f"[red]✖ Found {len(findings)} potential API keys![/red]")

    if outcome.status is ScanStatus.REMEDIATED and outcome.remediation is not None:
        print_remediation(outcome.remediation, root / scan_config.env_path)
    else:
        if env:
            console.print("[yellow]No keys were moved to the .env file.[/yellow]")
        print_findings(findings, root=root, mask=not show_secrets)

    raise typer.Exit(code=outcome.exit_code)
