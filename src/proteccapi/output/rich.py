"""Rich console output for proteccapi commands."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from proteccapi.audit.models import AuditResult
from proteccapi.remediation import RemediationResult
from proteccapi.scanner.base import Finding
from proteccapi.scanner.patterns import redact_secret
from proteccapi.supply_chain.heuristics import InspectionReport

console = Console()


def print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✔[/green] {message}")


def setup_logging(debug: bool = False) -> None:
    """Route package logging through rich; DEBUG when requested."""
    level = logging.DEBUG if debug else logging.WARNING
    logger = logging.getLogger("proteccapi")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_time=False, show_path=debug, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def _display_path(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return str(path.resolve().relative_to(root.resolve()))
        except ValueError:
            pass
    return str(path)


def print_findings(
    findings: list[Finding],
    root: Path | None = None,
    mask: bool = True,
    out: Console | None = None,
) -> None:
    """Display findings grouped by file, followed by the block banner."""
    out = out or console
    grouped: dict[str, list[Finding]] = defaultdict(list)
    for finding in findings:
        grouped[_display_path(finding.file_path, root)].append(finding)

    out.print()
    out.print("[bold red]⚠  Found potential API keys:[/bold red]")
    for file_name, matches in grouped.items():
        out.print(f"\n[yellow]In file: {file_name}[/yellow]")
        for finding in matches:
            snippet = redact_secret(finding.snippet) if mask else finding.snippet
            out.print(
                f"  [cyan]{finding.signature}[/cyan] at line [green]{finding.line_number}[/green]:"
            )
            out.print(f"    {snippet}", style="dim", markup=False, highlight=False)
    out.print(
        "\n[bold red]✖ Commit blocked! Remove or handle these keys before committing.[/bold red]"
    )


def print_remediation(result: RemediationResult, store_path: Path, out: Console | None = None) -> None:
    """Show what was migrated and how to replace the literals in code."""
    out = out or console
    out.print(f"\n[green]✔ Created/Updated {store_path}.[/green]")
    if result.gitignore_updated:
        out.print(f"[green]Added {store_path.name} to .gitignore[/green]")
    out.print(
        "[yellow]Please replace the API keys in your code with the corresponding "
        "environment variables.[/yellow]"
    )
    for entry in result.entries:
        out.print(
            f"\n[blue]Replace in code:[/blue] {redact_secret(entry.value)} "
            f"[dim]({entry.finding.file_path}:{entry.finding.line_number})[/dim]"
        )
        out.print(f"[green]With environment variable:[/green] {entry.key}")


def print_audit(result: AuditResult | None, out: Console | None = None) -> None:
    """Render normalized audit data."""
    out = out or console
    if result is None:
        out.print("[yellow]No audit data to report.[/yellow]")
        return

    if result.source_format == "advisories" and result.advisories:
        out.print(f"[red][!][/red] Found {len(result.advisories)} advisories:")
        for advisory in result.advisories:
            out.print(
                f" - {advisory.module_name}: {advisory.overview} "
                f"(severity: [magenta]{advisory.severity}[/magenta])",
                highlight=False,
            )
    else:
        for name, pkg in result.packages.items():
            out.print(
                f"[red][!][/red] Found [yellow]{pkg.count}[/yellow] vulnerabilities in "
                f"[cyan]{name}[/cyan] (severity: [magenta]{pkg.severity}[/magenta])"
            )

    if result.has_vulnerabilities:
        out.print(f"\n[red]Total vulnerabilities found: {result.vulnerability_count}[/red]")
    elif result.source_format == "unknown":
        out.print("[green]✓ No known vulnerabilities found (or unrecognized audit format).[/green]")
    else:
        out.print("[green]✓ No known vulnerabilities found.[/green]")


def print_inspection(report: InspectionReport, out: Console | None = None) -> None:
    """Render supply-chain heuristic flags."""
    out = out or console
    out.print(f"\n[bright_blue]Scanned {report.packages_scanned} local packages.[/bright_blue]\n")

    for record in report.suspicion_records:
        out.print(
            f"[red][!] Potential typosquatting/impostor package: {record.package} "
            f'(close to "{record.closest_match}", distance={record.distance})[/red]'
        )

    by_package: dict[str, list[str]] = defaultdict(list)
    for flag in report.lifecycle_flags:
        by_package[flag.package].append(f"    - {flag.hook}: {flag.script}")
    for package, lines in by_package.items():
        out.print(f'[red][!] Package "{package}" has lifecycle scripts that may be malicious:[/red]')
        for line in lines:
            out.print(line, markup=False, highlight=False)

    for flag in report.code_flags:
        out.print(
            f'[red][!] Package "{flag.package}" has suspicious code '
            f"(score: {flag.score:.2f}; {', '.join(flag.keywords)}).[/red]"
        )

    for flag in report.env_usage_flags:
        out.print(
            f'[yellow][?] Package "{flag.package}" reads "process.env" {flag.occurrences} '
            f"times in {flag.file_path.name}. Ensure no secrets are exfiltrated.[/yellow]"
        )

    if not report.has_issues:
        out.print("[green]No suspicious activity detected in local packages.[/green]")


def print_summary(vulnerability_count: int, final_score: float, out: Console | None = None) -> None:
    out = out or console
    color = "green" if final_score >= 8 else ("yellow" if final_score >= 5 else "red")
    out.print(
        Panel(
            f"Known vulnerabilities: {vulnerability_count}\n"
            f"Final Security Score: [{color}]{final_score:.1f}[/{color}]/10.0",
            title="Final Security Summary",
        )
    )
