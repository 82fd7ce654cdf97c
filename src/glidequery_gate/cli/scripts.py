"""CLI commands for GlideQuery scripts.

Provides user-facing commands over the safety gate:
- validate: Lint a script (exit 1 when it has errors)
- check: Security scan a script (exit 1 when it is unsafe)
- generate: Generate a script from a description
- run: Execute a script on the instance
- test: Execute a script in preview mode with a row cap

Script paths may be "-" to read from stdin.
"""

import asyncio
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from glidequery_gate.client import ServiceNowScriptClient
from glidequery_gate.config import settings
from glidequery_gate.exceptions import ConfigurationError
from glidequery_gate.executor import ExecutionResult, ScriptExecutor
from glidequery_gate.generator import QueryGenerator
from glidequery_gate.linting import StyleValidator
from glidequery_gate.security import SecurityConfig, SecurityValidator

script_app = typer.Typer(help="Validate, generate and run GlideQuery scripts")
console = Console()


def _read_script(path: str) -> str:
    """Read a script from a file, or from stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    script_path = Path(path)
    if not script_path.is_file():
        console.print(f"[red]Script file not found: {path}[/red]")
        raise typer.Exit(1)
    return script_path.read_text()


@asynccontextmanager
async def _open_executor() -> AsyncIterator[ScriptExecutor]:
    """Build an executor bound to the configured instance.

    Raises:
        ConfigurationError: If the instance URL or credentials are missing
    """
    if not settings.instance_url:
        raise ConfigurationError("GLIDEQUERY_INSTANCE_URL")
    if not settings.username or not settings.password:
        raise ConfigurationError("GLIDEQUERY_USERNAME / GLIDEQUERY_PASSWORD")

    async with httpx.AsyncClient(
        base_url=settings.instance_url,
        auth=(settings.username, settings.password),
        headers={"Accept": "application/json"},
    ) as http:
        client = ServiceNowScriptClient(http=http, endpoint=settings.script_endpoint)
        yield ScriptExecutor(
            client,
            max_script_length=settings.max_script_length,
            test_max_results=settings.test_max_results,
        )


def _print_result(result: ExecutionResult) -> None:
    for line in result.logs:
        style = "yellow" if line.startswith("WARNING") else "dim"
        console.print(line, style=style, markup=False, highlight=False)

    if not result.success:
        console.print(f"[red]Execution failed:[/red] {escape(result.error or '')}", highlight=False)
        raise typer.Exit(1)

    table = Table(title="Execution Result")
    table.add_column("Records", style="cyan")
    table.add_column("Truncated", style="yellow")
    table.add_column("Time", style="dim")
    table.add_row(
        str(result.record_count) if result.record_count is not None else "-",
        "yes" if result.truncated else "no",
        f"{result.execution_time}ms",
    )
    console.print(table)
    console.print_json(data=result.data)


def _execute(path: str, timeout: int | None, test_mode: bool, max_results: int | None) -> None:
    script = _read_script(path)

    async def _run():
        async with _open_executor() as executor:
            return await executor.execute(
                script,
                timeout=timeout or settings.default_timeout_ms,
                test_mode=test_mode,
                max_results=max_results,
            )

    try:
        result = asyncio.run(_run())
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)

    _print_result(result)


@script_app.command("validate")
def validate_script(
    path: str = typer.Argument(..., help="Script file, or '-' for stdin"),
) -> None:
    """Lint a script for GlideQuery misuse."""
    script = _read_script(path)
    report = StyleValidator(max_script_length=settings.max_script_length).validate(script)

    if report.errors:
        table = Table(title="Lint Errors")
        table.add_column("Line", style="cyan")
        table.add_column("Message", style="red")
        for issue in report.errors:
            table.add_row(str(issue.line), issue.message)
        console.print(table)

    for warning in report.warnings or []:
        console.print(f"[yellow]warning:[/yellow] {escape(warning)}", highlight=False)

    if not report.valid:
        raise typer.Exit(1)
    console.print("[green]Script is valid.[/green]")


@script_app.command("check")
def check_script(
    path: str = typer.Argument(..., help="Script file, or '-' for stdin"),
) -> None:
    """Security scan a script without executing it."""
    script = _read_script(path)
    validator = SecurityValidator(SecurityConfig(max_script_length=settings.max_script_length))
    report = validator.validate(script)

    for violation in report.violations or []:
        console.print(f"[red]violation:[/red] {escape(violation)}", highlight=False)
    if report.dangerous_operations:
        console.print(
            f"[yellow]Requires confirmation:[/yellow] {', '.join(report.dangerous_operations)}",
            highlight=False,
        )

    if not report.safe:
        raise typer.Exit(1)
    console.print("[green]Script is safe to execute.[/green]")


@script_app.command("generate")
def generate_script(
    description: str = typer.Argument(..., help="What the query should do"),
    table: str = typer.Option(None, "--table", "-t", help="Table name (overrides the description)"),
    comments: bool = typer.Option(True, "--comments/--no-comments", help="Include explanatory comments"),
) -> None:
    """Generate a GlideQuery script from a description."""
    try:
        generated = QueryGenerator().generate(description, table=table, include_comments=comments)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(generated.code, markup=False, highlight=False)
    console.print(f"\n[dim]{escape(generated.explanation)}[/dim]", highlight=False)
    for warning in generated.warnings:
        console.print(f"[yellow]warning:[/yellow] {escape(warning)}", highlight=False)


@script_app.command("run")
def run_script(
    path: str = typer.Argument(..., help="Script file, or '-' for stdin"),
    timeout: int = typer.Option(None, min=1000, max=60000, help="Timeout in milliseconds"),
) -> None:
    """Execute a script on the instance."""
    _execute(path, timeout, test_mode=False, max_results=None)


@script_app.command("test")
def test_script(
    path: str = typer.Argument(..., help="Script file, or '-' for stdin"),
    max_results: int = typer.Option(None, min=1, max=1000, help="Maximum records to return (default 100)"),
    timeout: int = typer.Option(None, min=1000, max=60000, help="Timeout in milliseconds"),
) -> None:
    """Execute a script in preview mode with a row cap and write warnings."""
    _execute(path, timeout, test_mode=True, max_results=max_results)
