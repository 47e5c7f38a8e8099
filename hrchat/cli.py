"""
HR Chatbot CLI

Command-line interface for running and talking to the HR Chatbot API.

Usage:
    hrchat serve                               # Run the API server
    hrchat ask "How many employees?"           # Single question
    hrchat ask "Pending leave" --role hr --hr-id HR001
    hrchat chat --role manager                 # Interactive REPL mode
    hrchat schema                              # Show the catalogued schema
    hrchat refresh-schema                      # Rebuild schema metadata
    hrchat policy-status                       # Handbook index status
    hrchat health                              # Liveness and readiness
"""

import json
import logging
import os
import re
import sys
from typing import Any

import click
import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from hrchat.config import get_settings

console = Console()
API_BASE_URL = os.getenv("HRCHAT_API_URL", "http://localhost:3000")

ROLE_PATHS = {
    "standard": "/api/chat",
    "manager": "/api/manager",
    "hr": "/api/chat/hr",
}


def configure_cli_logging() -> None:
    logging.disable(logging.CRITICAL)
    for logger_name in ("hrchat", "httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


def _build_payload(
    message: str,
    history: list[dict[str, str]] | None = None,
    hr_id: str | None = None,
    hr_email: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"message": message, "history": history or []}
    if hr_id:
        payload["hrId"] = hr_id
    if hr_email:
        payload["hrEmail"] = hr_email
    return payload


def format_answer(body: dict[str, Any], show_sql: bool = True) -> str:
    """Display one chat response body and return the answer text."""
    if not body.get("success"):
        error = body.get("error") or "Request failed"
        console.print(Panel(error, title="[bold red]Error[/bold red]", border_style="red"))
        if show_sql and body.get("sql"):
            console.print(Panel(body["sql"], title="SQL", border_style="cyan"))
        return error

    answer = body.get("response") or ""
    title = "[bold green]Answer[/bold green]"
    if body.get("isPolicyAnswer"):
        title = "[bold magenta]Policy[/bold magenta]"
    console.print(Panel(Markdown(answer), title=title))

    if show_sql and body.get("sql"):
        console.print("\n[bold cyan]Generated SQL:[/bold cyan]")
        console.print(Panel(body["sql"], title="SQL", border_style="cyan", highlight=True))

    footer = []
    if body.get("count") is not None:
        footer.append(f"rows: {body['count']}")
    if body.get("source"):
        footer.append(f"source: {body['source']}")
    if body.get("policyPages"):
        footer.append("pages: " + ", ".join(str(page) for page in body["policyPages"]))
    if body.get("accessLevel"):
        footer.append(f"access: {body['accessLevel']}")
    if footer:
        console.print(f"[dim]{' | '.join(footer)}[/dim]")
    return answer


def _should_exit_chat(query: str) -> bool:
    text = query.strip().lower()
    if not text:
        return False
    if text in {"exit", "quit", "q", "bye", "goodbye", "done"}:
        return True
    return bool(re.search(r"\b(end|stop|quit|exit)\b.*\b(chat|conversation)\b", text))


def _check_identity(role: str, hr_id: str | None, hr_email: str | None) -> None:
    if role == "hr" and not (hr_id or hr_email):
        raise click.UsageError("--hr-id or --hr-email is required for the hr role")


@click.group()
@click.version_option(version="1.0.0", prog_name="HR Chatbot")
def cli():
    """HR Chatbot - Natural language questions over HR data and the handbook."""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind host (defaults to API_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (defaults to API_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hrchat.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@cli.command()
@click.argument("message")
@click.option(
    "--role",
    type=click.Choice(sorted(ROLE_PATHS)),
    default="standard",
    show_default=True,
    help="Chat endpoint to use.",
)
@click.option("--hr-id", default=None, help="HR staff identifier (hr role).")
@click.option("--hr-email", default=None, help="HR staff email (hr role).")
@click.option("--no-sql", is_flag=True, help="Hide the generated SQL.")
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def ask(
    message: str,
    role: str,
    hr_id: str | None,
    hr_email: str | None,
    no_sql: bool,
    url: str,
):
    """Ask a single question."""
    configure_cli_logging()
    _check_identity(role, hr_id, hr_email)

    try:
        with console.status("[cyan]Processing...[/cyan]", spinner="dots"):
            response = httpx.post(
                f"{url}{ROLE_PATHS[role]}",
                json=_build_payload(message, hr_id=hr_id, hr_email=hr_email),
                timeout=60.0,
            )
        body = response.json()
    except (httpx.HTTPError, json.JSONDecodeError) as exc:
        console.print(f"[red]Request failed: {exc}[/red]")
        sys.exit(1)

    format_answer(body, show_sql=not no_sql)
    if not body.get("success"):
        sys.exit(1)


@cli.command()
@click.option(
    "--role",
    type=click.Choice(sorted(ROLE_PATHS)),
    default="standard",
    show_default=True,
    help="Chat endpoint to use.",
)
@click.option("--hr-id", default=None, help="HR staff identifier (hr role).")
@click.option("--hr-email", default=None, help="HR staff email (hr role).")
@click.option("--no-sql", is_flag=True, help="Hide the generated SQL.")
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def chat(role: str, hr_id: str | None, hr_email: str | None, no_sql: bool, url: str):
    """Interactive REPL mode for conversations."""
    configure_cli_logging()
    _check_identity(role, hr_id, hr_email)
    history_limit = get_settings().pipeline.history_messages

    console.print(
        Panel.fit(
            f"[bold green]HR Chatbot ({role})[/bold green]\n"
            "Ask questions in natural language. Type 'exit' or 'quit' to leave.",
            border_style="green",
        )
    )

    history: list[dict[str, str]] = []
    # The client keeps the session cookie between turns
    with httpx.Client(base_url=url, timeout=60.0) as client:
        while True:
            try:
                message = console.input("[bold cyan]You:[/bold cyan] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[yellow]Goodbye![/yellow]")
                break

            if not message.strip():
                continue
            if _should_exit_chat(message):
                console.print("\n[yellow]Goodbye![/yellow]")
                break

            try:
                with console.status("[cyan]Processing...[/cyan]", spinner="dots"):
                    response = client.post(
                        ROLE_PATHS[role],
                        json=_build_payload(
                            message,
                            history=history[-history_limit:] if history_limit else [],
                            hr_id=hr_id,
                            hr_email=hr_email,
                        ),
                    )
                body = response.json()
            except (httpx.HTTPError, json.JSONDecodeError) as exc:
                console.print(f"\n[red]Error: {exc}[/red]")
                continue

            answer = format_answer(body, show_sql=not no_sql)
            history.append({"role": "user", "content": message})
            history.append({"role": "assistant", "content": answer})


@cli.command()
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def schema(url: str):
    """Show the catalogued database schema."""
    try:
        response = httpx.get(f"{url}/api/admin/schema", timeout=30.0)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as exc:
        console.print(f"[red]Failed to fetch schema: {exc}[/red]")
        sys.exit(1)

    if data.get("tables"):
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Table")
        for name in data["tables"]:
            table.add_row(name)
        console.print(table)
    console.print(data.get("schema", ""))


@cli.command(name="refresh-schema")
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def refresh_schema(url: str):
    """Rebuild the schema metadata tables."""
    try:
        response = httpx.post(f"{url}/api/admin/refresh", timeout=120.0)
        data = response.json()
    except (httpx.HTTPError, json.JSONDecodeError) as exc:
        console.print(f"[red]Failed to refresh schema: {exc}[/red]")
        sys.exit(1)

    if not data.get("success"):
        console.print(f"[red]{data.get('error', 'Schema refresh failed')}[/red]")
        sys.exit(1)
    console.print(f"[green]✓ {data.get('message', 'Schema refreshed')}[/green]")


@cli.command(name="policy-status")
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def policy_status(url: str):
    """Show whether the handbook index is loaded."""
    try:
        response = httpx.get(f"{url}/api/admin/policy/status", timeout=15.0)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as exc:
        console.print(f"[red]Failed to fetch policy status: {exc}[/red]")
        sys.exit(1)

    status = data.get("status", {})
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value")
    for key in ("loaded", "total_chunks", "total_characters", "max_page", "error"):
        if status.get(key) is not None:
            table.add_row(key, str(status[key]))
    console.print(table)


@cli.command()
@click.option("--url", default=API_BASE_URL, show_default=True, help="API base URL.")
def health(url: str):
    """Check liveness and readiness of the API."""
    try:
        live = httpx.get(f"{url}/api/health", timeout=10.0)
        ready = httpx.get(f"{url}/api/ready", timeout=10.0)
    except httpx.HTTPError as exc:
        console.print(f"[red]API unreachable: {exc}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ {live.json().get('message', 'API is running')}[/green]")
    checks = ready.json().get("checks", {})
    for name, ok in checks.items():
        mark = "[green]✓[/green]" if ok else "[red]✗[/red]"
        console.print(f"  {mark} {name}")
    if ready.status_code != 200:
        sys.exit(1)


if __name__ == "__main__":
    cli()
