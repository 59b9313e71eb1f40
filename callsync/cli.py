"""callsync CLI: API server, one-off sweeps and sync log inspection."""

import asyncio
import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="callsync",
    help="Gong → Velaris call activity sync",
    no_args_is_help=True,
)
console = Console()


def _output_result(result: Any) -> None:
    console.print_json(json.dumps(result, default=str, indent=2))


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    port: int = typer.Option(8030, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Launch the webhook/API server."""
    import uvicorn

    console.print(f"[bold cyan]Starting call sync at http://{host}:{port}[/bold cyan]")
    uvicorn.run("callsync.app:app", host=host, port=port, reload=reload)


@app.command("sweep")
def sweep(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Run one scheduled sweep across all active integrations."""
    from .database import async_session_factory
    from .sync.sweep import run_sweep

    async def _sweep():
        async with async_session_factory() as db:
            return await run_sweep(db)

    report = asyncio.run(_sweep())

    if json_output:
        _output_result(report.model_dump())
        return

    table = Table(title=f"Sweep ({report.processed_configs} integrations)")
    table.add_column("User", style="cyan")
    table.add_column("Found", justify="right")
    table.add_column("Synced", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="dim")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Error")

    for user in report.users:
        table.add_row(
            user.user_id,
            str(user.calls_found),
            str(user.synced),
            str(user.skipped),
            str(user.failed),
            user.error or "",
        )

    console.print(table)


@app.command("logs")
def logs(
    user_id: str = typer.Option(None, "--user", "-u", help="Only this user's rows"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max rows"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show recent sync log rows."""
    from .database import async_session_factory
    from .schemas.sync import SyncLogEntry
    from .services import sync_log_svc

    async def _logs():
        async with async_session_factory() as db:
            rows = await sync_log_svc.list_logs(db, user_id=user_id, limit=limit)
            return [SyncLogEntry.model_validate(r) for r in rows]

    entries = asyncio.run(_logs())

    if json_output:
        _output_result([e.model_dump(mode="json") for e in entries])
        return

    if not entries:
        console.print("[yellow]No sync log entries[/yellow]")
        return

    table = Table(title="Sync log")
    table.add_column("When", style="dim")
    table.add_column("User", style="cyan")
    table.add_column("Call")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Activity / Error")

    for e in entries:
        status = "[green]success[/green]" if e.status == "success" else "[red]error[/red]"
        table.add_row(
            e.created_at.isoformat() if e.created_at else "",
            e.user_id,
            e.gong_call_id or "-",
            e.sync_type,
            status,
            e.velaris_activity_id or e.error_message or "",
        )

    console.print(table)


if __name__ == "__main__":
    app()
