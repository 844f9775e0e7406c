"""permflowctl - inspect and simulate permission flows."""

from __future__ import annotations

import asyncio
import json
import tempfile
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from permflow import __version__
from permflow.app import App
from permflow.config import Config, load_config
from permflow.data.repository import (
    CHECKABLE_STATUSES,
    MockPermissionRepository,
    resolve_permissions,
)
from permflow.domain.models import PermissionCategory, PermissionStatus
from permflow.presentation.platform import MockPlatformActions
from permflow.presentation.state import ApplicationState

app = typer.Typer(
    name="permflowctl",
    help="Permission flow control CLI",
    no_args_is_help=True,
)
console = Console()

STATE_STYLES = {
    "Granted": "green",
    "NotRequired": "green",
    "Checking": "dim",
    "Idle": "dim",
    "RequestPermission": "yellow",
    "ShowRationale": "yellow",
    "Denied": "red",
    "PermanentlyDenied": "red",
}


def get_config() -> Config:
    """Get configuration."""
    return load_config()


def parse_category(value: str) -> PermissionCategory:
    try:
        return PermissionCategory.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_status(value: str) -> PermissionStatus:
    """Parse a status a platform check can report (granted or denied)."""
    normalized = value.strip().lower().replace("-", "_")
    for status in CHECKABLE_STATUSES:
        if status.value == normalized:
            return status
    choices = ", ".join(s.value for s in CHECKABLE_STATUSES)
    raise typer.BadParameter(f"Unsupported status: {value} (choose from {choices})")


@app.command()
def resolve(
    category: str,
    api_level: Optional[int] = typer.Option(None, help="Platform API level (default from config)"),
    photo_picker: bool = typer.Option(False, help="Gallery goes through the photo picker"),
):
    """Show the platform permissions a category needs."""
    cfg = get_config()
    parsed = parse_category(category)
    level = api_level if api_level is not None else cfg.platform.api_level
    permissions = resolve_permissions(
        parsed, level, photo_picker or cfg.platform.photo_picker_enabled
    )

    console.print(f"[bold]{parsed.value}[/] on API {level}")
    if not permissions:
        console.print("  [green]No runtime permission required[/]")
    for permission in permissions:
        console.print(f"  {permission}")


@app.command()
def simulate(
    category: str,
    status: str = typer.Option("denied", help="Status reported by the platform (granted or denied)"),
    grant: bool = typer.Option(True, "--grant/--deny", help="Answer to the permission prompt"),
    rationale: bool = typer.Option(False, help="Platform asks for a rationale after a denial"),
    confirm: bool = typer.Option(False, help="Confirm the rationale or settings dialog"),
    api_level: Optional[int] = typer.Option(None, help="Platform API level (default from config)"),
    verbose: bool = typer.Option(False, help="Show session logs"),
):
    """Run one permission flow against mock collaborators."""
    parsed = parse_category(category)
    parsed_status = parse_status(status)

    cfg = get_config()
    cfg.mock_mode = True
    if not verbose:
        cfg.app.log_level = "WARNING"
    if api_level is not None:
        cfg.platform.api_level = api_level

    async def _simulate() -> ApplicationState:
        with tempfile.TemporaryDirectory() as pictures_dir:
            cfg.camera.pictures_dir = pictures_dir
            repository = MockPermissionRepository(
                {parsed: parsed_status},
                api_level=cfg.platform.api_level,
                photo_picker_enabled=cfg.platform.photo_picker_enabled,
            )
            async with App(config=cfg, repository=repository) as session:
                platform = session.platform
                if isinstance(platform, MockPlatformActions):
                    platform.queue_prompt(parsed, grant, rationale)

                trail: list[ApplicationState] = []
                session.machine.add_listener(trail.append)

                await session.machine.request_action(parsed)
                if confirm:
                    await session.machine.dialog_confirmed(parsed)

                _print_trail(parsed, trail)
                return session.state

    final = asyncio.run(_simulate())
    result = final.result_for(parsed)
    if result:
        console.print(f"\n[bold]Result:[/] {result}")
    if final.error_message:
        console.print(f"[red]Error:[/] {final.error_message}")


def _print_trail(category: PermissionCategory, trail: list[ApplicationState]) -> None:
    table = Table(title=f"{category.value} permission flow")
    table.add_column("#", style="cyan")
    table.add_column("State", no_wrap=True)
    table.add_column("Message")

    last = None
    for snapshot in trail:
        ui_state = snapshot.permission(category)
        if ui_state == last:
            continue
        last = ui_state
        style = STATE_STYLES.get(ui_state.kind, "white")
        table.add_row(
            str(table.row_count + 1),
            f"[{style}]{ui_state.kind}[/]",
            ui_state.message or "",
        )

    console.print(table)


@app.command()
def config(json_output: bool = False):
    """Show configuration."""
    cfg = get_config()

    if json_output:
        print(json.dumps(cfg.model_dump(), indent=2, default=str, ensure_ascii=False))
    else:
        console.print("[bold]Configuration[/]")
        console.print(f"  App: {cfg.app.name}")
        console.print(f"  Mode: {cfg.app.mode}")
        console.print(f"  Mock Mode: {cfg.mock_mode}")
        console.print(f"\n[bold]Platform[/]")
        console.print(f"  API level: {cfg.platform.api_level}")
        console.print(f"  Photo picker: {cfg.platform.photo_picker_enabled}")
        console.print(f"\n[bold]Camera[/]")
        console.print(f"  Pictures: {cfg.camera.pictures_dir}")
        console.print(f"  Authority: {cfg.camera.authority or '-'}")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]permflow[/] v{__version__}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
