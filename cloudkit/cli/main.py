"""cloudkit CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

app = typer.Typer(
    name="cloudkit",
    help="Cloud drive CLI (AliyunDrive)",
    add_completion=False
)
console = Console()

TokenOption = typer.Option(
    ..., "--token", envvar="CLOUDKIT_ACCESS_TOKEN", help="Access token", show_default=False
)
DriveOption = typer.Option(
    "", "--drive", envvar="CLOUDKIT_DRIVE_ID", help="Drive id (default drive when empty)"
)


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def make_drive(token: str, drive_id: str):
    from cloudkit import AliyunDriveProvider, Credential

    return AliyunDriveProvider(Credential(access_token=token), drive_id=drive_id)


def format_size(size: int) -> str:
    if size < 0:
        return "-"
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    parent: str = typer.Option("root", "--parent", "-p", help="Remote folder id"),
    token: str = TokenOption,
    drive_id: str = DriveOption,
):
    """Upload a file."""
    from cloudkit import CloudItem, CloudServiceError, UploadProgress

    async def do_upload():
        async with make_drive(token, drive_id) as drive:
            directory = CloudItem(id=parent, name=parent, path="/")

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task = progress.add_task(f"Uploading {file_path.name}", total=100)

                def on_progress(p: UploadProgress):
                    progress.update(task, completed=p.percentage)

                try:
                    result = await drive.upload_file(file_path, directory, progress_callback=on_progress)
                except CloudServiceError as e:
                    console.print(f"[red]Upload failed: {e}[/red]")
                    raise typer.Exit(1)

            mode = "rapid upload" if result.rapid_upload else "transferred"
            console.print(f"[green]Uploaded:[/green] {file_path.name} ({mode})")
            console.print(f"File ID: {result.file_id}")
            console.print(f"Size: {result.file_size:,} bytes")

    run_async(do_upload())


@app.command()
def ls(
    parent: str = typer.Argument("root", help="Remote folder id"),
    long: bool = typer.Option(False, "-l", "--long", help="Long format with details"),
    cursor: Optional[str] = typer.Option(None, "--cursor", help="Resume from a listing cursor"),
    pages: int = typer.Option(0, "--pages", help="Stop after this many pages (0 = all)"),
    token: str = TokenOption,
    drive_id: str = DriveOption,
):
    """List files and folders."""
    from cloudkit import CloudItem, CloudServiceError

    async def list_files():
        async with make_drive(token, drive_id) as drive:
            try:
                if not drive.drive_id:
                    await drive.get_drive_info()
                directory = CloudItem(id=parent, name=parent, path="/")
                listing = drive.list_directory(directory, cursor=cursor)
                items = []
                while not listing.exhausted and (pages == 0 or listing.pages_fetched < pages):
                    items.extend(await listing.next_page())
            except CloudServiceError as e:
                console.print(f"[red]Listing failed: {e}[/red]")
                raise typer.Exit(1)

            if long:
                table = Table()
                table.add_column("Type", style="cyan")
                table.add_column("Size", justify="right")
                table.add_column("Modified")
                table.add_column("Name")
                table.add_column("ID", style="dim")

                for item in items:
                    type_str = "D" if item.is_directory else "F"
                    modified = item.modified_at.strftime("%Y-%m-%d %H:%M") if item.modified_at else ""
                    table.add_row(type_str, format_size(item.size), modified, item.name, item.id)

                console.print(table)
            else:
                for item in items:
                    if item.is_directory:
                        console.print(f"[blue]{item.name}/[/blue]")
                    else:
                        console.print(item.name)

            if listing.cursor:
                console.print(f"[dim]More items: --cursor {listing.cursor}[/dim]")

    run_async(list_files())


@app.command()
def info(
    token: str = TokenOption,
    drive_id: str = DriveOption,
):
    """Show account and drive ids."""
    from cloudkit import CloudServiceError

    async def show_info():
        async with make_drive(token, drive_id) as drive:
            try:
                data = await drive.get_drive_info()
            except CloudServiceError as e:
                console.print(f"[red]Request failed: {e}[/red]")
                raise typer.Exit(1)

            console.print(f"User: {data.name} ({data.user_id})")
            console.print(f"Default drive: {data.default_drive_id}")
            if data.resource_drive_id:
                console.print(f"Resource drive: {data.resource_drive_id}")
            if data.backup_drive_id:
                console.print(f"Backup drive: {data.backup_drive_id}")

    run_async(show_info())


@app.command()
def vendors():
    """List known vendors and their capabilities."""
    from cloudkit import VENDORS

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Vendor")
    table.add_column("API")
    table.add_column("Refresh", justify="center")
    table.add_column("Device code", justify="center")
    table.add_column("Rapid upload", justify="center")
    table.add_column("Chunk", justify="right")

    def flag(value: bool) -> str:
        return "[green]yes[/green]" if value else "[dim]no[/dim]"

    for profile in VENDORS.values():
        table.add_row(
            profile.name,
            profile.display_name,
            profile.api_url,
            flag(profile.supports_refresh_token),
            flag(profile.supports_device_code),
            flag(profile.supports_rapid_upload),
            format_size(profile.chunk_size) if profile.chunk_size else "-",
        )

    console.print(table)


if __name__ == "__main__":
    app()
