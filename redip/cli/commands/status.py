"""Status and schema commands."""

from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from redip.cli.utils import console, fail, run_async
from redip.config import settings
from redip.dictionary import SqlRemoteDictionary, build_remote_dictionary
from redip.exceptions import ConfigurationError


def status() -> None:
    """Show registered remote dictionaries and their configuration."""
    run_async(_status())


async def _status() -> None:
    """Async implementation of status command."""
    async with build_remote_dictionary(settings) as registry:
        etymologies = registry.etymologies

    source_table = Table(show_header=False, box=None, padding=(0, 2))
    source_table.add_column("Etymology", style="bold")
    source_table.add_column("Target")

    targets = {
        "http": settings.http.base,
        "redis": ", ".join(settings.redis.cluster_nodes)
        or f"{settings.redis.host}:{settings.redis.port}/{settings.redis.database}",
        "mysql": settings.sql.url or "",
    }
    for etymology in etymologies:
        source_table.add_row(etymology, f"[source]{targets.get(etymology, '-')}[/]")
    if not etymologies:
        source_table.add_row("-", "[yellow]No remote dictionaries configured[/]")

    refresh_table = Table(show_header=False, box=None, padding=(0, 2))
    refresh_table.add_column("Label", style="bold")
    refresh_table.add_column("Value", justify="right")
    refresh_table.add_row("Delay", f"{settings.refresh.delay}s")
    refresh_table.add_row("Period", f"{settings.refresh.period}s")
    refresh_table.add_row("Local main dicts", str(len(settings.local_main_dict_files)))
    refresh_table.add_row("Local stop dicts", str(len(settings.local_stop_dict_files)))

    console.print()
    console.print(Panel(source_table, title="[bold]Remote Dictionaries[/]", border_style="blue"))
    console.print(Panel(refresh_table, title="[bold]Refresh[/]", border_style="blue"))
    console.print()


def init_db() -> None:
    """Create the relational word tables."""
    run_async(_init_db())


async def _init_db() -> None:
    """Async implementation of init-db command."""
    try:
        source = SqlRemoteDictionary(settings.sql)
    except ConfigurationError as e:
        fail(e)

    try:
        await source.init_schema()
    except SQLAlchemyError as e:
        fail(f"Failed to initialize database: {e}")
    finally:
        await source.close()

    console.print("[success]Tables 'words' and 'dict_state' are ready[/]")
