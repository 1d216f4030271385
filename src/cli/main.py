"""
Typer CLI for xp-filters.

Commands:
    xp db init                    - Create the XP tables
    xp seed all                   - Add static filters to every course lacking them
    xp seed course 42             - Add static filters to one course
    xp seed course 42 --force     - Append static filters even if the course has some
    xp filters list 42            - Show a course's filters (0 = default set)
    xp filters catalog            - Show the static rule catalog

Usage:
    xp --help
    xp seed all --dry-run
"""

from __future__ import annotations

import sys

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table
from rich.text import Text

from config import get_settings

app = typer.Typer(
    help="xp-filters CLI: seed XP scoring filters into courses",
    no_args_is_help=True,
)

console = Console()


def configure_logging(level: str, log_file: str | None = None, rotation: str = "10 MB") -> None:
    """Route loguru output to stderr and, optionally, a rotating file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(log_file, level=level, rotation=rotation, encoding="utf-8")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Seed experience-point scoring filters."""
    settings = get_settings()
    configure_logging(
        "DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
    )


# ========================================
# Database Commands
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Create the XP tables from SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    from src.db.database import init_db

    init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# Seed Commands
# ========================================

seed_app = typer.Typer(help="Seed static filters into courses")
app.add_typer(seed_app, name="seed")


def _report(result) -> None:
    if not result:
        rprint(f"[red]✗[/red] Seeding failed: {result.error}")
        raise typer.Exit(code=1)

    for courseid, count in sorted(result.courses.items()):
        if count:
            rprint(f"  course {courseid}: [green]{count} filter(s) added[/green]")
        else:
            rprint(f"  course {courseid}: [dim]already has filters, skipped[/dim]")
    rprint(f"[green]✓[/green] {result.status.value}: {result.inserted} filter(s)")


@seed_app.command("all")
def seed_all(
    dry_run: bool = typer.Option(False, "--dry-run", help="Roll back instead of committing"),
) -> None:
    """Add the static filters to every configured course that has none."""
    from src.db.database import session_scope
    from src.xp.repository import FilterRepository
    from src.xp.seeder import StaticFilterSeeder

    dry_run = dry_run or get_settings().dry_run

    with session_scope() as session:
        seeder = StaticFilterSeeder(FilterRepository(session), dry_run=dry_run)
        result = seeder.seed_all_courses()
    _report(result)


@seed_app.command("course")
def seed_course(
    courseid: int = typer.Argument(..., help="Course id"),
    force: bool = typer.Option(False, "--force", help="Append filters even if the course has some"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Roll back instead of committing"),
) -> None:
    """Add the static filters to a single course."""
    from src.db.database import session_scope
    from src.xp.repository import FilterRepository
    from src.xp.seeder import StaticFilterSeeder

    dry_run = dry_run or get_settings().dry_run

    with session_scope() as session:
        seeder = StaticFilterSeeder(FilterRepository(session), dry_run=dry_run)
        result = seeder.seed_course(courseid, force=force)
    _report(result)


# ========================================
# Filter Commands
# ========================================

filters_app = typer.Typer(help="Inspect filters")
app.add_typer(filters_app, name="filters")


def _filters_table(title: str, rows: list[tuple[object, str, int]]) -> Table:
    table = Table(title=title)
    table.add_column("Order", justify="right", style="cyan")
    table.add_column("Rule")
    table.add_column("Points", justify="right", style="green")
    for sortorder, ruledata, points in rows:
        table.add_row(str(sortorder), Text(ruledata), str(points))
    return table


@filters_app.command("list")
def filters_list(courseid: int = typer.Argument(..., help="Course id (0 = default set)")) -> None:
    """Show the filters stored for a course."""
    from src.db.database import session_scope
    from src.xp.filters import DEFAULT_COURSEID, CourseFilterSet, DefaultFilterSet
    from src.xp.repository import FilterRepository

    filterset = DefaultFilterSet() if courseid == DEFAULT_COURSEID else CourseFilterSet(courseid)

    with session_scope() as session:
        filterset.load(FilterRepository(session))

    if not len(filterset):
        rprint(f"[yellow]Course {courseid} has no filters[/yellow]")
        return

    rows = [(f.sortorder, f.ruledata or "", f.points) for f in filterset]
    console.print(_filters_table(f"Filters for course {courseid}", rows))


@filters_app.command("catalog")
def filters_catalog() -> None:
    """Show the static rule catalog."""
    from src.xp.catalog import get_static_filters

    rows = [(i, f.ruledata, f.points) for i, f in enumerate(get_static_filters(), start=1)]
    console.print(_filters_table("Static filters", rows))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
