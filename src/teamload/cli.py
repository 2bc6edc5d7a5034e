"""Command-line entry points for Teamload."""

from __future__ import annotations

from datetime import datetime

import click

from .config import BaseConfig
from .context import create_app_context
from .errors import DataLoadError, ValidationError
from .services.loader import seed_demo_data
from .services.metrics import free_resources, load_heatmap
from .services.weeks import format_week_short, format_window_range, next_weeks, weeks_around


@click.group()
def main() -> None:
    """Plan weekly FTE allocations for a team."""


def _open_context():
    return create_app_context(BaseConfig())


@main.command("init-db")
def init_db() -> None:
    """Create the members/projects/allocations tables."""

    app = _open_context()
    try:
        click.echo(f"Schema ready at {app.config.DATABASE_URL}")
    finally:
        app.close()


@main.command("seed")
@click.option("--with-allocations", is_flag=True, default=False, help="Also add random demo allocations")
def seed(with_allocations: bool) -> None:
    """Load the demo team and projects."""

    app = _open_context()
    try:
        weeks = next_weeks(app.config.WEEK_COUNT)
        summary = seed_demo_data(app.store, with_allocations=with_allocations, weeks=weeks)
        click.echo(
            f"Seeded {summary.members} members, {summary.projects} projects, "
            f"{summary.allocations} allocations"
        )
    finally:
        app.close()


@main.command("summary")
@click.option("--weeks", "week_count", type=click.IntRange(min=1), default=None, help="Window length")
@click.option(
    "--around",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Show weeks around this date instead of the coming weeks",
)
def summary(week_count: int | None, around: datetime | None) -> None:
    """Print the team load heatmap and who is free when."""

    app = _open_context()
    try:
        try:
            data = app.controller.load()
        except DataLoadError as exc:
            raise click.ClickException(f"Cannot load data: {exc}") from exc

        count = week_count or app.config.WEEK_COUNT
        weeks = weeks_around(around.date(), count) if around else next_weeks(count)

        click.echo(f"Team load {format_window_range(weeks)}")
        name_width = max([len(m.name) for m in data.members] + [6])
        header = "Member".ljust(name_width) + "".join(
            format_week_short(w).rjust(8) for w in weeks
        )
        click.echo(header)
        for row in load_heatmap(data, weeks):
            cells = "".join(
                (f"{c.load:.1f}" if c.load > 0 else "-").rjust(8) for c in row.cells
            )
            click.echo(row.member.name.ljust(name_width) + cells)

        click.echo("")
        click.echo("Free from:")
        free = free_resources(data, weeks)
        if not free:
            click.echo("  nobody is free in this window")
        for member, week in free:
            click.echo(f"  {member.name} ({member.role}): {week.isoformat()}")
    finally:
        app.close()


@main.command("set")
@click.argument("member_id")
@click.argument("project_id")
@click.argument("week")
@click.argument("value", type=float)
def set_cell(member_id: str, project_id: str, week: str, value: float) -> None:
    """Set one allocation cell (WEEK is a Monday, YYYY-MM-DD)."""

    app = _open_context()
    try:
        try:
            app.controller.load()
            app.controller.update_allocation(member_id, project_id, week, value)
        except (DataLoadError, ValidationError) as exc:
            raise click.ClickException(str(exc)) from exc
        app.writer.flush()
        if app.writer.failures:
            raise click.ClickException("Store write failed; see the log for details")
        click.echo(f"{member_id}/{project_id} {week} = {value}")
    finally:
        app.close()


if __name__ == "__main__":  # pragma: no cover
    main()
