"""tasktriage CLI - urgency, schedule and insights for a personal task list."""

import json
import logging
import sys
import uuid
from datetime import datetime

import click

from .adapters.ai_gateway import AIGatewayPrioritizer, PrioritizationError
from .adapters.json_store import StoreError
from .config import load_config
from .core.decay import classify_all
from .core.insights import synthesize
from .core.procrastination import find_avoided_tasks, suggest_micro_tasks
from .core.report import (
    format_daily_completions,
    format_decay_line,
    format_insight_line,
    format_micro_task_line,
    format_schedule,
    format_stats,
)
from .core.stats import category_distribution, compute_stats, daily_completions
from .core.tasks import Task, TaskValidationError, assume_timezone
from .workflows import get_prioritizer, get_store, prioritize_and_save, todays_schedule


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_tasks(ctx: click.Context) -> list[Task]:
    try:
        tasks = get_store(ctx.obj["config"]).fetch_all()
    except (StoreError, TaskValidationError) as e:
        _fail(str(e))
    tz = ctx.obj["now"].tzinfo
    if tz is not None:
        # Offset-less timestamps in the file are local time
        tasks = [assume_timezone(t, tz) for t in tasks]
    return tasks


def _parse_now(value: str | None) -> datetime:
    if not value:
        return datetime.now().astimezone()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not an ISO-8601 datetime", param_hint="--at")


@click.group()
@click.version_option(package_name="tasktriage")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--tasks-file", type=click.Path(dir_okay=False), default=None, help="Task JSON file")
@click.option("--at", "at", default=None, help="Evaluate as of this ISO-8601 time instead of now")
@click.pass_context
def main(ctx, debug: bool, tasks_file: str | None, at: str | None):
    """tasktriage - keep your task list honest."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    config = load_config()
    if tasks_file:
        config.tasks_file = tasks_file
    ctx.obj = {"config": config, "now": _parse_now(at)}


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--all", "include_completed", is_flag=True, help="Include completed tasks")
@click.pass_context
def decay(ctx, as_json: bool, include_completed: bool):
    """Show how stale each task has become."""
    tasks = _load_tasks(ctx)
    if not include_completed:
        tasks = [t for t in tasks if not t.is_completed]

    try:
        pairs = classify_all(tasks, ctx.obj["now"])
    except TaskValidationError as e:
        _fail(str(e))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": t.id,
                        "title": t.title,
                        "level": info.level.value,
                        "hours_old": info.hours_old,
                        "days_old": info.days_old,
                        "urgency_score": info.urgency_score,
                        "message": info.message,
                        "style": info.style,
                    }
                    for t, info in pairs
                ],
                indent=2,
            )
        )
        return

    if not pairs:
        click.echo("No open tasks.")
        return

    for task, info in sorted(pairs, key=lambda pair: -pair[1].urgency_score):
        click.echo(format_decay_line(task, info))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def schedule(ctx, as_json: bool):
    """Propose a time-blocked schedule for today."""
    tasks = _load_tasks(ctx)
    try:
        slots, hidden = todays_schedule(tasks, ctx.obj["now"], ctx.obj["config"])
    except TaskValidationError as e:
        _fail(str(e))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "slots": [
                        {
                            "start": s.start.isoformat(),
                            "end": s.end.isoformat(),
                            "task_id": s.task.id if s.task else None,
                            "is_break": s.is_break,
                        }
                        for s in slots
                    ],
                    "more": hidden,
                },
                indent=2,
            )
        )
        return

    click.echo(format_schedule(slots, hidden))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def insights(ctx, as_json: bool):
    """Show patterns in how you get things done."""
    tasks = _load_tasks(ctx)
    try:
        found = synthesize(tasks, ctx.obj["now"], ctx.obj["config"].week_start)
    except TaskValidationError as e:
        _fail(str(e))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": i.id,
                        "kind": i.kind.value,
                        "title": i.title,
                        "message": i.message,
                        "details": i.details,
                    }
                    for i in found
                ],
                indent=2,
            )
        )
        return

    if not found:
        click.echo("No insights yet. Complete a few more tasks.")
        return

    for insight in found:
        click.echo(format_insight_line(insight))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, as_json: bool):
    """Show completion statistics."""
    tasks = _load_tasks(ctx)
    summary = compute_stats(tasks)
    try:
        week = daily_completions(tasks, ctx.obj["now"])
    except TaskValidationError as e:
        _fail(str(e))
    categories = category_distribution(tasks)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total": summary.total,
                    "completed": summary.completed,
                    "in_progress": summary.in_progress,
                    "pending": summary.pending,
                    "completion_rate": summary.completion_rate,
                    "hours_remaining": summary.hours_remaining,
                    "high_priority": summary.high_priority,
                    "daily_completions": {d.isoformat(): n for d, n in week},
                    "categories": categories,
                },
                indent=2,
            )
        )
        return

    click.echo(format_stats(summary))
    click.echo("\nLast 7 days:")
    click.echo(format_daily_completions(week))
    if categories:
        click.echo("\nCategories: " + ", ".join(f"{c} {n}" for c, n in categories.items()))


@main.command()
@click.option("--create", is_flag=True, help="Add the suggested micro-tasks to the task file")
@click.pass_context
def avoided(ctx, create: bool):
    """Find avoided tasks and suggest tiny first steps."""
    tasks = _load_tasks(ctx)
    now = ctx.obj["now"]
    try:
        stuck = find_avoided_tasks(tasks, now)
    except TaskValidationError as e:
        _fail(str(e))

    if not stuck:
        click.echo("Nothing is being avoided. Nice.")
        return

    micro_tasks = suggest_micro_tasks(stuck)
    click.echo(f"{len(stuck)} avoided. Start with a tiny action:")
    for micro in micro_tasks:
        click.echo(format_micro_task_line(micro))

    if create:
        store = get_store(ctx.obj["config"])
        for micro in micro_tasks:
            row = micro.to_create_input()
            row.update(id=str(uuid.uuid4()), created_at=now.isoformat())
            try:
                store.add(Task.from_dict(row))
            except StoreError as e:
                _fail(str(e))
        click.echo(f"\n✓ Added {len(micro_tasks)} micro-tasks to {store.path}")


@main.command()
@click.option("--local", is_flag=True, help="Use the local heuristic instead of the AI gateway")
@click.option("--dry-run", is_flag=True, help="Show scores without saving them")
@click.pass_context
def prioritize(ctx, local: bool, dry_run: bool):
    """Re-score open tasks and save the new priorities."""
    config = ctx.obj["config"]
    store = get_store(config)
    service = get_prioritizer(config, local=local, now=ctx.obj["now"])
    try:
        result = prioritize_and_save(store, service, dry_run=dry_run)
    except (StoreError, TaskValidationError) as e:
        _fail(str(e))

    if not result.applied:
        click.echo("Priorities unchanged (service unavailable or nothing to score).")
        return

    titles = {t.id: t.title for t in result.tasks}
    for task_id, score in sorted(result.scores.items(), key=lambda item: -item[1]):
        click.echo(f"  {score:.2f}  {titles.get(task_id, task_id)}")
    if dry_run:
        click.echo("\n(dry run - nothing saved)")
    else:
        click.echo(f"\n✓ Saved {len(result.scores)} priorities via {result.source}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suggest(ctx, as_json: bool):
    """Ask the AI gateway for tasks worth adding."""
    tasks = _load_tasks(ctx)
    try:
        suggestions = AIGatewayPrioritizer(ctx.obj["config"]).suggest(tasks)
    except PrioritizationError as e:
        _fail(str(e))

    if as_json:
        click.echo(
            json.dumps(
                [{"title": s.title, "priority": s.priority, "category": s.category} for s in suggestions],
                indent=2,
            )
        )
        return

    if not suggestions:
        click.echo("No suggestions.")
        return

    for s in suggestions:
        click.echo(f"- [{s.priority}] {s.title} ({s.category})")


if __name__ == "__main__":
    main()
