#!/usr/bin/env python3
"""
recovery-coach CLI.

Muscle fatigue, workout suggestions, training load, personal records and
injury statistics from a JSON snapshot bundle.

Usage:
    recovery-coach fatigue --snapshot snapshot.json
    recovery-coach recommend --snapshot snapshot.json --as-of 2024-05-01
    recovery-coach load --snapshot snapshot.json --days 14 --age 35
    recovery-coach records --snapshot snapshot.json
    recovery-coach injuries --snapshot snapshot.json --window 14
"""

import argparse
import asyncio
import json
import sys
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import Settings, get_settings
from .exceptions import RecoveryCoachError, ValidationError
from .integrations.json_snapshot import JsonSnapshotSource
from .models.fatigue import FatigueLevel
from .models.personal_records import MilestoneDistance, PersonalRecordType
from .pipeline import DataStatus, RecoveryPipeline, RecoveryReport
from .services.exercise_library import ExerciseLibrary
from .services.injury_statistics import InjuryStatisticsService
from .services.personal_records import build_record_book
from .services.training_load import daily_loads, estimate_max_hr
from .services.workout_recommendation import check_injury_conflicts
from .utils.dates import utc_now
from .utils.logging import configure_logging

console = Console()


def get_level_color(level: FatigueLevel) -> str:
    """Get rich color for a fatigue level."""
    if level is FatigueLevel.NO_DATA:
        return "dim"
    if level <= FatigueLevel.WELL_RESTED:
        return "green"
    if level <= FatigueLevel.MILD_FATIGUE:
        return "cyan"
    if level <= FatigueLevel.HIGH_FATIGUE:
        return "yellow"
    return "red"


def parse_as_of(value: Optional[str]) -> Optional[datetime]:
    """``YYYY-MM-DD`` to the end of that UTC day, as a naive datetime."""
    if value is None:
        return None
    try:
        day = date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid --as-of date '{value}', expected YYYY-MM-DD", field="as_of") from e
    return datetime.combine(day, time(23, 59, 59))


def resolve_as_of(args, source: JsonSnapshotSource) -> datetime:
    return parse_as_of(args.as_of) or source.as_of or utc_now()


def load_library(settings: Settings) -> ExerciseLibrary:
    return ExerciseLibrary.from_json(settings.resolved_library_path)


def run_pipeline(args, settings: Settings) -> Tuple[RecoveryReport, JsonSnapshotSource]:
    source = JsonSnapshotSource.from_file(args.snapshot)
    pipeline = RecoveryPipeline.from_settings(
        health=source,
        records=source,
        library=load_library(settings),
        settings=settings,
    )
    report = asyncio.run(pipeline.run(as_of=resolve_as_of(args, source), injuries=source.injuries()))
    return report, source


def print_status(report: RecoveryReport) -> None:
    if report.status is DataStatus.COMPLETE:
        return
    color = "yellow" if report.status is DataStatus.DEGRADED else "red"
    console.print(f"[{color}]! {report.advisory}[/{color}]")
    console.print(f"[dim]Failed sources: {', '.join(report.failed_sources)}[/dim]")
    console.print()


def emit_json(payload) -> None:
    console.print_json(json.dumps(payload, default=str))


def cmd_fatigue(args, settings: Settings):
    """Show per-muscle fatigue."""
    report, _ = run_pipeline(args, settings)
    if args.json:
        emit_json(report.to_dict())
        return

    console.print()
    console.print(Panel("[bold]Recovery Coach - Muscle Fatigue[/bold]"))
    console.print()
    print_status(report)

    mods = report.modifiers
    baseline = report.hrv_baseline
    hrv_text = (
        f"z={baseline.z_score:+.2f}, condition {baseline.condition_score}/100"
        if baseline.is_ready
        else f"baseline {baseline.days_collected}/{baseline.days_required} days"
    )
    console.print(Panel(
        f"[cyan]As of:[/cyan]        {report.as_of:%Y-%m-%d %H:%M}\n"
        f"[cyan]Sleep:[/cyan]        x{mods.sleep_modifier:.2f}\n"
        f"[cyan]Readiness:[/cyan]    x{mods.readiness_modifier:.2f}  ({hrv_text})\n"
        f"[cyan]Half-life:[/cyan]    {report.fatigue_states[0].breakdown.effective_half_life_hours:.1f} h",
        title="Recovery Modifiers",
        box=box.ROUNDED,
    ))

    table = Table(title=f"Fatigue ({report.event_count} events)", box=box.ROUNDED)
    table.add_column("Muscle", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("State")
    table.add_column("Score", justify="right")
    table.add_column("Last Trained")
    table.add_column("Weekly Sets", justify="right")

    for state in report.fatigue_states:
        color = get_level_color(state.level)
        table.add_row(
            state.muscle.value,
            str(int(state.level)),
            Text(state.level.label, style=color),
            f"{state.raw_score:.2f}",
            f"{state.last_trained_date:%Y-%m-%d}" if state.last_trained_date else "-",
            f"{state.weekly_volume:.0f}",
        )

    console.print(table)
    console.print()


def cmd_recommend(args, settings: Settings):
    """Suggest the next workout."""
    report, source = run_pipeline(args, settings)
    suggestion = report.suggestion
    if args.json:
        emit_json(suggestion.to_dict())
        return

    console.print()
    console.print(Panel("[bold]Recovery Coach - Workout Suggestion[/bold]"))
    console.print()
    print_status(report)

    if suggestion.is_rest_day:
        text = "[bold yellow]All muscle groups are still recovering.[/bold yellow]\n"
        for activity in suggestion.active_recovery:
            text += f"\n  - {activity.title} ({activity.duration})"
        if suggestion.next_ready:
            text += (
                f"\n\n[cyan]Next ready:[/cyan] {suggestion.next_ready.muscle.value} "
                f"around {suggestion.next_ready.ready_date:%Y-%m-%d %H:%M}"
            )
        console.print(Panel(text, title="Rest Day", box=box.ROUNDED))
        console.print()
        return

    if suggestion.is_empty:
        console.print(f"[yellow]No suggestion available ({suggestion.rationale.value}).[/yellow]")
        console.print()
        return

    table = Table(
        title=f"Focus: {', '.join(m.value for m in suggestion.focus_order)}",
        box=box.ROUNDED,
    )
    table.add_column("#", justify="right")
    table.add_column("Exercise", style="bold")
    table.add_column("Sets", justify="right")
    table.add_column("Target", style="cyan")
    table.add_column("Reason")
    table.add_column("Alternatives", style="dim")

    for index, exercise in enumerate(suggestion.exercises, start=1):
        table.add_row(
            str(index),
            exercise.definition.display_name,
            str(exercise.suggested_sets),
            exercise.target_muscle.value,
            exercise.reason,
            ", ".join(a.display_name for a in exercise.alternatives) or "-",
        )
    console.print(table)

    injuries = source.injuries()
    for exercise in suggestion.exercises:
        d = exercise.definition
        for conflict in check_injury_conflicts(d.primary_muscles + d.secondary_muscles, injuries):
            console.print(
                f"[yellow]! {d.display_name}: caution with {conflict.injury.body_part.value} injury "
                f"({', '.join(m.value for m in conflict.conflicting_muscles)})[/yellow]"
            )
    console.print()


def cmd_load(args, settings: Settings):
    """Show daily training load."""
    source = JsonSnapshotSource.from_file(args.snapshot)
    as_of = resolve_as_of(args, source)
    days = args.days or settings.training_load_days

    max_hr = args.max_hr or source.profile.max_heart_rate
    age = args.age or source.profile.age
    if max_hr is None and age is not None:
        max_hr = estimate_max_hr(age)

    series = daily_loads(
        source.all_workouts(),
        resting_hr=source.resting_heart_rates(),
        max_hr=max_hr,
        as_of=as_of,
        days=days,
    )
    if args.json:
        emit_json([d.to_dict() for d in series])
        return

    console.print()
    console.print(Panel("[bold]Recovery Coach - Training Load[/bold]"))
    console.print()

    table = Table(title=f"Daily Load (Last {days} Days)", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Load", justify="right")
    table.add_column("Workouts", justify="right")
    table.add_column("Source")

    for day in series:
        table.add_row(
            day.date.isoformat(),
            f"{day.load:.1f}",
            str(day.workout_count),
            day.source.value if day.source else "-",
        )
    console.print(table)

    total = sum(d.load for d in series)
    console.print(f"[dim]Total: {total:.1f}  |  Max HR: {max_hr:.0f}[/dim]" if max_hr else f"[dim]Total: {total:.1f}[/dim]")
    console.print()


def cmd_records(args, settings: Settings):
    """Show personal records per activity type."""
    source = JsonSnapshotSource.from_file(args.snapshot)
    workouts = source.all_workouts()
    book = build_record_book(workouts)
    if args.json:
        emit_json({
            activity: {t.value: r.model_dump(mode="json", by_alias=True) for t, r in records.items()}
            for activity, records in book.items()
        })
        return

    console.print()
    console.print(Panel("[bold]Recovery Coach - Personal Records[/bold]"))
    console.print()

    if not book:
        console.print("No personal records yet.")
        console.print()
        return

    table = Table(title="Personal Records", box=box.ROUNDED)
    table.add_column("Activity", style="cyan")
    table.add_column("Record")
    table.add_column("Value", justify="right")
    table.add_column("Date")

    for activity in sorted(book):
        for record_type in PersonalRecordType:
            record = book[activity].get(record_type)
            if record is None:
                continue
            table.add_row(activity, record_type.value, format_record_value(record_type, record.value), f"{record.date:%Y-%m-%d}")
    console.print(table)

    milestones = [(w, MilestoneDistance.detect(w.distance)) for w in workouts]
    milestones = [(w, m) for w, m in milestones if m is not None]
    if milestones:
        console.print()
        for workout, milestone in milestones:
            console.print(f"[green]* {milestone.value}[/green] {workout.activity_type.value} on {workout.date:%Y-%m-%d}")
    console.print()


def format_record_value(record_type: PersonalRecordType, value: float) -> str:
    if record_type is PersonalRecordType.FASTEST_PACE:
        minutes, seconds = divmod(int(round(value)), 60)
        return f"{minutes}:{seconds:02d} /km"
    if record_type is PersonalRecordType.LONGEST_DISTANCE:
        return f"{value / 1000:.2f} km"
    if record_type is PersonalRecordType.LONGEST_DURATION:
        hours, rest = divmod(int(value), 3600)
        return f"{hours}:{rest // 60:02d}:{rest % 60:02d}"
    if record_type is PersonalRecordType.HIGHEST_CALORIES:
        return f"{value:.0f} kcal"
    return f"{value:.0f} m"


def cmd_injuries(args, settings: Settings):
    """Show injury statistics and training volume around injuries."""
    source = JsonSnapshotSource.from_file(args.snapshot)
    as_of = resolve_as_of(args, source)
    injuries = source.injuries()
    service = InjuryStatisticsService(window_days=args.window or settings.injury_window_days)

    exercise_dates: List[datetime] = [r.date for r in source.all_records()]
    exercise_dates += [w.date for w in source.all_workouts() if not w.is_from_this_app]

    stats = service.compute_statistics(injuries, as_of=as_of)
    comparisons = service.compute_volume_comparisons(injuries, exercise_dates, as_of=as_of)
    if args.json:
        emit_json({
            "statistics": stats.to_dict(),
            "volume_comparisons": [c.to_dict() for c in comparisons],
        })
        return

    console.print()
    console.print(Panel("[bold]Recovery Coach - Injuries[/bold]"))
    console.print()

    avg = f"{stats.average_recovery_days:.1f} days" if stats.average_recovery_days is not None else "-"
    longest = f"{stats.longest_recovery_days} days" if stats.longest_recovery_days is not None else "-"
    console.print(Panel(
        f"[cyan]Total:[/cyan]            {stats.total_count}\n"
        f"[cyan]Active:[/cyan]           {stats.active_count}\n"
        f"[cyan]Avg recovery:[/cyan]     {avg}\n"
        f"[cyan]Longest recovery:[/cyan] {longest}",
        title="Statistics",
        box=box.ROUNDED,
    ))

    if stats.frequency_by_body_part:
        freq = Table(title="By Body Part", box=box.SIMPLE)
        freq.add_column("Body Part", style="cyan")
        freq.add_column("Count", justify="right")
        for item in stats.frequency_by_body_part:
            freq.add_row(item.body_part.value, str(item.count))
        console.print(freq)

    if comparisons:
        table = Table(title=f"Training Days (window {service.window_days} days)", box=box.ROUNDED)
        table.add_column("Body Part", style="cyan")
        table.add_column("Severity", justify="right")
        table.add_column("Before", justify="right")
        table.add_column("During", justify="right")
        table.add_column("After", justify="right")
        for c in comparisons:
            table.add_row(
                c.body_part.value,
                c.severity.name.lower(),
                str(c.pre_injury_count),
                str(c.during_injury_count),
                str(c.post_injury_count) if c.post_injury_count is not None else "active",
            )
        console.print(table)
    console.print()


COMMANDS = {
    "fatigue": cmd_fatigue,
    "recommend": cmd_recommend,
    "load": cmd_load,
    "records": cmd_records,
    "injuries": cmd_injuries,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recovery-coach",
        description="Recovery Coach - recovery-aware workout recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  recovery-coach fatigue --snapshot snapshot.json
  recovery-coach recommend --snapshot snapshot.json --as-of 2024-05-01
  recovery-coach load --snapshot snapshot.json --days 14 --age 35
  recovery-coach records --snapshot snapshot.json
  recovery-coach injuries --snapshot snapshot.json --window 14
        """,
    )
    parser.add_argument("--log-level", help="Log level (default from settings)")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--snapshot", required=True, help="Path to a JSON snapshot bundle")
    common.add_argument("--as-of", help="Evaluation date YYYY-MM-DD (default: snapshot asOf or now)")
    common.add_argument("--json", action="store_true", help="Print JSON instead of tables")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("fatigue", parents=[common], help="Show per-muscle fatigue")
    subparsers.add_parser("recommend", parents=[common], help="Suggest the next workout")

    load_p = subparsers.add_parser("load", parents=[common], help="Show daily training load")
    load_p.add_argument("--days", type=int, help="Days in the series (default from settings)")
    load_p.add_argument("--max-hr", type=float, help="Maximum heart rate for TRIMP")
    load_p.add_argument("--age", type=int, help="Age, used to estimate max HR")

    subparsers.add_parser("records", parents=[common], help="Show personal records")

    injuries_p = subparsers.add_parser("injuries", parents=[common], help="Show injury statistics")
    injuries_p.add_argument("--window", type=int, help="Comparison window in days")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args, settings)
    except RecoveryCoachError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        for key, value in e.details.items():
            if key != "errors":
                console.print(f"[dim]{key}: {value}[/dim]")
        sys.exit(1)


if __name__ == "__main__":
    main()
