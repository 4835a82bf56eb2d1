from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from lms_assess.assessment import check_item, medal_for, number_rows
from lms_assess.data_models import GradableItem, LeaderboardFilter, Learner
from lms_assess.errors import AssessmentError
from lms_assess.system import AssessmentSystem
from lms_assess.utils.files import load_item, load_items, load_submission

app = typer.Typer(help="Grade submissions and report progress and leaderboards.")
console = Console()

# Lets LMS_ASSESS_CONFIG_OVERRIDES live in a local .env file.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

MEDAL_STYLES = {"gold": "yellow", "silver": "grey70", "bronze": "dark_orange3"}


def _load_system(config: Optional[Path]) -> AssessmentSystem:
    """Instantiate `AssessmentSystem` with an optional config override."""
    return AssessmentSystem.from_config(config)


def _load_gradable(path: Path) -> GradableItem:
    item = load_item(path)
    if not isinstance(item, GradableItem):
        raise typer.BadParameter(f"{path} is a {item.kind}, not a test or assignment.")
    return item


def _report(exc: Exception) -> None:
    console.print(f"[red]{exc}[/red]")


@app.command("check-item")
def check_item_command(
    item_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
):
    """Report authoring defects that would make a test or assignment ungradable."""
    item = _load_gradable(item_file)
    try:
        check_item(item)
    except AssessmentError as exc:
        _report(exc)
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]{item.title or item.id}: {len(item.questions)} questions, "
        f"{item.max_points} points.[/green]"
    )


@app.command()
def grade(
    submission_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    item_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    learner_name: str = typer.Option("", help="Display name stored with the result."),
    role: str = typer.Option("student", help="student or admin; admins skip access checks."),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """
    Grade a submission file against a test or assignment file and store the result.

    A second submission for the same learner and item is rejected.
    """
    if role not in ("student", "admin"):
        raise typer.BadParameter("role must be 'student' or 'admin'.")
    submission = load_submission(submission_file)
    item = _load_gradable(item_file)
    learner = Learner(id=submission.learner_id, name=learner_name, role=role)
    system = _load_system(config)
    try:
        result = system.submit(learner, submission, item)
    except (AssessmentError, ValueError) as exc:
        _report(exc)
        raise typer.Exit(code=1) from exc

    table = Table(title=f"{result.title or result.item_id} ({result.item_type})")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    table.add_column("Points", justify="right")
    table.add_column("Feedback")
    for outcome in result.answers:
        color = "green" if outcome.is_correct else "red"
        table.add_row(
            outcome.question_id,
            "" if outcome.raw_answer is None else str(outcome.raw_answer),
            str(outcome.points_awarded),
            f"[{color}]{outcome.feedback}[/{color}]",
        )
    console.print(table)
    console.print(f"[bold]Score: {result.score}% of {result.max_score} points[/bold]")


@app.command()
def leaderboard(
    course: Optional[str] = typer.Option(None, help="Only results for this course id."),
    item_type: Optional[str] = typer.Option(None, "--type", help="test or assignment."),
    name: Optional[str] = typer.Option(None, help="Case-insensitive learner name filter."),
    overall: bool = typer.Option(False, help="One row per learner with summed scores."),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Also write the rows as CSV."),
    items_dir: Optional[Path] = typer.Option(
        None, "--items", exists=True, file_okay=False, help="Item documents used for CSV display names."
    ),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """Show the ranked leaderboard."""
    if item_type not in (None, "test", "assignment"):
        raise typer.BadParameter("type must be 'test' or 'assignment'.")
    system = _load_system(config)
    criteria = LeaderboardFilter(course_id=course, item_type=item_type, name_query=name)
    rows = system.overall_leaderboard(criteria) if overall else system.leaderboard(criteria)
    if not rows:
        console.print("[yellow]No results yet.[/yellow]")
        return

    medal_positions = system.settings.leaderboard.medal_positions
    table = Table(title="Leaderboard")
    table.add_column("Rank", justify="right")
    table.add_column("Student")
    if not overall:
        table.add_column("Course")
        table.add_column("Item")
    table.add_column("Score", justify="right")
    table.add_column("Completed")
    for position, row in number_rows(rows):
        medal = medal_for(position, medal_positions)
        rank_cell = f"[{MEDAL_STYLES[medal]}]{position}[/{MEDAL_STYLES[medal]}]" if medal else str(position)
        cells = [rank_cell, row.learner_name or row.learner_id]
        if not overall:
            cells += [row.course_id or "", f"{row.item_id} ({row.item_type})"]
        cells += [str(row.score), row.completed_at.strftime("%Y-%m-%d %H:%M")]
        table.add_row(*cells)
    console.print(table)

    if csv_path:
        # Courses and items share one id space, so one lookup serves both columns.
        names = {}
        if items_dir:
            names = {item.id: item.title for item in load_items(items_dir) if item.title}
        text = system.export_leaderboard_csv(
            criteria, titles=names, course_names=names, overall=overall
        )
        csv_path.write_text(text, encoding="utf-8")
        console.print(f"Wrote {csv_path}")


@app.command()
def progress(
    learner_id: str = typer.Argument(...),
    course_id: str = typer.Argument(...),
    items_dir: Path = typer.Argument(..., exists=True, file_okay=False, readable=True),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """Show a learner's completion of one course, counting only items they can access."""
    system = _load_system(config)
    items = [item for item in load_items(items_dir) if isinstance(item, GradableItem)]
    entry = system.progress(learner_id, course_id, items)
    console.print(
        f"Course [cyan]{entry.course_id}[/cyan]: {entry.completed_count}/{entry.total_count} "
        f"completed ([bold]{entry.percent}%[/bold])"
    )
    if entry.last_activity:
        console.print(f"Last activity: {entry.last_activity.isoformat()}")
    summary = system.summary(learner_id)
    console.print(
        f"Tests: {summary.tests_completed} (avg {summary.test_average})  |  "
        f"Assignments: {summary.assignments_completed} (avg {summary.assignment_average})"
    )


if __name__ == "__main__":
    app()
