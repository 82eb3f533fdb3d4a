"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import os

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from career_draft.clients.career_api import CareerApiClient
from career_draft.clients.llm_client import LLMClient
from career_draft.config import AppConfig, load_config
from career_draft.engine.collection import interview_questions
from career_draft.engine.manager import QuestionManager
from career_draft.errors import SubmissionError
from career_draft.generation.generator import QuestionGenerator
from career_draft.generation.integrator import ALL_CATEGORIES
from career_draft.logging.generation_store import GenerationLogStore
from career_draft.models.draft import team_warnings
from career_draft.models.taxonomy import find_suggested_question
from career_draft.store.draft_store import DraftStore
from career_draft.store.storage import SQLiteStorage
from career_draft.submission.payload import salary_display
from career_draft.submission.submitter import CareerSubmitter
from career_draft.validation.steps import STEPS, StepNavigator, is_form_valid, is_step_complete

app = typer.Typer(
    name="career-draft",
    help="Job posting draft editor",
    no_args_is_help=True,
)
console = Console()

ORG_OPTION = typer.Option(None, "--org", envvar="CAREER_ORG_ID", help="Organization id")
EMAIL_OPTION = typer.Option(None, "--email", envvar="CAREER_USER_EMAIL", help="Your email")


class ConsoleNotifier:
    """Prints notices to the rich console."""

    def success(self, message: str) -> None:
        console.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        console.print(f"[red]{message}[/red]")


def _open_store(config: AppConfig, org_id: str | None) -> DraftStore:
    storage = SQLiteStorage(config.storage.resolved_db_path, namespace=org_id or "default")
    store = DraftStore(storage)
    store.load_for_org(org_id)
    return store


def _parse_value(raw: str):
    lowered = raw.strip().lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    return raw


@app.command()
def show(org: str = ORG_OPTION) -> None:
    """Print the current draft."""
    config = load_config()
    store = _open_store(config, org)
    draft = store.draft
    minimum, maximum = salary_display(draft.salary)

    console.print(
        Panel(
            f"[bold]{draft.job_title or '(untitled)'}[/bold]\n"
            f"{draft.employment_type or '-'} | {draft.work_setup or '-'} | "
            f"{draft.location.city or '-'}, {draft.location.province or '-'}, {draft.location.country}\n"
            f"Salary: {minimum} - {maximum} ({draft.salary.currency})\n"
            f"Status: {draft.status} | Step: {store.active_step}",
            title="Career draft",
        )
    )

    manager = QuestionManager(store, ConsoleNotifier())
    table = Table(title="Pre-screening questions")
    table.add_column("ID", style="dim")
    table.add_column("Question")
    table.add_column("Answer type")
    for q in manager.pre_screen_questions:
        table.add_row(q.id[:8], q.question, q.answer_type)
    console.print(table)

    for group, questions in manager.interview_groups:
        table = Table(title=f"{group.category} (group {group.id}, ask {group.question_count_to_ask})")
        table.add_column("ID", style="dim")
        table.add_column("Question")
        for q in questions:
            table.add_row(q.id[:8], q.question)
        console.print(table)

    for warning in team_warnings(draft):
        console.print(f"[yellow]{warning}[/yellow]")


@app.command()
def steps(org: str = ORG_OPTION) -> None:
    """Show wizard steps and their completeness."""
    config = load_config()
    store = _open_store(config, org)
    navigator = StepNavigator(
        store, required_interview_questions=config.validation.required_interview_questions
    )
    for index, step in enumerate(STEPS):
        done = is_step_complete(
            step.id, store.draft, config.validation.required_interview_questions
        )
        marker = ">" if index == navigator.current_index else " "
        status = "[green]done[/green]" if done else "[dim]open[/dim]"
        console.print(f"{marker} {step.subtitle}: [bold]{step.title}[/bold] {status}")
    console.print(f"\nProgress: {navigator.progress_ratio:.0%}")
    valid = is_form_valid(store.draft, config.validation.required_interview_questions)
    console.print("[green]Ready to publish[/green]" if valid else "[yellow]Not ready to publish[/yellow]")


@app.command("set")
def set_field(
    field: str = typer.Argument(help="Field name, e.g. jobTitle or salary.minimum"),
    value: str = typer.Argument(help="New value"),
    org: str = ORG_OPTION,
) -> None:
    """Set a draft field."""
    config = load_config()
    store = _open_store(config, org)
    if "." in field:
        head, tail = field.split(".", 1)
        partial = {head: {tail: _parse_value(value)}}
    else:
        partial = {field: _parse_value(value)}
    try:
        store.update(partial)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{field} updated[/green]")


@app.command("add-prescreen")
def add_prescreen(
    question: str = typer.Argument(help="Question text or a suggested question label"),
    answer_type: str = typer.Option(None, "--type", "-t", help="Answer type"),
    option: list[str] = typer.Option(None, "--option", "-o", help="Choice option (repeatable)"),
    org: str = ORG_OPTION,
) -> None:
    """Add a pre-screening question."""
    config = load_config()
    manager = QuestionManager(_open_store(config, org), ConsoleNotifier())
    suggestion = find_suggested_question(question)
    if suggestion and answer_type is None and not option:
        result = manager.add_suggested_question(suggestion)
    else:
        try:
            result = manager.add_pre_screen_question(question, answer_type, option or None)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    if result.rejected:
        raise typer.Exit(1)


@app.command("add-question")
def add_question(
    group_id: int = typer.Argument(help="Interview group id"),
    question: str = typer.Argument(help="Question text"),
    org: str = ORG_OPTION,
) -> None:
    """Add an interview question to a category group."""
    config = load_config()
    manager = QuestionManager(_open_store(config, org), ConsoleNotifier())
    if manager.add_interview_question(group_id, question).rejected:
        raise typer.Exit(1)


def _resolve_id(manager: QuestionManager, prefix: str) -> str:
    ids = [q.id for group in manager.groups for q in group.questions if q.id.startswith(prefix)]
    if len(ids) != 1:
        console.print(f"[red]No unique question matches: {prefix}[/red]")
        raise typer.Exit(1)
    return ids[0]


@app.command("remove-question")
def remove_question(
    question_id: str = typer.Argument(help="Question id (or unique prefix)"),
    org: str = ORG_OPTION,
) -> None:
    """Remove a question from whichever group holds it."""
    config = load_config()
    manager = QuestionManager(_open_store(config, org), ConsoleNotifier())
    manager.remove_question(_resolve_id(manager, question_id))


@app.command()
def move(
    source: str = typer.Argument(help="Question to move"),
    target: str = typer.Argument(None, help="Question to drop on; omit to move to the end"),
    group_id: int = typer.Option(None, "--group", "-g", help="Interview group id"),
    org: str = ORG_OPTION,
) -> None:
    """Reorder a question within its list."""
    config = load_config()
    manager = QuestionManager(_open_store(config, org), ConsoleNotifier())
    source_id = _resolve_id(manager, source)
    target_id = _resolve_id(manager, target) if target else None
    if group_id is None:
        result = manager.reorder_pre_screen(source_id, target_id)
    else:
        result = manager.reorder_interview(group_id, source_id, target_id)
    console.print("[green]Moved[/green]" if result.applied else "[dim]Nothing to move[/dim]")


@app.command()
def generate(
    category: str = typer.Option(None, "--category", "-c", help="Only this interview category"),
    org: str = ORG_OPTION,
) -> None:
    """Generate interview questions with Claude."""
    config = load_config()
    store = _open_store(config, org)
    manager = QuestionManager(store, ConsoleNotifier())
    generator = QuestionGenerator(
        LLMClient(timeout=config.llm.timeout),
        manager,
        config=config,
        log_store=GenerationLogStore(config.storage.resolved_log_db_path),
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Generating questions ({category or ALL_CATEGORIES})...", total=None)
        if category:
            asyncio.run(generator.generate_for_category(category))
        else:
            asyncio.run(generator.generate_all())

    for group in manager.groups:
        console.print(f"  [bold]{group.category}[/bold]: {len(interview_questions(group))} questions")


@app.command()
def stats(
    org: str = ORG_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", help="Recent runs to list"),
) -> None:
    """Show question generation usage for this month."""
    config = load_config()
    log_store = GenerationLogStore(config.storage.resolved_log_db_path)
    monthly = log_store.get_monthly_stats()

    table = Table(title=f"Generation usage ({monthly['month']})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Runs", str(monthly["total_runs"]))
    table.add_row("Questions added", str(monthly["total_added"]))
    table.add_row("Input tokens", f"{monthly['total_input_tokens']:,}")
    table.add_row("Output tokens", f"{monthly['total_output_tokens']:,}")
    table.add_row("Estimated cost", f"${monthly['total_cost_usd']:.4f}")
    table.add_row("Success rate", f"{monthly['success_rate']:.0f}%")
    console.print(table)

    logs = log_store.get_logs(org_id=org, limit=limit)
    if not logs:
        return
    recent = Table(title="Recent runs")
    recent.add_column("When", style="dim")
    recent.add_column("Scope")
    recent.add_column("Added", justify="right")
    recent.add_column("Result")
    for log in logs:
        result = "[green]ok[/green]" if log.success else f"[red]{escape(log.error_message or 'failed')}[/red]"
        recent.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M"), log.scope, str(log.added_count), result
        )
    console.print(recent)


@app.command()
def submit(
    status: str = typer.Option("draft", "--status", "-s", help="draft | active | inactive"),
    edit: str = typer.Option(None, "--edit", help="Id of the career being edited"),
    org: str = ORG_OPTION,
    email: str = EMAIL_OPTION,
) -> None:
    """Create the career (or update it with --edit)."""
    config = load_config()
    store = _open_store(config, org)
    submitter = CareerSubmitter(
        store,
        CareerApiClient(config.api.base_url, config.api.timeout),
        ConsoleNotifier(),
        form_type="edit" if edit else "add",
        org_id=org,
        user={"email": email, "name": os.getenv("CAREER_USER_NAME")},
        career={"_id": edit} if edit else None,
        required_interview_questions=config.validation.required_interview_questions,
    )
    try:
        response = asyncio.run(submitter.save(status))
    except SubmissionError:
        raise typer.Exit(1)
    if response is None:
        raise typer.Exit(1)


@app.command()
def step(
    action: str = typer.Argument(help="next | previous | <step id>"),
    org: str = ORG_OPTION,
    email: str = EMAIL_OPTION,
) -> None:
    """Move through the wizard."""
    config = load_config()
    navigator = StepNavigator(
        _open_store(config, org),
        ConsoleNotifier(),
        org_id=org,
        user_email=email,
        required_interview_questions=config.validation.required_interview_questions,
    )
    if action == "next":
        moved = navigator.go_next()
    elif action == "previous":
        moved = navigator.go_previous()
    else:
        try:
            moved = navigator.go_to(action)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    console.print(f"Step: [bold]{navigator.current_step}[/bold]")
    if not moved:
        raise typer.Exit(1)


@app.command()
def reset(
    org: str = ORG_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Discard the draft and start over."""
    if not yes and not typer.confirm("Discard the current draft?"):
        raise typer.Exit()
    config = load_config()
    _open_store(config, org).reset()
    console.print("[green]Draft reset[/green]")


if __name__ == "__main__":
    app()
