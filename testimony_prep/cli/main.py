"""Main CLI application"""

import asyncio
import mimetypes
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from testimony_prep.errors import LimitReachedError, PrepError
from testimony_prep.models.document import UploadedFile
from testimony_prep.models.session import DepositionSession, SessionKind, TestimonySession
from testimony_prep.services.context import build_context
from testimony_prep.utils.config import get_settings, upgrade_messages
from testimony_prep.utils.logging import setup_logging

app = typer.Typer(
    name="testimony-prep",
    help="Cross-examination and deposition preparation tools",
    add_completion=False,
)

console = Console(force_terminal=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    setup_logging("DEBUG" if verbose else get_settings().log_level)


def _read_files(paths: List[Path]) -> List[UploadedFile]:
    files = []
    for path in paths:
        content_type, _ = mimetypes.guess_type(path.name)
        files.append(UploadedFile(name=path.name, data=path.read_bytes(), content_type=content_type or ""))
    return files


def _show_limit(error: LimitReachedError) -> None:
    settings = get_settings()
    kind = error.result.kind.value if error.result.kind else "feature_disabled"
    message = upgrade_messages(settings)[kind]
    console.print(Panel(
        f"{error}\n\n{message['description']}\n\n"
        f"[cyan]{message['cta']}:[/cyan] {settings.demo_upgrade_url}",
        title=f"[bold red]{message['title']}[/bold red]",
        border_style="red",
    ))


def _print_testimony_questions(session: TestimonySession) -> None:
    table = Table(title=f"Cross-Examination Questions - {session.witness_name}")
    table.add_column("#", justify="right")
    table.add_column("Question")
    table.add_column("Category", style="cyan")
    table.add_column("Difficulty", style="magenta")
    for i, q in enumerate(session.questions, start=1):
        table.add_row(str(i), q.question, q.category.value, q.difficulty.value)
    console.print(table)


def _print_deposition_analysis(session: DepositionSession) -> None:
    if session.analysis and session.analysis.key_themes:
        console.print(Panel(
            "\n".join(f"• {t}" for t in session.analysis.key_themes),
            title="Key Themes",
            border_style="blue",
        ))
    for gap in session.gaps:
        console.print(f"[yellow]Gap ({gap.severity.value}):[/yellow] {gap.description}")
    for contradiction in session.contradictions:
        console.print(f"[red]Contradiction ({contradiction.severity.value}):[/red] {contradiction.description}")

    table = Table(title=f"Deposition Questions - {session.deponent_name}")
    table.add_column("#", justify="right")
    table.add_column("Question")
    table.add_column("Topic", style="cyan")
    table.add_column("Priority", style="magenta")
    for i, q in enumerate(session.questions, start=1):
        table.add_row(str(i), q.question, q.topic, q.priority.value)
    console.print(table)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API"""
    import uvicorn

    console.print(f"[blue]Serving on http://{host}:{port}[/blue]")
    uvicorn.run(
        "testimony_prep.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=get_settings().log_level.lower(),
    )


@app.command("config")
def show_config():
    """Show demo configuration and limits"""
    from testimony_prep.services.demo_config import build_demo_config

    payload = build_demo_config(get_settings())
    config = payload["config"]

    table = Table(title=config["app_name"])
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Demo mode", str(config["is_demo_mode"]))
    table.add_row("Upgrade URL", config["upgrade_url"])
    table.add_row("Contact", config["contact_email"])
    table.add_row("Session limit", payload["limit_descriptions"]["pricing"]["session_limit"])
    for value in payload["limit_descriptions"]["documents"].values():
        table.add_row("Documents", value)
    console.print(table)

    if payload["disabled_features"]:
        console.print(f"[dim]Disabled in demo: {', '.join(payload['disabled_features'])}[/dim]")


@app.command("usage")
def usage():
    """Show usage against the demo limits"""
    from testimony_prep.services.limits import usage_level
    from testimony_prep.services.usage import format_price

    context = build_context()
    stats = context.ledger.get_usage_stats()
    colors = {"normal": "green", "warning": "yellow", "critical": "red", "exhausted": "red"}

    table = Table(title="Demo Usage")
    table.add_column("Meter", style="cyan")
    table.add_column("Used", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Percent", justify="right")

    price_color = colors[usage_level(stats.pricing.percent_used)]
    table.add_row(
        "Session spend",
        format_price(stats.pricing.session_used),
        format_price(stats.pricing.session_limit),
        f"[{price_color}]{stats.pricing.percent_used:.0f}%[/{price_color}]",
    )
    doc_color = colors[usage_level(stats.documents.percent_used)]
    table.add_row(
        "Documents",
        str(stats.documents.documents_used),
        str(stats.documents.documents_limit),
        f"[{doc_color}]{stats.documents.percent_used:.0f}%[/{doc_color}]",
    )
    console.print(table)
    console.print(f"Resets in {context.ledger.time_remaining()}")


@app.command("reset-usage")
def reset_usage(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")):
    """Clear the usage ledger"""
    if not yes and not typer.confirm("Clear all usage data?"):
        raise typer.Abort()
    build_context().ledger.clear()
    console.print("[green][OK] Usage data cleared[/green]")


@app.command("classify")
def classify_files(files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Files to classify")):
    """Extract text and detect the document type of each file"""
    from testimony_prep.services.classifier import classify
    from testimony_prep.services.ingest import extract_text

    table = Table(title="Document Types")
    table.add_column("File", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Pages", justify="right")

    for upload in _read_files(files):
        try:
            result = extract_text(upload.name, upload.data, upload.content_type)
        except PrepError as e:
            table.add_row(upload.name, f"[red]{e}[/red]", "-")
            continue
        table.add_row(upload.name, classify(upload.name, result.text).value, str(result.page_count))

    console.print(table)


@app.command("prepare")
def prepare(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Case documents (PDF or text)"),
    subject: str = typer.Option(..., "--subject", "-s", help="Witness or deponent name"),
    case: str = typer.Option(..., "--case", "-c", help="Case name"),
    kind: SessionKind = typer.Option(SessionKind.TESTIMONY, "--kind", "-k", help="testimony or deposition"),
    case_number: Optional[str] = typer.Option(None, "--case-number", help="Case number (deposition)"),
    outline: bool = typer.Option(True, "--outline/--no-outline", help="Build the deposition outline"),
):
    """Create a session, upload documents and generate questions"""
    from testimony_prep.services.wizard import WizardController

    wizard = WizardController(build_context(), kind)

    try:
        session = wizard.create_session(subject, case, case_number)
        console.print(f"[blue]Session {session.id}[/blue]")

        report = wizard.upload_files(_read_files(files))
        for doc in report.added:
            console.print(f"  [green][OK][/green] {doc.name} ({doc.type.value}, {doc.page_count} pages)")
        for notice in wizard.active_notices():
            console.print(f"  [yellow]{notice.message}[/yellow]")
        if wizard.limit_reached:
            raise LimitReachedError(wizard.limit_result)

        with console.status("[blue]Analyzing documents...[/blue]"):
            session = asyncio.run(wizard.generate())

        if isinstance(session, DepositionSession):
            if outline and session.questions:
                session = wizard.build_outline()
            _print_deposition_analysis(session)
        else:
            _print_testimony_questions(session)

        for notice in wizard.active_notices():
            if notice.level == "info":
                console.print(f"[dim]{notice.message}[/dim]")

    except LimitReachedError as e:
        _show_limit(e)
        raise typer.Exit(1)
    except PrepError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("practice")
def practice(session_id: Optional[str] = typer.Argument(None, help="Session id (default: current)")):
    """Answer practice questions and get examiner feedback"""
    from testimony_prep.services.outline import render_practice_review
    from testimony_prep.services.wizard import WizardController

    wizard = WizardController(build_context(), SessionKind.TESTIMONY)
    if wizard.resume(session_id) is None:
        console.print("[red]No testimony session found. Run 'prepare' first.[/red]")
        raise typer.Exit(1)

    try:
        question = wizard.start_practice()
    except PrepError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print("[dim]Answer each question. 'skip' moves on, 'quit' ends practice.[/dim]\n")

    while question is not None:
        total = len(wizard.session.questions)
        console.print(Panel(
            question.question,
            title=f"[bold]Question {wizard.question_index + 1} of {total}[/bold] [dim]({question.category.value})[/dim]",
            border_style="blue",
        ))

        try:
            answer = Prompt.ask("[bold green]Your answer[/bold green]")
        except KeyboardInterrupt:
            break

        if answer.strip().lower() in ("quit", "exit", "q"):
            break
        if answer.strip().lower() != "skip":
            try:
                with console.status("[blue]Opposing counsel is reviewing your answer...[/blue]"):
                    feedback = asyncio.run(wizard.submit_response(answer))
            except LimitReachedError as e:
                _show_limit(e)
                break
            except PrepError as e:
                console.print(f"[red]Error: {e}[/red]")
                continue

            console.print(f"\n[cyan]Feedback:[/cyan] {feedback.feedback}")
            if feedback.weakness_identified:
                console.print(f"[yellow]Weakness:[/yellow] {feedback.weakness_identified}")
            if feedback.suggested_improvement:
                console.print(f"[green]Better answer:[/green] {feedback.suggested_improvement}")
            console.print(f"[magenta]Follow-up:[/magenta] {feedback.follow_up}\n")

        question = wizard.next_question()

    console.print(Markdown(render_practice_review(wizard.session)))


@app.command("sessions")
def list_sessions(kind: Optional[SessionKind] = typer.Option(None, "--kind", "-k", help="Filter by flow")):
    """List saved sessions"""
    sessions = build_context().sessions.list_sessions(kind)
    if not sessions:
        console.print("[yellow]No sessions saved[/yellow]")
        return

    table = Table(title="Saved Sessions")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Subject", style="green")
    table.add_column("Case")
    table.add_column("Docs", justify="right")
    table.add_column("Questions", justify="right")
    table.add_column("Updated")

    for s in sessions:
        table.add_row(
            s.id,
            s.kind,
            s.subject_name,
            s.case_name,
            str(len(s.documents)),
            str(len(s.questions)),
            s.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command("show")
def show(session_id: str = typer.Argument(..., help="Session id")):
    """Show a saved session"""
    session = build_context().sessions.get(session_id)
    if session is None:
        console.print(f"[red]Session {session_id} not found[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold]{session.subject_name}[/bold]\n"
        f"Case: {session.case_name}\n"
        f"Created: {session.created_at:%Y-%m-%d %H:%M}",
        title=f"{session.kind.title()} Session",
        border_style="blue",
    ))
    for doc in session.documents:
        status = "[green]ready[/green]" if doc.is_ready else f"[red]{doc.status.value}[/red]"
        console.print(f"  {doc.name} ({doc.type.value}) {status}")

    if isinstance(session, DepositionSession):
        _print_deposition_analysis(session)
    elif session.questions:
        _print_testimony_questions(session)


@app.command("export")
def export(
    session_id: str = typer.Argument(..., help="Session id"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write Markdown to this file"),
):
    """Export a deposition outline or practice review as Markdown"""
    from testimony_prep.services.outline import render_outline_markdown, render_practice_review

    session = build_context().sessions.get(session_id)
    if session is None:
        console.print(f"[red]Session {session_id} not found[/red]")
        raise typer.Exit(1)

    if isinstance(session, DepositionSession):
        text = render_outline_markdown(session)
    else:
        text = render_practice_review(session)

    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green][OK] Exported to {output}[/green]")
    else:
        console.print(Markdown(text))


@app.command("delete")
def delete(session_id: str = typer.Argument(..., help="Session id")):
    """Delete a saved session"""
    context = build_context()
    session = context.sessions.get(session_id)
    if session is None or not context.sessions.delete(session_id):
        console.print(f"[red]Session {session_id} not found[/red]")
        raise typer.Exit(1)

    current = context.sessions.get_current(SessionKind(session.kind))
    if current is None:
        context.sessions.clear_current(SessionKind(session.kind))
    console.print(f"[green][OK] Deleted session {session_id}[/green]")


if __name__ == "__main__":
    app()
