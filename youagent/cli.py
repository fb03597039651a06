"""[Layer: Presentation] Typer CLI Commands."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from youagent import _get_version
from youagent.config import get_settings
from youagent.core.engine import Engine
from youagent.core.indexer import RefreshReport
from youagent.core.planner import Plan
from youagent.core.synthesis import NO_CONTEXT_MESSAGE
from youagent.errors import YouAgentError
from youagent.models import SOURCE_LABELS, SOURCE_TAGS, ContextFragment
from youagent.utils.dates import format_date
from youagent.utils.llm import PROVIDERS, load_config, save_config
from youagent.utils.llm.config import DEFAULT_CONFIG_PATH
from youagent.utils.redact import redact_mapping

app = typer.Typer(
    name="youagent",
    help="Ask questions about yourself, answered from your own public footprint.",
    no_args_is_help=True,
)

console = Console()

EXIT_WORDS = {"exit", "quit", "bye"}

# Friendly names accepted wherever a source tag is expected.
SOURCE_ALIASES = {
    "github": "profile-host",
    "rss": "feed",
    "blog": "feed",
    "twitter": "social",
    "resume": "document",
}

REPL_HELP = """REPL Commands
  :help              Show this help
  :sources           Show available data sources
  :plan <message>    Show the planner decision for a message
  :stats             Show system statistics
  :refresh <source>  Refresh a source (github, rss, twitter, resume, all)
  :clear             Clear the screen
  exit | quit | bye  Leave the chat

Example: :plan Write a cover letter"""


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"youagent {_get_version()}")
        raise typer.Exit()


def _engine() -> Engine:
    return Engine()


def _resolve_source(name: str) -> str:
    """Map an alias or tag to a source tag; exits on unknown names."""
    key = name.strip().lower()
    tag = SOURCE_ALIASES.get(key, key)
    if tag not in SOURCE_TAGS:
        valid = ", ".join(list(SOURCE_TAGS) + list(SOURCE_ALIASES))
        typer.echo(f"Unknown source '{name}'. Choose from: {valid}", err=True)
        raise typer.Exit(2)
    return tag


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """YouAgent command line."""


# =============================================================================
# Output helpers
# =============================================================================


def _print_plan(message: str, plan: Plan) -> None:
    labels = [SOURCE_LABELS[tag] for tag in SOURCE_TAGS if tag in plan.eligible_categories]
    typer.echo(f'Message: "{message}"')
    typer.echo(f"Intent: {plan.intent.value}")
    typer.echo(f"Sources: {', '.join(labels) or 'None'}")
    typer.echo(f"Max Results: {plan.max_results}")
    typer.echo(f"Force Fresh: {'Yes' if plan.force_fresh else 'No'}")


def _print_citations(fragments: list[ContextFragment]) -> None:
    typer.echo("\nSources:")
    for idx, fragment in enumerate(fragments, start=1):
        title = f" — {fragment.title}" if fragment.title else ""
        label = SOURCE_LABELS.get(fragment.source, fragment.source)
        typer.echo(f"  [{idx}] {label}{title} ({format_date(fragment.date)})")


def _print_reports(reports: list[RefreshReport]) -> None:
    if not reports:
        typer.echo("No consented sources to refresh. Run `youagent init` first.")
        return
    for report in reports:
        label = SOURCE_LABELS.get(report.source, report.source)
        if report.error and report.embedded == 0 and report.fetched == 0:
            typer.echo(f"✗ {label}: {report.error}")
        elif report.error:
            typer.echo(
                f"! {label}: {report.embedded}/{report.updated} updated items embedded "
                f"({report.error})"
            )
        else:
            line = f"✓ {label}: {report.updated} of {report.fetched} items updated"
            if report.removed:
                line += f", {report.removed} removed"
            typer.echo(line)


def _print_sources(engine: Engine) -> None:
    counts = engine.db.count_by_source()
    if not counts:
        typer.echo('No data sources available. Run "youagent init" to set up.')
        return
    for tag in SOURCE_TAGS:
        if counts.get(tag):
            granted = engine.settings_db.is_granted(tag)
            mark = "✓" if granted else "-"
            typer.echo(f"{mark} {SOURCE_LABELS[tag]}: {counts[tag]} items")


def _print_stats(engine: Engine) -> None:
    stats = engine.stats()
    table = Table(title="YouAgent Statistics")
    table.add_column("Source")
    table.add_column("Documents", justify="right")
    table.add_column("Consent")
    for tag in SOURCE_TAGS:
        consent = stats["consent"].get(tag)
        table.add_row(
            SOURCE_LABELS[tag],
            str(stats["documents"][tag]),
            "granted" if consent else ("revoked" if consent is False else "-"),
        )
    console.print(table)
    typer.echo(f"Total documents: {stats['total_documents']}")
    typer.echo(f"Indexed vectors: {stats['vectors']}")


def _answer(engine: Engine, message: str, as_json: bool = False) -> None:
    """Retrieve, stream and print one answer."""
    plan, fragments, chunks = engine.stream(message)

    if not fragments:
        if as_json:
            typer.echo(
                json.dumps(
                    {
                        "response": NO_CONTEXT_MESSAGE,
                        "intent": plan.intent.value,
                        "sources": {},
                        "context": [],
                    }
                )
            )
        else:
            typer.echo(f"\n{NO_CONTEXT_MESSAGE}\n")
        return

    counts: dict[str, int] = {}
    for fragment in fragments:
        counts[fragment.source] = counts.get(fragment.source, 0) + 1

    if as_json:
        response = "".join(chunks)
        typer.echo(
            json.dumps(
                {
                    "response": response,
                    "intent": plan.intent.value,
                    "sources": counts,
                    "context": [
                        {
                            "source": f.source,
                            "title": f.title,
                            "date": f.date,
                            "url": f.url,
                        }
                        for f in fragments
                    ],
                }
            )
        )
        return

    chips = " ".join(f"[{SOURCE_LABELS.get(s, s).upper()}]" for s in counts)
    typer.echo(f"\nUsing sources: {chips}\n")
    typer.echo("Agent: ", nl=False)
    try:
        for chunk in chunks:
            typer.echo(chunk, nl=False)
    except KeyboardInterrupt:
        typer.echo("\n[interrupted]")
        return
    typer.echo("")
    _print_citations(fragments)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def init(
    provider: Optional[str] = typer.Option(
        None, "--provider", help=f"LLM provider ({', '.join(PROVIDERS)})"
    ),
    refresh_now: bool = typer.Option(
        True, "--refresh/--no-refresh", help="Fetch and index sources after setup."
    ),
) -> None:
    """Set up YouAgent: LLM provider, consent per source, first refresh."""
    settings = get_settings()
    settings.home.mkdir(parents=True, exist_ok=True)
    typer.echo(f"Setting up YouAgent in {settings.home}\n")

    chosen = provider or typer.prompt("LLM provider", default="gemini")
    chosen = chosen.strip().lower()
    if chosen not in PROVIDERS:
        typer.echo(f"Unknown provider '{chosen}'. Choose from: {', '.join(PROVIDERS)}", err=True)
        raise typer.Exit(2)
    if chosen == "ollama":
        credentials = {
            "base_url": typer.prompt("Ollama URL", default="http://localhost:11434")
        }
    else:
        credentials = {"api_key": typer.prompt(f"{chosen} API key", hide_input=True)}
    path = save_config(chosen, credentials)  # type: ignore[arg-type]
    typer.echo(f"Saved LLM configuration to {path}\n")

    engine = _engine()
    for tag in SOURCE_TAGS:
        label = SOURCE_LABELS[tag]
        if typer.confirm(f"Allow YouAgent to collect your {label} data?", default=True):
            engine.grant(tag)
            if tag == "profile-host":
                current = engine.settings_db.get("github_username") or settings.github_username
                username = typer.prompt("GitHub username", default=current or "")
                if username:
                    engine.settings_db.set("github_username", username.strip())
        else:
            engine.revoke(tag, purge=False)

    if refresh_now:
        typer.echo("\nRefreshing sources...")
        try:
            _print_reports(engine.refresh())
        except YouAgentError as exc:
            _fail(exc)
    typer.echo("\nSetup complete. Try: youagent chat")


@app.command()
def chat() -> None:
    """Interactive chat (REPL). Type :help for commands."""
    engine = _engine()
    typer.echo("YouAgent Chat\nType your questions. Type :help for commands, exit to leave.\n")
    while True:
        try:
            message = typer.prompt("You", default="", show_default=False).strip()
        except (typer.Abort, EOFError, KeyboardInterrupt):
            break
        if not message:
            continue
        if message.lower() in EXIT_WORDS:
            break
        if message.startswith(":"):
            _handle_repl_command(engine, message)
            continue
        try:
            _answer(engine, message)
        except YouAgentError as exc:
            typer.echo(f"Error: {exc}", err=True)
    typer.echo("\nGoodbye!")
    engine.close()


def _handle_repl_command(engine: Engine, command: str) -> None:
    name, _, arg = command[1:].partition(" ")
    name = name.lower()
    arg = arg.strip()
    if name == "help":
        typer.echo(REPL_HELP)
    elif name == "sources":
        _print_sources(engine)
    elif name == "plan":
        if not arg:
            typer.echo("Usage: :plan <message>")
            return
        _print_plan(arg, engine.plan(arg))
    elif name == "stats":
        _print_stats(engine)
    elif name == "refresh":
        if not arg:
            typer.echo("Usage: :refresh <source> (github, rss, twitter, resume, all)")
            return
        try:
            sources = None if arg == "all" else [_resolve_source(arg)]
        except typer.Exit:
            return
        try:
            _print_reports(engine.refresh(sources))
        except YouAgentError as exc:
            typer.echo(f"Error: {exc}", err=True)
    elif name == "clear":
        typer.clear()
    else:
        typer.echo(f"Unknown command: {name}\nType :help for available commands")


@app.command()
def ask(
    message: str = typer.Argument(..., help="Question to answer"),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON object instead of text."),
) -> None:
    """Answer a single question and exit."""
    engine = _engine()
    try:
        _answer(engine, message, as_json=as_json)
    except YouAgentError as exc:
        if as_json:
            typer.echo(json.dumps({"error": {"code": exc.code, "message": str(exc)}}))
            raise typer.Exit(1)
        _fail(exc)
    finally:
        engine.close()


@app.command()
def refresh(
    source: Optional[list[str]] = typer.Option(
        None, "--source", "-s", help="Source to refresh (repeatable). Default: all consented."
    ),
) -> None:
    """Fetch consented sources and re-embed changed items."""
    sources = [_resolve_source(s) for s in source] if source else None
    engine = _engine()
    try:
        reports = engine.refresh(sources)
    except YouAgentError as exc:
        _fail(exc)
    else:
        _print_reports(reports)
        if any(r.error for r in reports):
            raise typer.Exit(1)
    finally:
        engine.close()


@app.command()
def revoke(
    source: str = typer.Argument(..., help="Source to revoke (github, rss, twitter, resume)"),
    keep_data: bool = typer.Option(False, "--keep-data", help="Keep already collected items."),
) -> None:
    """Revoke consent for a source and delete its collected data."""
    tag = _resolve_source(source)
    engine = _engine()
    try:
        removed = engine.revoke(tag, purge=not keep_data)
    except YouAgentError as exc:
        _fail(exc)
    else:
        typer.echo(f"Revoked {SOURCE_LABELS[tag]} ({removed} items removed)")
    finally:
        engine.close()


@app.command()
def plan(message: str = typer.Argument(..., help="Message to analyze")) -> None:
    """Show the planner decision for a message."""
    _print_plan(message, _engine().plan(message))


@app.command()
def sources() -> None:
    """Show collected data sources."""
    _print_sources(_engine())


@app.command()
def stats() -> None:
    """Show document, vector and consent statistics."""
    engine = _engine()
    try:
        _print_stats(engine)
    except YouAgentError as exc:
        _fail(exc)
    finally:
        engine.close()


@app.command()
def doctor() -> None:
    """Run health checks on configuration, storage and the LLM provider."""
    settings = get_settings()
    table = Table(title="YouAgent health checks")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")
    failed = False

    def _row(name: str, status: str, details: str) -> None:
        nonlocal failed
        failed = failed or status == "fail"
        table.add_row(name, status, details)

    if settings.home.exists():
        _row("Home directory", "pass", str(settings.home))
    else:
        _row("Home directory", "warn", "Not initialized. Run `youagent init`")

    llm_config = load_config()
    engine = None
    try:
        engine = _engine()
        counts = engine.db.count_by_source()
        _row("Database", "pass", f"{sum(counts.values())} items at {settings.db_path}")
        _row("Vector index", "pass", f"{engine.store.count()} vectors ({settings.vector_backend})")
    except YouAgentError as exc:
        _row("Storage", "fail", str(exc))

    if engine is not None:
        try:
            provider = engine.provider
            _row("LLM provider", "pass", f"{provider.name} ({provider.default_model})")
        except YouAgentError as exc:
            _row("LLM provider", "fail", f"{llm_config.provider}: {exc}")
        for tag in SOURCE_TAGS:
            granted = engine.settings_db.is_granted(tag)
            _row(f"Consent: {SOURCE_LABELS[tag]}", "pass" if granted else "warn",
                 "granted" if granted else "not granted")
        engine.close()

    console.print(table)
    if failed:
        raise typer.Exit(1)


@app.command(name="config")
def show_config(
    config_path: Optional[Path] = typer.Option(None, "--path", help="Config file to read."),
) -> None:
    """Show the effective configuration (secrets redacted)."""
    settings = get_settings()
    llm = load_config(config_path)
    data = {
        "config_file": str(config_path or DEFAULT_CONFIG_PATH),
        "settings": settings.model_dump(mode="json"),
        "llm": {
            "provider": llm.provider,
            "gemini": vars(llm.gemini),
            "openai": vars(llm.openai),
            "ollama": vars(llm.ollama),
        },
    }
    typer.echo(json.dumps(redact_mapping(data), indent=2))


@app.command()
def version() -> None:
    """Show YouAgent version."""
    typer.echo(f"youagent {_get_version()}")
