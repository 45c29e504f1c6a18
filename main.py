"""CLI entry point for the essay writer."""

from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from essay_writer.errors import EssayWriterError, InvalidRequestError
from essay_writer.services.container import AppContainer
from essay_writer.services.essay_service import EssayService, require_citation_style
from essay_writer.state.state import Essay
from essay_writer.utils.config import load_config
from essay_writer.utils.text import count_words

app = typer.Typer(help="Essay Writer - draft, review and revise essays with a completion API")
essays_app = typer.Typer(help="Manage saved essays")
app.add_typer(essays_app, name="essays")

ConfigOption = typer.Option(None, "--config", help="Path to config.yaml (default: ./config.yaml)")
TokenOption = typer.Option(None, "--token", envvar="ESSAY_WRITER_TOKEN", help="Identity token (see `token` command)")


def _build_service(config: Optional[str]) -> EssayService:
    return EssayService(AppContainer(load_config(Path(config) if config else None)))


@contextmanager
def _command(service: Optional[EssayService], name: str, metadata: Optional[Dict[str, Any]] = None):
    """Trace a command when tracking is on and turn essay writer errors into exit code 1."""
    try:
        tracker = service.container.tracker if service else None
        if tracker and tracker.is_enabled():
            with tracker.trace_context(name=name, metadata=metadata) as trace:
                yield trace
        else:
            yield None
    except EssayWriterError as e:
        typer.echo(f"Error: {str(e)}", err=True)
        raise typer.Exit(1)


def _read_text(path: Optional[str]) -> str:
    file_path = Path(path)
    if not file_path.exists():
        raise InvalidRequestError(f"File not found: {file_path}")
    with open(file_path, "r", encoding="utf-8") as f:
        return f.read()


def _echo_essay_summary(essay: Essay) -> None:
    typer.echo(
        f"{essay.id}  {essay.status.value:<11}  {essay.word_count:>6} words  "
        f"{essay.created_at:%Y-%m-%d}  {essay.topic}"
    )


@app.command("token")
def issue_token(
    user: str = typer.Option(..., "--user", "-u", help="User id to embed in the token"),
    ttl_days: Optional[int] = typer.Option(None, "--ttl-days", help="Token lifetime in days"),
    config: Optional[str] = ConfigOption,
):
    """Issue a signed identity token for a user."""
    with _command(None, "token"):
        service = _build_service(config)
        ttl = timedelta(days=ttl_days) if ttl_days else None
        typer.echo(service.container.auth.issue_token(user, ttl=ttl))


@app.command()
def write(
    topic: str = typer.Option(..., "--topic", "-t", help="Essay topic"),
    thesis: str = typer.Option("", "--thesis", help="Central thesis (the model develops one if omitted)"),
    arguments: Optional[List[str]] = typer.Option(None, "--argument", "-a", help="Key argument (repeatable)"),
    words: int = typer.Option(1000, "--words", "-w", help="Target word count"),
    style: str = typer.Option("academic", "--style", "-s", help="Writing style"),
    save: bool = typer.Option(False, "--save", help="Save the essay as a draft"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the essay to this file"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """
    Generate an essay, extending it until it is close to the target length.

    Example:
        python main.py write --topic "The ethics of gene editing" \\
            --argument "Consent of future generations" --words 1500
    """
    with _command(None, "write"):
        service = _build_service(config)

    with _command(service, "essay_write", {"topic": topic, "target_word_count": words}) as trace:
        typer.echo("🚀 Starting essay generation...\n")
        result = service.write_essay(
            token,
            topic=topic,
            thesis=thesis,
            arguments=arguments or [],
            word_count=words,
            style=style,
            save=save
        )
        if trace:
            trace.update(metadata={
                "word_count": result.word_count,
                "extension_attempts": result.extension_attempts,
                "stop_reason": result.stop_reason.value if result.stop_reason else None,
            })

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result.content)
    else:
        typer.echo(result.content)

    typer.echo("\n✅ Essay generated successfully!")
    if output:
        typer.echo(f"   Output: {output}")
    typer.echo(f"   Word count: {result.word_count}/{words}")
    typer.echo(f"   Extension attempts: {result.extension_attempts}")
    if result.extension_error:
        typer.echo(f"   ⚠️  Last extension failed: {result.extension_error}", err=True)
    if result.citations:
        typer.echo("   Citations:")
        for citation in result.citations:
            typer.echo(f"     - {citation}")


@app.command()
def review(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Essay text file"),
    essay_id: Optional[str] = typer.Option(None, "--essay-id", help="Saved essay to review"),
    title: str = typer.Option("", "--title", help="Essay title"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Rate an essay for grammar, structure and substance and suggest improvements."""
    with _command(None, "review"):
        service = _build_service(config)

    with _command(service, "essay_review"):
        if essay_id:
            essay = service.get_essay(token, essay_id)
            content, title = essay.content, title or essay.topic
        elif file:
            content = _read_text(file)
        else:
            raise InvalidRequestError("Provide --file or --essay-id")
        result = service.review_essay(token, content, title)

    ratings = result.ratings
    typer.echo(f"Grammar:   {ratings.grammar}/10")
    typer.echo(f"Structure: {ratings.structure}/10")
    typer.echo(f"Substance: {ratings.substance}/10")
    typer.echo(f"Overall:   {ratings.overall}/10")
    if result.suggestions:
        typer.echo("\nSuggestions:")
        for suggestion in result.suggestions:
            typer.echo(f"  - {suggestion}")


@app.command()
def tweak(
    feedback: str = typer.Option(..., "--feedback", help="What to change"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Essay text file"),
    essay_id: Optional[str] = typer.Option(None, "--essay-id", help="Saved essay to revise"),
    title: str = typer.Option("", "--title", help="Essay title"),
    save: bool = typer.Option(False, "--save", help="Store the revision back into --essay-id"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Revise an essay to address feedback while keeping most of its content."""
    with _command(None, "tweak"):
        service = _build_service(config)

    with _command(service, "essay_tweak"):
        if save and not essay_id:
            raise InvalidRequestError("--save requires --essay-id")
        if essay_id:
            essay = service.get_essay(token, essay_id)
            content, title = essay.content, title or essay.topic
        elif file:
            content = _read_text(file)
        else:
            raise InvalidRequestError("Provide --file or --essay-id")

        improved = service.tweak_essay(token, content, feedback, title)
        if save:
            service.update_essay(token, essay_id, {"content": improved})

    typer.echo(improved)
    if save:
        typer.echo(f"\n💾 Saved revision to {essay_id}")


@app.command()
def cite(
    citations: Optional[List[str]] = typer.Option(None, "--citation", "-c", help="Source URL (repeatable)"),
    essay_id: Optional[str] = typer.Option(None, "--essay-id", help="Use the citations of a saved essay"),
    style: str = typer.Option("MLA", "--style", "-s", help="MLA, APA or Chicago"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Format citation URLs as a works cited section."""
    with _command(None, "cite"):
        service = _build_service(config)

    with _command(service, "works_cited", {"style": style}):
        require_citation_style(style)
        urls = list(citations or [])
        if essay_id:
            urls.extend(service.get_essay(token, essay_id).citations)
        works_cited = service.works_cited(token, urls, style)

    typer.echo(works_cited)


@essays_app.command("list")
def list_essays(
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """List your essays, newest first."""
    with _command(None, "essays_list"):
        service = _build_service(config)
        essays = service.list_essays(token)

    if not essays:
        typer.echo("No essays yet.")
        return
    for essay in essays:
        _echo_essay_summary(essay)
    typer.echo(f"\n{len(essays)} essay(s)")


@essays_app.command("show")
def show_essay(
    essay_id: str = typer.Argument(..., help="Essay id"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Print a saved essay."""
    with _command(None, "essays_show"):
        service = _build_service(config)
        essay = service.get_essay(token, essay_id)

    typer.echo(f"# {essay.topic}\n")
    if essay.thesis:
        typer.echo(f"Thesis: {essay.thesis}\n")
    typer.echo(essay.content)
    typer.echo(f"\nStatus: {essay.status.value}  Words: {essay.word_count}  Updated: {essay.updated_at:%Y-%m-%d %H:%M}")
    for citation in essay.citations:
        typer.echo(f"  - {citation}")


@essays_app.command("create")
def create_essay(
    topic: str = typer.Option(..., "--topic", "-t", help="Essay topic"),
    thesis: str = typer.Option("", "--thesis", help="Thesis"),
    content_file: Optional[str] = typer.Option(None, "--content-file", help="File with the essay text"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Save an essay you wrote yourself."""
    with _command(None, "essays_create"):
        service = _build_service(config)
        content = _read_text(content_file) if content_file else ""
        essay = service.create_essay(token, {
            "topic": topic,
            "thesis": thesis,
            "content": content,
            "word_count": count_words(content),
        })

    typer.echo(f"Created essay {essay.id}")


@essays_app.command("update")
def update_essay(
    essay_id: str = typer.Argument(..., help="Essay id"),
    topic: Optional[str] = typer.Option(None, "--topic", help="New topic"),
    thesis: Optional[str] = typer.Option(None, "--thesis", help="New thesis"),
    status: Optional[str] = typer.Option(None, "--status", help="draft, in-progress or complete"),
    content_file: Optional[str] = typer.Option(None, "--content-file", help="File with the new essay text"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Update fields of a saved essay."""
    with _command(None, "essays_update"):
        service = _build_service(config)
        changes: Dict[str, Any] = {"topic": topic, "thesis": thesis, "status": status}
        if content_file:
            changes["content"] = _read_text(content_file)
        essay = service.update_essay(token, essay_id, {k: v for k, v in changes.items() if v is not None})

    typer.echo(f"Updated essay {essay.id} ({essay.status.value}, {essay.word_count} words)")


@essays_app.command("delete")
def delete_essay(
    essay_id: str = typer.Argument(..., help="Essay id"),
    config: Optional[str] = ConfigOption,
    token: Optional[str] = TokenOption,
):
    """Delete a saved essay."""
    with _command(None, "essays_delete"):
        service = _build_service(config)
        service.delete_essay(token, essay_id)

    typer.echo(f"Deleted essay {essay_id}")


if __name__ == "__main__":
    app()
