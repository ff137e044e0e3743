"""Main CLI application using Typer."""
import asyncio
import logging
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..config import DEFAULT_PORT, LanguageMode
from ..conversation import Message
from ..errors import DoubtSolverError, ExportError
from ..pdf import render_pdf, timestamped_filename
from ..session import DoubtSession
from .providers import get_answer_provider, get_note_store, get_server_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="doubtsolver",
    help="AI doubt solver for B.Tech engineering questions",
    no_args_is_help=True,
    add_completion=True,
)
notes_app = typer.Typer(help="Manage saved notes", no_args_is_help=True)
app.add_typer(notes_app, name="notes")

# Console for rich output
console = Console()

_NOTIFY_STYLES = {"info": "green", "warning": "yellow", "error": "red"}

CHAT_HELP = """[bold]Commands[/bold]
  /image PATH       attach an image to the next question
  /clear-image      remove the attached image
  /lang NAME        switch language (English, Hinglish)
  /save             save the last answer to notes
  /pdf [PATH]       export the last answer as PDF
  /notes            list saved notes
  /help             show this help
  /quit             leave the chat"""


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR); defaults to LOG_LEVEL or WARNING"
    )
):
    """Configure logging for every command."""
    level = (log_level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _parse_language(value: str) -> LanguageMode:
    try:
        return LanguageMode.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _notify(level: str, text: str) -> None:
    style = _NOTIFY_STYLES.get(level, "white")
    console.print(f"[{style}]{text}[/{style}]")


def _render_message(message: Message) -> None:
    if message.role == "user":
        label = message.content or "[dim](image)[/dim]"
        if message.image:
            label += " [dim]+ image[/dim]"
        console.print(f"[bold yellow]You:[/bold yellow] {label}")
    else:
        console.print(Panel(Markdown(message.content), title="Doubt Solver", border_style="cyan"))


def _notes_table(notes) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Question")
    table.add_column("Saved", style="green", width=20)
    for note in notes:
        table.add_row(str(note.id), note.question, note.timestamp.strftime("%Y-%m-%d %H:%M"))
    return table


@app.command()
def ask(
    question: str = typer.Argument("", help="Your doubt (may be empty when an image is given)"),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        help="Image of the problem (max 5MB)"
    ),
    language: str = typer.Option(
        LanguageMode.ENGLISH.value,
        "--language",
        "-l",
        help="Answer language: English or Hinglish"
    ),
    save: bool = typer.Option(False, "--save", "-s", help="Save the answer to notes"),
    pdf: Path | None = typer.Option(None, "--pdf", help="Also export the answer to this PDF file"),
):
    """Ask a single question and print the answer."""
    mode = _parse_language(language)

    async def _ask():
        provider = get_answer_provider(console)
        notes = get_note_store() if save else None

        try:
            if notes:
                await notes.connect()

            session = DoubtSession(provider, notes=notes, language=mode, notifier=_notify)
            session.subscribe(_render_message)

            with console.status("[dim]Thinking...[/dim]"):
                exchange = await session.ask(question, image_path=image)

            if exchange is None:
                console.print("[yellow]Nothing to ask: give a question or an image[/yellow]")
                raise typer.Exit(code=1)

            if exchange.ok and save:
                note = await session.save_note()
                console.print(f"[dim]Note id: {note.id}[/dim]")
            if exchange.ok and pdf:
                written = await session.export_pdf_to(pdf, exchange.assistant_message.content)
                if written:
                    console.print(f"[green]PDF written to {written}[/green]")

            if not exchange.ok:
                raise typer.Exit(code=1)

        except DoubtSolverError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            if notes:
                await notes.disconnect()
            await provider.close()

    asyncio.run(_ask())


@app.command()
def chat(
    language: str = typer.Option(
        LanguageMode.ENGLISH.value,
        "--language",
        "-l",
        help="Answer language: English or Hinglish"
    )
):
    """Interactive doubt-solving chat."""
    mode = _parse_language(language)

    async def _chat():
        provider = get_answer_provider(console)
        notes = get_note_store()

        try:
            await notes.connect()
            session = DoubtSession(provider, notes=notes, language=mode, notifier=_notify)

            console.print("[bold cyan]Doubt Solver AI[/bold cyan] [dim]B.Tech Engineering Tutor[/dim]")
            _render_message(session.transcript.last)
            console.print("[dim]Type /help for commands, /quit to leave[/dim]\n")
            session.subscribe(lambda m: _render_message(m) if m.role == "assistant" else None)

            while True:
                try:
                    user_input = console.input(
                        f"[bold yellow]You ({session.language.value}):[/bold yellow] "
                    )
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                stripped = user_input.strip()
                if stripped.lower() in ("exit", "quit", "q", "/quit", "/exit"):
                    console.print("[dim]Goodbye![/dim]")
                    break

                try:
                    if stripped.startswith("/"):
                        await _handle_chat_command(session, stripped)
                        continue

                    session.capture.set_text(user_input)
                    with console.status("[dim]Thinking...[/dim]"):
                        await session.submit()
                except DoubtSolverError as e:
                    _notify("error", str(e))

        finally:
            await notes.disconnect()
            await provider.close()

    asyncio.run(_chat())


async def _handle_chat_command(session: DoubtSession, line: str) -> None:
    command, _, argument = line.partition(" ")
    argument = argument.strip()
    command = command.lower()

    if command == "/help":
        console.print(CHAT_HELP)
    elif command == "/image":
        if not argument:
            _notify("warning", "Usage: /image PATH")
            return
        session.capture.attach_image_file(Path(argument).expanduser())
        _notify("info", f"Attached {argument}; it will be sent with your next question")
    elif command == "/clear-image":
        session.capture.clear_image()
        _notify("info", "Image removed")
    elif command == "/lang":
        try:
            session.language = LanguageMode.parse(argument)
        except ValueError as e:
            _notify("warning", str(e))
            return
        _notify("info", f"Answers will be in {session.language.value}: {session.language.description}")
    elif command == "/save":
        note = await session.save_note()
        console.print(f"[dim]Note id: {note.id}[/dim]")
    elif command == "/pdf":
        index = session.transcript.last_answer_index()
        if index is None:
            _notify("warning", "There is no answer to export yet")
            return
        path = Path(argument).expanduser() if argument else Path(timestamped_filename())
        written = await session.export_pdf_to(path, session.transcript[index].content)
        if written:
            _notify("info", f"PDF written to {written}")
    elif command == "/notes":
        notes = await session.notes.load()
        if notes:
            console.print(_notes_table(notes))
        else:
            console.print("[dim]No saved notes yet[/dim]")
    else:
        _notify("warning", f"Unknown command {command}; type /help")


@notes_app.command("list")
def notes_list():
    """List saved notes, newest first."""
    async def _list():
        async with get_note_store() as store:
            notes = await store.load()
        if not notes:
            console.print("[dim]No saved notes yet[/dim]")
            return
        console.print(_notes_table(notes))

    asyncio.run(_list())


@notes_app.command("show")
def notes_show(note_id: int = typer.Argument(..., help="Note id")):
    """Show a saved note."""
    async def _show():
        async with get_note_store() as store:
            note = await store.get(note_id)
        if note is None:
            console.print(f"[red]Error: No note with id {note_id}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[bold yellow]Q:[/bold yellow] {note.question}")
        console.print(Panel(Markdown(note.answer), border_style="cyan"))

    asyncio.run(_show())


@notes_app.command("delete")
def notes_delete(note_id: int = typer.Argument(..., help="Note id")):
    """Delete a saved note."""
    async def _delete():
        async with get_note_store() as store:
            deleted = await store.delete(note_id)
        if deleted:
            console.print(f"[green]Deleted note {note_id}[/green]")
        else:
            console.print(f"[dim]No note with id {note_id}[/dim]")

    asyncio.run(_delete())


@notes_app.command("export")
def notes_export(
    note_id: int = typer.Argument(..., help="Note id"),
    output: Path | None = typer.Argument(None, help="Output PDF path"),
):
    """Export a saved note's answer to PDF."""
    async def _export():
        async with get_note_store() as store:
            note = await store.get(note_id)
        if note is None:
            console.print(f"[red]Error: No note with id {note_id}[/red]")
            raise typer.Exit(code=1)

        path = output or Path(timestamped_filename())
        try:
            data = await asyncio.to_thread(render_pdf, note.answer)
            await asyncio.to_thread(path.write_bytes, data)
        except (ExportError, OSError) as e:
            _notify("error", f"Failed to generate PDF. Please try again. ({e})")
            raise typer.Exit(code=1)
        console.print(f"[green]PDF written to {path}[/green]")

    asyncio.run(_export())


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (defaults to PORT or 5000)"
    ),
):
    """Run the backend proxy API (POST /api/solve, POST /api/generate-pdf)."""
    import uvicorn

    from ..server import create_app

    port = port or int(os.getenv("PORT", str(DEFAULT_PORT)))
    provider = get_server_provider(console)
    console.print(f"[green]Server running on port {port}[/green]")
    uvicorn.run(create_app(provider), host=host, port=port, log_config=None)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
