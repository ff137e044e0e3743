"""Provider factory functions for CLI.

Centralizes creation of answer providers and note stores from environment variables.
Hides configuration details from command implementations.
"""

import os

import typer
from rich.console import Console

from ..config import DEFAULT_API_URL, GEMINI_DEFAULT_MODEL, OPENAI_DEFAULT_MODEL
from ..llm import AnswerProvider, create_answer_provider
from ..notes import NoteStore, create_note_store

# Default console for output
_console = Console()


def _provider_from_env(name: str, con: Console) -> AnswerProvider:
    if name == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: OPENAI_API_KEY not set, answers will report a missing key[/yellow]")
        model = os.getenv("OPENAI_CHAT_MODEL", OPENAI_DEFAULT_MODEL)
        return create_answer_provider("openai", api_key=api_key, model=model)

    elif name == "gemini":
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: GEMINI_API_KEY not set, answers will report a missing key[/yellow]")
        model = os.getenv("GEMINI_MODEL", GEMINI_DEFAULT_MODEL)
        return create_answer_provider("gemini", api_key=api_key, model=model)

    elif name == "proxy":
        api_url = os.getenv("DOUBTSOLVER_API_URL", DEFAULT_API_URL)
        return create_answer_provider("proxy", api_url=api_url)

    con.print(f"[red]Error: Unknown answer provider: {name}[/red]")
    raise typer.Exit(code=1)


def get_answer_provider(console: Console | None = None) -> AnswerProvider:
    """Create the client-side answer provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Answer provider instance

    Raises:
        SystemExit: If ANSWER_PROVIDER names an unknown provider

    Environment variables:
        ANSWER_PROVIDER: Provider type (openai, gemini, proxy; default: openai)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o)
        GEMINI_API_KEY: Gemini API key (for gemini provider)
        GEMINI_MODEL: Gemini model (default: gemini-2.5-flash)
        DOUBTSOLVER_API_URL: Proxy server URL (default: http://localhost:5000)
    """
    con = console or _console
    return _provider_from_env(os.getenv("ANSWER_PROVIDER", "openai").lower(), con)


def get_server_provider(console: Console | None = None) -> AnswerProvider:
    """Create the answer provider used by the backend proxy.

    Environment variables:
        SERVER_PROVIDER: Provider type (openai, gemini; default: gemini)
    """
    con = console or _console
    name = os.getenv("SERVER_PROVIDER", "gemini").lower()
    if name == "proxy":
        con.print("[red]Error: The server cannot proxy to itself; use openai or gemini[/red]")
        raise typer.Exit(code=1)
    return _provider_from_env(name, con)


def get_note_store() -> NoteStore:
    """Create the note store from environment variables.

    Environment variables:
        NOTES_BACKEND: Backend type (json, sqlite, memory; default: json)
        NOTES_PATH: Storage file location (backend default if unset)
    """
    backend = os.getenv("NOTES_BACKEND", "json").lower()
    path = os.getenv("NOTES_PATH")
    if path and backend != "memory":
        return create_note_store(backend, path=path)
    return create_note_store(backend)
