"""Prompt management module.

Externalizes prompts to text files for easy customization.
Prompts can be overridden by placing files in the working directory.
Placeholders such as `{language}` are substituted literally, so other
braces in a prompt (LaTeX, JSON examples) are left as written.
"""

from functools import lru_cache
from pathlib import Path

from ..config import LanguageMode

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

_LANGUAGE_INSTRUCTIONS = {
    LanguageMode.ENGLISH: "Provide detailed answers in English.",
    LanguageMode.HINGLISH: (
        "Provide detailed answers in Hinglish. Use a mix of Hindi and English, "
        "but keep technical terms, formulas and units in English."
    ),
}


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: doubtsolver/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    # Check working directory first (allows user overrides)
    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_tutor_prompt(language: LanguageMode) -> str:
    """Get the engineering tutor system instruction for a language mode."""
    return load_prompt("tutor").replace(
        "{language_instruction}", _LANGUAGE_INSTRUCTIONS[language]
    ).strip()


def get_greeting(language: LanguageMode) -> str:
    """Get the greeting that seeds every transcript."""
    return load_prompt("greeting").replace("{language}", language.value).strip()


def build_question_prompt(question: str, context: str = "") -> str:
    """Combine the student's question with optional context."""
    if not context.strip():
        return question
    return f"Context (if any): {context.strip()}\n\nQuestion: {question}"


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_tutor_prompt",
    "get_greeting",
    "build_question_prompt",
    "clear_cache",
]
