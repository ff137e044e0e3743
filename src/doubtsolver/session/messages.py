"""User-facing text for failed exchanges.

The transcript is the only place provider failures are shown, so every
FailureKind maps to a stable, readable message.
"""

from ..llm.models import Failure, FailureKind


def failure_message(failure: Failure) -> str:
    """Render a Failure as a Markdown assistant message."""
    setting = f"`{failure.credential_name}`" if failure.credential_name else "your API key setting"

    if failure.kind is FailureKind.MISSING_CREDENTIAL:
        return (
            "⚠️ **Missing API Key**\n\n"
            f"Please add your API key as {setting} (in the environment or a `.env` file) "
            "and ask again."
        )

    if failure.kind is FailureKind.AUTH:
        return (
            "⚠️ **Invalid API Key**\n\n"
            f"The key provided is incorrect or expired. Please check {setting}."
        )

    if failure.kind is FailureKind.TRANSPORT:
        message = (
            "❌ Sorry, I couldn't reach the AI service.\n\n"
            "Please check your connection and send your question again."
        )
    else:
        message = "❌ Sorry, I encountered an error."

    if failure.detail:
        message += f"\n\nDebug: {failure.detail}"
    return message
