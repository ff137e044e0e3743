"""Exception hierarchy for doubtsolver.

Provider failures are not exceptions once they leave an adapter: they travel
as `Failure` values (see `doubtsolver.llm.models`). The exceptions here cover
local validation, the single-flight guard, persisted state and export.
"""


class DoubtSolverError(Exception):
    """Base class for all doubtsolver errors."""


class ValidationError(DoubtSolverError):
    """Input rejected locally, before any network call."""


class SessionBusyError(DoubtSolverError):
    """A submission was attempted while another exchange is in flight."""


class PersistenceParseError(DoubtSolverError):
    """Persisted state could not be decoded."""


class ExportError(DoubtSolverError):
    """A PDF export could not be produced."""
