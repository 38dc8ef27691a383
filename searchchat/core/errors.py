"""Error taxonomy shared by retrieval, completion, and orchestration layers.

Architectural role:
    Search and completion adapters raise these exceptions at the point of failure.
    `searchchat.core.engine` catches them at the turn boundary and converts them
    into user-facing `TurnResult` messages.

Failure handling model:
    - `ConfigurationError` is only raised during startup and is fatal for the CLI.
    - `SearchError` and `CompletionError` subclasses end the current turn only.
    - No exception in this module triggers a retry anywhere in the package.
"""


class SearchChatError(Exception):
    """Base class for all package-level failures."""


class ConfigurationError(SearchChatError):
    """Invalid model/provider configuration detected at startup."""


# =========================================================
# SEARCH FAILURES
# =========================================================

class SearchError(SearchChatError):
    """Base class for failures of the web search step."""


class SearchNetworkError(SearchError):
    """Transport-level failure while talking to the search provider."""


class SearchBadStatusError(SearchError):
    """Search provider answered with a non-200 HTTP status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"search request failed with status code: {status_code}")
        self.status_code = status_code


class SearchReadError(SearchError):
    """Response body could not be read or decoded."""


class CaptchaDetectedError(SearchError):
    """Provider served an anti-automation challenge page."""

    def __init__(self, message: str = "CAPTCHA detected, unable to proceed") -> None:
        super().__init__(message)


class SearchParseError(SearchError):
    """Result markup could not be parsed."""


# =========================================================
# COMPLETION FAILURES
# =========================================================

class CompletionError(SearchChatError):
    """Base class for failures of the language-model step."""


class DeadlineExceededError(CompletionError):
    """The per-turn deadline expired before generation finished."""

    def __init__(self, message: str = "deadline exceeded") -> None:
        super().__init__(message)


class CompletionTransportError(CompletionError):
    """HTTP/transport failure while calling the completion backend."""


class CompletionFailedError(CompletionError):
    """Backend answered, but the answer could not be used."""
