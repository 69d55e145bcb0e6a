"""
Exception hierarchy for the FAQ assistant.

    FaqAssistantError  (base)
    +-- ComponentNotInitializedError  (tool used before initialize())
    +-- ImageFetchError               (image download returned non-success)
    +-- SeedDataError                 (FAQ seed file missing or malformed)
    +-- VectorStoreError              (bad vectors or unknown vector field)

Provider and store outages are not wrapped; they propagate as raised by the
client libraries.
"""


class FaqAssistantError(Exception):
    """
    Base exception.

    Carries a human-readable ``message`` and an optional ``component``
    naming the part of the system that failed, e.g. ``image_describer``.
    """

    def __init__(self, message: str, component: str | None = None):
        self.message = message
        self.component = component
        super().__init__(message)

    def __str__(self) -> str:
        if self.component:
            return f"[{self.component}] {self.message}"
        return self.message


class ComponentNotInitializedError(FaqAssistantError):
    """Raised when a component is used before its initialize() completed."""


class ImageFetchError(FaqAssistantError):
    """Raised when downloading a remote image does not succeed."""

    def __init__(self, url: str, status_code: int, component: str | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(
            f"Could not download image '{url}': HTTP {status_code}",
            component=component,
        )


class SeedDataError(FaqAssistantError):
    """Raised when the FAQ seed file is missing or malformed."""


class VectorStoreError(FaqAssistantError):
    """Raised on invalid vectors or vector fields."""
