"""
Errors raised while drafting SQL or checking Gemini info files.

Callers can tell a failed Gemini request (DraftingError) apart from a reply
with no text in it (EmptyResponseError) by type.
"""


class MissingCredentialError(ValueError):
    """Raised before any remote call when no Gemini API key was supplied."""


class DraftingError(Exception):
    """Raised when the Gemini generation request itself fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmptyResponseError(DraftingError):
    """Raised when Gemini answers with no text, or only whitespace."""


class FileListingError(Exception):
    """Raised when listing Gemini files fails, up front or mid-iteration."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
