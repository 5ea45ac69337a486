"""Errors surfaced to API callers as terminal responses."""


class DeckRequestError(ValueError):
    """Raised when a request payload cannot be turned into a presentation."""

    status_code = 400

    def __init__(self, message):
        self.message = str(message).strip() or "Invalid request"
        super().__init__(self.message)


class TableNotFoundError(DeckRequestError):
    """Raised when table markup contains no <table> element."""

    def __init__(self, message="No table found in provided HTML"):
        super().__init__(message)
