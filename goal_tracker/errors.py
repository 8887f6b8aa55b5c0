"""Error kinds surfaced by the repositories."""


class NotFoundError(ValueError):
    """Raised when an update targets a row that does not exist."""


class UsernameTakenError(ValueError):
    """Raised when a profile upsert claims a username owned by another email."""

    def __init__(self, username: str):
        super().__init__(f"Username already taken: {username}")
        self.username = username


class BackendUnavailableError(RuntimeError):
    """Raised when the remote spreadsheet fails after it was selected as the backend."""
