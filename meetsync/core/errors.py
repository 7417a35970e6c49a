"""Error taxonomy shared by services and routes; each error carries its HTTP status."""


class MeetSyncError(Exception):
    """Base error; message is safe to show to the client."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(MeetSyncError):
    """Missing or malformed input."""

    status_code = 400


class DuplicateAccountError(MeetSyncError):
    """An identity with the same account identifier already exists."""

    status_code = 400

    def __init__(self, message: str = "User already exists") -> None:
        super().__init__(message)


class InvalidCredentialsError(MeetSyncError):
    """Unknown account or wrong password; the two causes are deliberately indistinguishable."""

    status_code = 400

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class UnauthenticatedError(MeetSyncError):
    """Missing, invalid or expired session credential."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(MeetSyncError):
    """Authenticated, but the identity lacks the required role."""

    status_code = 403

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)


class ProviderUnavailableError(MeetSyncError):
    """The video provider could not be reached or rejected the request."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
