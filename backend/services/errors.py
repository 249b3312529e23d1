"""Error taxonomy shared by services and the HTTP layer."""


class CareerForgeError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(CareerForgeError):
    """A required field was missing or malformed before save."""

    status_code = 400


class NotFoundError(CareerForgeError):
    """The requested record or job no longer exists."""

    status_code = 404


class CollaboratorUnavailable(CareerForgeError):
    """An external service (model, job provider) could not be reached."""

    status_code = 503
