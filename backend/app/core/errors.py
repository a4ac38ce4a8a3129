"""Domain exceptions.

Raised by the core and services, translated to HTTP responses by the
handlers registered in ``app.main``.
"""


class AdventureError(Exception):
    """Base class for every error the app maps to an HTTP response."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail or self.__class__.__name__


class ValidationError(AdventureError):
    status_code = 422


class EmptyInputError(AdventureError):
    status_code = 422


class NotFoundError(AdventureError):
    """Resource absent, or present but invisible to the principal."""

    status_code = 404


class PermissionDeniedError(AdventureError):
    """Principal can read the adventure but may not change it."""

    status_code = 403


class InsufficientWaypointsError(AdventureError):
    status_code = 400


class UnsupportedModeError(AdventureError):
    status_code = 400


class RoutingServiceUnavailable(AdventureError):
    status_code = 503


class RoutingProviderError(AdventureError):
    status_code = 502

    def __init__(self, status: int, body: str, leg: int | None = None):
        self.status = status
        self.body = body
        self.leg = leg
        where = f" on leg {leg}" if leg is not None else ""
        super().__init__(f"Routing provider returned {status}{where}: {body}")
