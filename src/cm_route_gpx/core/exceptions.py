"""Custom exceptions for Carris Metropolitana route export."""


class CarrisRouteError(Exception):
    """Base exception for route lookup and export errors."""

    pass


class ValidationError(CarrisRouteError):
    """Raised when input validation fails."""

    pass


class NotFoundError(CarrisRouteError):
    """Raised when the API answers a lookup with a non-success status."""

    def __init__(self, resource: str, identifier: str, status_code: int | None = None):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code
        message = f"{resource.capitalize()} '{identifier}' not found"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        super().__init__(message)


class PatternLoadError(CarrisRouteError):
    """Raised when any pattern or route lookup of a line fails."""

    def __init__(self, pattern_id: str, route_id: str | None = None):
        self.pattern_id = pattern_id
        self.route_id = route_id
        if route_id is not None:
            message = f"Failed to load route '{route_id}' of pattern '{pattern_id}'"
        else:
            message = f"Failed to load pattern '{pattern_id}'"
        super().__init__(message)


class InvalidGeometryError(CarrisRouteError):
    """Raised when a shape has no usable line coordinates."""

    pass


class NetworkError(CarrisRouteError):
    """Raised when there's a network-related error."""

    pass


class InvalidResponseError(CarrisRouteError):
    """Raised when the API returns a body that cannot be parsed."""

    pass
