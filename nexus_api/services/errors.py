class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class InvalidPlatformError(ValidationError):
    pass


class AuthenticationError(ServiceError):
    status_code = 401


class PermissionDenied(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class RateLimitExceeded(ServiceError):
    status_code = 429


class UpstreamError(Exception):
    """An outbound lookup failed (timeout, non-2xx, network error)."""
