"""Custom exception classes for the relay."""


class RelayError(Exception):
    """Base exception for the relay."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(RelayError):
    """Inbound request failed validation at the route boundary."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class PreconditionError(RelayError):
    """A required identifier or owning record is missing mid-pipeline.

    Reported as a server error: the request was already accepted by the
    time the sync pipeline discovers it cannot proceed.
    """

    def __init__(self, message: str, details=None):
        super().__init__("PRECONDITION_FAILED", message, details, status_code=500)


class RemoteServiceError(RelayError):
    """Non-success response (or transport failure) from a remote API."""

    def __init__(self, service: str, message: str, status: int | None = None, body: str = ""):
        self.service = service
        self.status = status
        self.body = body
        text = f"{message}: {body}" if body else message
        super().__init__(
            "REMOTE_SERVICE_ERROR",
            text,
            details={"service": service, "status": status},
            status_code=500,
        )


class StoreError(RemoteServiceError):
    """Airtable request failed."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__("airtable", message, status=status, body=body)


class ProxyError(RemoteServiceError):
    """Nango request failed."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__("nango", message, status=status, body=body)


class UnhandledError(RelayError):
    """Wraps an unexpected exception caught by a route's top-level handler."""

    def __init__(self, exc: Exception):
        super().__init__("INTERNAL_ERROR", str(exc) or exc.__class__.__name__, status_code=500)
