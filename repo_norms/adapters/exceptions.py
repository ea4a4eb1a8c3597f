"""Custom exceptions for repository adapters."""


class AdapterError(Exception):
    """Base exception for all adapter errors.

    Catching this exception catches every acquisition failure. The CLI treats
    any AdapterError as fatal for the run: no partial record set is analyzed.
    """

    pass


class AdapterHTTPError(AdapterError):
    """HTTP request failed with 4xx or 5xx error, or could not be sent at all.

    A status_code of 0 means the request never produced a response
    (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 404, 500), 0 if no response
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """HTTP request timed out."""

    def __init__(self, message: str, url: str) -> None:
        """Initialize timeout error with URL.

        Args:
            message: Human-readable error message
            url: URL that timed out
        """
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response or snapshot content could not be parsed or has the wrong shape."""

    pass


class AdapterConfigurationError(AdapterError):
    """Invalid adapter configuration (missing credentials, unknown source, ...)."""

    pass
