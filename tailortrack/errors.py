class TrackerError(Exception):
    """Base class for errors reported back to the caller as ``{"message": ...}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    status_code = 400


class NotFound(TrackerError):
    status_code = 404


class TransportError(TrackerError):
    """The external spreadsheet endpoint could not be reached or refused the data."""

    status_code = 500


class InternalError(TrackerError):
    status_code = 500
