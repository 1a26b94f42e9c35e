"""Error taxonomy for the conversion service.

Every error carries the HTTP status the routers answer with and the short,
human-readable message the client sees. Cleanup failures are never raised;
they are reported through ``CleanupOutcome`` instead.
"""


class ConvertiqError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(ConvertiqError):
    """The request itself is unusable; the client must not retry as-is."""

    status_code = 400


class NoFilePartError(ClientInputError):
    def __init__(self, message: str = "No file uploaded") -> None:
        super().__init__(message)


class MissingTargetFormatError(ClientInputError):
    def __init__(self, message: str = "No target format specified") -> None:
        super().__init__(message)


class InvalidTargetFormatError(ClientInputError):
    def __init__(self, message: str = "Invalid target format") -> None:
        super().__init__(message)


class UnsupportedTypeError(ClientInputError):
    def __init__(self, message: str = "Unsupported file type for conversion") -> None:
        super().__init__(message)


class FileTooLargeError(ClientInputError):
    status_code = 413


class ConversionError(ConvertiqError):
    """A converter reported failure; message is the underlying I/O error."""


class NotFoundError(ConvertiqError):
    status_code = 404

    def __init__(self, message: str = "File not found") -> None:
        super().__init__(message)


class DownloadFailedError(ConvertiqError):
    def __init__(self, message: str = "Download failed") -> None:
        super().__init__(message)


class UnexpectedError(ConvertiqError):
    """Wraps anything uncaught while handling a conversion request."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Conversion failed: {detail}")
