"""Error types for gormgen."""

from typing import Optional, Dict, Any, List


class GormGenError(Exception):
    """Base exception for gormgen errors."""

    def __init__(self, message: str, code: str = "GORMGEN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConnectionError(GormGenError):
    """Handshake, authentication or network failure while connecting."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class UnsupportedEngineError(GormGenError):
    """The engine-kind selector is not one of the supported drivers."""

    def __init__(self, driver: str, supported: Optional[List[str]] = None):
        super().__init__(
            f"Unsupported database driver: {driver}",
            code="UNSUPPORTED_ENGINE",
            details={"driver": driver, "supported": supported or []},
        )
        self.driver = driver


class QueryError(GormGenError):
    """A catalog query or a row scan failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: str = "QUERY_ERROR"):
        super().__init__(message, code=code, details=details)


class QueryCancelledError(QueryError):
    """A catalog query was cancelled or ran past the statement timeout."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details, code="QUERY_CANCELLED")


class NotConnectedError(GormGenError):
    """Operation attempted while the session is disconnected."""

    def __init__(self, operation: str = ""):
        message = "Database not connected"
        if operation:
            message = f"Database not connected (cannot {operation})"
        super().__init__(message, code="NOT_CONNECTED", details={"operation": operation})


class TemplateRenderError(GormGenError):
    """Rendering the model template failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="TEMPLATE_RENDER_ERROR", details=details)


class FormatError(GormGenError):
    """Pretty-printing the rendered Go source failed.

    Recoverable: the generator keeps the unformatted text and reports this
    error alongside it instead of raising.
    """

    def __init__(self, message: str, line: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if line is not None:
            error_details["line"] = line
        super().__init__(message, code="FORMAT_ERROR", details=error_details)
        self.line = line

    def get_user_friendly_message(self) -> str:
        """Return the message with the offending line number, if known."""
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        return self.message


class FileWriteError(GormGenError):
    """Destination path could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to write {path}: {reason}",
            code="FILE_WRITE_ERROR",
            details={"path": path},
        )
        self.path = path


class BatchGenerationError(GormGenError):
    """Batch generation stopped at the first failing table.

    ``paths`` holds the files already written before the failure; they are
    valid output and callers should report them.
    """

    def __init__(self, table: str, paths: Optional[List[str]] = None, cause: Optional[Exception] = None):
        message = f"Failed to generate {table}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message,
            code="BATCH_GENERATION_ERROR",
            details={"table": table, "written": list(paths or [])},
        )
        self.table = table
        self.paths = list(paths or [])
