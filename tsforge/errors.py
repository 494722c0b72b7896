"""Error types for tsforge."""

from typing import Optional, Dict, Any


class ForgeError(Exception):
    """Base exception for tsforge errors."""

    def __init__(
        self,
        message: str,
        code: str = "FORGE_ERROR",
        status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for display or JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "details": self.details,
        }


class TransportError(ForgeError):
    """Request could not complete or returned a non-success status.

    ``code`` is one of HTTP_ERROR, REQUEST_FAILED or TIMEOUT. ``details``
    holds the raw error body returned by the backend, when there was one.
    """

    def __init__(
        self,
        message: str,
        code: str = "HTTP_ERROR",
        status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message, code=code, status=status, details=details)


class NotFoundError(ForgeError):
    """A requested record or named schema element does not exist."""

    def __init__(self, message: str, status: Optional[int] = 404, details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status=status, details=details)


class TableNotFoundError(NotFoundError):
    """Table not found in the loaded schema metadata."""

    def __init__(self, schema_name: str, table_name: str):
        super().__init__(
            f"Table {schema_name}.{table_name} not found",
            status=None,
            details={"schema": schema_name, "table": table_name},
        )
        self.code = "TABLE_NOT_FOUND"


class ViewNotFoundError(NotFoundError):
    """View not found in the loaded schema metadata."""

    def __init__(self, schema_name: str, view_name: str):
        super().__init__(
            f"View {schema_name}.{view_name} not found",
            status=None,
            details={"schema": schema_name, "view": view_name},
        )
        self.code = "VIEW_NOT_FOUND"


class InvalidInputError(ForgeError):
    """Caller supplied malformed arguments; rejected before any I/O."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, code="INVALID_INPUT", details=details)


class InvalidTableMetadataError(InvalidInputError):
    """Table metadata handed to the CRUD factory is missing or malformed."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "INVALID_TABLE_METADATA"


class GenerationError(ForgeError):
    """Error during type generation, e.g. two objects mapping to one identifier."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="GENERATION_ERROR", details=details or {})
