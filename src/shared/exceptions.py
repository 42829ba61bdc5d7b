"""
Custom exception hierarchy for the query engine and the HTTP driver.

All errors inherit from OgmError so they can be caught uniformly
by callers that do not care which layer failed.
"""


class OgmError(Exception):
    """Base exception for all query-construction and driver errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        super().__init__(f"[{component}] {message}")


class FilterCompositionError(OgmError):
    """A filter chain is malformed (boolean operators in the wrong place)."""

    def __init__(self, message: str, property_name: str):
        self.property_name = property_name
        super().__init__(message, component="composer")


class MissingOperatorError(FilterCompositionError):
    """A filter after the first one does not declare AND/OR."""
    pass


class UnsupportedFilterCombinationError(OgmError):
    """The filter shape is valid but the engine cannot express it."""

    def __init__(self, message: str, property_name: str):
        self.property_name = property_name
        super().__init__(message, component="composer")


class DriverError(OgmError):
    """Errors raised by the HTTP transactional driver."""

    def __init__(self, message: str):
        super().__init__(message, component="driver")


class ResultProcessingError(DriverError):
    """The server could not be reached or answered with a failure status."""
    pass


class CypherExecutionError(ResultProcessingError):
    """The server accepted the request but reported statement errors."""

    def __init__(self, message: str, errors: list[dict]):
        self.errors = errors
        super().__init__(message)


class TransactionError(DriverError):
    """An operation was attempted on a transaction that is no longer open."""
    pass
