# sales_tracker/errors.py


class SalesTrackerError(Exception):
    """Base class for errors raised by sales_tracker."""


class SeedError(SalesTrackerError):
    """The seed dataset could not be fetched or decoded."""


class InvalidParameterError(SalesTrackerError, ValueError):
    """A request parameter is missing or malformed."""


class QueryError(SalesTrackerError):
    """A read query against the transaction store failed."""
