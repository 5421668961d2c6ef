"""Failure taxonomy shared by the refresh pipeline and the read side."""


class CountryServiceError(Exception):
    """Base class for every error the countries app raises on purpose."""


class SourceUnavailable(CountryServiceError):
    """An external source could not be reached."""

    def __init__(self, source, reason=""):
        self.source = source
        self.reason = reason
        super().__init__(f"{source} unavailable: {reason}" if reason else f"{source} unavailable")


class DecodeFailed(CountryServiceError):
    """An external source answered with a body of the wrong shape."""

    def __init__(self, source, reason=""):
        self.source = source
        self.reason = reason
        message = f"{source} returned an invalid payload"
        super().__init__(f"{message}: {reason}" if reason else message)


class StoreFailure(CountryServiceError):
    """
    The store failed for a reason other than a missing row.

    ``applied`` is the number of records already written by the
    reconciliation pass that hit the failure; those writes are kept.
    """

    def __init__(self, message="Database error", applied=0):
        self.applied = applied
        super().__init__(message)


class NotFound(CountryServiceError):
    pass


class InternalError(CountryServiceError):
    pass
