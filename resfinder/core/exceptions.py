class CatalogError(Exception):
    """
    Base exception for all catalog-related failures.
    """

    pass


class CatalogUnavailable(CatalogError):
    """
    Raised when the raw catalog cannot be loaded.

    The message is for logs only; callers surface a single opaque
    "catalog unavailable" condition.
    """

    pass


class UnknownOrganization(CatalogError):
    """
    Raised when a metric is requested for an organization not in the table.
    """

    pass


class UnknownMetric(CatalogError):
    """
    Raised when no organization in the table carries the requested metric.
    """

    pass
