"""Resource Finder API package.

This module provides an optional FastAPI service layer around the catalog
search, facet, filter and metric operations.
"""

from .server import create_app  # noqa: F401
