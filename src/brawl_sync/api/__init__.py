"""Upstream API access: endpoint catalog, error types and the HTTP client.

:class:`~brawl_sync.api.client.APIClient` is imported from its own module;
it depends on :mod:`brawl_sync.dto`, which in turn needs the error types
exported here.
"""

from __future__ import annotations

from brawl_sync.api.endpoints import Endpoint
from brawl_sync.api.errors import (
    BrawlSyncError,
    ConfigurationError,
    InvalidDTOError,
    ResponseError,
)

__all__ = [
    "BrawlSyncError",
    "ConfigurationError",
    "Endpoint",
    "InvalidDTOError",
    "ResponseError",
]
