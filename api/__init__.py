"""HTTP side of the transaction client. Import ``Client`` from ``api.client``."""

from api.fetch_client import FetchClient, FetchError, handle_x_migration

__all__ = ["FetchClient", "FetchError", "handle_x_migration"]
